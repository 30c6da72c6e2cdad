# renderkit/render.py
"""
Render writes JSON, JSONP, XML, text, binary data and HTML templates to an
HTTP response.

    from renderkit import Options, Render

    r = Render(Options(directory="templates", layout="layout"))

    def handler(w):
        # templates/example.tmpl: <h1>Hello {{ this }}</h1>
        r.html(w, 200, "example", "world")

Every render method marshals or executes fully before writing, writes an
HTTP 500 with the error text when that fails, and returns the exception
(``None`` on success) rather than raising it into the request handler.

A layout reaches the requested template with ``{{ yield() }}``, its name with
``{{ current() }}`` and an optional ``<name>-<template>`` unit with
``{{ partial("name") }}``. ``yield`` and ``current`` also render when written
without parentheses.
"""
from typing import Any, Callable, Dict, Optional
import structlog
from markupsafe import Markup

from renderkit.config.settings import HTMLOptions, Options
from renderkit.core.engine import Data, Engine, Head, HTML, JSON, JSONP, Text, XML
from renderkit.core.helpers import OutputHelper, yield_helper
from renderkit.core.lock import NullLock, RWLock, RWLocker
from renderkit.core.templates import TemplateSet
from renderkit.core.walker import compile_templates
from renderkit.core.writer import ResponseWriter, http_error
from renderkit.exceptions import RenderKitError

log = structlog.get_logger(__name__)


class Render:
    def __init__(self, options: Optional[Options] = None):
        self.opt: Options = (options or Options()).prepared()
        # templates compiled once and never reloaded can be read without locking.
        self.lock: RWLocker = RWLock() if self.opt.needs_lock else NullLock()
        self.templates: TemplateSet = TemplateSet(self.opt.directory, delims=self.opt.delims)
        self.compile_templates()
        log.debug(
            "render_initialized",
            directory=self.opt.directory,
            development=self.opt.is_development,
            lock=type(self.lock).__name__,
        )

    def compile_templates(self) -> TemplateSet:
        """Recompiles every template and installs the new set.

        Raises TraversalError/ParseError on failure; the installed set is
        left as it was.
        """
        with self.lock.write_locked():
            compiled = compile_templates(self.opt)
            self.templates = compiled
        return compiled

    def template_lookup(self, name: str):
        # returns the compiled template or None; never compiles or reads files.
        with self.lock.read_locked():
            return self.templates.lookup(name)

    def render(self, w: ResponseWriter, engine: Engine, value: Any) -> Optional[Exception]:
        try:
            engine.render(w, value)
        except RenderKitError as e:
            return self._error(w, e)
        return None

    def _error(self, w: ResponseWriter, err: Exception) -> Exception:
        log.error("render_failed", error_type=type(err).__name__, message=str(err))
        if not self.opt.disable_http_error_rendering:
            http_error(w, str(err), 500)
        return err

    def _content_type(self, base: str) -> str:
        return base + self.opt.compiled_charset

    def data(self, w: ResponseWriter, status: int, v: bytes) -> Optional[Exception]:
        head = Head(self.opt.binary_content_type, status)
        return self.render(w, Data(head), v)

    def text(self, w: ResponseWriter, status: int, v: str) -> Optional[Exception]:
        head = Head(self._content_type(self.opt.text_content_type), status)
        return self.render(w, Text(head), v)

    def json(self, w: ResponseWriter, status: int, v: Any) -> Optional[Exception]:
        head = Head(self._content_type(self.opt.json_content_type), status)
        engine = JSON(head, indent=self.opt.indent_json, unescape_html=self.opt.unescape_html, prefix=self.opt.prefix_json)
        return self.render(w, engine, v)

    def jsonp(self, w: ResponseWriter, status: int, callback: str, v: Any) -> Optional[Exception]:
        head = Head(self._content_type(self.opt.jsonp_content_type), status)
        return self.render(w, JSONP(head, callback=callback, indent=self.opt.indent_json), v)

    def xml(self, w: ResponseWriter, status: int, v: Any) -> Optional[Exception]:
        head = Head(self._content_type(self.opt.xml_content_type), status)
        return self.render(w, XML(head, indent=self.opt.indent_xml, prefix=self.opt.prefix_xml), v)

    def html(
        self,
        w: ResponseWriter,
        status: int,
        name: str,
        binding: Any = None,
        html_opt: Optional[HTMLOptions] = None,
    ) -> Optional[Exception]:
        """Executes template ``name`` with ``binding`` and writes it as HTML.

        In development mode the whole template set is recompiled first. With a
        layout (``html_opt.layout`` or ``Options.layout``) the layout template
        is executed instead and reaches the requested one through ``yield()``.
        """
        if self.opt.is_development:
            try:
                self.compile_templates()
            except RenderKitError as e:
                return self._error(w, e)

        layout = self._prepare_html_options(html_opt).layout
        head = Head(self._content_type(self.opt.html_content_type), status)

        with self.lock.read_locked():
            templates = self.templates
            if layout:
                engine = HTML(head, layout, templates, self._layout_funcs(templates, name, binding))
            else:
                engine = HTML(head, name, templates)
            return self.render(w, engine, binding)

    def _prepare_html_options(self, html_opt: Optional[HTMLOptions]) -> HTMLOptions:
        if html_opt is not None and html_opt.layout is not None:
            return html_opt
        return HTMLOptions(layout=self.opt.layout)

    def _layout_funcs(self, templates: TemplateSet, name: str, binding: Any) -> Dict[str, Callable[..., Any]]:
        # bound per call and passed as render context; the shared set is never mutated.
        def yield_() -> Markup:
            # our own template output, so it is already escaped.
            return Markup(templates.execute(name, binding, inner_funcs))

        def current() -> str:
            return name

        def partial(partial_name: str) -> Markup:
            full_name = f"{partial_name}-{name}"
            if self.opt.require_partials or templates.lookup(full_name) is not None:
                return Markup(templates.execute(full_name, binding, inner_funcs))
            return Markup("")

        funcs: Dict[str, Callable[..., Any]] = {
            "yield": OutputHelper(yield_),
            "current": OutputHelper(current),
            "partial": partial,
        }
        # the requested template and its partials see the same bindings, minus
        # yield, which stays the no-layout stand-in so it cannot recurse.
        inner_funcs = {**funcs, "yield": OutputHelper(yield_helper)}
        return funcs
