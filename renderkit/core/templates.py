# renderkit/core/templates.py
"""
TemplateSet: the compiled collection of named templates.

A set owns one Jinja2 environment configured with the delimiters and the
helper function table. Units are registered by name (``add``), looked up by
exact name (``lookup``) and rendered fully into a string (``execute``) so a
failing render never leaves a half-written response behind.
"""
from typing import Any, Callable, Dict, List, Mapping, Optional
import jinja2
import structlog

from renderkit.config.settings import Delims
from renderkit.core.helpers import helper_funcs
from renderkit.exceptions import ParseError, RenderError

log = structlog.get_logger(__name__)

# name under which the binding value is visible inside templates.
BINDING_NAME = "this"


class TemplateSet:
    def __init__(self, root: str, delims: Optional[Delims] = None, autoescape: bool = True):
        self.root = root
        self.delims = (delims or Delims()).resolved()
        self._sources: Dict[str, str] = {}
        self._units: Dict[str, jinja2.Template] = {}

        self.env = jinja2.Environment(
            loader=jinja2.FunctionLoader(self._load_source),
            variable_start_string=self.delims.left,
            variable_end_string=self.delims.right,
            block_start_string=self.delims.block_left,
            block_end_string=self.delims.block_right,
            undefined=jinja2.StrictUndefined,
            autoescape=autoescape,
            keep_trailing_newline=True,
        )
        # stand-ins go in first so user bundles can override them.
        self.env.globals.update(helper_funcs())

    def _load_source(self, name: str):
        # loader for {% include %}/{% extends %}; never touches the file system.
        source = self._sources.get(name)
        if source is None:
            return None
        return source, name, lambda: self._sources.get(name) is source

    def funcs(self, func_map: Mapping[str, Callable[..., Any]]) -> "TemplateSet":
        """Adds helper functions to the set's function table. Later calls win on name clashes."""
        self.env.globals.update(func_map)
        return self

    def add(self, name: str, source: str) -> jinja2.Template:
        """Parses ``source`` and registers it under ``name``, replacing any unit of that name.

        Raises:
            ParseError: the source is not a valid template.
        """
        previous = self._sources.get(name)
        self._sources[name] = source
        try:
            unit = self.env.get_template(name)
        except jinja2.TemplateSyntaxError as e:
            if previous is None:
                del self._sources[name]
            else:
                self._sources[name] = previous
            raise ParseError(f"template: {name}:{e.lineno}: {e.message}", name=name, lineno=e.lineno) from e
        if previous is not None:
            log.debug("template_name_overwritten", name=name, root=self.root)
        self._units[name] = unit
        return unit

    def lookup(self, name: str) -> Optional[jinja2.Template]:
        return self._units.get(name)

    def names(self) -> List[str]:
        return sorted(self._units)

    def __contains__(self, name: object) -> bool:
        return name in self._units

    def __len__(self) -> int:
        return len(self._units)

    def context_for(self, data: Any, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        # the binding is always reachable as `this`; mapping keys are also top-level names.
        context: Dict[str, Any] = {}
        if isinstance(data, Mapping):
            context.update((k, v) for k, v in data.items() if isinstance(k, str))
        context[BINDING_NAME] = data
        if extra:
            context.update(extra)
        return context

    def execute(self, name: str, data: Any, extra: Optional[Mapping[str, Any]] = None) -> str:
        """Renders the named unit into a string.

        ``extra`` is merged into the render context only, so per-call helpers
        never leak into concurrent renders of the same set.

        Raises:
            RenderError: unknown name, or any failure while rendering.
        """
        unit = self.lookup(name)
        if unit is None:
            raise RenderError(f'template "{name}" is undefined')
        try:
            return unit.render(self.context_for(data, extra))
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"template: {name}: {e}") from e
