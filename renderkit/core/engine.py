# renderkit/core/engine.py
"""
Format renderers. Each engine marshals a value fully before touching the
response, so a marshal failure can still be reported as a clean HTTP 500.
"""
import copy
import dataclasses
import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace
from typing import Any, Protocol

from renderkit.config.settings import CONTENT_TYPE
from renderkit.core.templates import TemplateSet
from renderkit.core.writer import ResponseWriter
from renderkit.exceptions import RenderError

_HTML_ESCAPES = (("<", "\\u003c"), (">", "\\u003e"), ("&", "\\u0026"))


class Engine(Protocol):
    def render(self, w: ResponseWriter, value: Any) -> None: ...


@dataclass(frozen=True)
class Head:
    content_type: str
    status: int

    def write(self, w: ResponseWriter) -> None:
        w.headers[CONTENT_TYPE] = self.content_type
        w.write_header(self.status)


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def marshal_json(value: Any, indent: bool = False, escape_html: bool = True) -> str:
    """Serializes ``value`` like a strict JSON encoder: NaN/Infinity are errors.

    With ``escape_html`` the characters ``<``, ``>`` and ``&`` are written as
    unicode escapes so the output is safe to embed in HTML.
    """
    try:
        if indent:
            result = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False, default=_json_default)
        else:
            result = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=_json_default)
    except (TypeError, ValueError) as e:
        raise RenderError(f"json: unsupported value: {e}") from e
    if escape_html:
        for raw, escaped in _HTML_ESCAPES:
            result = result.replace(raw, escaped)
    return result


def marshal_xml(value: Any, indent: bool = False) -> str:
    # accepts an ElementTree element, or any object exposing __xml__() -> Element.
    element = value
    if not isinstance(element, ET.Element):
        to_xml = getattr(value, "__xml__", None)
        if to_xml is None:
            raise RenderError(f"xml: unsupported type: {type(value).__name__}")
        try:
            element = to_xml()
        except Exception as e:
            raise RenderError(f"xml: __xml__ of {type(value).__name__} failed: {e}") from e
        if not isinstance(element, ET.Element):
            raise RenderError(f"xml: __xml__ of {type(value).__name__} did not return an Element")
    try:
        if indent:
            element = copy.deepcopy(element)
            ET.indent(element, space="  ")
        return ET.tostring(element, encoding="unicode", short_empty_elements=False)
    except (TypeError, ValueError) as e:
        raise RenderError(f"xml: unsupported value: {e}") from e


@dataclass(frozen=True)
class Data:
    head: Head

    def render(self, w: ResponseWriter, value: Any) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise RenderError(f"data: expected bytes, got {type(value).__name__}")
        head = self.head
        existing = w.headers.get(CONTENT_TYPE)
        if existing:
            head = replace(head, content_type=existing)
        head.write(w)
        w.write(bytes(value))


@dataclass(frozen=True)
class Text:
    head: Head

    def render(self, w: ResponseWriter, value: Any) -> None:
        if not isinstance(value, str):
            raise RenderError(f"text: expected str, got {type(value).__name__}")
        head = self.head
        existing = w.headers.get(CONTENT_TYPE)
        if existing:
            head = replace(head, content_type=existing)
        head.write(w)
        w.write(value.encode("utf-8"))


@dataclass(frozen=True)
class JSON:
    head: Head
    indent: bool = False
    unescape_html: bool = False
    prefix: bytes = b""

    def render(self, w: ResponseWriter, value: Any) -> None:
        result = marshal_json(value, indent=self.indent, escape_html=not self.unescape_html)
        if self.indent:
            result += "\n"

        self.head.write(w)
        if self.prefix:
            w.write(self.prefix)
        w.write(result.encode("utf-8"))


@dataclass(frozen=True)
class JSONP:
    head: Head
    callback: str
    indent: bool = False

    def render(self, w: ResponseWriter, value: Any) -> None:
        result = marshal_json(value, indent=self.indent)

        self.head.write(w)
        w.write(f"{self.callback}(".encode("utf-8"))
        w.write(result.encode("utf-8"))
        w.write(b");")
        if self.indent:
            w.write(b"\n")


@dataclass(frozen=True)
class XML:
    head: Head
    indent: bool = False
    prefix: bytes = b""

    def render(self, w: ResponseWriter, value: Any) -> None:
        result = marshal_xml(value, indent=self.indent)
        if self.indent:
            result += "\n"

        self.head.write(w)
        if self.prefix:
            w.write(self.prefix)
        w.write(result.encode("utf-8"))


@dataclass(frozen=True)
class HTML:
    head: Head
    name: str
    templates: TemplateSet = field(repr=False)
    extra: Any = None

    def render(self, w: ResponseWriter, binding: Any) -> None:
        # execute into a buffer first; a failed render writes nothing.
        out = self.templates.execute(self.name, binding, self.extra)

        self.head.write(w)
        w.write(out.encode("utf-8"))
