from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from renderkit.core.filesystem import FileSystem, OSFileSystem


CONTENT_TYPE = "Content-Type"
CONTENT_BINARY = "application/octet-stream"
CONTENT_HTML = "text/html"
CONTENT_XHTML = "application/xhtml+xml"
CONTENT_JSON = "application/json"
CONTENT_JSONP = "application/javascript"
CONTENT_TEXT = "text/plain"
CONTENT_XML = "text/xml"

DEFAULT_CHARSET = "UTF-8"
DEFAULT_DIRECTORY = "templates"
DEFAULT_EXTENSIONS = [".tmpl"]
DEFAULT_LEFT_DELIM = "{{"
DEFAULT_RIGHT_DELIM = "}}"
DEFAULT_BLOCK_LEFT_DELIM = "{%"
DEFAULT_BLOCK_RIGHT_DELIM = "%}"

FuncMap = Dict[str, Callable[..., Any]]


@dataclass(frozen=True)
class Delims:
    """Action delimiters for HTML templates.

    ``left``/``right`` delimit expressions (``{{ this }}``), ``block_left``/
    ``block_right`` delimit statements (``{% if x %}``). Empty values fall
    back to the defaults.
    """
    left: str = ""
    right: str = ""
    block_left: str = ""
    block_right: str = ""

    def resolved(self) -> "Delims":
        return Delims(
            left=self.left or DEFAULT_LEFT_DELIM,
            right=self.right or DEFAULT_RIGHT_DELIM,
            block_left=self.block_left or DEFAULT_BLOCK_LEFT_DELIM,
            block_right=self.block_right or DEFAULT_BLOCK_RIGHT_DELIM,
        )


@dataclass(frozen=True)
class HTMLOptions:
    # per-call overrides for Render.html. None keeps the instance-wide layout.
    layout: Optional[str] = None


@dataclass(frozen=True)
class Options:
    # configuration snapshot for a Render instance; immutable after construction.
    directory: str = ""
    layout: str = ""
    extensions: List[str] = field(default_factory=list)
    funcs: List[FuncMap] = field(default_factory=list)
    delims: Delims = field(default_factory=Delims)
    file_system: Optional[FileSystem] = None
    is_development: bool = False
    use_mutex_lock: bool = False
    autoescape: bool = True
    require_partials: bool = False

    charset: str = ""
    disable_charset: bool = False
    indent_json: bool = False
    indent_xml: bool = False
    prefix_json: bytes = b""
    prefix_xml: bytes = b""
    unescape_html: bool = False
    disable_http_error_rendering: bool = False

    html_content_type: str = ""
    json_content_type: str = ""
    jsonp_content_type: str = ""
    xml_content_type: str = ""
    text_content_type: str = ""
    binary_content_type: str = ""

    def prepared(self) -> "Options":
        """Returns a copy with every unset option filled with its default."""
        return replace(
            self,
            directory=self.directory or DEFAULT_DIRECTORY,
            extensions=list(self.extensions) if self.extensions else list(DEFAULT_EXTENSIONS),
            funcs=list(self.funcs),
            delims=self.delims.resolved(),
            file_system=self.file_system if self.file_system is not None else OSFileSystem(),
            charset=self.charset or DEFAULT_CHARSET,
            html_content_type=self.html_content_type or CONTENT_HTML,
            json_content_type=self.json_content_type or CONTENT_JSON,
            jsonp_content_type=self.jsonp_content_type or CONTENT_JSONP,
            xml_content_type=self.xml_content_type or CONTENT_XML,
            text_content_type=self.text_content_type or CONTENT_TEXT,
            binary_content_type=self.binary_content_type or CONTENT_BINARY,
        )

    @property
    def compiled_charset(self) -> str:
        # suffix appended to every content type except raw binary.
        if self.disable_charset:
            return ""
        return "; charset=" + (self.charset or DEFAULT_CHARSET)

    @property
    def needs_lock(self) -> bool:
        return self.is_development or self.use_mutex_lock
