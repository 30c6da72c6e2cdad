# renderkit/__init__.py
"""
renderkit: render JSON, XML, text, binary data and directory-compiled HTML
templates onto HTTP responses.
"""
from renderkit.config.settings import Delims, HTMLOptions, Options
from renderkit.core.filesystem import (
    FileSystem,
    OSFileSystem,
    TraversableFileSystem,
    package_filesystem,
    zip_filesystem,
)
from renderkit.core.writer import ResponseRecorder, ResponseWriter
from renderkit.exceptions import (
    ConfigError,
    ParseError,
    RenderError,
    RenderKitError,
    TraversalError,
)
from renderkit.render import Render

__version__ = "0.1.0"

__all__ = [
    "Render",
    "Options",
    "HTMLOptions",
    "Delims",
    "FileSystem",
    "OSFileSystem",
    "TraversableFileSystem",
    "package_filesystem",
    "zip_filesystem",
    "ResponseWriter",
    "ResponseRecorder",
    "RenderKitError",
    "ConfigError",
    "TraversalError",
    "ParseError",
    "RenderError",
]
