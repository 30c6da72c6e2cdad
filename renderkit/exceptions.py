from typing import Optional


class RenderKitError(Exception):
    # base exception for all renderkit errors.
    pass

class ConfigError(RenderKitError):
    # errors related to configuration files and option values.
    pass

class TraversalError(RenderKitError):
    # errors while walking or reading the template file system.
    pass

class ParseError(RenderKitError):
    # a template failed to parse; aborts the whole compilation.
    def __init__(self, message: str, name: Optional[str] = None, lineno: Optional[int] = None):
        super().__init__(message)
        self.name = name
        self.lineno = lineno

class RenderError(RenderKitError):
    # errors while executing a template or marshaling a value.
    pass
