# renderkit/core/helpers.py
"""
Built-in template helpers installed into every template set.

These are stand-ins: they keep ``yield``, ``current`` and ``partial``
resolvable while templates are parsed and rendered without a layout. A
layout render shadows them with per-call bindings (see Render._layout_funcs).
"""
from typing import Any, Callable, Dict
from markupsafe import escape

from renderkit.exceptions import RenderError


class OutputHelper:
    """A zero-argument helper that also renders when used without parentheses.

    ``{{ yield() }}`` and ``{{ yield }}`` produce the same output; the second
    form goes through ``__html__`` (autoescape on) or ``__str__`` (off).
    """

    def __init__(self, func: Callable[[], Any]):
        self.func = func

    def __call__(self) -> Any:
        return self.func()

    def __html__(self) -> str:
        return str(escape(self.func()))

    def __str__(self) -> str:
        return str(self.func())


def yield_helper(*args: Any) -> str:
    raise RenderError("yield called with no layout defined")

def partial_helper(*args: Any) -> str:
    raise RenderError("partial called with no layout defined")

def current_helper(*args: Any) -> str:
    return ""


def helper_funcs() -> Dict[str, Callable[..., Any]]:
    # a fresh table per template set; never shared between sets.
    return {
        "yield": OutputHelper(yield_helper),
        "partial": partial_helper,
        "current": OutputHelper(current_helper),
    }
