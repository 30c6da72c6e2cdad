# renderkit/core/__init__.py
"""
Template compilation, locking, file system providers and format engines.

Import from the submodules directly; this package re-exports nothing so the
config layer can depend on ``renderkit.core.filesystem`` without a cycle.
"""
