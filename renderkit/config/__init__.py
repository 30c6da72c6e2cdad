# renderkit/config/__init__.py
"""Options dataclasses and config-file loading."""
