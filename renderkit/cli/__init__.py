# renderkit/cli/__init__.py
"""Command line interface: list and render templates from a directory."""
