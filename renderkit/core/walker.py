# renderkit/core/walker.py
import os
from pathlib import PurePath
from typing import Iterable, Optional
import structlog

from renderkit.config.settings import Options
from renderkit.core.filesystem import FileSystem
from renderkit.core.templates import TemplateSet
from renderkit.exceptions import TraversalError

log = structlog.get_logger(__name__)


def first_dot_extension(path: str) -> str:
    # everything from the first "." on; "a/b.html.tmpl" -> ".html.tmpl".
    dot = path.find(".")
    return path[dot:] if dot != -1 else ""


def match_extension(rel_path: str, extensions: Iterable[str]) -> Optional[str]:
    """Returns the configured extension ``rel_path`` is compiled under, or None.

    The extension runs from the first dot of the whole relative path, so a
    compound suffix such as ``.tmpl/notbad`` only matches when configured
    verbatim. If that matches nothing, the same rule is applied to the file
    name alone, which lets ``dedicated.tmpl/notbad.html`` match ``.html``.
    """
    extensions = list(extensions)
    ext = first_dot_extension(rel_path)
    if ext and ext in extensions:
        return ext
    base_ext = first_dot_extension(rel_path.rsplit("/", 1)[-1])
    if base_ext and base_ext != ext and base_ext in extensions:
        return base_ext
    return None


def compile_templates(options: Options, file_system: Optional[FileSystem] = None) -> TemplateSet:
    """Walks ``options.directory`` and compiles every matching file into a new TemplateSet.

    Nothing is installed anywhere: the caller swaps the returned set in, so a
    failure leaves whatever set it was using untouched.

    Raises:
        TraversalError: the walk or a file read failed.
        ParseError: a matched file is not a valid template.
    """
    options = options.prepared()
    fs = file_system or options.file_system
    root = options.directory
    extensions = options.extensions
    template_set = TemplateSet(root, delims=options.delims, autoescape=options.autoescape)
    for func_map in options.funcs:
        template_set.funcs(func_map)

    log.debug("template_compilation_started", root=root, extensions=extensions, file_system=type(fs).__name__)

    walked_any = False
    try:
        for entry in fs.walk(root):
            walked_any = True
            if entry.is_dir:
                continue

            rel = PurePath(os.path.relpath(entry.path, root)).as_posix()
            ext = match_extension(rel, extensions)
            if ext is None:
                log.debug("template_skipped_extension_mismatch", path=rel)
                continue

            raw = fs.read_file(entry.path)
            name = rel[: len(rel) - len(ext)]
            template_set.add(name, raw.decode("utf-8"))
            log.debug("template_compiled", name=name, path=rel)
    except TraversalError as e:
        if walked_any or not isinstance(e.__cause__, FileNotFoundError):
            raise
        # a missing root just means there are no templates.
        log.warning("template_directory_not_found", root=root)
    except UnicodeDecodeError as e:
        raise TraversalError(f"template file under '{root}' is not valid UTF-8: {e}") from e

    log.info("templates_compiled", root=root, count=len(template_set))
    return template_set
