# renderkit/core/filesystem.py
"""
File system providers used by the template compiler.

A provider only needs two operations: ``walk`` every entry under a root and
``read_file`` by path. ``OSFileSystem`` serves a physical directory;
``TraversableFileSystem`` serves anything implementing
``importlib.resources.abc.Traversable`` (package data, zip archives, paths),
which is how read-only embedded templates are shipped.
"""
import os
import zipfile
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import PurePosixPath
from typing import IO, Iterator, NamedTuple, Protocol, Union, runtime_checkable
import structlog

from renderkit.exceptions import TraversalError

log = structlog.get_logger(__name__)


class WalkEntry(NamedTuple):
    path: str
    is_dir: bool


@runtime_checkable
class FileSystem(Protocol):
    def walk(self, root: str) -> Iterator[WalkEntry]: ...

    def read_file(self, path: str) -> bytes: ...


class OSFileSystem:
    """Physical directory provider. Paths are OS-native and relative to the cwd."""

    def walk(self, root: str) -> Iterator[WalkEntry]:
        # depth-first, lexical order, root first; mirrors a classic directory walk.
        try:
            is_dir = os.path.isdir(root)
            if not is_dir and not os.path.exists(root):
                raise FileNotFoundError(f"no such file or directory: '{root}'")
        except OSError as e:
            raise TraversalError(f"cannot stat '{root}': {e}") from e

        yield WalkEntry(root, is_dir)
        if is_dir:
            yield from self._walk_dir(root)

    def _walk_dir(self, dir_path: str) -> Iterator[WalkEntry]:
        try:
            with os.scandir(dir_path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise TraversalError(f"cannot read directory '{dir_path}': {e}") from e

        for entry in entries:
            child_path = os.path.join(dir_path, entry.name)
            try:
                child_is_dir = entry.is_dir()
                child_is_link = entry.is_symlink()
            except OSError as e:
                raise TraversalError(f"cannot stat '{child_path}': {e}") from e
            yield WalkEntry(child_path, child_is_dir)
            # symlinked directories are reported but never descended into.
            if child_is_dir and not child_is_link:
                yield from self._walk_dir(child_path)

    def read_file(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise TraversalError(f"cannot read template file '{path}': {e}") from e


class TraversableFileSystem:
    """Read-only provider over an ``importlib.resources`` Traversable.

    Paths handed to ``walk``/``read_file`` are slash-separated and relative to
    the traversable; ``"."`` or ``""`` names the traversable itself.
    """

    def __init__(self, base: Traversable):
        self.base = base

    def _resolve(self, path: str) -> Traversable:
        node = self.base
        for part in PurePosixPath(path).parts:
            if part in (".", "/"):
                continue
            node = node / part
        return node

    def walk(self, root: str) -> Iterator[WalkEntry]:
        node = self._resolve(root)
        try:
            is_dir = node.is_dir()
            if not is_dir and not node.is_file():
                raise FileNotFoundError(f"no such file or directory: '{root}'")
        except OSError as e:
            raise TraversalError(f"cannot stat '{root}': {e}") from e

        yield WalkEntry(root, is_dir)
        if is_dir:
            yield from self._walk_node(node, root)

    def _walk_node(self, node: Traversable, node_path: str) -> Iterator[WalkEntry]:
        try:
            children = sorted(node.iterdir(), key=lambda c: c.name)
        except OSError as e:
            raise TraversalError(f"cannot read directory '{node_path}': {e}") from e

        for child in children:
            child_path = child.name if node_path in ("", ".") else f"{node_path.rstrip('/')}/{child.name}"
            child_is_dir = child.is_dir()
            yield WalkEntry(child_path, child_is_dir)
            # is_symlink is optional on Traversable.
            is_symlink = getattr(child, "is_symlink", None)
            if child_is_dir and not (is_symlink and is_symlink()):
                yield from self._walk_node(child, child_path)

    def read_file(self, path: str) -> bytes:
        node = self._resolve(path)
        try:
            with node.open("rb") as f:
                return f.read()
        except (OSError, KeyError) as e:
            raise TraversalError(f"cannot read template file '{path}': {e}") from e


def zip_filesystem(archive: Union[str, os.PathLike, IO[bytes], zipfile.ZipFile]) -> TraversableFileSystem:
    # templates bundled in a zip archive (a file path, file object, or open ZipFile).
    log.debug("zip_filesystem_opened", archive=str(getattr(archive, "filename", archive)))
    return TraversableFileSystem(zipfile.Path(archive))


def package_filesystem(package: str) -> TraversableFileSystem:
    # templates shipped as package data, e.g. package_filesystem("myapp.views").
    return TraversableFileSystem(resources.files(package))
