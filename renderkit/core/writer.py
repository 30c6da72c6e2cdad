# renderkit/core/writer.py
"""
The response sink renderers write to, plus an in-memory implementation.

Any object with a ``headers`` mapping, ``write_header(status)`` and
``write(data)`` can receive a render. ``ResponseRecorder`` buffers the
response so it can be inspected in tests or handed to a WSGI server.
"""
from collections.abc import MutableMapping
from http import HTTPStatus
from typing import Callable, Dict, Iterator, List, Protocol, Tuple
import structlog

log = structlog.get_logger(__name__)


class ResponseWriter(Protocol):
    headers: MutableMapping[str, str]

    def write_header(self, status: int) -> None: ...

    def write(self, data: bytes) -> int: ...


class Headers(MutableMapping[str, str]):
    """Case-insensitive header mapping; keeps the spelling of the first ``set``."""

    def __init__(self, *args, **kwargs):
        self._store: Dict[str, Tuple[str, str]] = {}
        self.update(*args, **kwargs)

    def __setitem__(self, key: str, value: str) -> None:
        self._store[key.lower()] = (key, value)

    def __getitem__(self, key: str) -> str:
        return self._store[key.lower()][1]

    def __delitem__(self, key: str) -> None:
        del self._store[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"


class ResponseRecorder:
    def __init__(self):
        self.headers = Headers()
        self.code = HTTPStatus.OK.value
        self.body = bytearray()
        self.wrote_header = False

    def write_header(self, status: int) -> None:
        if self.wrote_header:
            log.warning("superfluous_write_header_call", status=status, previous=self.code)
            return
        self.code = status
        self.wrote_header = True

    def write(self, data: bytes) -> int:
        if not self.wrote_header:
            self.write_header(HTTPStatus.OK.value)
        self.body.extend(data)
        return len(data)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def to_wsgi(self, start_response: Callable[[str, List[Tuple[str, str]]], object]) -> List[bytes]:
        # hands the recorded response to a WSGI server.
        try:
            reason = HTTPStatus(self.code).phrase
        except ValueError:
            reason = ""
        start_response(f"{self.code} {reason}".rstrip(), list(self.headers.items()))
        return [bytes(self.body)]


def http_error(w: ResponseWriter, message: str, code: int) -> None:
    # plain-text error response, the body being the message plus a newline.
    w.headers["Content-Type"] = "text/plain; charset=utf-8"
    w.headers["X-Content-Type-Options"] = "nosniff"
    w.write_header(code)
    w.write((message + "\n").encode("utf-8"))
