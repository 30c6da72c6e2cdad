# renderkit/core/lock.py
"""
Reader/writer locks guarding the compiled template set.

Both implementations expose the same four operations (lock/unlock for
exclusive access, rlock/runlock for shared access). ``NullLock`` is used when
templates are compiled once and never reloaded, so readers pay nothing.
"""
import threading
from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol


class RWLocker(Protocol):
    def lock(self) -> None: ...
    def unlock(self) -> None: ...
    def rlock(self) -> None: ...
    def runlock(self) -> None: ...
    def write_locked(self) -> ContextManager[None]: ...
    def read_locked(self) -> ContextManager[None]: ...


class RWLock:
    """Writer-preferring reader/writer lock.

    Any number of readers may hold the lock at once; a writer waits for the
    active readers to drain and blocks new readers while it waits, so a
    development-mode reload cannot be starved by a steady stream of renders.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def lock(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def unlock(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("unlock of unlocked RWLock")
            self._writer = False
            self._cond.notify_all()

    def rlock(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def runlock(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("runlock of unlocked RWLock")
            self._readers -= 1
            if not self._readers:
                self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.lock()
        try:
            yield
        finally:
            self.unlock()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.rlock()
        try:
            yield
        finally:
            self.runlock()


class NullLock:
    # no-op lock; the caller guarantees no concurrent recompilation.
    def lock(self) -> None:
        pass

    def unlock(self) -> None:
        pass

    def rlock(self) -> None:
        pass

    def runlock(self) -> None:
        pass

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        yield

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        yield
