# tests/test_lock.py
import threading
import pytest
from pathlib import Path

from renderkit import Options, Render
from renderkit.core.lock import NullLock, RWLock

WAIT = 0.2


class TestRWLock:
    def test_readers_share_the_lock(self):
        lock = RWLock()
        both_inside = threading.Barrier(2, timeout=5)
        errors = []

        def reader():
            try:
                with lock.read_locked():
                    both_inside.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads: t.start()
        for t in threads: t.join(timeout=5)
        assert not errors

    def test_writer_waits_for_readers(self):
        lock = RWLock()
        acquired = threading.Event()

        def writer():
            with lock.write_locked():
                acquired.set()

        lock.rlock()
        t = threading.Thread(target=writer)
        t.start()
        assert not acquired.wait(WAIT)
        lock.runlock()
        assert acquired.wait(5)
        t.join(timeout=5)

    def test_waiting_writer_blocks_new_readers(self):
        lock = RWLock()
        order = []
        writer_started = threading.Event()

        def writer():
            writer_started.set()
            with lock.write_locked():
                order.append("writer")

        def late_reader():
            with lock.read_locked():
                order.append("reader")

        lock.rlock()
        w = threading.Thread(target=writer)
        w.start()
        writer_started.wait(5)
        # give the writer time to register as waiting.
        threading.Event().wait(WAIT)
        r = threading.Thread(target=late_reader)
        r.start()
        threading.Event().wait(WAIT)
        assert order == []
        lock.runlock()
        w.join(timeout=5)
        r.join(timeout=5)
        assert order == ["writer", "reader"]

    def test_writers_are_exclusive(self):
        lock = RWLock()
        counter = {"value": 0}

        def bump():
            for _ in range(1000):
                with lock.write_locked():
                    current = counter["value"]
                    counter["value"] = current + 1

        threads = [threading.Thread(target=bump) for _ in range(4)]
        for t in threads: t.start()
        for t in threads: t.join(timeout=10)
        assert counter["value"] == 4000

    def test_unlock_without_lock_raises(self):
        lock = RWLock()
        with pytest.raises(RuntimeError):
            lock.unlock()
        with pytest.raises(RuntimeError):
            lock.runlock()


def test_null_lock_is_a_no_op():
    lock = NullLock()
    lock.lock()
    lock.unlock()
    lock.rlock()
    lock.runlock()
    with lock.write_locked():
        with lock.read_locked():
            pass


class TestLockSelection:
    def test_static_templates_use_null_lock(self, template_dir: Path):
        assert isinstance(Render(Options(directory=str(template_dir))).lock, NullLock)

    def test_development_mode_uses_rw_lock(self, template_dir: Path):
        assert isinstance(Render(Options(directory=str(template_dir), is_development=True)).lock, RWLock)

    def test_mutex_option_uses_rw_lock(self, template_dir: Path):
        assert isinstance(Render(Options(directory=str(template_dir), use_mutex_lock=True)).lock, RWLock)
