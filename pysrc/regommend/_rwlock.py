# _rwlock.py
"""Reader/writer lock built on threading.Condition."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class RWLock:
    """
    Many concurrent readers or one exclusive writer, writers preferred.

    Once a writer is waiting, new readers queue behind it, so a steady
    stream of readers cannot starve writers.

    Not reentrant. A thread holding the write lock must not ask for either
    lock again, a reader must not upgrade to a writer, and a reader that
    asks for the read lock again can deadlock if a writer queued meanwhile.

    Example:
        ```python
        lock = RWLock()
        with lock.read_lock():
            ...
        with lock.write_lock():
            ...
        ```
    """

    __slots__ = ("_cond", "_readers", "_writer", "_writers_waiting")

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting > 0:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read called without a matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers > 0:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write called without a matching acquire_write")
            self._writer = False
            self._cond.notify_all()

    @property
    def readers(self) -> int:
        """Number of readers currently holding the lock."""
        with self._cond:
            return self._readers

    @property
    def writers_waiting(self) -> int:
        """Number of writers queued for the lock."""
        with self._cond:
            return self._writers_waiting

    @property
    def write_locked(self) -> bool:
        """True while a writer holds the lock."""
        with self._cond:
            return self._writer
