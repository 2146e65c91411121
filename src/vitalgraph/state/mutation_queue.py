from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from vitalgraph.errors import StateStoreError


class MutationQueue:
    """
    Process-wide FIFO mutual exclusion for state mutations.

    Callers are admitted strictly in arrival order. A slot is always
    released when its body exits, including by exception, so a failing
    mutation never stalls the ones queued behind it.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._next_ticket = 0
        self._serving = 0
        self._local = threading.local()

    @contextmanager
    def slot(self) -> Iterator[int]:
        if getattr(self._local, "active", False):
            raise StateStoreError(
                "mutate() may not be called from inside another mutation",
                "nested_mutation",
            )

        with self._cond:
            ticket = self._next_ticket
            self._next_ticket += 1
            while ticket != self._serving:
                self._cond.wait()

        self._local.active = True
        try:
            yield ticket
        finally:
            self._local.active = False
            with self._cond:
                self._serving += 1
                self._cond.notify_all()

    @property
    def pending(self) -> int:
        with self._cond:
            return self._next_ticket - self._serving


_DEFAULT_QUEUE = MutationQueue()


def default_queue() -> MutationQueue:
    return _DEFAULT_QUEUE
