from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, TypeVar

from vitalgraph.state.document import Document
from vitalgraph.state.mutation_queue import MutationQueue, default_queue

T = TypeVar("T")

Mutator = Callable[[Document], T]

logger = logging.getLogger("vitalgraph.state")


class StateStore(ABC):
    """
    Serialized read/mutate access to the single application document.

    Contract shared by every backend:

    - ``read()`` returns the last persisted document. It never waits on
      the mutation queue and may observe state about to be superseded.
    - ``mutate(fn)`` runs ``fn`` on a fresh copy of the document while
      holding the process-wide mutation slot. ``fn`` edits the document
      in place and returns a result. The document is persisted only if
      ``fn`` returns normally; if it raises, nothing is written and the
      exception propagates after the slot is released.
    """

    backend: str = "abstract"

    def __init__(self, *, queue: Optional[MutationQueue] = None) -> None:
        self.queue = queue or default_queue()

    @abstractmethod
    def read(self) -> Document:
        raise NotImplementedError

    def mutate(self, fn: Mutator[T]) -> T:
        with self.queue.slot() as ticket:
            t0 = time.perf_counter()
            try:
                result = self._transact(fn)
            except Exception as exc:
                logger.warning(
                    "[state] mutation #%s rolled back on %s backend: %s",
                    ticket,
                    self.backend,
                    exc,
                )
                raise
            logger.debug(
                "[state] mutation #%s committed on %s backend in %.3fs",
                ticket,
                self.backend,
                time.perf_counter() - t0,
            )
            return result

    @abstractmethod
    def _transact(self, fn: Mutator[T]) -> T:
        """
        Load, apply ``fn`` and persist atomically.

        Called with the mutation slot held.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources."""
