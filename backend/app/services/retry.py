from __future__ import annotations

import logging
from typing import TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from vitalgraph.errors import ConcurrencyFailure
from vitalgraph.state.base import Mutator, StateStore

T = TypeVar("T")

logger = logging.getLogger("vitalgraph.state")


def mutate_with_retry(store: StateStore, fn: Mutator[T], *, attempts: int = 3) -> T:
    """
    Run ``store.mutate(fn)``, retrying lock/commit failures.

    Only ``ConcurrencyFailure`` is retried; every attempt re-reads the
    document, so ``fn`` must not carry state between calls. The last
    failure is re-raised once attempts are exhausted.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=0.05, max=1.0),
        retry=retry_if_exception_type(ConcurrencyFailure),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retrying(store.mutate, fn)
