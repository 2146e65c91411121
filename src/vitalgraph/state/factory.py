from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from vitalgraph.config.settings import StoreConfig
from vitalgraph.errors import StateStoreError
from vitalgraph.state.base import StateStore
from vitalgraph.state.json_store import JsonFileStateStore
from vitalgraph.state.mutation_queue import MutationQueue
from vitalgraph.state.sql_store import SqlStateStore

logger = logging.getLogger("vitalgraph.state")


def _normalize_url(url: str) -> str:
    # SQLAlchemy only understands the long postgres scheme.
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def create_state_store(
    config: StoreConfig,
    *,
    queue: Optional[MutationQueue] = None,
) -> StateStore:
    """
    Pick the state backend for ``config``.

    A configured ``database_url`` selects the relational backend,
    anything else falls back to the JSON document at ``data_path``.
    """
    url = (config.database_url or "").strip()

    if not url:
        logger.info("[state] using JSON file backend at %s", config.data_path)
        return JsonFileStateStore(config.data_path, queue=queue)

    try:
        parsed = make_url(_normalize_url(url))
    except ArgumentError as exc:
        raise StateStoreError(
            f"invalid database url: {exc}",
            "state_invalid_database_url",
        ) from exc

    logger.info("[state] using relational backend (%s)", parsed.get_backend_name())
    return SqlStateStore.from_url(
        parsed.render_as_string(hide_password=False),
        state_key=config.state_key,
        queue=queue,
    )
