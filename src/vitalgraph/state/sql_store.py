from __future__ import annotations

import logging
import threading
from typing import Optional

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    MetaData,
    Table,
    Text,
    create_engine,
    event,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from vitalgraph.errors import ConcurrencyFailure, StateStoreError
from vitalgraph.state.base import Mutator, StateStore, T
from vitalgraph.state.document import Document, dumps_state, empty_state, normalize_state
from vitalgraph.state.mutation_queue import MutationQueue

logger = logging.getLogger("vitalgraph.state")

APP_STATE_KEY = "primary"

metadata = MetaData()

app_state_table = Table(
    "app_state",
    metadata,
    Column("key", Text, primary_key=True),
    Column("data", JSON().with_variant(JSONB(), "postgresql"), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)


def build_engine(database_url: str, **kwargs) -> Engine:
    """
    Create an engine for ``database_url``.

    SQLite connections are opened with ``check_same_thread=False`` since
    the request threadpool shares the engine's pool. SQLite has no row
    locks, so every transaction there starts with ``BEGIN IMMEDIATE`` and
    holds the database write lock from its first read.
    """
    url = make_url(database_url)
    kwargs.setdefault("json_serializer", dumps_state)
    if url.get_backend_name() != "sqlite":
        kwargs.setdefault("pool_pre_ping", True)
        return create_engine(url, **kwargs)

    connect_args = dict(kwargs.pop("connect_args", {}))
    connect_args.setdefault("check_same_thread", False)
    kwargs["connect_args"] = connect_args
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        # pysqlite would otherwise defer BEGIN until the first write.
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


class SqlStateStore(StateStore):
    """
    Relational backend keeping the whole document in one row.

    Each mutation runs in a single transaction that first takes a row
    lock (``SELECT ... FOR UPDATE``) on the state row, so writers in
    other processes queue behind it as well. On SQLite the immediate
    transaction from ``build_engine`` plays that role. Within this process
    the shared mutation queue already serializes writers; the database
    lock covers everything outside it.
    """

    backend = "relational"

    def __init__(
        self,
        engine: Engine,
        *,
        state_key: str = APP_STATE_KEY,
        queue: Optional[MutationQueue] = None,
    ) -> None:
        super().__init__(queue=queue)
        self.engine = engine
        self.state_key = state_key
        self._init_lock = threading.Lock()
        self._initialized = False

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "SqlStateStore":
        return cls(build_engine(database_url), **kwargs)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create the table and seed the state row if missing."""
        if self._initialized:
            return

        with self._init_lock:
            if self._initialized:
                return
            try:
                metadata.create_all(self.engine)
                with self.engine.begin() as conn:
                    exists = conn.execute(
                        select(app_state_table.c.key).where(
                            app_state_table.c.key == self.state_key
                        )
                    ).first()
                    if exists is None:
                        conn.execute(
                            insert(app_state_table).values(
                                key=self.state_key,
                                data=empty_state(),
                            )
                        )
            except IntegrityError:
                # Another process seeded the row first.
                logger.debug("[state] state row %r already seeded", self.state_key)
            except SQLAlchemyError as exc:
                logger.error("[state] failed to initialize app_state: %s", exc)
                raise StateStoreError(
                    f"could not initialize state table: {exc}",
                    "state_init_failed",
                ) from exc
            self._initialized = True

    def read(self) -> Document:
        self.initialize()
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    select(app_state_table.c.data).where(
                        app_state_table.c.key == self.state_key
                    )
                ).first()
        except SQLAlchemyError as exc:
            raise StateStoreError(f"could not read state row: {exc}") from exc

        if row is None:
            return empty_state()
        return normalize_state(row.data)

    def close(self) -> None:
        self.engine.dispose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transact(self, fn: Mutator[T]) -> T:
        self.initialize()
        try:
            with self.engine.begin() as conn:
                doc = self._lock_and_load(conn)
                result = fn(doc)
                conn.execute(
                    update(app_state_table)
                    .where(app_state_table.c.key == self.state_key)
                    .values(data=doc, updated_at=func.now())
                )
        except OperationalError as exc:
            logger.error("[state] transaction on %r aborted: %s", self.state_key, exc)
            raise ConcurrencyFailure(
                f"state transaction could not be committed: {exc.orig}",
            ) from exc
        except SQLAlchemyError as exc:
            logger.error("[state] database failure on %r: %s", self.state_key, exc)
            raise StateStoreError(f"state transaction failed: {exc}") from exc
        return result

    def _lock_and_load(self, conn: Connection) -> Document:
        row = conn.execute(
            select(app_state_table.c.data)
            .where(app_state_table.c.key == self.state_key)
            .with_for_update()
        ).first()
        if row is None:
            return empty_state()
        return normalize_state(row.data)
