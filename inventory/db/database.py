"""Async SQLite database with lazy one-time bootstrap and scoped transactions.

One ``Database`` owns exactly one ``aiosqlite`` connection. The connection is
opened, and the schema bootstrapped, on first use; concurrent first callers
all await the same initialization task, so the bootstrap runs once.

Mutations that must be atomic go through ``transaction(body)``: the body
receives a ``TransactionScope`` bound to one BEGIN / COMMIT-or-ROLLBACK
lifecycle. Nested transactions are rejected, not flattened.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Mapping
from contextlib import asynccontextmanager
from contextvars import ContextVar
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Sequence, TypeVar

import aiosqlite

from inventory.config import MEMORY_TARGET, get_database_config
from inventory.db.bootstrap import bootstrap_schema
from inventory.db.errors import (
    DatabaseError,
    InitializationError,
    NestedTransactionError,
    TransactionOutcome,
    TransactionStateError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
Params = Optional[Sequence[Any]]
Bootstrapper = Callable[["TransactionScope"], Awaitable[None]]

# Scope of the transaction body running in the current task, if any.
_active_scope: ContextVar[Optional["TransactionScope"]] = ContextVar(
    "inventory_active_transaction", default=None
)


# -- statement helpers ---------------------------------------------------------

def _bind(params: Params) -> tuple[Any, ...]:
    """Positional parameters only; values are never spliced into SQL text."""
    if params is None:
        return ()
    if isinstance(params, (str, bytes, Mapping)):
        raise TypeError(
            f"params must be a sequence of positional values, not {type(params).__name__}"
        )
    return tuple(params)


async def _fetchall(conn: aiosqlite.Connection, sql: str, params: Params) -> list[dict[str, Any]]:
    async with conn.execute(sql, _bind(params)) as cursor:
        rows = await cursor.fetchall()
    return [dict(r) for r in rows]


async def _fetchone(conn: aiosqlite.Connection, sql: str, params: Params) -> Optional[dict[str, Any]]:
    async with conn.execute(sql, _bind(params)) as cursor:
        row = await cursor.fetchone()
    return dict(row) if row else None


async def _execute(conn: aiosqlite.Connection, sql: str, params: Params) -> None:
    async with conn.execute(sql, _bind(params)):
        pass


# -- transaction scope ---------------------------------------------------------

class TransactionState(str, Enum):
    IDLE = "idle"
    OPEN = "open"
    COMMITTED = "committed"
    COMMITTED_AFTER_EXTERNAL_RESOLUTION = "committed_after_external_resolution"
    ROLLED_BACK = "rolled_back"


_TERMINAL_STATES = {
    TransactionState.COMMITTED: TransactionOutcome.COMMITTED,
    TransactionState.COMMITTED_AFTER_EXTERNAL_RESOLUTION:
        TransactionOutcome.COMMITTED_AFTER_EXTERNAL_RESOLUTION,
    TransactionState.ROLLED_BACK: TransactionOutcome.ROLLED_BACK,
}


class TransactionScope:
    """Query surface bound to one open transaction.

    Created and driven by ``Database.transaction``; callers only use the
    query methods. ``IDLE -> OPEN -> {COMMITTED, COMMITTED_AFTER_EXTERNAL_RESOLUTION,
    ROLLED_BACK}``, with no way out of a terminal state.
    """

    def __init__(self, db: "Database", conn: aiosqlite.Connection):
        self._db = db
        self._conn = conn
        self.state = TransactionState.IDLE

    @property
    def outcome(self) -> Optional[TransactionOutcome]:
        return _TERMINAL_STATES.get(self.state)

    @property
    def is_open(self) -> bool:
        return self.state is TransactionState.OPEN

    def _require_open(self) -> None:
        if not self.is_open:
            raise TransactionStateError(f"Transaction is {self.state.value}, not open")

    def _finish(self, state: TransactionState) -> None:
        self._require_open()
        self.state = state
        logger.debug("Transaction finished: %s", state.value)

    # -- queries ---------------------------------------------------------------

    async def fetchall(self, sql: str, params: Params = None) -> list[dict[str, Any]]:
        self._require_open()
        return await _fetchall(self._conn, sql, params)

    async def fetchone(self, sql: str, params: Params = None) -> Optional[dict[str, Any]]:
        self._require_open()
        return await _fetchone(self._conn, sql, params)

    async def execute(self, sql: str, params: Params = None) -> None:
        self._require_open()
        await _execute(self._conn, sql, params)

    def transaction(self, body: Callable[["TransactionScope"], Awaitable[T]]) -> Awaitable[T]:
        raise NestedTransactionError()

    # -- lifecycle -------------------------------------------------------------

    async def _begin(self) -> None:
        if self.state is not TransactionState.IDLE:
            raise TransactionStateError(f"Cannot begin a transaction that is {self.state.value}")
        await _execute(self._conn, "BEGIN", None)
        self.state = TransactionState.OPEN

    async def _commit(self) -> TransactionOutcome:
        self._require_open()
        try:
            was_active = self._conn.in_transaction
            await _execute(self._conn, "COMMIT", None)
        except sqlite3.Error as exc:
            if not was_active and isinstance(exc, sqlite3.OperationalError):
                # Something already ended the transaction (an explicit ROLLBACK
                # or an engine-side abort); nothing is left to commit.
                self._finish(TransactionState.COMMITTED_AFTER_EXTERNAL_RESOLUTION)
                return TransactionOutcome.COMMITTED_AFTER_EXTERNAL_RESOLUTION
            await self._rollback_quietly()
            raise
        except Exception:
            # The connection itself is unusable (e.g. closed mid-body).
            await self._rollback_quietly()
            raise
        self._finish(TransactionState.COMMITTED)
        return TransactionOutcome.COMMITTED

    async def _rollback_quietly(self) -> None:
        """Roll back; never raise, so the caller's original error survives."""
        if not self.is_open:
            return
        try:
            await _execute(self._conn, "ROLLBACK", None)
        except Exception as exc:
            logger.warning("Rollback failed (suppressed): %s", exc)
        self._finish(TransactionState.ROLLED_BACK)


# -- database ------------------------------------------------------------------

class Database:
    """
    Lazily-initialized SQLite handle with a query facade and transactions.

    Every statement, autonomous or transactional, runs on the same
    connection. A lock keeps autonomous statements out of an open
    transaction and keeps two transactions from being open at once.
    """

    def __init__(
        self,
        target: Optional[Path | str] = None,
        bootstrap: Optional[Bootstrapper] = bootstrap_schema,
    ):
        if target is None:
            target = get_database_config().target
        self.target: str = str(target)
        self._bootstrap = bootstrap
        self._conn: Optional[aiosqlite.Connection] = None
        self._init_task: Optional[asyncio.Future[aiosqlite.Connection]] = None
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def in_memory(self) -> bool:
        return self.target == MEMORY_TARGET

    @property
    def initialized(self) -> bool:
        return self._conn is not None

    # -- connection lifecycle --------------------------------------------------

    def _ensure_dir(self) -> None:
        if not self.in_memory:
            Path(self.target).parent.mkdir(parents=True, exist_ok=True)

    async def _connect(self) -> aiosqlite.Connection:
        self._ensure_dir()
        # Autocommit: BEGIN/COMMIT/ROLLBACK are issued explicitly.
        conn = await aiosqlite.connect(self.target, isolation_level=None)
        conn.row_factory = aiosqlite.Row
        await _execute(conn, "PRAGMA foreign_keys = ON", None)
        return conn

    async def _initialize(self) -> aiosqlite.Connection:
        try:
            conn = await self._connect()
        except Exception:
            logger.exception("Could not open database at %s", self.target)
            raise
        try:
            if self._bootstrap is not None:
                await self._run_bootstrap(conn)
        except BaseException:
            logger.exception("Database bootstrap failed for %s", self.target)
            await conn.close()
            raise
        if self._closed:
            await conn.close()
            raise DatabaseError("Database was closed during initialization")
        self._conn = conn
        logger.info("Database ready at %s", self.target)
        return conn

    async def _run_bootstrap(self, conn: aiosqlite.Connection) -> None:
        """Run the bootstrapper in one transaction: a failed bootstrap leaves nothing behind."""
        scope = TransactionScope(self, conn)
        await scope._begin()
        try:
            await self._bootstrap(scope)
        except BaseException:
            await scope._rollback_quietly()
            raise
        await scope._commit()

    async def get_client(self) -> aiosqlite.Connection:
        """Return the live connection, opening and bootstrapping it on first use.

        The initialization task is recorded before it is awaited, so callers
        arriving mid-initialization share it instead of starting another. A
        failed initialization is never retried.
        """
        if self._closed:
            raise DatabaseError("Database is closed")
        if self._conn is not None:
            return self._conn
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())
        try:
            # Shielded: one caller being cancelled must not cancel everyone's init.
            return await asyncio.shield(self._init_task)
        except DatabaseError:
            raise
        except Exception as exc:
            raise InitializationError(
                f"Database initialization failed for {self.target}"
            ) from exc

    async def close(self) -> None:
        self._closed = True
        conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()
            logger.info("Database connection closed")

    @asynccontextmanager
    async def _statement_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        conn = await self.get_client()
        scope = _active_scope.get()
        if scope is not None and scope._db is self:
            # Called from inside a transaction body: join the open transaction.
            scope._require_open()
            yield conn
            return
        async with self._lock:
            yield conn

    # -- query facade ----------------------------------------------------------

    async def fetchall(self, sql: str, params: Params = None) -> list[dict[str, Any]]:
        async with self._statement_connection() as conn:
            return await _fetchall(conn, sql, params)

    async def fetchone(self, sql: str, params: Params = None) -> Optional[dict[str, Any]]:
        async with self._statement_connection() as conn:
            return await _fetchone(conn, sql, params)

    async def execute(self, sql: str, params: Params = None) -> None:
        async with self._statement_connection() as conn:
            await _execute(conn, sql, params)

    # -- transactions ----------------------------------------------------------

    async def transaction(self, body: Callable[[TransactionScope], Awaitable[T]]) -> T:
        """Run ``body`` inside one transaction and return its result.

        Commits when ``body`` returns; rolls back when it raises, re-raising
        the body's own exception (a failing rollback never replaces it).
        """
        current = _active_scope.get()
        if current is not None and current._db is self:
            raise NestedTransactionError()

        conn = await self.get_client()
        async with self._lock:
            scope = TransactionScope(self, conn)
            token = _active_scope.set(scope)
            try:
                await scope._begin()
                try:
                    result = await body(scope)
                except BaseException:
                    await scope._rollback_quietly()
                    raise
                await scope._commit()
                return result
            finally:
                _active_scope.reset(token)


# -- module singleton ----------------------------------------------------------

_default_db: Optional[Database] = None


def get_db(target: Optional[Path | str] = None) -> Database:
    """Return the process-wide Database, creating it (unopened) on first call."""
    global _default_db
    if _default_db is None:
        _default_db = Database(target)
    return _default_db


def use_db(db: Database) -> Optional[Database]:
    """Install ``db`` as the process-wide Database; returns the one it replaced."""
    global _default_db
    previous, _default_db = _default_db, db
    return previous


async def reset_db() -> None:
    """Close and discard the singleton (useful in tests)."""
    global _default_db
    db, _default_db = _default_db, None
    if db is not None:
        await db.close()
