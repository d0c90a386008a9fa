"""Single-connection storage pool over SQLite.

SQLite permits one writer at a time, so the pool holds exactly one
connection and every borrower waits its turn. The synchronous ``sqlite3``
calls run in worker threads so the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Optional, TypeVar

from promptbox.db.classifier import classify
from promptbox.db.schema import migrate
from promptbox.errors import ConnectionFailedError, PromptboxError, StartupError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MEMORY_PATH = ":memory:"
POOL_SIZE = 1


def _consume_result(fut: "asyncio.Future[Any]") -> None:
    if not fut.cancelled():
        fut.exception()


class PooledConnection:
    """Borrowed handle to the pooled connection, valid until released."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn: Optional[sqlite3.Connection] = conn
        self._inflight: Optional[asyncio.Future[Any]] = None

    @property
    def raw(self) -> sqlite3.Connection:
        if self._conn is None:
            raise ConnectionFailedError("connection handle used after release")
        return self._conn

    async def _run(self, fn: Callable[[sqlite3.Connection], T], sql: str) -> T:
        conn = self.raw
        fut = asyncio.ensure_future(asyncio.to_thread(fn, conn))
        self._inflight = fut
        try:
            return await asyncio.shield(fut)
        except asyncio.CancelledError:
            # the statement keeps running in its thread; release waits for it
            fut.add_done_callback(_consume_result)
            raise
        except Exception as e:
            raise classify(e, sql) from e

    # -- query helpers ---------------------------------------------------------

    async def fetchall(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        def _fetchall(conn: sqlite3.Connection) -> list[dict[str, Any]]:
            cur = conn.execute(sql, params)
            try:
                return [dict(r) for r in cur.fetchall()]
            finally:
                cur.close()

        return await self._run(_fetchall, sql)

    async def fetchone(self, sql: str, params: tuple = ()) -> Optional[dict[str, Any]]:
        rows = await self.fetchall(sql, params)
        return rows[0] if rows else None

    async def execute(self, sql: str, params: tuple = ()) -> int:
        """Run a statement and return the number of affected rows."""

        def _execute(conn: sqlite3.Connection) -> int:
            cur = conn.execute(sql, params)
            try:
                return cur.rowcount
            finally:
                cur.close()

        return await self._run(_execute, sql)

    async def executescript(self, sql: str) -> None:
        def _executescript(conn: sqlite3.Connection) -> None:
            conn.executescript(sql).close()

        await self._run(_executescript, sql)


class StoragePool:
    """
    Owner of the one SQLite connection.

    ``start()`` opens the connection and applies the schema exactly once;
    ``acquire()`` lends the connection out to one borrower at a time;
    ``close()`` closes it exactly once.
    """

    def __init__(self, path: Path | str, size: int = POOL_SIZE):
        if size != POOL_SIZE:
            raise ValueError("SQLite allows a single writer; pool size must be 1")
        if isinstance(path, str) and path != MEMORY_PATH:
            path = Path(path)
        self.path: Path | str = path
        self._queue: asyncio.Queue[sqlite3.Connection] = asyncio.Queue(maxsize=size)
        self._start_lock = asyncio.Lock()
        self._conn: Optional[sqlite3.Connection] = None
        self._started = False
        self._closed = False

    @property
    def in_memory(self) -> bool:
        return self.path == MEMORY_PATH

    @property
    def started(self) -> bool:
        return self._started

    # -- connection lifecycle --------------------------------------------------

    def _open(self) -> sqlite3.Connection:
        conn: Optional[sqlite3.Connection] = None
        try:
            if not self.in_memory:
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.path), check_same_thread=False, isolation_level=None)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            if not self.in_memory:
                conn.execute("PRAGMA journal_mode = WAL")
        except (sqlite3.Error, OSError) as e:
            if conn is not None:
                conn.close()
            raise ConnectionFailedError(f"Database connection failed: {e}") from e
        return conn

    async def start(self) -> None:
        """Open the connection and run migrations. Later calls are no-ops."""
        async with self._start_lock:
            if self._started:
                return
            if self._closed:
                raise ConnectionFailedError("storage pool is closed")

            conn = await asyncio.to_thread(self._open)
            try:
                await migrate(PooledConnection(conn))
            except PromptboxError as e:
                conn.close()
                raise StartupError(f"Migration failed: {e.reason}") from e

            if self._closed:
                conn.close()
                raise ConnectionFailedError("storage pool is closed")

            self._conn = conn
            self._queue.put_nowait(conn)
            self._started = True
            logger.info(f"Storage pool opened at {self.path}")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[PooledConnection]:
        """Borrow the connection; it is returned on every exit path."""
        if not self._started:
            await self.start()
        if self._closed:
            raise ConnectionFailedError("storage pool is closed")

        conn = await self._queue.get()
        handle = PooledConnection(conn)
        try:
            yield handle
        finally:
            self._release(handle)

    def _release(self, handle: PooledConnection) -> None:
        conn = handle._conn
        handle._conn = None
        if conn is None:
            return
        inflight = handle._inflight
        if inflight is not None and not inflight.done():
            inflight.add_done_callback(lambda _: self._queue.put_nowait(conn))
        else:
            self._queue.put_nowait(conn)

    async def close(self) -> None:
        """Close the connection once it is back in the pool."""
        if self._closed:
            return
        self._closed = True
        if self._conn is None:
            return
        conn = await self._queue.get()
        conn.close()
        self._conn = None
        logger.info(f"Storage pool closed ({self.path})")
