"""SQLite database with per-operation connections and WAL mode."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiosqlite

from karaoke_queue.domain.shared.constants import SQLPragmas
from karaoke_queue.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import StorageSettings

logger = logging.getLogger(__name__)

SHARED_MEMORY_URI = "file:karaoke-queue?mode=memory&cache=shared"


class Database:
    def __init__(self, url: str, settings: StorageSettings | None = None) -> None:
        if url.startswith("sqlite:///"):
            self._db_path = url[10:]  # Remove "sqlite:///"
        else:
            self._db_path = url

        self._initialized = False
        self._keepalive_conn: aiosqlite.Connection | None = None
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connection_timeout = settings.connection_timeout_s if settings else 10

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_memory(self) -> bool:
        return self._db_path == ":memory:"

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        if self._initialized:
            return

        if not self.is_memory:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        # The shared in-memory DB lives only while at least one connection is open.
        if self.is_memory and self._keepalive_conn is None:
            self._keepalive_conn = await self._connect()

        conn = self._keepalive_conn
        if conn is None:
            async with self.transaction() as tx:
                await self._ensure_schema(tx)
        else:
            await self._ensure_schema(conn)
            await conn.commit()

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._db_path)

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS karaoke_sessions (
                code TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                created_at TEXT NOT NULL,
                current_video_id TEXT,
                current_video_title TEXT,
                current_video_url TEXT,
                cast_device TEXT,
                is_playing INTEGER NOT NULL DEFAULT 0
            )
            """
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS session_members (
                session_code TEXT NOT NULL,
                caller_id TEXT NOT NULL,
                display_name TEXT,
                position INTEGER NOT NULL,
                PRIMARY KEY (session_code, caller_id),
                FOREIGN KEY(session_code) REFERENCES karaoke_sessions(code) ON DELETE CASCADE
            )
            """
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS queue_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_code TEXT NOT NULL,
                position INTEGER NOT NULL,
                video_id TEXT NOT NULL,
                video_title TEXT,
                video_url TEXT NOT NULL,
                added_by TEXT NOT NULL,
                added_by_name TEXT,
                note TEXT,
                added_at TEXT NOT NULL,
                played INTEGER NOT NULL DEFAULT 0,
                played_at TEXT,
                FOREIGN KEY(session_code) REFERENCES karaoke_sessions(code) ON DELETE CASCADE
            )
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_queue_items_session_pos ON queue_items(session_code, position)"
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS memberships (
                caller_id TEXT PRIMARY KEY,
                session_code TEXT NOT NULL,
                FOREIGN KEY(session_code) REFERENCES karaoke_sessions(code) ON DELETE CASCADE
            )
            """
        )

    async def _connect(self) -> aiosqlite.Connection:
        # ":memory:" is per-connection; the shared-cache URI lets every
        # connection see the same in-memory database.
        if self.is_memory:
            db_path = SHARED_MEMORY_URI
            uri = True
        else:
            db_path = self._db_path
            uri = False

        conn = await aiosqlite.connect(
            db_path,
            detect_types=0,
            uri=uri,
            timeout=self._connection_timeout,
        )
        conn.row_factory = aiosqlite.Row

        await conn.execute(SQLPragmas.JOURNAL_MODE_WAL)
        await conn.execute(SQLPragmas.FOREIGN_KEYS_ON)
        await conn.execute(SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout))

        return conn

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        conn = await self._connect()
        try:
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get a transaction context manager with auto-commit/rollback."""
        async with self.connection() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    async def fetch_all(
        self, sql: str, parameters: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch all rows."""
        async with self.connection() as conn:
            cursor = await conn.execute(sql, parameters or ())
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def close(self) -> None:
        """Close the database.

        For file-based DBs this is mostly a no-op. For in-memory DBs the
        keepalive connection is closed, which discards the data.
        """
        if self._keepalive_conn is not None:
            try:
                await self._keepalive_conn.close()
            finally:
                self._keepalive_conn = None
        self._initialized = False
        logger.info(LogTemplates.DATABASE_CLOSED)
