"""
MongoDB connection cache.

Holds a single live connection per process. The first caller starts the
connection attempt; every caller that arrives while it is in flight awaits that
same attempt, so at most one connect is ever running.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import ConfigurationError as DriverConfigurationError

from backend.app.core.config import Settings
from backend.app.observability.logging import log_event


DEFAULT_DB_NAME = "Imaginify"
# Driver default; used only when command buffering is enabled.
BUFFERED_SERVER_SELECTION_TIMEOUT_MS = 30_000


class ConfigurationError(RuntimeError):
    """Raised when the database connection string is missing or malformed."""


@dataclass
class MongoConnection:
    client: AsyncMongoClient
    db: AsyncDatabase

    def __getitem__(self, name: str) -> AsyncCollection:
        return self.db[name]

    async def ping(self) -> dict[str, Any]:
        return await self.db.command("ping")

    async def close(self):
        await self.client.close()


ConnectFn = Callable[..., Awaitable[MongoConnection]]


async def connect_mongo(
    url: str,
    *,
    db_name: str = DEFAULT_DB_NAME,
    buffer_commands: bool = False,
    server_selection_timeout_ms: int = 5000,
) -> MongoConnection:
    """
    Open a client and verify the server answers before handing it out.

    With ``buffer_commands`` disabled the client gives up on server selection
    quickly, so operations issued while the server is unreachable fail instead
    of queueing until the driver default timeout.
    """
    timeout_ms = server_selection_timeout_ms
    if buffer_commands:
        timeout_ms = max(timeout_ms, BUFFERED_SERVER_SELECTION_TIMEOUT_MS)
    try:
        client: AsyncMongoClient = AsyncMongoClient(url, serverSelectionTimeoutMS=timeout_ms)
    except DriverConfigurationError as exc:
        raise ConfigurationError(f"Invalid MONGODB_URL: {exc}") from exc
    try:
        await client.admin.command("ping")
    except DriverConfigurationError as exc:
        await client.close()
        raise ConfigurationError(f"Invalid MONGODB_URL: {exc}") from exc
    except Exception:
        await client.close()
        raise
    return MongoConnection(client=client, db=client[db_name])


class MongoConnectionCache:
    """Single-flight owner of the process MongoDB connection."""

    def __init__(
        self,
        url: Optional[str],
        *,
        db_name: str = DEFAULT_DB_NAME,
        buffer_commands: bool = False,
        server_selection_timeout_ms: int = 5000,
        connect: Optional[ConnectFn] = None,
    ):
        self._url = (url or "").strip() or None
        self._db_name = db_name
        self._buffer_commands = buffer_commands
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._connect = connect or connect_mongo
        self._client: MongoConnection | None = None
        self._pending: asyncio.Future[MongoConnection] | None = None

    @classmethod
    def from_settings(cls, settings: Settings, connect: Optional[ConnectFn] = None) -> "MongoConnectionCache":
        return cls(
            settings.mongodb_url,
            db_name=settings.mongodb_db_name,
            buffer_commands=settings.mongodb_buffer_commands,
            server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms,
            connect=connect,
        )

    @property
    def state(self) -> str:
        if self._client is not None:
            return "connected"
        if self._pending is not None:
            return "connecting"
        return "unconnected"

    @property
    def db_name(self) -> str:
        return self._db_name

    async def get_connection(self) -> MongoConnection:
        if self._client is not None:
            return self._client

        if not self._url:
            raise ConfigurationError("Missing MONGODB_URL")

        # Record the attempt before the first await so concurrent callers share it.
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._open())
            self._pending.add_done_callback(self._attempt_done)
        pending = self._pending

        # Shielded: a cancelled caller must not cancel the shared attempt.
        conn = await asyncio.shield(pending)
        if self._client is None and self._pending is pending:
            self._client = conn
        return conn

    def _attempt_done(self, task: asyncio.Future):
        failed = task.cancelled() or task.exception() is not None
        # A failed attempt is dropped so the next call starts a new one.
        if failed and self._pending is task:
            self._pending = None

    async def _open(self) -> MongoConnection:
        started = time.perf_counter()
        log_event("mongo_connect_started", db_name=self._db_name)
        try:
            conn = await self._connect(
                self._url,
                db_name=self._db_name,
                buffer_commands=self._buffer_commands,
                server_selection_timeout_ms=self._server_selection_timeout_ms,
            )
        except Exception as exc:
            log_event(
                "mongo_connect_failed",
                level=logging.ERROR,
                db_name=self._db_name,
                error_class=type(exc).__name__,
                error=str(exc),
            )
            raise
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        log_event("mongo_connect_succeeded", db_name=self._db_name, latency_ms=elapsed_ms)
        return conn

    async def close(self):
        """Close the connection on application shutdown and reset the cache."""
        conn, pending = self._client, self._pending
        self._client = None
        self._pending = None
        if pending is not None and not pending.done():
            pending.cancel()
        elif conn is None and pending is not None and not pending.cancelled() and pending.exception() is None:
            conn = pending.result()
        if conn is None:
            return
        await conn.close()
        log_event("mongo_connection_closed", db_name=self._db_name)


async def get_mongo(request: Request) -> MongoConnection:
    """FastAPI dependency returning the live connection owned by the app."""
    cache: MongoConnectionCache = request.app.state.mongo
    return await cache.get_connection()
