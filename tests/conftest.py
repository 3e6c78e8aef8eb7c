"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import os
from typing import Any

import pytest

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")


class FakeCollection:
    """In-memory stand-in for an async Mongo collection."""

    def __init__(self):
        self.docs: dict[Any, dict[str, Any]] = {}

    @staticmethod
    def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
        return all(doc.get(k) == v for k, v in query.items())

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self.docs.values():
            if self._matches(doc, query):
                return dict(doc)
        return None

    async def insert_one(self, doc: dict[str, Any]):
        if doc["_id"] in self.docs:
            raise ValueError(f"duplicate key {doc['_id']}")
        self.docs[doc["_id"]] = dict(doc)

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]):
        for doc in self.docs.values():
            if self._matches(doc, query):
                doc.update(update.get("$set", {}))
                return


class FakeConnection:
    """Stand-in for MongoConnection backed by FakeCollection objects."""

    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}
        self.pings = 0
        self.closed = False

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def ping(self) -> dict[str, Any]:
        self.pings += 1
        return {"ok": 1.0}

    async def close(self):
        self.closed = True


class CountingConnect:
    """Connect collaborator that records every invocation."""

    def __init__(self, connection: Any = None, *, delay: float = 0.0, error: Exception | None = None):
        self.connection = connection if connection is not None else FakeConnection()
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, url: str, **options: Any):
        self.calls.append((url, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.connection


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def counting_connect(fake_connection) -> CountingConnect:
    return CountingConnect(fake_connection)


@pytest.fixture
def make_connect():
    """Build CountingConnect instances with custom delay or error."""
    return CountingConnect
