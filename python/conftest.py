"""
Shared fixtures: an in-memory stand-in for a Motor collection and a connector
that hands it out.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from userdb.errors import StoreUnavailable


class FakeCursor:
    def __init__(self, collection: "FakeCollection") -> None:
        self._collection = collection

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        await self._collection._checkpoint()
        for doc in list(self._collection.docs.values()):
            yield dict(doc)


class FakeCollection:
    """Keyed by ``_id``; set ``fail`` to make every call raise, ``delay`` to stall it."""

    def __init__(self) -> None:
        self.docs: dict[Any, dict] = {}
        self.fail: Optional[Exception] = None
        self.delay: float = 0.0

    async def _checkpoint(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail is not None:
            raise self.fail

    async def insert_one(self, doc: dict):
        await self._checkpoint()
        self.docs[doc["_id"]] = dict(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, flt: dict):
        await self._checkpoint()
        doc = self.docs.get(flt["_id"])
        return dict(doc) if doc is not None else None

    async def update_one(self, flt: dict, update: dict):
        await self._checkpoint()
        doc = self.docs.get(flt["_id"])
        if doc is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        doc.update(update["$set"])
        return SimpleNamespace(matched_count=1, modified_count=1)

    async def delete_one(self, flt: dict):
        await self._checkpoint()
        removed = self.docs.pop(flt["_id"], None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1)

    def find(self, flt: dict) -> FakeCursor:
        assert flt == {}
        return FakeCursor(self)


class FakeConnector:
    def __init__(self, collection: FakeCollection, *, reachable: bool = True) -> None:
        self.users = collection
        self.reachable = reachable
        self.connected = False
        self.closed = False

    async def connect(self) -> None:
        if not self.reachable:
            raise StoreUnavailable("MongoDB unreachable: connection refused")
        self.connected = True

    def close(self) -> None:
        self.closed = True
        self.connected = False

    async def ping(self) -> bool:
        return self.reachable

    def collection(self, name: str) -> FakeCollection:
        assert name == "users"
        return self.users


@pytest.fixture
def users_collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def connector(users_collection) -> FakeConnector:
    return FakeConnector(users_collection)
