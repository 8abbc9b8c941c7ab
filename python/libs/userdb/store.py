"""MongoDB connector and the user repository built on top of it."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import pydantic
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from userdb.errors import StoreError, StoreUnavailable
from userdb.models import User, UserBase
from userdb.settings import StoreSettings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


class MongoConnector:
    """
    Owns the process-wide Motor client.

    ``connect()`` must succeed before ``collection()`` is used; the service
    calls it from its lifespan startup and ``close()`` on shutdown.
    """

    def __init__(self, settings: StoreSettings) -> None:
        self.settings = settings
        self._client: Optional[AsyncIOMotorClient] = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        if self._client is not None:
            return

        uri = self.settings.mongo_uri
        if not uri:
            logger.critical("MONGOURI is not set; cannot start")
            raise StoreUnavailable("MONGOURI is not set")

        timeout = self.settings.connect_timeout_seconds
        client: Optional[AsyncIOMotorClient] = None
        try:
            client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=int(timeout * 1000))
            await asyncio.wait_for(client.admin.command("ping"), timeout)
        except (PyMongoError, asyncio.TimeoutError) as exc:
            if client is not None:
                client.close()
            logger.critical("MongoDB unreachable within %ss: %s", timeout, exc)
            raise StoreUnavailable(f"MongoDB unreachable: {exc}") from exc

        self._client = client
        logger.info("Connected to MongoDB (database=%s)", self.settings.database)

    def close(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None
        logger.info("MongoDB connection closed")

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False
        return True

    def collection(self, name: str) -> Any:
        if self._client is None:
            raise StoreUnavailable("MongoDB connector is not connected")
        return self._client[self.settings.database][name]


def _object_id(user_id: str) -> Optional[ObjectId]:
    # malformed ids match nothing rather than failing the request
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


def _decode(doc: Any) -> User:
    try:
        return User.from_document(doc)
    except pydantic.ValidationError as exc:
        raise StoreError(f"cannot decode user document {doc.get('_id')}: {exc}") from exc


@contextmanager
def _driver_errors() -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        raise StoreError(str(exc)) from exc


class UserRepository:
    def __init__(self, collection: Any) -> None:
        self.collection = collection

    async def insert(self, user: UserBase) -> str:
        oid = ObjectId()
        with _driver_errors():
            await self.collection.insert_one({"_id": oid, **user.to_document()})
        return str(oid)

    async def get(self, user_id: str) -> Optional[User]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        with _driver_errors():
            doc = await self.collection.find_one({"_id": oid})
        return _decode(doc) if doc is not None else None

    async def update(self, user_id: str, user: UserBase) -> Optional[User]:
        """Replace name/location/title; returns the stored record only if exactly one matched."""
        oid = _object_id(user_id)
        if oid is None:
            return None
        with _driver_errors():
            result = await self.collection.update_one({"_id": oid}, {"$set": user.to_document()})
            if result.matched_count != 1:
                return None
            doc = await self.collection.find_one({"_id": oid})
        return _decode(doc) if doc is not None else None

    async def delete(self, user_id: str) -> int:
        oid = _object_id(user_id)
        if oid is None:
            return 0
        with _driver_errors():
            result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count

    async def list_all(self) -> list[User]:
        users: list[User] = []
        with _driver_errors():
            async for doc in self.collection.find({}):
                users.append(_decode(doc))
        return users
