"""Document storage connectivity."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from people.core.config import Settings
from people.core.exceptions import StorageConnectionError

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "test"

ClientFactory = Callable[..., Any]


class DatabaseManager:
    """Owns a single MongoDB client for the lifetime of the process.

    The manager is constructed explicitly and passed to whatever needs storage;
    nothing reaches it through module globals. `connect` verifies the server is
    reachable before any operation is issued, so a bad URI or an unreachable
    cluster surfaces as `StorageConnectionError` at startup.
    """

    def __init__(self, settings: Settings, *, client_factory: ClientFactory = AsyncIOMotorClient) -> None:
        self.settings = settings
        self._client_factory = client_factory
        self.client: Optional[AsyncIOMotorClient] = None

    async def connect(self) -> None:
        if self.client is not None:
            return

        logger.info("Connecting to MongoDB")
        client = self._client_factory(
            self.settings.MONGO_URI,
            serverSelectionTimeoutMS=self.settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as exc:
            client.close()
            raise StorageConnectionError(
                "Unable to connect to MongoDB", details={"reason": str(exc)}
            ) from exc

        self.client = client
        logger.info("Connected to MongoDB database '%s'", self.database.name)

    async def ping(self) -> None:
        """Round-trip to the server; raises `StorageConnectionError` on failure."""

        client = self._require_client()
        try:
            await client.admin.command("ping")
        except PyMongoError as exc:
            raise StorageConnectionError("MongoDB ping failed", details={"reason": str(exc)}) from exc

    @property
    def database(self) -> AsyncIOMotorDatabase:
        client = self._require_client()
        if self.settings.MONGO_DATABASE:
            return client[self.settings.MONGO_DATABASE]
        return client.get_default_database(default=DEFAULT_DATABASE)

    @property
    def person_collection(self) -> AsyncIOMotorCollection:
        return self.database[self.settings.PERSON_COLLECTION]

    async def close(self) -> None:
        if self.client is not None:
            logger.info("Closing MongoDB connection")
            self.client.close()
            self.client = None

    async def __aenter__(self) -> "DatabaseManager":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _require_client(self) -> AsyncIOMotorClient:
        if self.client is None:
            raise StorageConnectionError("MongoDB client is not connected")
        return self.client
