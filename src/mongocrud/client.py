"""
MongoDB client: connection bootstrap, collection registry, health checks.
"""

import asyncio
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ReadPreference

from . import logger as log
from .collection import Collection
from .config import DatabaseConfiguration
from .exceptions import ConnectionFailed, CrudError, ErrorKind

# Deadline for connect, ping and collection listing
CONNECT_TIMEOUT = 10.0


class DatabaseClient:
    """Owns the Motor client, the bound database and the collection registry.

    Usage:
        client = await DatabaseClient.connect(config)
        users = client.get_collection("users")
        result = await users.get_item("id", user_id)

    The registry is filled at connect time from the collections that already
    exist, and can be extended with add_collections (e.g. to inject
    MemoryCollection-backed collections in tests).
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.instance: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.logger = logger or log.get_logger()
        self._collections: Dict[str, Collection] = {}
        self._lock = threading.RLock()

    @classmethod
    async def connect(
        cls,
        config: DatabaseConfiguration,
        logger: Optional[logging.Logger] = None,
        client_factory: Optional[Callable[..., Any]] = None,
    ) -> "DatabaseClient":
        """
        Create, connect and populate a client.

        Args:
            config: Connection settings
            logger: Logger for this client and its collections
            client_factory: Callable building the driver client from a URI,
                            AsyncIOMotorClient by default

        Raises:
            ConnectionFailed: the driver client could not be created or
                              connected. `.client` holds the partial client.
        """
        resp = cls(logger)
        factory = client_factory or AsyncIOMotorClient

        try:
            resp.instance = factory(config.uri(), serverSelectionTimeoutMS=int(CONNECT_TIMEOUT * 1000))
        except Exception as e:
            resp.logger.error(f"DatabaseClient: new client failed for {config.redacted_uri()}: {e}")
            raise ConnectionFailed(e, client=resp) from e
        resp.logger.info("DatabaseClient: new client created")

        try:
            await asyncio.wait_for(resp.instance.admin.command("ping"), CONNECT_TIMEOUT)
        except Exception as e:
            resp.logger.error(f"DatabaseClient: client connection failed: {e!r}")
            raise ConnectionFailed(e, client=resp) from e
        resp.logger.info("DatabaseClient: client connection established")

        resp.database = resp.instance[config.name]

        try:
            names = await asyncio.wait_for(resp.database.list_collection_names(), CONNECT_TIMEOUT)
        except Exception as e:
            resp.logger.warning(f"DatabaseClient: unable to get collection names: {e!r}")
            names = []

        resp.add_collections(Collection(name, resp.database[name], resp.logger) for name in names)
        resp.logger.info(f"DatabaseClient: connected to {config.name} with {len(names)} collections")
        return resp

    async def ping(self) -> None:
        """Ping the primary. Raises CrudError(PING_FAILED) on failure."""
        if self.instance is None:
            self.logger.error("DatabaseClient: ping failed: client not connected")
            raise CrudError(ErrorKind.PING_FAILED)

        try:
            await asyncio.wait_for(
                self.instance.admin.command("ping", read_preference=ReadPreference.PRIMARY),
                CONNECT_TIMEOUT,
            )
        except Exception as e:
            self.logger.error(f"DatabaseClient: ping failed: {e!r}")
            raise CrudError(ErrorKind.PING_FAILED) from None
        self.logger.info("DatabaseClient: client ping success")

    async def is_alive(self) -> bool:
        """Fire-and-forget health check: failures are logged by ping()"""
        try:
            await self.ping()
        except CrudError:
            return False
        return True

    async def list_collections(self) -> List[str]:
        """Collection names of the bound database. Raises CrudError(LIST_FAILED)."""
        if self.database is None:
            self.logger.warning("DatabaseClient: get collections failed: no database bound")
            raise CrudError(ErrorKind.LIST_FAILED)

        try:
            return await asyncio.wait_for(self.database.list_collection_names(), CONNECT_TIMEOUT)
        except Exception as e:
            self.logger.warning(f"DatabaseClient: get collections failed: {e!r}")
            raise CrudError(ErrorKind.LIST_FAILED) from None

    def get_collection(self, name: str) -> Optional[Collection]:
        with self._lock:
            return self._collections.get(name)

    def add_collections(self, collections: Iterable[Collection]) -> None:
        """Register collections. A name already present is replaced in place."""
        with self._lock:
            for collection in collections:
                self._collections[collection.name] = collection

    @property
    def collections(self) -> List[Collection]:
        """Registered collections in registration order"""
        with self._lock:
            return list(self._collections.values())

    def close(self) -> None:
        if self.instance is not None:
            self.instance.close()
            self.instance = None
            self.database = None
            self.logger.info("DatabaseClient: connection closed")
