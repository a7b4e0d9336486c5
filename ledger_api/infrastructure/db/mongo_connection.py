"""
MongoDB Client
==============

Singleton MongoDB client for database connections.
"""
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from ledger_api.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class MongoClientManager:
    """
    MongoDB client manager.

    Manages the MongoDB connection and provides access to collections.
    The client is created lazily on first use.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = None

    def _initialize_client(self) -> None:
        """Initialize MongoDB client connection."""
        if self._client is not None:
            return  # Already initialized

        # tz_aware so stored datetimes come back comparable with now()
        self._client = MongoClient(self._settings.mongo_uri, tz_aware=True)
        self._database = self._client[self._settings.mongo_database_name]
        logger.info("Connected to MongoDB database '%s'", self._settings.mongo_database_name)

    def get_database(self) -> Database:
        """Get MongoDB database instance."""
        if self._database is None:
            self._initialize_client()
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a MongoDB collection.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB Collection object
        """
        database = self.get_database()
        return database[collection_name]

    def ping(self) -> bool:
        """Check that the server answers."""
        self.get_database().command("ping")
        return True

    def close(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")


# Global client manager (singleton pattern)
_mongo_client: Optional[MongoClientManager] = None


def get_mongo_client() -> MongoClientManager:
    """Get singleton MongoDB client manager."""
    global _mongo_client
    if _mongo_client is None:
        _mongo_client = MongoClientManager()
    return _mongo_client
