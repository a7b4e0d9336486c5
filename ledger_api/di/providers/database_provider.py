import logging
from typing import TYPE_CHECKING

from ...infrastructure.db.mongo_connection import MongoClientManager
from ...infrastructure.memory.store import InMemoryStore

if TYPE_CHECKING:
    from ..base_container import BaseContainer

logger = logging.getLogger(__name__)

MEMORY_BACKEND = "memory"
MONGO_BACKEND = "mongo"


class DatabaseProvider:
    """Centralized database connection provider - single source of truth for all DB connections"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the storage backend selected by STORAGE_BACKEND.
        Repositories pick up whichever connection is registered here.
        """
        settings = container.get("settings")
        backend = settings.storage_backend

        if backend == MEMORY_BACKEND:
            container.register_singleton("memory_store", InMemoryStore())
        elif backend == MONGO_BACKEND:
            container.register_singleton("mongo_client", MongoClientManager(settings))
        else:
            raise ValueError(f"Unknown STORAGE_BACKEND '{backend}' (expected 'mongo' or 'memory')")

        logger.info("Storage backend: %s", backend)
