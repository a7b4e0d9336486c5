"""
MongoDB Repository Base
=======================

Collection wiring shared by the concrete MongoDB repositories.
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pymongo.collection import Collection

from ledger_api.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client

logger = logging.getLogger(__name__)


class MongoRepository:
    """
    Base for MongoDB repositories.

    Entities are stored with their string id in an ``id`` field; Mongo's own
    ``_id`` is never exposed. Unique indexes are created on construction.
    """

    COLLECTION_NAME = ""

    def __init__(self, client: Optional[MongoClientManager] = None, collection_name: Optional[str] = None):
        """Initialize repository with MongoDB client."""
        self._client = client or get_mongo_client()
        self._collection: Collection = self._client.get_collection(collection_name or self.COLLECTION_NAME)
        self.ensure_indexes()

    def ensure_indexes(self) -> None:
        """Create the indexes the repository relies on. Idempotent."""
        self._collection.create_index("id", unique=True)
        logger.debug("Indexes ensured on %s", self._collection.name)

    def _by_id(self, entity_id: str) -> Dict[str, Any]:
        return {"id": entity_id}

    def _find_doc(self, entity_id: str) -> Optional[Dict[str, Any]]:
        return self._collection.find_one(self._by_id(entity_id))

    def _delete_doc(self, entity_id: str) -> bool:
        result = self._collection.delete_one(self._by_id(entity_id))
        return result.deleted_count > 0

    def _count_by(
        self,
        key: str,
        match: Optional[Dict[str, Any]] = None,
        unwind: Optional[str] = None,
        top: Optional[int] = None,
    ) -> List[Tuple[Any, int]]:
        """Group documents by ``key`` and count them, most frequent first."""
        pipeline: List[Dict[str, Any]] = []
        if match:
            pipeline.append({"$match": match})
        if unwind:
            pipeline.append({"$unwind": f"${unwind}"})
        pipeline.append({"$group": {"_id": f"${key}", "count": {"$sum": 1}}})
        pipeline.append({"$sort": {"count": -1, "_id": 1}})
        if top:
            pipeline.append({"$limit": top})
        return [(doc["_id"], doc["count"]) for doc in self._collection.aggregate(pipeline)]


def icontains(value: str) -> Dict[str, Any]:
    """Case-insensitive substring filter for user-supplied text."""
    return {"$regex": re.escape(value), "$options": "i"}
