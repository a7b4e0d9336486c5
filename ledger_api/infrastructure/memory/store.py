"""
In-Memory Store
===============

Process-local stand-in for the document database.

Each repository keeps its entities in a named collection. Every read hands
out a deep copy and every write stores one, so callers can never mutate
stored state by accident. A single re-entrant lock makes each repository
call behave like one atomic single-document write.
"""
import copy
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

T = TypeVar("T")


class InMemoryStore:
    """Named collections of entities keyed by id."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Any]] = {}
        self.lock = threading.RLock()

    def collection(self, name: str) -> Dict[str, Any]:
        return self._collections.setdefault(name, {})

    def clear(self) -> None:
        with self.lock:
            self._collections.clear()


class InMemoryRepository:
    """Shared helpers for the in-memory repositories."""

    COLLECTION_NAME = ""

    def __init__(self, store: InMemoryStore):
        self._store = store
        self._lock = store.lock
        self._items = store.collection(self.COLLECTION_NAME)

    def _get(self, entity_id: str) -> Optional[Any]:
        item = self._items.get(entity_id)
        return copy.deepcopy(item) if item is not None else None

    def _put(self, entity: Any) -> Any:
        self._items[entity.id] = copy.deepcopy(entity)
        return copy.deepcopy(entity)

    def _select(self, predicate: Callable[[Any], bool]) -> List[Any]:
        return [item for item in self._items.values() if predicate(item)]

    @staticmethod
    def _page(items: Iterable[T], skip: int, limit: int, sort_key: Callable[[T], Any]) -> List[T]:
        ordered = sorted(items, key=sort_key, reverse=True)
        return [copy.deepcopy(item) for item in ordered[skip:skip + limit]]


def contains(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring match, the in-memory analogue of a regex filter."""
    return bool(haystack) and needle.lower() in haystack.lower()
