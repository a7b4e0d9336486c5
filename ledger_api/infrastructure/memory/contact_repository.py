"""In-memory contact repository."""
from typing import List, Optional

from ledger_api.domain.errors import NotFound
from ledger_api.domain.models.contact import Contact
from ledger_api.domain.repositories.contact_repository import ContactRepository
from ledger_api.infrastructure.memory.store import InMemoryRepository


class InMemoryContactRepository(InMemoryRepository, ContactRepository):
    COLLECTION_NAME = "contacts"

    def create(self, contact: Contact) -> Contact:
        with self._lock:
            return self._put(contact)

    def update(self, contact: Contact) -> Contact:
        with self._lock:
            if contact.id not in self._items:
                raise NotFound("Contact", contact.id)
            return self._put(contact)

    def find_by_id(self, contact_id: str) -> Optional[Contact]:
        with self._lock:
            return self._get(contact_id)

    def find_page(self, skip: int, limit: int) -> List[Contact]:
        with self._lock:
            return self._page(self._items.values(), skip, limit, lambda c: c.created_at)

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def delete(self, contact_id: str) -> bool:
        with self._lock:
            return self._items.pop(contact_id, None) is not None
