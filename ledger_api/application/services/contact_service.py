"""Contact Service: plain CRUD over address-book entries."""
from datetime import datetime
from typing import Any, Callable, Dict

from ledger_api.application.dto.common_dto import Page
from ledger_api.domain.errors import NotFound
from ledger_api.domain.models.contact import Contact
from ledger_api.domain.repositories.contact_repository import ContactRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import new_id, require_valid_id


class ContactService:

    def __init__(self, contact_repository: ContactRepository, clock: Callable[[], datetime] = now):
        self._repository = contact_repository
        self._clock = clock

    def create_contact(self, data: Dict[str, Any]) -> Contact:
        created_at = self._clock()
        contact = Contact(id=new_id(), created_at=created_at, updated_at=created_at, **data)
        return self._repository.create(contact)

    def get_contact(self, contact_id: str) -> Contact:
        require_valid_id(contact_id, "Contact")
        contact = self._repository.find_by_id(contact_id)
        if contact is None:
            raise NotFound("Contact", contact_id)
        return contact

    def list_contacts(self, page: int, limit: int) -> Page[Contact]:
        items = self._repository.find_page(skip=(page - 1) * limit, limit=limit)
        return Page(items=items, total=self._repository.count(), page=page, limit=limit)

    def update_contact(self, contact_id: str, changes: Dict[str, Any]) -> Contact:
        contact = self.get_contact(contact_id)
        contact.update(**{k: v for k, v in changes.items() if v is not None})
        return self._repository.update(contact)

    def delete_contact(self, contact_id: str) -> None:
        require_valid_id(contact_id, "Contact")
        if not self._repository.delete(contact_id):
            raise NotFound("Contact", contact_id)
