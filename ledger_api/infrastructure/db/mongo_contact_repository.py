"""MongoDB implementation of ContactRepository."""
from typing import List, Optional

from pymongo import ReturnDocument

from ledger_api.domain.constants.marketplace_fields import ContactFields
from ledger_api.domain.errors import NotFound
from ledger_api.domain.models.contact import Contact
from ledger_api.domain.repositories.contact_repository import ContactRepository
from ledger_api.infrastructure.db.mongo_base import MongoRepository
from ledger_api.utils.datetime_utils import ensure_aware, now


class MongoContactRepository(MongoRepository, ContactRepository):
    COLLECTION_NAME = "contacts"

    def _to_entity(self, doc: dict) -> Contact:
        return Contact(
            id=doc[ContactFields.ID],
            first_name=doc[ContactFields.FIRST_NAME],
            last_name=doc[ContactFields.LAST_NAME],
            email=doc[ContactFields.EMAIL],
            favorite_color=doc.get(ContactFields.FAVORITE_COLOR),
            birthday=doc.get(ContactFields.BIRTHDAY),
            created_at=ensure_aware(doc.get(ContactFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(ContactFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, contact: Contact) -> dict:
        return {
            ContactFields.ID: contact.id,
            ContactFields.FIRST_NAME: contact.first_name,
            ContactFields.LAST_NAME: contact.last_name,
            ContactFields.EMAIL: contact.email,
            ContactFields.FAVORITE_COLOR: contact.favorite_color,
            ContactFields.BIRTHDAY: contact.birthday,
            ContactFields.CREATED_AT: contact.created_at,
            ContactFields.UPDATED_AT: contact.updated_at,
        }

    def create(self, contact: Contact) -> Contact:
        self._collection.insert_one(self._to_document(contact))
        return contact

    def update(self, contact: Contact) -> Contact:
        doc = self._to_document(contact)
        result = self._collection.find_one_and_update(
            self._by_id(contact.id),
            {"$set": {k: v for k, v in doc.items() if k != ContactFields.CREATED_AT}},
            return_document=ReturnDocument.AFTER,
        )
        if not result:
            raise NotFound("Contact", contact.id)
        return self._to_entity(result)

    def find_by_id(self, contact_id: str) -> Optional[Contact]:
        doc = self._find_doc(contact_id)
        return self._to_entity(doc) if doc else None

    def find_page(self, skip: int, limit: int) -> List[Contact]:
        docs = self._collection.find({}).sort(ContactFields.CREATED_AT, -1).skip(skip).limit(limit)
        return [self._to_entity(doc) for doc in docs]

    def count(self) -> int:
        return self._collection.count_documents({})

    def delete(self, contact_id: str) -> bool:
        return self._delete_doc(contact_id)
