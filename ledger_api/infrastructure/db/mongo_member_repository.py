"""
MongoDB Member Repository
=========================

Concrete implementation of MemberRepository using MongoDB.
The borrow ledger is an embedded array written only through guarded
``$push`` / positional ``$set`` updates.
"""
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ledger_api.domain.constants.library_fields import BorrowRecordFields, MemberFields
from ledger_api.domain.errors import DuplicateConstraintViolation, NotFound
from ledger_api.domain.models.member import Address, BorrowRecord, Member
from ledger_api.domain.repositories.member_repository import MemberQuery, MemberRepository
from ledger_api.infrastructure.db.mongo_base import MongoRepository
from ledger_api.utils.datetime_utils import ensure_aware, now


def _active_record_of(book_id: str) -> Dict[str, Any]:
    return {"$elemMatch": {BorrowRecordFields.BOOK_ID: book_id, BorrowRecordFields.IS_RETURNED: False}}


class MongoMemberRepository(MongoRepository, MemberRepository):
    """MongoDB implementation of MemberRepository."""

    COLLECTION_NAME = "members"

    def ensure_indexes(self) -> None:
        super().ensure_indexes()
        self._collection.create_index(MemberFields.EMAIL, unique=True)
        self._collection.create_index(f"{MemberFields.BORROWED_BOOKS}.{BorrowRecordFields.BOOK_ID}")

    @staticmethod
    def _record_to_entity(doc: dict) -> BorrowRecord:
        return BorrowRecord(
            book_id=doc[BorrowRecordFields.BOOK_ID],
            borrow_date=ensure_aware(doc[BorrowRecordFields.BORROW_DATE]),
            due_date=ensure_aware(doc[BorrowRecordFields.DUE_DATE]),
            return_date=ensure_aware(doc.get(BorrowRecordFields.RETURN_DATE)),
            is_returned=doc.get(BorrowRecordFields.IS_RETURNED, False),
        )

    def _to_entity(self, doc: dict) -> Member:
        """Convert MongoDB document to Member entity."""
        address = doc.get(MemberFields.ADDRESS)
        return Member(
            id=doc[MemberFields.ID],
            first_name=doc[MemberFields.FIRST_NAME],
            last_name=doc[MemberFields.LAST_NAME],
            email=doc[MemberFields.EMAIL],
            phone=doc[MemberFields.PHONE],
            address=Address(**address) if address else None,
            membership_date=ensure_aware(doc.get(MemberFields.MEMBERSHIP_DATE)) or now(),
            membership_type=doc.get(MemberFields.MEMBERSHIP_TYPE, "Basic"),
            is_active=doc.get(MemberFields.IS_ACTIVE, True),
            fines=doc.get(MemberFields.FINES, 0.0),
            borrowed_books=[self._record_to_entity(r) for r in doc.get(MemberFields.BORROWED_BOOKS, [])],
            created_at=ensure_aware(doc.get(MemberFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(MemberFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, member: Member) -> dict:
        """Convert Member entity to MongoDB document."""
        return {
            MemberFields.ID: member.id,
            MemberFields.FIRST_NAME: member.first_name,
            MemberFields.LAST_NAME: member.last_name,
            MemberFields.EMAIL: member.email,
            MemberFields.PHONE: member.phone,
            MemberFields.ADDRESS: asdict(member.address) if member.address else None,
            MemberFields.MEMBERSHIP_DATE: member.membership_date,
            MemberFields.MEMBERSHIP_TYPE: member.membership_type,
            MemberFields.IS_ACTIVE: member.is_active,
            MemberFields.FINES: member.fines,
            MemberFields.BORROWED_BOOKS: [asdict(r) for r in member.borrowed_books],
            MemberFields.CREATED_AT: member.created_at,
            MemberFields.UPDATED_AT: member.updated_at,
        }

    @staticmethod
    def _filter(query: MemberQuery) -> Dict[str, Any]:
        conditions: Dict[str, Any] = {}
        if query.membership_type:
            conditions[MemberFields.MEMBERSHIP_TYPE] = query.membership_type
        if query.is_active is not None:
            conditions[MemberFields.IS_ACTIVE] = query.is_active
        return conditions

    def create(self, member: Member) -> Member:
        """Create a new member."""
        try:
            self._collection.insert_one(self._to_document(member))
        except DuplicateKeyError:
            raise DuplicateConstraintViolation("Member with this email already exists")
        return member

    def update(self, member: Member) -> Member:
        """Update profile fields; the borrow ledger is left untouched."""
        member.updated_at = now()
        doc = self._to_document(member)
        protected = {MemberFields.CREATED_AT, MemberFields.BORROWED_BOOKS}
        try:
            result = self._collection.find_one_and_update(
                self._by_id(member.id),
                {"$set": {k: v for k, v in doc.items() if k not in protected}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise DuplicateConstraintViolation("Member with this email already exists")

        if not result:
            raise NotFound("Member", member.id)

        return self._to_entity(result)

    def find_by_id(self, member_id: str) -> Optional[Member]:
        doc = self._find_doc(member_id)
        if not doc:
            return None
        return self._to_entity(doc)

    def find_page(self, query: MemberQuery, skip: int, limit: int) -> List[Member]:
        docs = (
            self._collection.find(self._filter(query))
            .sort(MemberFields.CREATED_AT, -1)
            .skip(skip)
            .limit(limit)
        )
        return [self._to_entity(doc) for doc in docs]

    def count(self, query: MemberQuery) -> int:
        return self._collection.count_documents(self._filter(query))

    def delete(self, member_id: str) -> bool:
        return self._delete_doc(member_id)

    def append_borrow_record(self, member_id: str, record: BorrowRecord) -> Optional[Member]:
        """Push record unless an unreturned entry for the same book is present."""
        result = self._collection.find_one_and_update(
            {
                MemberFields.ID: member_id,
                MemberFields.BORROWED_BOOKS: {"$not": _active_record_of(record.book_id)},
            },
            {
                "$push": {MemberFields.BORROWED_BOOKS: asdict(record)},
                "$set": {MemberFields.UPDATED_AT: record.borrow_date},
            },
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(result) if result else None

    def close_borrow_record(self, member_id: str, book_id: str, returned_at: datetime) -> Optional[Member]:
        """Flip the matching unreturned entry to returned."""
        ledger = MemberFields.BORROWED_BOOKS
        result = self._collection.find_one_and_update(
            {MemberFields.ID: member_id, ledger: _active_record_of(book_id)},
            {
                "$set": {
                    f"{ledger}.$.{BorrowRecordFields.IS_RETURNED}": True,
                    f"{ledger}.$.{BorrowRecordFields.RETURN_DATE}": returned_at,
                    MemberFields.UPDATED_AT: returned_at,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(result) if result else None

    def has_active_borrow_of(self, book_id: str) -> bool:
        count = self._collection.count_documents(
            {MemberFields.BORROWED_BOOKS: _active_record_of(book_id)}, limit=1
        )
        return count > 0
