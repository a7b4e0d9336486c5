"""
In-Memory Library Repositories
==============================

Book and member repositories backed by InMemoryStore.
"""
import copy
from datetime import datetime
from typing import List, Optional

from ledger_api.domain.errors import DuplicateConstraintViolation, NotFound
from ledger_api.domain.models.book import Book, BookStatus
from ledger_api.domain.models.member import BorrowRecord, Member
from ledger_api.domain.repositories.book_repository import BookQuery, BookRepository
from ledger_api.domain.repositories.member_repository import MemberQuery, MemberRepository
from ledger_api.infrastructure.memory.store import InMemoryRepository, contains
from ledger_api.utils.datetime_utils import now


class InMemoryBookRepository(InMemoryRepository, BookRepository):
    COLLECTION_NAME = "books"

    def _check_isbn_free(self, book: Book) -> None:
        for other in self._items.values():
            if other.isbn == book.isbn and other.id != book.id:
                raise DuplicateConstraintViolation("Book with this ISBN already exists")

    def _matches(self, book: Book, query: BookQuery) -> bool:
        if not query.include_archived and book.status == BookStatus.ARCHIVED:
            return False
        if query.genre and book.genre != query.genre:
            return False
        if query.author and not contains(book.author, query.author):
            return False
        if query.search and not any(
            contains(text, query.search) for text in (book.title, book.author, book.description)
        ):
            return False
        return True

    def create(self, book: Book) -> Book:
        with self._lock:
            self._check_isbn_free(book)
            return self._put(book)

    def update(self, book: Book) -> Book:
        with self._lock:
            if book.id not in self._items:
                raise NotFound("Book", book.id)
            self._check_isbn_free(book)
            book.updated_at = now()
            return self._put(book)

    def find_by_id(self, book_id: str) -> Optional[Book]:
        with self._lock:
            return self._get(book_id)

    def find_page(self, query: BookQuery, skip: int, limit: int) -> List[Book]:
        with self._lock:
            matches = self._select(lambda b: self._matches(b, query))
            return self._page(matches, skip, limit, lambda b: b.created_at)

    def count(self, query: BookQuery) -> int:
        with self._lock:
            return len(self._select(lambda b: self._matches(b, query)))

    def decrement_available(self, book_id: str) -> Optional[Book]:
        with self._lock:
            book = self._items.get(book_id)
            if book is None or book.status != BookStatus.ACTIVE or book.available_copies <= 0:
                return None
            book.available_copies -= 1
            book.updated_at = now()
            return self._get(book_id)

    def increment_available(self, book_id: str) -> Optional[Book]:
        with self._lock:
            book = self._items.get(book_id)
            if book is None:
                return None
            book.available_copies = min(book.total_copies, book.available_copies + 1)
            book.updated_at = now()
            return self._get(book_id)


class InMemoryMemberRepository(InMemoryRepository, MemberRepository):
    COLLECTION_NAME = "members"

    def _check_email_free(self, member: Member) -> None:
        for other in self._items.values():
            if other.email == member.email and other.id != member.id:
                raise DuplicateConstraintViolation("Member with this email already exists")

    @staticmethod
    def _matches(member: Member, query: MemberQuery) -> bool:
        if query.membership_type and member.membership_type != query.membership_type:
            return False
        if query.is_active is not None and member.is_active != query.is_active:
            return False
        return True

    def create(self, member: Member) -> Member:
        with self._lock:
            self._check_email_free(member)
            return self._put(member)

    def update(self, member: Member) -> Member:
        with self._lock:
            stored = self._items.get(member.id)
            if stored is None:
                raise NotFound("Member", member.id)
            self._check_email_free(member)
            # The ledger is only written by the borrow/return operations
            member.borrowed_books = stored.borrowed_books
            member.updated_at = now()
            return self._put(member)

    def find_by_id(self, member_id: str) -> Optional[Member]:
        with self._lock:
            return self._get(member_id)

    def find_page(self, query: MemberQuery, skip: int, limit: int) -> List[Member]:
        with self._lock:
            matches = self._select(lambda m: self._matches(m, query))
            return self._page(matches, skip, limit, lambda m: m.created_at)

    def count(self, query: MemberQuery) -> int:
        with self._lock:
            return len(self._select(lambda m: self._matches(m, query)))

    def delete(self, member_id: str) -> bool:
        with self._lock:
            return self._items.pop(member_id, None) is not None

    def append_borrow_record(self, member_id: str, record: BorrowRecord) -> Optional[Member]:
        with self._lock:
            member = self._items.get(member_id)
            if member is None or member.active_borrow_for(record.book_id) is not None:
                return None
            member.borrowed_books.append(copy.deepcopy(record))
            member.updated_at = record.borrow_date
            return self._get(member_id)

    def close_borrow_record(self, member_id: str, book_id: str, returned_at: datetime) -> Optional[Member]:
        with self._lock:
            member = self._items.get(member_id)
            if member is None:
                return None
            record = member.active_borrow_for(book_id)
            if record is None:
                return None
            record.close(returned_at)
            member.updated_at = returned_at
            return self._get(member_id)

    def has_active_borrow_of(self, book_id: str) -> bool:
        with self._lock:
            return any(m.active_borrow_for(book_id) is not None for m in self._items.values())
