"""
MongoDB Book Repository
=======================

Concrete implementation of BookRepository using MongoDB.

The copy counter is only ever moved by single-document conditional updates,
so concurrent borrowers cannot drive it below zero or above the total.
"""
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ledger_api.domain.constants.library_fields import BookFields
from ledger_api.domain.errors import DuplicateConstraintViolation, NotFound
from ledger_api.domain.models.book import Book, BookStatus
from ledger_api.domain.repositories.book_repository import BookQuery, BookRepository
from ledger_api.infrastructure.db.mongo_base import MongoRepository, icontains
from ledger_api.utils.datetime_utils import ensure_aware, now


class MongoBookRepository(MongoRepository, BookRepository):
    """MongoDB implementation of BookRepository."""

    COLLECTION_NAME = "books"

    def ensure_indexes(self) -> None:
        super().ensure_indexes()
        self._collection.create_index(BookFields.ISBN, unique=True)

    def _to_entity(self, doc: dict) -> Book:
        """Convert MongoDB document to Book entity."""
        return Book(
            id=doc[BookFields.ID],
            title=doc[BookFields.TITLE],
            author=doc[BookFields.AUTHOR],
            isbn=doc[BookFields.ISBN],
            published_year=doc[BookFields.PUBLISHED_YEAR],
            genre=doc.get(BookFields.GENRE, "Other"),
            total_copies=doc.get(BookFields.TOTAL_COPIES, 1),
            available_copies=doc.get(BookFields.AVAILABLE_COPIES, 1),
            description=doc.get(BookFields.DESCRIPTION),
            publisher=doc.get(BookFields.PUBLISHER),
            language=doc.get(BookFields.LANGUAGE, "English"),
            page_count=doc.get(BookFields.PAGE_COUNT),
            status=doc.get(BookFields.STATUS, BookStatus.ACTIVE),
            created_at=ensure_aware(doc.get(BookFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(BookFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, book: Book) -> dict:
        """Convert Book entity to MongoDB document."""
        return {
            BookFields.ID: book.id,
            BookFields.TITLE: book.title,
            BookFields.AUTHOR: book.author,
            BookFields.ISBN: book.isbn,
            BookFields.PUBLISHED_YEAR: book.published_year,
            BookFields.GENRE: book.genre,
            BookFields.TOTAL_COPIES: book.total_copies,
            BookFields.AVAILABLE_COPIES: book.available_copies,
            BookFields.DESCRIPTION: book.description,
            BookFields.PUBLISHER: book.publisher,
            BookFields.LANGUAGE: book.language,
            BookFields.PAGE_COUNT: book.page_count,
            BookFields.STATUS: book.status,
            BookFields.CREATED_AT: book.created_at,
            BookFields.UPDATED_AT: book.updated_at,
        }

    @staticmethod
    def _filter(query: BookQuery) -> Dict[str, Any]:
        conditions: Dict[str, Any] = {}
        if not query.include_archived:
            conditions[BookFields.STATUS] = {"$ne": BookStatus.ARCHIVED}
        if query.genre:
            conditions[BookFields.GENRE] = query.genre
        if query.author:
            conditions[BookFields.AUTHOR] = icontains(query.author)
        if query.search:
            conditions["$or"] = [
                {BookFields.TITLE: icontains(query.search)},
                {BookFields.AUTHOR: icontains(query.search)},
                {BookFields.DESCRIPTION: icontains(query.search)},
            ]
        return conditions

    def create(self, book: Book) -> Book:
        """Create a new book."""
        try:
            self._collection.insert_one(self._to_document(book))
        except DuplicateKeyError:
            raise DuplicateConstraintViolation("Book with this ISBN already exists")
        return book

    def update(self, book: Book) -> Book:
        """Update an existing book."""
        book.updated_at = now()
        doc = self._to_document(book)
        try:
            result = self._collection.find_one_and_update(
                self._by_id(book.id),
                {"$set": {k: v for k, v in doc.items() if k != BookFields.CREATED_AT}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise DuplicateConstraintViolation("Book with this ISBN already exists")

        if not result:
            raise NotFound("Book", book.id)

        return self._to_entity(result)

    def find_by_id(self, book_id: str) -> Optional[Book]:
        """Find a book by its ID."""
        doc = self._find_doc(book_id)
        if not doc:
            return None
        return self._to_entity(doc)

    def find_page(self, query: BookQuery, skip: int, limit: int) -> List[Book]:
        docs = (
            self._collection.find(self._filter(query))
            .sort(BookFields.CREATED_AT, -1)
            .skip(skip)
            .limit(limit)
        )
        return [self._to_entity(doc) for doc in docs]

    def count(self, query: BookQuery) -> int:
        return self._collection.count_documents(self._filter(query))

    def decrement_available(self, book_id: str) -> Optional[Book]:
        """Take one copy if the book is active and has one left."""
        result = self._collection.find_one_and_update(
            {
                BookFields.ID: book_id,
                BookFields.STATUS: BookStatus.ACTIVE,
                BookFields.AVAILABLE_COPIES: {"$gt": 0},
            },
            {
                "$inc": {BookFields.AVAILABLE_COPIES: -1},
                "$set": {BookFields.UPDATED_AT: now()},
            },
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(result) if result else None

    def increment_available(self, book_id: str) -> Optional[Book]:
        """Put one copy back, leaving the counter alone when it is already at the total."""
        result = self._collection.find_one_and_update(
            {
                BookFields.ID: book_id,
                "$expr": {"$lt": [f"${BookFields.AVAILABLE_COPIES}", f"${BookFields.TOTAL_COPIES}"]},
            },
            {
                "$inc": {BookFields.AVAILABLE_COPIES: 1},
                "$set": {BookFields.UPDATED_AT: now()},
            },
            return_document=ReturnDocument.AFTER,
        )
        if result:
            return self._to_entity(result)
        return self.find_by_id(book_id)
