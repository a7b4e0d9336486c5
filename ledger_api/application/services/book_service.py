"""
Book Service
============

Application service for the book catalog.
"""
import logging
from typing import Any, Dict

from ledger_api.application.dto.common_dto import Page
from ledger_api.domain.errors import EntityInUse, NotFound
from ledger_api.domain.models.book import Book
from ledger_api.domain.repositories.book_repository import BookQuery, BookRepository
from ledger_api.domain.repositories.member_repository import MemberRepository
from ledger_api.utils.ids import new_id, require_valid_id

logger = logging.getLogger(__name__)

_STOCK_FIELDS = ("total_copies", "available_copies")


class BookService:
    """
    Application service for book operations.

    Books are never hard-deleted; delete archives them once no copy is out.
    """

    def __init__(self, book_repository: BookRepository, member_repository: MemberRepository):
        """
        Initialize service with repositories.

        Args:
            book_repository: Repository for book persistence
            member_repository: Used to check for outstanding loans before archiving
        """
        self._repository = book_repository
        self._members = member_repository

    def create_book(self, data: Dict[str, Any]) -> Book:
        """
        Add a book to the catalog.

        available_copies defaults to total_copies and is clamped to it.
        """
        data = dict(data)
        if data.get("available_copies") is None:
            data["available_copies"] = data.get("total_copies", 1)
        book = Book(id=new_id(), **data)
        saved = self._repository.create(book)
        logger.info("Book %s created (isbn=%s, copies=%d)", saved.id, saved.isbn, saved.total_copies)
        return saved

    def get_book(self, book_id: str) -> Book:
        require_valid_id(book_id, "Book")
        book = self._repository.find_by_id(book_id)
        if book is None:
            raise NotFound("Book", book_id)
        return book

    def list_books(self, query: BookQuery, page: int, limit: int) -> Page[Book]:
        items = self._repository.find_page(query, skip=(page - 1) * limit, limit=limit)
        return Page(items=items, total=self._repository.count(query), page=page, limit=limit)

    def update_book(self, book_id: str, changes: Dict[str, Any]) -> Book:
        """
        Apply a partial update.

        Raises:
            ValidationFailed: If total_copies would drop below the copies on loan
        """
        book = self.get_book(book_id)
        if any(changes.get(name) is not None for name in _STOCK_FIELDS):
            total = changes.get("total_copies")
            book.resize_stock(
                book.total_copies if total is None else total,
                changes.get("available_copies"),
            )
        for name, value in changes.items():
            if name not in _STOCK_FIELDS and value is not None:
                setattr(book, name, value)
        return self._repository.update(book)

    def delete_book(self, book_id: str) -> Book:
        """
        Archive a book.

        Raises:
            EntityInUse: If any member still holds an unreturned copy
        """
        book = self.get_book(book_id)
        if self._members.has_active_borrow_of(book_id):
            raise EntityInUse(
                "Cannot delete book while copies are on loan",
                {"borrowed_copies": book.borrowed_copies},
            )
        book.archive()
        archived = self._repository.update(book)
        logger.info("Book %s archived", book_id)
        return archived
