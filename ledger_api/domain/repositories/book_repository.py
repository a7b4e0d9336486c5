"""
Book Repository Interface
=========================

Abstract interface for book data access.
Implementations should be in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ledger_api.domain.models.book import Book


@dataclass
class BookQuery:
    """Listing filters. ``author`` and ``search`` match case-insensitively."""
    genre: Optional[str] = None
    author: Optional[str] = None
    search: Optional[str] = None
    include_archived: bool = False


class BookRepository(ABC):
    """
    Abstract repository for book persistence operations.

    The copy counter is only ever moved through ``decrement_available`` and
    ``increment_available``, which must be single guarded writes.
    """

    @abstractmethod
    def create(self, book: Book) -> Book:
        """
        Create a new book.

        Raises:
            DuplicateConstraintViolation: If the ISBN is already catalogued
        """
        pass

    @abstractmethod
    def update(self, book: Book) -> Book:
        """
        Update an existing book's descriptive fields and counters.

        Raises:
            NotFound: If the book does not exist
            DuplicateConstraintViolation: If the new ISBN is taken
        """
        pass

    @abstractmethod
    def find_by_id(self, book_id: str) -> Optional[Book]:
        """Find a book by its ID."""
        pass

    @abstractmethod
    def find_page(self, query: BookQuery, skip: int, limit: int) -> List[Book]:
        """Find books matching query, newest first."""
        pass

    @abstractmethod
    def count(self, query: BookQuery) -> int:
        """Count books matching query."""
        pass

    @abstractmethod
    def decrement_available(self, book_id: str) -> Optional[Book]:
        """
        Take one copy off the shelf if the book is active and has one.

        Returns:
            Updated book, or None if no copy could be taken
        """
        pass

    @abstractmethod
    def increment_available(self, book_id: str) -> Optional[Book]:
        """
        Put one copy back, never exceeding total_copies.

        Returns:
            Updated book, or None if the book does not exist
        """
        pass
