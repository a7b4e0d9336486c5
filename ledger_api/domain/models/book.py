"""
Book Model
==========

Domain model representing a catalog book with a finite number of copies.
This is a pure domain object with no infrastructure dependencies.
"""
from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field

from ledger_api.domain.errors import CapacityExhausted, ValidationFailed
from ledger_api.utils.datetime_utils import now


BOOK_GENRES = (
    "Fiction",
    "Non-Fiction",
    "Mystery",
    "Romance",
    "Sci-Fi",
    "Fantasy",
    "Biography",
    "History",
    "Science",
    "Technology",
    "Self-Help",
    "Other",
)


class BookStatus:
    ACTIVE = "active"
    ARCHIVED = "archived"


@dataclass
class Book:
    """
    Book domain model.

    Owns the copy counters. ``available_copies`` never exceeds
    ``total_copies`` and never drops below zero.
    """
    id: str
    title: str
    author: str
    isbn: str
    published_year: int
    genre: str = "Other"
    total_copies: int = 1
    available_copies: int = 1
    description: Optional[str] = None
    publisher: Optional[str] = None
    language: str = "English"
    page_count: Optional[int] = None
    status: str = BookStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def __post_init__(self) -> None:
        if self.total_copies < 0 or self.available_copies < 0:
            raise ValidationFailed("Copy counts cannot be negative")
        if self.available_copies > self.total_copies:
            self.available_copies = self.total_copies

    @property
    def borrowed_copies(self) -> int:
        return self.total_copies - self.available_copies

    def is_archived(self) -> bool:
        return self.status == BookStatus.ARCHIVED

    def checkout_copy(self) -> None:
        """Take one copy off the shelf."""
        if self.available_copies <= 0:
            raise CapacityExhausted(f"No copies of '{self.title}' available for borrowing")
        self.available_copies -= 1
        self.updated_at = now()

    def resize_stock(self, total_copies: int, available_copies: Optional[int] = None) -> None:
        """
        Change the number of owned copies.

        Copies currently out on loan stay out: when ``available_copies`` is not
        given it is shifted by the same delta as the total.

        Raises:
            ValidationFailed: If the new total is below the borrowed count
        """
        borrowed = self.borrowed_copies
        if total_copies < borrowed:
            raise ValidationFailed(
                f"Total copies cannot be lower than the {borrowed} copies currently on loan"
            )
        if available_copies is None:
            available_copies = total_copies - borrowed
        self.total_copies = total_copies
        self.available_copies = max(0, min(available_copies, total_copies))
        self.updated_at = now()

    def archive(self) -> None:
        self.status = BookStatus.ARCHIVED
        self.updated_at = now()
