"""
Member Model
============

Domain model for a library member and the borrow ledger embedded in it.

Each borrow event appends one BorrowRecord. The ledger is not deduplicated
by book (a book may be borrowed many times over a membership) but holds at
most one unreturned record per book at any time.
"""
from datetime import datetime, timedelta
from typing import List, Optional
from dataclasses import dataclass, field

from ledger_api.domain.errors import DuplicateActiveBorrow, EntityInUse, NoActiveBorrow
from ledger_api.utils.datetime_utils import now

DEFAULT_LOAN_PERIOD_DAYS = 14

MEMBERSHIP_TYPES = ("Basic", "Premium", "Student", "Senior")


@dataclass
class BorrowRecord:
    """One borrow of one book. Terminal once returned."""
    book_id: str
    borrow_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None
    is_returned: bool = False

    @classmethod
    def open(
        cls,
        book_id: str,
        borrowed_at: datetime,
        loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS,
    ) -> "BorrowRecord":
        """Start a loan; the due date is always derived from the borrow date."""
        return cls(
            book_id=book_id,
            borrow_date=borrowed_at,
            due_date=borrowed_at + timedelta(days=loan_period_days),
        )

    @property
    def is_active(self) -> bool:
        return not self.is_returned

    def is_overdue(self, at: Optional[datetime] = None) -> bool:
        return self.is_active and self.due_date < (at or now())

    def close(self, returned_at: datetime) -> None:
        if self.is_returned:
            raise NoActiveBorrow(f"Book '{self.book_id}' was already returned")
        self.return_date = returned_at
        self.is_returned = True


@dataclass
class Address:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


@dataclass
class Member:
    """Library member (the actor side of a loan)."""
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    address: Optional[Address] = None
    membership_date: datetime = field(default_factory=lambda: now())
    membership_type: str = "Basic"
    is_active: bool = True
    fines: float = 0.0
    borrowed_books: List[BorrowRecord] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def current_borrowed_count(self) -> int:
        return sum(1 for record in self.borrowed_books if record.is_active)

    def overdue_books(self, at: Optional[datetime] = None) -> List[BorrowRecord]:
        at = at or now()
        return [record for record in self.borrowed_books if record.is_overdue(at)]

    def active_borrow_for(self, book_id: str) -> Optional[BorrowRecord]:
        for record in self.borrowed_books:
            if record.book_id == book_id and record.is_active:
                return record
        return None

    def borrow(
        self,
        book_id: str,
        borrowed_at: datetime,
        loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS,
    ) -> BorrowRecord:
        """
        Append a new active record for book_id.

        Raises:
            DuplicateActiveBorrow: If an unreturned copy of the book is already held
        """
        if self.active_borrow_for(book_id) is not None:
            raise DuplicateActiveBorrow(f"Member has already borrowed book '{book_id}'")
        record = BorrowRecord.open(book_id, borrowed_at, loan_period_days)
        self.borrowed_books.append(record)
        self.updated_at = borrowed_at
        return record

    def return_book(self, book_id: str, returned_at: datetime) -> BorrowRecord:
        """
        Close the active record for book_id.

        Raises:
            NoActiveBorrow: If the book was not borrowed or is already returned
        """
        record = self.active_borrow_for(book_id)
        if record is None:
            raise NoActiveBorrow("Book was not borrowed by this member or already returned")
        record.close(returned_at)
        self.updated_at = returned_at
        return record

    def ensure_deletable(self) -> None:
        unreturned = self.current_borrowed_count
        if unreturned:
            raise EntityInUse(
                "Cannot delete member with unreturned books",
                {"unreturned_books": unreturned},
            )
