"""
Borrow Book Use Case
====================

Lends one copy of a book to a member.

The book counter and the member ledger live in different documents, so the
change is two guarded writes: take a copy (only if one is available), then
append the borrow record (only if the member holds no unreturned copy of the
same book). If the second write is refused the copy is put back.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ledger_api.domain.errors import CapacityExhausted, DuplicateActiveBorrow, NotFound
from ledger_api.domain.models.book import Book
from ledger_api.domain.models.member import DEFAULT_LOAN_PERIOD_DAYS, BorrowRecord, Member
from ledger_api.domain.repositories.book_repository import BookRepository
from ledger_api.domain.repositories.member_repository import MemberRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import require_valid_id

logger = logging.getLogger(__name__)


@dataclass
class Loan:
    """Both sides of the ledger after a borrow or return."""
    member: Member
    book: Book
    record: BorrowRecord


class BorrowBookUseCase:
    """
    Use case for borrowing a book.

    Raises NotFound for a missing member, a missing or archived book,
    CapacityExhausted when no copy is left and DuplicateActiveBorrow when the
    member already holds an unreturned copy.
    """

    def __init__(
        self,
        member_repository: MemberRepository,
        book_repository: BookRepository,
        loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS,
        clock: Callable[[], datetime] = now,
    ):
        """
        Initialize use case with repositories.

        Args:
            member_repository: Repository holding members and their borrow ledgers
            book_repository: Repository holding books and their copy counters
            loan_period_days: Days between borrow_date and due_date
            clock: Source of the current time
        """
        self._members = member_repository
        self._books = book_repository
        self._loan_period_days = loan_period_days
        self._clock = clock

    def _load_book(self, book_id: str) -> Book:
        book = self._books.find_by_id(book_id)
        if book is None or book.is_archived():
            raise NotFound("Book", book_id)
        return book

    def execute(self, member_id: str, book_id: str) -> Loan:
        """
        Execute the borrow book use case.

        Args:
            member_id: Borrowing member
            book_id: Book to lend

        Returns:
            Loan with the updated member, book and the new record
        """
        require_valid_id(member_id, "Member")
        require_valid_id(book_id, "Book")

        member = self._members.find_by_id(member_id)
        if member is None:
            raise NotFound("Member", member_id)
        book = self._load_book(book_id)

        # Validate against the current state first so the common failures
        # never touch storage. Capacity is checked before the member ledger.
        book.checkout_copy()
        borrowed_at = self._clock()
        record = member.borrow(book_id, borrowed_at, self._loan_period_days)

        updated_book = self._books.decrement_available(book_id)
        if updated_book is None:
            # Lost a race for the last copy, or the book was archived meanwhile
            self._load_book(book_id)
            raise CapacityExhausted(f"No copies of '{book.title}' available for borrowing")

        updated_member = self._members.append_borrow_record(member_id, record)
        if updated_member is None:
            self._books.increment_available(book_id)
            logger.warning(
                "Borrow of book %s by member %s refused after taking a copy; copy returned",
                book_id,
                member_id,
            )
            if self._members.find_by_id(member_id) is None:
                raise NotFound("Member", member_id)
            raise DuplicateActiveBorrow(f"Member has already borrowed book '{book_id}'")

        logger.info(
            "Member %s borrowed book %s (due %s, %d copies left)",
            member_id,
            book_id,
            record.due_date.isoformat(),
            updated_book.available_copies,
        )
        return Loan(member=updated_member, book=updated_book, record=record)
