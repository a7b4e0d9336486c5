"""
Return Book Use Case
====================

Closes a member's active borrow record and puts the copy back on the shelf.
"""
import logging
from datetime import datetime
from typing import Callable

from ledger_api.application.use_cases.library.borrow_book import Loan
from ledger_api.domain.errors import NoActiveBorrow, NotFound
from ledger_api.domain.repositories.book_repository import BookRepository
from ledger_api.domain.repositories.member_repository import MemberRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import require_valid_id

logger = logging.getLogger(__name__)


class ReturnBookUseCase:
    """
    Use case for returning a borrowed book.

    Archived books can still be returned. The copy counter is clamped at
    total_copies.
    """

    def __init__(
        self,
        member_repository: MemberRepository,
        book_repository: BookRepository,
        clock: Callable[[], datetime] = now,
    ):
        self._members = member_repository
        self._books = book_repository
        self._clock = clock

    def execute(self, member_id: str, book_id: str) -> Loan:
        """
        Execute the return book use case.

        Raises:
            NotFound: If the member or book does not exist
            NoActiveBorrow: If the member holds no unreturned copy of the book
        """
        require_valid_id(member_id, "Member")
        require_valid_id(book_id, "Book")

        member = self._members.find_by_id(member_id)
        if member is None:
            raise NotFound("Member", member_id)
        if self._books.find_by_id(book_id) is None:
            raise NotFound("Book", book_id)

        returned_at = self._clock()
        record = member.return_book(book_id, returned_at)

        updated_member = self._members.close_borrow_record(member_id, book_id, returned_at)
        if updated_member is None:
            # A concurrent return closed it first
            raise NoActiveBorrow("Book was not borrowed by this member or already returned")

        updated_book = self._books.increment_available(book_id)
        if updated_book is None:
            raise NotFound("Book", book_id)

        logger.info(
            "Member %s returned book %s (%d copies available)",
            member_id,
            book_id,
            updated_book.available_copies,
        )
        return Loan(member=updated_member, book=updated_book, record=record)
