"""
Member Service
==============

Application service that coordinates member operations, including the
borrow and return use cases.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict

from ledger_api.application.dto.common_dto import Page
from ledger_api.application.use_cases.library.borrow_book import BorrowBookUseCase, Loan
from ledger_api.application.use_cases.library.return_book import ReturnBookUseCase
from ledger_api.domain.errors import NotFound
from ledger_api.domain.models.member import DEFAULT_LOAN_PERIOD_DAYS, Address, Member
from ledger_api.domain.repositories.book_repository import BookRepository
from ledger_api.domain.repositories.member_repository import MemberQuery, MemberRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import new_id, require_valid_id

logger = logging.getLogger(__name__)


class MemberService:
    """
    Application service for member operations.

    This service coordinates the borrow/return use cases and provides
    plain CRUD for member profiles.
    """

    def __init__(
        self,
        member_repository: MemberRepository,
        book_repository: BookRepository,
        loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS,
        clock: Callable[[], datetime] = now,
    ):
        self._repository = member_repository
        self._clock = clock
        self._borrow_use_case = BorrowBookUseCase(member_repository, book_repository, loan_period_days, clock)
        self._return_use_case = ReturnBookUseCase(member_repository, book_repository, clock)

    def create_member(self, data: Dict[str, Any]) -> Member:
        data = dict(data)
        address = data.pop("address", None)
        joined_at = self._clock()
        member = Member(
            id=new_id(),
            address=Address(**address) if address else None,
            membership_date=joined_at,
            created_at=joined_at,
            updated_at=joined_at,
            **data,
        )
        saved = self._repository.create(member)
        logger.info("Member %s registered (%s)", saved.id, saved.membership_type)
        return saved

    def get_member(self, member_id: str) -> Member:
        require_valid_id(member_id, "Member")
        member = self._repository.find_by_id(member_id)
        if member is None:
            raise NotFound("Member", member_id)
        return member

    def list_members(self, query: MemberQuery, page: int, limit: int) -> Page[Member]:
        items = self._repository.find_page(query, skip=(page - 1) * limit, limit=limit)
        return Page(items=items, total=self._repository.count(query), page=page, limit=limit)

    def update_member(self, member_id: str, changes: Dict[str, Any]) -> Member:
        member = self.get_member(member_id)
        for name, value in changes.items():
            if value is None:
                continue
            if name == "address":
                value = Address(**value)
            setattr(member, name, value)
        return self._repository.update(member)

    def delete_member(self, member_id: str) -> None:
        """
        Delete a member.

        Raises:
            EntityInUse: If the member still holds unreturned books
        """
        member = self.get_member(member_id)
        member.ensure_deletable()
        if not self._repository.delete(member_id):
            raise NotFound("Member", member_id)
        logger.info("Member %s deleted", member_id)

    def borrow_book(self, member_id: str, book_id: str) -> Loan:
        return self._borrow_use_case.execute(member_id, book_id)

    def return_book(self, member_id: str, book_id: str) -> Loan:
        return self._return_use_case.execute(member_id, book_id)
