"""
Member Repository Interface
===========================

Abstract interface for member data access, including the embedded borrow ledger.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ledger_api.domain.models.member import BorrowRecord, Member


@dataclass
class MemberQuery:
    membership_type: Optional[str] = None
    is_active: Optional[bool] = None


class MemberRepository(ABC):
    """Abstract repository for member persistence operations."""

    @abstractmethod
    def create(self, member: Member) -> Member:
        """
        Create a new member.

        Raises:
            DuplicateConstraintViolation: If the email is already registered
        """
        pass

    @abstractmethod
    def update(self, member: Member) -> Member:
        """
        Update profile fields. The borrow ledger is not written by this call.

        Raises:
            NotFound: If the member does not exist
            DuplicateConstraintViolation: If the new email is taken
        """
        pass

    @abstractmethod
    def find_by_id(self, member_id: str) -> Optional[Member]:
        """Find a member by ID."""
        pass

    @abstractmethod
    def find_page(self, query: MemberQuery, skip: int, limit: int) -> List[Member]:
        """Find members matching query, newest first."""
        pass

    @abstractmethod
    def count(self, query: MemberQuery) -> int:
        """Count members matching query."""
        pass

    @abstractmethod
    def delete(self, member_id: str) -> bool:
        """Delete a member. Returns True if one was removed."""
        pass

    @abstractmethod
    def append_borrow_record(self, member_id: str, record: BorrowRecord) -> Optional[Member]:
        """
        Append record unless the member already holds an unreturned copy of the same book.

        Returns:
            Updated member, or None if the member is missing or the guard failed
        """
        pass

    @abstractmethod
    def close_borrow_record(self, member_id: str, book_id: str, returned_at: datetime) -> Optional[Member]:
        """
        Mark the member's unreturned record for book_id as returned.

        Returns:
            Updated member, or None if no such record exists
        """
        pass

    @abstractmethod
    def has_active_borrow_of(self, book_id: str) -> bool:
        """Check whether any member holds an unreturned copy of book_id."""
        pass
