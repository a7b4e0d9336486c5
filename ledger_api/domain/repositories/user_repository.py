"""
User Repository Interface
=========================
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ledger_api.domain.models.user import User


@dataclass
class UserQuery:
    experience_level: Optional[str] = None
    is_available: Optional[bool] = None
    skill: Optional[str] = None


@dataclass
class UserStats:
    available_users: int = 0
    by_experience_level: Dict[str, int] = field(default_factory=dict)
    top_skills: List[Tuple[str, int]] = field(default_factory=list)


class UserRepository(ABC):
    """Abstract repository interface for user operations."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Create a new user. Raises DuplicateConstraintViolation on a taken email."""
        pass

    @abstractmethod
    def update(self, user: User) -> User:
        """Update an existing user."""
        pass

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]:
        """Find a user by ID."""
        pass

    @abstractmethod
    def find_page(self, query: UserQuery, skip: int, limit: int) -> List[User]:
        """Find users matching query, newest first."""
        pass

    @abstractmethod
    def count(self, query: UserQuery) -> int:
        """Count users matching query."""
        pass

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Delete a user."""
        pass

    @abstractmethod
    def exists(self, user_id: str) -> bool:
        """Check if a user exists."""
        pass

    @abstractmethod
    def stats(self, top: int = 10) -> UserStats:
        """Counts over available users: by experience level and the ``top`` skills."""
        pass
