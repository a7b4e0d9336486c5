"""
User Service
============
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict

from ledger_api.application.dto.common_dto import Page
from ledger_api.domain.errors import NotFound
from ledger_api.domain.models.user import Skill, User
from ledger_api.domain.repositories.user_repository import UserQuery, UserRepository, UserStats
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import new_id, require_valid_id

TOP_STATS_LIMIT = 10

logger = logging.getLogger(__name__)


class UserService:
    """Plain CRUD over marketplace user profiles."""

    def __init__(self, user_repository: UserRepository, clock: Callable[[], datetime] = now):
        self._repository = user_repository
        self._clock = clock

    def create_user(self, data: Dict[str, Any]) -> User:
        data = dict(data)
        skills = [Skill(**s) for s in data.pop("skills", [])]
        created_at = self._clock()
        user = User(id=new_id(), skills=skills, created_at=created_at, updated_at=created_at, **data)
        saved = self._repository.create(user)
        logger.info("User %s created", saved.id)
        return saved

    def get_user(self, user_id: str) -> User:
        require_valid_id(user_id, "User")
        user = self._repository.find_by_id(user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user

    def list_users(self, query: UserQuery, page: int, limit: int) -> Page[User]:
        items = self._repository.find_page(query, skip=(page - 1) * limit, limit=limit)
        return Page(items=items, total=self._repository.count(query), page=page, limit=limit)

    def get_stats(self) -> UserStats:
        """Availability, experience-level and top-skill counts over available users."""
        return self._repository.stats(top=TOP_STATS_LIMIT)

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> User:
        user = self.get_user(user_id)
        for name, value in changes.items():
            if value is None:
                continue
            if name == "skills":
                value = [Skill(**s) for s in value]
            setattr(user, name, value)
        return self._repository.update(user)

    def delete_user(self, user_id: str) -> None:
        require_valid_id(user_id, "User")
        if not self._repository.delete(user_id):
            raise NotFound("User", user_id)
        logger.info("User %s deleted", user_id)
