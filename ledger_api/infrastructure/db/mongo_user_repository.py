"""
MongoDB User Repository
=======================

Concrete implementation of UserRepository using MongoDB.
"""
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ledger_api.domain.constants.marketplace_fields import UserFields
from ledger_api.domain.errors import DuplicateConstraintViolation, NotFound
from ledger_api.domain.models.user import Skill, User
from ledger_api.domain.repositories.user_repository import UserQuery, UserRepository, UserStats
from ledger_api.infrastructure.db.mongo_base import MongoRepository, icontains
from ledger_api.utils.datetime_utils import ensure_aware, now


class MongoUserRepository(MongoRepository, UserRepository):
    """MongoDB implementation of UserRepository."""

    COLLECTION_NAME = "users"

    def ensure_indexes(self) -> None:
        super().ensure_indexes()
        self._collection.create_index(UserFields.EMAIL, unique=True)

    def _to_entity(self, doc: dict) -> User:
        """Convert MongoDB document to User entity."""
        return User(
            id=doc[UserFields.ID],
            name=doc[UserFields.NAME],
            email=doc[UserFields.EMAIL],
            bio=doc.get(UserFields.BIO, ""),
            skills=[Skill(**s) for s in doc.get(UserFields.SKILLS, [])],
            experience_level=doc.get(UserFields.EXPERIENCE_LEVEL, "junior"),
            location=doc.get(UserFields.LOCATION, ""),
            website=doc.get(UserFields.WEBSITE, ""),
            github=doc.get(UserFields.GITHUB, ""),
            is_available=doc.get(UserFields.IS_AVAILABLE, True),
            preferred_project_types=doc.get(UserFields.PREFERRED_PROJECT_TYPES, []),
            hourly_rate=doc.get(UserFields.HOURLY_RATE),
            languages=doc.get(UserFields.LANGUAGES, []),
            created_at=ensure_aware(doc.get(UserFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(UserFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, user: User) -> dict:
        """Convert User entity to MongoDB document."""
        return asdict(user)

    @staticmethod
    def _filter(query: UserQuery) -> Dict[str, Any]:
        conditions: Dict[str, Any] = {}
        if query.experience_level:
            conditions[UserFields.EXPERIENCE_LEVEL] = query.experience_level
        if query.is_available is not None:
            conditions[UserFields.IS_AVAILABLE] = query.is_available
        if query.skill:
            conditions[f"{UserFields.SKILLS}.name"] = icontains(query.skill)
        return conditions

    def create(self, user: User) -> User:
        try:
            self._collection.insert_one(self._to_document(user))
        except DuplicateKeyError:
            raise DuplicateConstraintViolation("User with this email already exists")
        return user

    def update(self, user: User) -> User:
        user.updated_at = now()
        doc = self._to_document(user)
        try:
            result = self._collection.find_one_and_update(
                self._by_id(user.id),
                {"$set": {k: v for k, v in doc.items() if k != UserFields.CREATED_AT}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise DuplicateConstraintViolation("User with this email already exists")

        if not result:
            raise NotFound("User", user.id)

        return self._to_entity(result)

    def find_by_id(self, user_id: str) -> Optional[User]:
        doc = self._find_doc(user_id)
        if not doc:
            return None
        return self._to_entity(doc)

    def find_page(self, query: UserQuery, skip: int, limit: int) -> List[User]:
        docs = (
            self._collection.find(self._filter(query))
            .sort(UserFields.CREATED_AT, -1)
            .skip(skip)
            .limit(limit)
        )
        return [self._to_entity(doc) for doc in docs]

    def count(self, query: UserQuery) -> int:
        return self._collection.count_documents(self._filter(query))

    def delete(self, user_id: str) -> bool:
        return self._delete_doc(user_id)

    def exists(self, user_id: str) -> bool:
        """Check if a user exists."""
        count = self._collection.count_documents(self._by_id(user_id), limit=1)
        return count > 0

    def stats(self, top: int = 10) -> UserStats:
        available = {UserFields.IS_AVAILABLE: True}
        return UserStats(
            available_users=self._collection.count_documents(available),
            by_experience_level=dict(self._count_by(UserFields.EXPERIENCE_LEVEL, match=available)),
            top_skills=self._count_by(
                f"{UserFields.SKILLS}.name", match=available, unwind=UserFields.SKILLS, top=top
            ),
        )
