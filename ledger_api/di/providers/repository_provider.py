from typing import TYPE_CHECKING

from ...domain.repositories.application_repository import ApplicationRepository
from ...domain.repositories.book_repository import BookRepository
from ...domain.repositories.contact_repository import ContactRepository
from ...domain.repositories.member_repository import MemberRepository
from ...domain.repositories.project_repository import ProjectRepository
from ...domain.repositories.review_repository import ReviewRepository
from ...domain.repositories.user_repository import UserRepository
from ...infrastructure.db.mongo_application_repository import MongoApplicationRepository
from ...infrastructure.db.mongo_book_repository import MongoBookRepository
from ...infrastructure.db.mongo_contact_repository import MongoContactRepository
from ...infrastructure.db.mongo_member_repository import MongoMemberRepository
from ...infrastructure.db.mongo_project_repository import MongoProjectRepository
from ...infrastructure.db.mongo_review_repository import MongoReviewRepository
from ...infrastructure.db.mongo_user_repository import MongoUserRepository
from ...infrastructure.memory.contact_repository import InMemoryContactRepository
from ...infrastructure.memory.library_repositories import InMemoryBookRepository, InMemoryMemberRepository
from ...infrastructure.memory.marketplace_repositories import (
    InMemoryApplicationRepository,
    InMemoryProjectRepository,
    InMemoryReviewRepository,
    InMemoryUserRepository,
)

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class RepositoryProvider:
    """Repository registration provider - wires domain interfaces to infrastructure implementations"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all repository implementations.
        Uses whichever storage the database provider registered.
        """
        if container.has("memory_store"):
            RepositoryProvider._register_memory(container)
        else:
            RepositoryProvider._register_mongo(container)

    @staticmethod
    def _register_memory(container: "BaseContainer") -> None:
        store = container.get("memory_store")

        container.register_singleton(BookRepository, InMemoryBookRepository(store))
        container.register_singleton(MemberRepository, InMemoryMemberRepository(store))
        container.register_singleton(UserRepository, InMemoryUserRepository(store))
        container.register_singleton(ProjectRepository, InMemoryProjectRepository(store))
        container.register_singleton(ApplicationRepository, InMemoryApplicationRepository(store))
        container.register_singleton(ReviewRepository, InMemoryReviewRepository(store))
        container.register_singleton(ContactRepository, InMemoryContactRepository(store))

    @staticmethod
    def _register_mongo(container: "BaseContainer") -> None:
        # Get MongoDB client from database provider
        mongo_client = container.get("mongo_client")
        settings = container.get("settings")

        # Domain interfaces -> Infrastructure implementations
        container.register_singleton(
            BookRepository,
            MongoBookRepository(mongo_client, settings.books_collection),
        )
        container.register_singleton(
            MemberRepository,
            MongoMemberRepository(mongo_client, settings.members_collection),
        )
        container.register_singleton(
            UserRepository,
            MongoUserRepository(mongo_client, settings.users_collection),
        )
        container.register_singleton(
            ProjectRepository,
            MongoProjectRepository(mongo_client, settings.projects_collection),
        )
        container.register_singleton(
            ApplicationRepository,
            MongoApplicationRepository(mongo_client, settings.applications_collection),
        )
        container.register_singleton(
            ReviewRepository,
            MongoReviewRepository(mongo_client, settings.reviews_collection),
        )
        container.register_singleton(
            ContactRepository,
            MongoContactRepository(mongo_client, settings.contacts_collection),
        )
