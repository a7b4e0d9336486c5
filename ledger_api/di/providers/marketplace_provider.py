from typing import TYPE_CHECKING

from ...application.services.application_service import ApplicationService
from ...application.services.project_service import ProjectService
from ...application.services.review_service import ReviewService
from ...application.services.user_service import UserService
from ...domain.repositories.application_repository import ApplicationRepository
from ...domain.repositories.project_repository import ProjectRepository
from ...domain.repositories.review_repository import ReviewRepository
from ...domain.repositories.user_repository import UserRepository

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class MarketplaceProvider:
    """Marketplace service provider - registers user, project, application and review services"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        clock = container.get("clock")
        users = container.get(UserRepository)
        projects = container.get(ProjectRepository)

        container.register_singleton(UserService, UserService(users, clock=clock))

        container.register_singleton(
            ProjectService,
            ProjectService(
                project_repository=projects,
                user_repository=users,
                clock=clock,
            )
        )

        container.register_singleton(
            ApplicationService,
            ApplicationService(
                application_repository=container.get(ApplicationRepository),
                project_repository=projects,
                clock=clock,
            )
        )

        container.register_singleton(
            ReviewService,
            ReviewService(
                review_repository=container.get(ReviewRepository),
                project_repository=projects,
                user_repository=users,
                clock=clock,
            )
        )
