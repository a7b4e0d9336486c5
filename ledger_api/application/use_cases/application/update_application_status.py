"""
Update Application Status Use Case
==================================

Moves an application through pending -> under-review -> accepted/rejected/withdrawn.
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from ledger_api.domain.errors import AuthorizationDenied, InvalidStatusTransition, NotFound
from ledger_api.domain.models.application import Application
from ledger_api.domain.repositories.application_repository import ApplicationRepository
from ledger_api.domain.repositories.project_repository import ProjectRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import require_valid_id

logger = logging.getLogger(__name__)


class UpdateApplicationStatusUseCase:
    """
    Use case for changing an application's status.

    Only the owner of the project may do this. The write is conditional on
    the status read here, so two reviewers racing cannot both act on the same
    state.
    """

    def __init__(
        self,
        application_repository: ApplicationRepository,
        project_repository: ProjectRepository,
        clock: Callable[[], datetime] = now,
    ):
        self._applications = application_repository
        self._projects = project_repository
        self._clock = clock

    def execute(
        self,
        application_id: str,
        new_status: str,
        requester_id: str,
        review_notes: Optional[str] = None,
    ) -> Application:
        """
        Execute the status change.

        Args:
            application_id: Application to move
            new_status: Target status; never pending
            requester_id: Authenticated caller; must own the project
            review_notes: Optional notes stored with the decision

        Raises:
            NotFound: If the application or its project does not exist
            AuthorizationDenied: If the requester does not own the project
            InvalidStatusTransition: If the move is not allowed from the current status
        """
        require_valid_id(application_id, "Application")

        application = self._applications.find_by_id(application_id)
        if application is None:
            raise NotFound("Application", application_id)

        project = self._projects.find_by_id(application.project_id)
        if project is None:
            raise NotFound("Project", application.project_id)
        if not project.is_owned_by(requester_id):
            raise AuthorizationDenied("Only the project owner can update application status")

        previous_status = application.status
        application.transition_to(new_status, requester_id, self._clock(), review_notes)

        updated = self._applications.update_status(application, expected_status=previous_status)
        if updated is None:
            logger.warning("Status write for application %s refused, status moved from '%s'", application_id, previous_status)
            raise InvalidStatusTransition(
                "Application status changed concurrently; reload and retry",
                {"from": previous_status, "to": new_status},
            )

        logger.info(
            "Application %s moved from '%s' to '%s' by %s",
            application_id,
            previous_status,
            new_status,
            requester_id,
        )
        return updated
