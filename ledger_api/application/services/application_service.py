"""
Application Service
===================

Application service for project applications: applicant-side submission,
edits and withdrawal-by-delete, owner-side status decisions.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ledger_api.application.dto.common_dto import Page
from ledger_api.application.use_cases.application.create_application import CreateApplicationUseCase
from ledger_api.application.use_cases.application.update_application_status import (
    UpdateApplicationStatusUseCase,
)
from ledger_api.domain.errors import AuthorizationDenied, InvalidStatusTransition, NotFound
from ledger_api.domain.models.application import (
    Application,
    Availability,
    Compensation,
    SkillOffer,
)
from ledger_api.domain.repositories.application_repository import ApplicationQuery, ApplicationRepository
from ledger_api.domain.repositories.project_repository import ProjectRepository
from ledger_api.utils.datetime_utils import ensure_aware, now
from ledger_api.utils.ids import require_valid_id

logger = logging.getLogger(__name__)


def _availability_of(data: Dict[str, Any]) -> Availability:
    return Availability(
        hours_per_week=data["hours_per_week"],
        start_date=ensure_aware(data["start_date"]),
        end_date=ensure_aware(data.get("end_date")),
    )


def _compensation_of(data: Optional[Dict[str, Any]]) -> Optional[Compensation]:
    return Compensation(**data) if data else None


class ApplicationService:
    """Application service for application operations."""

    def __init__(
        self,
        application_repository: ApplicationRepository,
        project_repository: ProjectRepository,
        clock: Callable[[], datetime] = now,
    ):
        self._repository = application_repository
        self._projects = project_repository
        self._create_use_case = CreateApplicationUseCase(application_repository, project_repository, clock)
        self._status_use_case = UpdateApplicationStatusUseCase(application_repository, project_repository, clock)

    def create_application(self, applicant_id: str, data: Dict[str, Any]) -> Application:
        return self._create_use_case.execute(
            project_id=data["project_id"],
            applicant_id=applicant_id,
            cover_letter=data["cover_letter"],
            proposed_role=data["proposed_role"],
            availability=_availability_of(data["availability"]),
            skills_offered=[SkillOffer(**s) for s in data.get("skills_offered") or []],
            expected_compensation=_compensation_of(data.get("expected_compensation")),
        )

    def get_application(self, application_id: str) -> Application:
        require_valid_id(application_id, "Application")
        application = self._repository.find_by_id(application_id)
        if application is None:
            raise NotFound("Application", application_id)
        return application

    def list_applications(self, query: ApplicationQuery, page: int, limit: int) -> Page[Application]:
        items = self._repository.find_page(query, skip=(page - 1) * limit, limit=limit)
        return Page(items=items, total=self._repository.count(query), page=page, limit=limit)

    def list_for_project(
        self,
        project_id: str,
        requester_id: str,
        status: Optional[str],
        page: int,
        limit: int,
    ) -> Page[Application]:
        """Applications received by a project. Owner only."""
        require_valid_id(project_id, "Project")
        project = self._projects.find_by_id(project_id)
        if project is None:
            raise NotFound("Project", project_id)
        if not project.is_owned_by(requester_id):
            raise AuthorizationDenied("Only the project owner can view its applications")
        return self.list_applications(ApplicationQuery(status=status, project_id=project_id), page, limit)

    def _own_application(self, application_id: str, requester_id: str, action: str) -> Application:
        application = self.get_application(application_id)
        if application.applicant_id != requester_id:
            raise AuthorizationDenied(f"Not authorized to {action} this application")
        return application

    def update_application(self, application_id: str, requester_id: str, changes: Dict[str, Any]) -> Application:
        """
        Edit the applicant's own pending application.

        Raises:
            AuthorizationDenied: If the requester is not the applicant
            InvalidStatusTransition: If the application is no longer pending
        """
        application = self._own_application(application_id, requester_id, "update")
        revised: Dict[str, Any] = {}
        for name, value in changes.items():
            if value is None:
                continue
            if name == "availability":
                value = _availability_of(value)
            elif name == "expected_compensation":
                value = _compensation_of(value)
            elif name == "skills_offered":
                value = [SkillOffer(**s) for s in value]
            revised[name] = value
        application.revise(**revised)
        updated = self._repository.update(application)
        if updated is None:
            current = self.get_application(application_id)
            logger.warning(
                "Edit of application %s refused: status moved to %s",
                application_id,
                current.status,
            )
            raise InvalidStatusTransition("Only pending applications can be edited")
        return updated

    def update_status(
        self,
        application_id: str,
        new_status: str,
        requester_id: str,
        review_notes: Optional[str] = None,
    ) -> Application:
        return self._status_use_case.execute(application_id, new_status, requester_id, review_notes)

    def delete_application(self, application_id: str, requester_id: str) -> None:
        self._own_application(application_id, requester_id, "delete")
        if not self._repository.delete(application_id):
            raise NotFound("Application", application_id)
        logger.info("Application %s deleted by its applicant", application_id)
