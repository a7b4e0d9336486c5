"""
Create Application Use Case
===========================

Business use case for applying to join a project.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from ledger_api.domain.errors import AlreadyApplied, NotFound
from ledger_api.domain.models.application import (
    Application,
    Availability,
    Compensation,
    SkillOffer,
)
from ledger_api.domain.repositories.application_repository import ApplicationRepository
from ledger_api.domain.repositories.project_repository import ProjectRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import new_id, require_valid_id

logger = logging.getLogger(__name__)


class CreateApplicationUseCase:
    """
    Use case for submitting an application.

    One application per (project, applicant). The pre-check gives a clean
    error in the common case; the repository's unique constraint is what
    actually closes the race.
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
        project_id: str,
        applicant_id: str,
        cover_letter: str,
        proposed_role: str,
        availability: Availability,
        skills_offered: Optional[List[SkillOffer]] = None,
        expected_compensation: Optional[Compensation] = None,
    ) -> Application:
        """
        Execute the create application use case.

        Raises:
            NotFound: If the project does not exist
            AlreadyApplied: If the applicant already applied
        """
        require_valid_id(project_id, "Project")

        project = self._projects.find_by_id(project_id)
        if project is None:
            raise NotFound("Project", project_id)

        if self._applications.find_by_project_and_applicant(project_id, applicant_id):
            raise AlreadyApplied("You have already applied to this project")

        created_at = self._clock()
        application = Application(
            id=new_id(),
            project_id=project_id,
            applicant_id=applicant_id,
            cover_letter=cover_letter,
            proposed_role=proposed_role,
            availability=availability,
            skills_offered=skills_offered or [],
            expected_compensation=expected_compensation,
            created_at=created_at,
            updated_at=created_at,
        )
        saved = self._applications.create(application)
        logger.info("User %s applied to project %s (application %s)", applicant_id, project_id, saved.id)
        return saved
