"""
Remove Team Member Use Case
===========================
"""
import logging

from ledger_api.domain.errors import AuthorizationDenied, NotAnActiveMember, NotFound
from ledger_api.domain.models.project import Project
from ledger_api.domain.repositories.project_repository import ProjectRepository
from ledger_api.utils.ids import require_valid_id

logger = logging.getLogger(__name__)


class RemoveTeamMemberUseCase:
    """Soft-remove a user's active team entry. Owner only."""

    def __init__(self, project_repository: ProjectRepository):
        self._projects = project_repository

    def execute(self, project_id: str, user_id: str, requester_id: str) -> Project:
        """
        Execute the remove team member use case.

        Raises:
            NotFound: If the project does not exist
            AuthorizationDenied: If the requester is not the owner
            NotAnActiveMember: If the user has no active entry
        """
        require_valid_id(project_id, "Project")
        require_valid_id(user_id, "User")

        project = self._projects.find_by_id(project_id)
        if project is None:
            raise NotFound("Project", project_id)
        if not project.is_owned_by(requester_id):
            raise AuthorizationDenied("Only the project owner can remove team members")

        project.remove_team_member(user_id)

        updated = self._projects.remove_team_member(project_id, user_id)
        if updated is None:
            raise NotAnActiveMember("User is not an active team member")

        logger.info("User %s removed from project %s", user_id, project_id)
        return updated
