"""
Add Team Member Use Case
========================

Business use case for adding a user to a project team.
"""
import logging
from datetime import datetime
from typing import Callable

from ledger_api.domain.errors import AuthorizationDenied, CapacityExhausted, NotFound
from ledger_api.domain.models.project import Project
from ledger_api.domain.repositories.project_repository import ProjectRepository
from ledger_api.domain.repositories.user_repository import UserRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import require_valid_id

logger = logging.getLogger(__name__)


class AddTeamMemberUseCase:
    """
    Use case for adding a team member.

    Only the project owner may add members. Removed entries stay in the
    ledger and do not count towards max_team_size.
    """

    def __init__(
        self,
        project_repository: ProjectRepository,
        user_repository: UserRepository,
        clock: Callable[[], datetime] = now,
    ):
        """
        Initialize use case with repositories.

        Args:
            project_repository: Repository for projects and their team ledgers
            user_repository: Repository used to check the user exists
            clock: Source of the current time
        """
        self._projects = project_repository
        self._users = user_repository
        self._clock = clock

    def execute(self, project_id: str, user_id: str, role: str, requester_id: str) -> Project:
        """
        Execute the add team member use case.

        Args:
            project_id: Project to join
            user_id: User being added
            role: Role on the team
            requester_id: Authenticated caller; must own the project

        Returns:
            Updated project

        Raises:
            NotFound: If the project or user does not exist
            AuthorizationDenied: If the requester is not the owner
            AlreadyMember: If the user already has an active entry
            CapacityExhausted: If the team is full
        """
        require_valid_id(project_id, "Project")
        require_valid_id(user_id, "User")

        project = self._projects.find_by_id(project_id)
        if project is None:
            raise NotFound("Project", project_id)
        if not project.is_owned_by(requester_id):
            raise AuthorizationDenied("Only the project owner can add team members")
        if not self._users.exists(user_id):
            raise NotFound("User", user_id)

        member = project.add_team_member(user_id, role, self._clock())

        updated = self._projects.add_team_member(project_id, member)
        if updated is None:
            logger.warning("Guarded team update refused for user %s on project %s", user_id, project_id)
            # Re-check against fresh state to report the right reason
            current = self._projects.find_by_id(project_id)
            if current is None:
                raise NotFound("Project", project_id)
            current.add_team_member(user_id, role, member.joined_at)
            raise CapacityExhausted("Project is at maximum team size")

        logger.info(
            "User %s joined project %s as '%s' (%d/%d)",
            user_id,
            project_id,
            member.role,
            updated.current_team_size,
            updated.max_team_size,
        )
        return updated
