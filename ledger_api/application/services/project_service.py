"""
Project Service
===============

Application service that coordinates project operations and the
team-membership use cases.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict

from ledger_api.application.dto.common_dto import Page
from ledger_api.application.use_cases.project.add_team_member import AddTeamMemberUseCase
from ledger_api.application.use_cases.project.remove_team_member import RemoveTeamMemberUseCase
from ledger_api.domain.errors import AuthorizationDenied, NotFound, ValidationFailed
from ledger_api.domain.models.project import Project, RequiredSkill, Timeline, summarize
from ledger_api.domain.repositories.project_repository import ProjectQuery, ProjectRepository, ProjectStats
from ledger_api.domain.repositories.user_repository import UserRepository
from ledger_api.utils.datetime_utils import ensure_aware, now
from ledger_api.utils.ids import new_id, require_valid_id

TOP_STATS_LIMIT = 10

logger = logging.getLogger(__name__)


def _timeline_of(data: Dict[str, Any]) -> Timeline:
    return Timeline(
        start_date=ensure_aware(data.get("start_date")),
        end_date=ensure_aware(data.get("end_date")),
        estimated_duration_weeks=data.get("estimated_duration_weeks"),
    )


class ProjectService:
    """
    Application service for project operations.

    Only the owner may update, cancel or change the team of a project.
    """

    def __init__(
        self,
        project_repository: ProjectRepository,
        user_repository: UserRepository,
        clock: Callable[[], datetime] = now,
    ):
        self._repository = project_repository
        self._users = user_repository
        self._clock = clock
        self._add_member_use_case = AddTeamMemberUseCase(project_repository, user_repository, clock)
        self._remove_member_use_case = RemoveTeamMemberUseCase(project_repository)

    def create_project(self, owner_id: str, data: Dict[str, Any]) -> Project:
        """Create a project owned by owner_id. The owner must be a registered user."""
        if not self._users.exists(owner_id):
            raise NotFound("User", owner_id)
        data = dict(data)
        skills = [RequiredSkill(**s) for s in data.pop("required_skills", [])]
        timeline = _timeline_of(data.pop("timeline", None) or {})
        created_at = self._clock()
        project = Project(
            id=new_id(),
            owner_id=owner_id,
            required_skills=skills,
            timeline=timeline,
            created_at=created_at,
            updated_at=created_at,
            **data,
        )
        saved = self._repository.create(project)
        logger.info("Project %s created by %s", saved.id, owner_id)
        return saved

    def get_project(self, project_id: str) -> Project:
        require_valid_id(project_id, "Project")
        project = self._repository.find_by_id(project_id)
        if project is None:
            raise NotFound("Project", project_id)
        return project

    def view_project(self, project_id: str) -> Project:
        """Fetch a project for display, counting the view."""
        self.get_project(project_id)
        self._repository.increment_views(project_id)
        return self.get_project(project_id)

    def list_projects(self, query: ProjectQuery, page: int, limit: int) -> Page[Project]:
        items = self._repository.find_page(query, skip=(page - 1) * limit, limit=limit)
        return Page(items=items, total=self._repository.count(query), page=page, limit=limit)

    def get_stats(self) -> ProjectStats:
        """Project totals by status and category, plus the most used technologies."""
        return self._repository.stats(top=TOP_STATS_LIMIT)

    def _owned_project(self, project_id: str, requester_id: str, action: str) -> Project:
        project = self.get_project(project_id)
        if not project.is_owned_by(requester_id):
            raise AuthorizationDenied(f"Only the project owner can {action} this project")
        return project

    def update_project(self, project_id: str, requester_id: str, changes: Dict[str, Any]) -> Project:
        """
        Apply a partial update.

        Raises:
            AuthorizationDenied: If the requester is not the owner
            ValidationFailed: If max_team_size drops below the active team size
        """
        project = self._owned_project(project_id, requester_id, "update")
        new_size = changes.get("max_team_size")
        if new_size is not None and new_size < project.current_team_size:
            raise ValidationFailed(
                f"max_team_size cannot be lower than the {project.current_team_size} active members"
            )
        for name, value in changes.items():
            if value is None:
                continue
            if name == "required_skills":
                value = [RequiredSkill(**s) for s in value]
            elif name == "timeline":
                value = _timeline_of(value)
            setattr(project, name, value)
        if "description" in changes and "short_description" not in changes:
            project.short_description = summarize(project.description)
        return self._repository.update(project)

    def delete_project(self, project_id: str, requester_id: str) -> Project:
        """Cancel the project. Its team and application history is kept."""
        project = self._owned_project(project_id, requester_id, "delete")
        project.cancel()
        cancelled = self._repository.update(project)
        logger.info("Project %s cancelled by %s", project_id, requester_id)
        return cancelled

    def add_team_member(self, project_id: str, user_id: str, role: str, requester_id: str) -> Project:
        return self._add_member_use_case.execute(project_id, user_id, role, requester_id)

    def remove_team_member(self, project_id: str, user_id: str, requester_id: str) -> Project:
        return self._remove_member_use_case.execute(project_id, user_id, requester_id)
