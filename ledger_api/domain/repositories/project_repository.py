"""
Project Repository Interface
============================

Abstract interface for project data access, including the team ledger.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ledger_api.domain.models.project import Project, TeamMember


@dataclass
class ProjectQuery:
    status: Optional[str] = None
    category: Optional[str] = None
    owner_id: Optional[str] = None
    difficulty: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    search: Optional[str] = None


@dataclass
class ProjectStats:
    total_projects: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)
    top_technologies: List[Tuple[str, int]] = field(default_factory=list)


class ProjectRepository(ABC):
    """
    Abstract repository for project persistence operations.

    Team entries are only written through ``add_team_member`` and
    ``remove_team_member``; ``update`` leaves them untouched.
    """

    @abstractmethod
    def create(self, project: Project) -> Project:
        """Create a new project."""
        pass

    @abstractmethod
    def update(self, project: Project) -> Project:
        """
        Update descriptive fields and status.

        Raises:
            NotFound: If the project does not exist
        """
        pass

    @abstractmethod
    def find_by_id(self, project_id: str) -> Optional[Project]:
        """Find a project by ID."""
        pass

    @abstractmethod
    def find_page(self, query: ProjectQuery, skip: int, limit: int) -> List[Project]:
        """Find projects matching query, featured first then newest."""
        pass

    @abstractmethod
    def count(self, query: ProjectQuery) -> int:
        """Count projects matching query."""
        pass

    @abstractmethod
    def add_team_member(self, project_id: str, member: TeamMember) -> Optional[Project]:
        """
        Append an active entry if the user holds no active entry and the
        active count is below max_team_size.

        Returns:
            Updated project, or None if the guard failed
        """
        pass

    @abstractmethod
    def remove_team_member(self, project_id: str, user_id: str) -> Optional[Project]:
        """
        Flip the user's active entry to ``removed``.

        Returns:
            Updated project, or None if there was no active entry
        """
        pass

    @abstractmethod
    def increment_views(self, project_id: str) -> None:
        """Bump the view counter."""
        pass

    @abstractmethod
    def stats(self, top: int = 10) -> ProjectStats:
        """
        Totals over all projects.

        Counts by status and by category, plus the ``top`` most used
        technologies, most used first and ties by name.
        """
        pass
