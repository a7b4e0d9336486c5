"""
Project Model
=============

Domain model for a marketplace project and its team-membership ledger.

Team entries are never deleted. Removing a member flips the entry to
``removed`` so the history stays available; only ``active`` entries count
towards ``max_team_size``.
"""
import math
from datetime import datetime
from typing import List, Optional
from dataclasses import dataclass, field

from ledger_api.domain.errors import AlreadyMember, CapacityExhausted, NotAnActiveMember
from ledger_api.utils.datetime_utils import now

PROJECT_CATEGORIES = (
    "web-development",
    "mobile-development",
    "data-science",
    "machine-learning",
    "devops",
    "blockchain",
    "game-development",
    "other",
)

DIFFICULTY_LEVELS = ("beginner", "intermediate", "advanced", "expert")

SHORT_DESCRIPTION_LENGTH = 200


class ProjectStatus:
    PLANNING = "planning"
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PLANNING, OPEN, IN_PROGRESS, COMPLETED, CANCELLED)


class TeamMemberStatus:
    ACTIVE = "active"
    INACTIVE = "inactive"
    REMOVED = "removed"

    ALL = (ACTIVE, INACTIVE, REMOVED)


@dataclass
class TeamMember:
    user_id: str
    role: str
    joined_at: datetime
    status: str = TeamMemberStatus.ACTIVE

    def is_active(self) -> bool:
        return self.status == TeamMemberStatus.ACTIVE


@dataclass
class RequiredSkill:
    name: str
    level: str = "intermediate"
    is_required: bool = True


@dataclass
class Timeline:
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    estimated_duration_weeks: Optional[int] = None


@dataclass
class Project:
    """Project domain model (the catalog side of a team membership)."""
    id: str
    title: str
    description: str
    owner_id: str
    category: str
    short_description: Optional[str] = None
    status: str = ProjectStatus.PLANNING
    required_skills: List[RequiredSkill] = field(default_factory=list)
    technologies: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    difficulty: str = "intermediate"
    max_team_size: int = 5
    timeline: Timeline = field(default_factory=Timeline)
    is_remote: bool = True
    featured: bool = False
    views: int = 0
    team_members: List[TeamMember] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def __post_init__(self) -> None:
        if not self.short_description and self.description:
            self.short_description = summarize(self.description)

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def active_member(self, user_id: str) -> Optional[TeamMember]:
        for member in self.team_members:
            if member.user_id == user_id and member.is_active():
                return member
        return None

    def has_been_member(self, user_id: str) -> bool:
        """True if the user ever held a team entry, whatever its status now."""
        return any(member.user_id == user_id for member in self.team_members)

    @property
    def current_team_size(self) -> int:
        return sum(1 for member in self.team_members if member.is_active())

    @property
    def available_spots(self) -> int:
        return max(0, self.max_team_size - self.current_team_size)

    @property
    def duration_in_days(self) -> Optional[int]:
        start, end = self.timeline.start_date, self.timeline.end_date
        if start and end:
            return math.ceil((end - start).total_seconds() / 86400)
        return None

    def progress(self, at: Optional[datetime] = None) -> int:
        """Elapsed share of the timeline, 0-100."""
        start, end = self.timeline.start_date, self.timeline.end_date
        if not start or not end or end <= start:
            return 0
        at = at or now()
        if at < start:
            return 0
        if at > end:
            return 100
        return round((at - start) / (end - start) * 100)

    def add_team_member(self, user_id: str, role: str, joined_at: datetime) -> TeamMember:
        """
        Append an active membership entry.

        Raises:
            AlreadyMember: If the user already has an active entry
            CapacityExhausted: If the active count has reached max_team_size
        """
        if self.active_member(user_id) is not None:
            raise AlreadyMember("User is already a team member")
        if self.current_team_size >= self.max_team_size:
            raise CapacityExhausted("Project is at maximum team size")
        member = TeamMember(user_id=user_id, role=role, joined_at=joined_at)
        self.team_members.append(member)
        self.updated_at = joined_at
        return member

    def remove_team_member(self, user_id: str) -> TeamMember:
        """
        Soft-remove the user's active entry.

        Raises:
            NotAnActiveMember: If the user has no active entry
        """
        member = self.active_member(user_id)
        if member is None:
            raise NotAnActiveMember("User is not an active team member")
        member.status = TeamMemberStatus.REMOVED
        self.updated_at = now()
        return member

    def cancel(self) -> None:
        self.status = ProjectStatus.CANCELLED
        self.updated_at = now()


def summarize(description: str) -> str:
    limit = SHORT_DESCRIPTION_LENGTH - 3
    if len(description) <= limit:
        return description
    return description[:limit] + "..."
