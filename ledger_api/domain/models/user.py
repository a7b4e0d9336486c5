"""
User Model
==========

Marketplace user: applies to projects, joins teams, writes and receives reviews.
"""
from datetime import datetime
from typing import List, Optional
from dataclasses import dataclass, field

from ledger_api.utils.datetime_utils import now

SKILL_LEVELS = ("beginner", "intermediate", "advanced", "expert")
EXPERIENCE_LEVELS = ("junior", "mid", "senior", "lead", "principal")


@dataclass
class Skill:
    name: str
    level: str = "beginner"
    years_of_experience: int = 0


@dataclass
class User:
    """User domain model."""
    id: str
    name: str
    email: str
    bio: str = ""
    skills: List[Skill] = field(default_factory=list)
    experience_level: str = "junior"
    location: str = ""
    website: str = ""
    github: str = ""
    is_available: bool = True
    preferred_project_types: List[str] = field(default_factory=list)
    hourly_rate: Optional[float] = None
    languages: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    @property
    def profile_completion(self) -> int:
        """Percentage of the eight profile fields that are filled in."""
        filled = [
            bool(self.name),
            bool(self.email),
            bool(self.bio),
            bool(self.skills),
            bool(self.experience_level),
            bool(self.location),
            bool(self.preferred_project_types),
            bool(self.languages),
        ]
        return round(sum(filled) / len(filled) * 100)
