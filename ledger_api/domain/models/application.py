"""
Application Model
=================

A user's application to join a project. One per (project, applicant).

Status moves away from ``pending`` exactly once and never returns to it.
The first move stamps ``reviewed_by``/``reviewed_at``; later moves keep
the original stamp.
"""
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional
from dataclasses import dataclass, field

from ledger_api.domain.errors import InvalidStatusTransition
from ledger_api.utils.datetime_utils import now


class ApplicationStatus:
    PENDING = "pending"
    UNDER_REVIEW = "under-review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"

    ALL = (PENDING, UNDER_REVIEW, ACCEPTED, REJECTED, WITHDRAWN)
    TERMINAL = frozenset({ACCEPTED, REJECTED, WITHDRAWN})


ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    ApplicationStatus.PENDING: frozenset({
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationStatus.UNDER_REVIEW: frozenset({
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}

# Fields the applicant may still edit while the application is pending
EDITABLE_FIELDS = frozenset({
    "cover_letter",
    "proposed_role",
    "skills_offered",
    "availability",
    "expected_compensation",
})


@dataclass
class SkillOffer:
    name: str
    level: str = "intermediate"


@dataclass
class Availability:
    hours_per_week: int
    start_date: datetime
    end_date: Optional[datetime] = None


@dataclass
class Compensation:
    amount: Optional[float] = None
    currency: str = "USD"
    type: str = "hourly"


@dataclass
class Application:
    """Application domain model."""
    id: str
    project_id: str
    applicant_id: str
    cover_letter: str
    proposed_role: str
    availability: Availability
    skills_offered: List[SkillOffer] = field(default_factory=list)
    expected_compensation: Optional[Compensation] = None
    status: str = ApplicationStatus.PENDING
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def is_pending(self) -> bool:
        return self.status == ApplicationStatus.PENDING

    def days_old(self, at: Optional[datetime] = None) -> int:
        return abs(((at or now()) - self.created_at).days)

    def transition_to(
        self,
        new_status: str,
        reviewer_id: str,
        at: datetime,
        notes: Optional[str] = None,
    ) -> None:
        """
        Move the application to new_status.

        Raises:
            InvalidStatusTransition: If new_status is pending, unknown, or not
                reachable from the current status
        """
        allowed = ALLOWED_TRANSITIONS.get(self.status, frozenset())
        if new_status not in allowed:
            raise InvalidStatusTransition(
                f"Cannot move application from '{self.status}' to '{new_status}'",
                {"from": self.status, "to": new_status},
            )
        self.status = new_status
        if self.reviewed_by is None:
            self.reviewed_by = reviewer_id
            self.reviewed_at = at
        if notes:
            self.review_notes = notes
        self.updated_at = at

    def revise(self, **changes) -> None:
        """Edit the applicant-owned content of a pending application."""
        if not self.is_pending():
            raise InvalidStatusTransition("Only pending applications can be edited")
        for name, value in changes.items():
            if name not in EDITABLE_FIELDS:
                raise InvalidStatusTransition(f"Field '{name}' cannot be edited by the applicant")
            setattr(self, name, value)
        self.updated_at = now()
