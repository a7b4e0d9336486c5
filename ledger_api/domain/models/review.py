"""
Review Model
============

Peer review left by one project participant about another.
One per (project, reviewer); project, reviewer and reviewee never change.
"""
from datetime import datetime
from typing import List, Optional
from dataclasses import dataclass, field, fields

from ledger_api.domain.errors import ValidationFailed
from ledger_api.utils.datetime_utils import now

MIN_RATING = 1
MAX_RATING = 5

IDENTITY_FIELDS = frozenset({"id", "project_id", "reviewer_id", "reviewee_id"})


def _check_rating(value: Optional[int], label: str) -> None:
    if value is not None and not MIN_RATING <= value <= MAX_RATING:
        raise ValidationFailed(f"{label} must be between {MIN_RATING} and {MAX_RATING}")


@dataclass
class CategoryRatings:
    communication: Optional[int] = None
    technical_skills: Optional[int] = None
    reliability: Optional[int] = None
    teamwork: Optional[int] = None
    quality: Optional[int] = None

    def __post_init__(self) -> None:
        for f in fields(self):
            _check_rating(getattr(self, f.name), f.name)

    def average(self) -> Optional[float]:
        scores = [getattr(self, f.name) for f in fields(self) if getattr(self, f.name)]
        if not scores:
            return None
        return round(sum(scores) / len(scores), 1)


@dataclass
class ReviewResponse:
    content: str
    responded_at: datetime


@dataclass
class Review:
    """Review domain model."""
    id: str
    project_id: str
    reviewer_id: str
    reviewee_id: str
    rating: int
    title: str
    comment: str
    categories: CategoryRatings = field(default_factory=CategoryRatings)
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)
    would_work_again: bool = True
    is_public: bool = True
    is_verified: bool = False
    response: Optional[ReviewResponse] = None
    helpful_count: int = 0
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def __post_init__(self) -> None:
        _check_rating(self.rating, "Rating")
        if self.reviewer_id == self.reviewee_id:
            raise ValidationFailed("You cannot review yourself")

    @property
    def avg_category_rating(self) -> Optional[float]:
        return self.categories.average()

    def revise(self, **changes) -> None:
        """
        Apply reviewer edits.

        Raises:
            ValidationFailed: If an identity field is included or a rating is out of range
        """
        locked = IDENTITY_FIELDS.intersection(changes)
        if locked:
            raise ValidationFailed(f"Cannot change {', '.join(sorted(locked))} of a review")
        if "rating" in changes:
            _check_rating(changes["rating"], "Rating")
        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = now()

    def add_response(self, content: str, at: datetime) -> None:
        self.response = ReviewResponse(content=content, responded_at=at)
        self.updated_at = at
