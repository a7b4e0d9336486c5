"""
Review Repository Interface
===========================
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ledger_api.domain.models.review import Review


@dataclass
class ReviewQuery:
    project_id: Optional[str] = None
    reviewer_id: Optional[str] = None
    reviewee_id: Optional[str] = None
    is_public: Optional[bool] = True


@dataclass
class RatingStats:
    avg_rating: float = 0.0
    total_reviews: int = 0


class ReviewRepository(ABC):
    """
    Abstract repository for reviews.

    Implementations enforce uniqueness of (project_id, reviewer_id) in
    storage; ``create`` surfaces a violation as AlreadyReviewed.
    """

    @abstractmethod
    def create(self, review: Review) -> Review:
        """
        Insert a new review.

        Raises:
            AlreadyReviewed: If the reviewer already reviewed the project
        """
        pass

    @abstractmethod
    def update(self, review: Review) -> Review:
        """Persist mutable fields. Identity fields are never written."""
        pass

    @abstractmethod
    def find_by_id(self, review_id: str) -> Optional[Review]:
        pass

    @abstractmethod
    def find_by_project_and_reviewer(self, project_id: str, reviewer_id: str) -> Optional[Review]:
        pass

    @abstractmethod
    def find_page(self, query: ReviewQuery, skip: int, limit: int) -> List[Review]:
        """Find reviews matching query, newest first."""
        pass

    @abstractmethod
    def count(self, query: ReviewQuery) -> int:
        pass

    @abstractmethod
    def delete(self, review_id: str) -> bool:
        pass

    @abstractmethod
    def increment_helpful(self, review_id: str) -> Optional[Review]:
        pass

    @abstractmethod
    def rating_stats(self, reviewee_id: str) -> RatingStats:
        """Average rating over the reviewee's public reviews."""
        pass
