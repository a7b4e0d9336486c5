"""
Review Service
==============

Application service for peer reviews.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from ledger_api.application.dto.common_dto import Page
from ledger_api.application.use_cases.review.create_review import CreateReviewUseCase
from ledger_api.domain.errors import AuthorizationDenied, NotFound
from ledger_api.domain.models.review import CategoryRatings, Review
from ledger_api.domain.repositories.project_repository import ProjectRepository
from ledger_api.domain.repositories.review_repository import RatingStats, ReviewQuery, ReviewRepository
from ledger_api.domain.repositories.user_repository import UserRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import require_valid_id

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for review operations.

    The reviewer edits and deletes, the reviewee responds, anyone may mark a
    review helpful. Private reviews are visible to the two parties only.
    """

    def __init__(
        self,
        review_repository: ReviewRepository,
        project_repository: ProjectRepository,
        user_repository: UserRepository,
        clock: Callable[[], datetime] = now,
    ):
        self._repository = review_repository
        self._clock = clock
        self._create_use_case = CreateReviewUseCase(review_repository, project_repository, user_repository, clock)

    def create_review(self, reviewer_id: str, data: Dict[str, Any]) -> Review:
        data = dict(data)
        categories = data.pop("categories", None)
        return self._create_use_case.execute(
            reviewer_id=reviewer_id,
            categories=CategoryRatings(**categories) if categories else None,
            **data,
        )

    def _find(self, review_id: str) -> Review:
        require_valid_id(review_id, "Review")
        review = self._repository.find_by_id(review_id)
        if review is None:
            raise NotFound("Review", review_id)
        return review

    def get_review(self, review_id: str, requester_id: Optional[str] = None) -> Review:
        review = self._find(review_id)
        if not review.is_public and requester_id not in (review.reviewer_id, review.reviewee_id):
            raise AuthorizationDenied("This review is private")
        return review

    def list_reviews(self, query: ReviewQuery, page: int, limit: int) -> Page[Review]:
        items = self._repository.find_page(query, skip=(page - 1) * limit, limit=limit)
        return Page(items=items, total=self._repository.count(query), page=page, limit=limit)

    def reviews_for_user(self, user_id: str, page: int, limit: int) -> Tuple[Page[Review], RatingStats]:
        """Public reviews received by a user plus their rating statistics."""
        require_valid_id(user_id, "User")
        reviews = self.list_reviews(ReviewQuery(reviewee_id=user_id), page, limit)
        return reviews, self._repository.rating_stats(user_id)

    def reviews_for_project(self, project_id: str, page: int, limit: int) -> Page[Review]:
        require_valid_id(project_id, "Project")
        return self.list_reviews(ReviewQuery(project_id=project_id), page, limit)

    def update_review(self, review_id: str, requester_id: str, changes: Dict[str, Any]) -> Review:
        """
        Edit a review. Reviewer only; identity fields cannot change.

        Raises:
            AuthorizationDenied: If the requester is not the reviewer
            ValidationFailed: If an identity field is part of the change
        """
        review = self._find(review_id)
        if review.reviewer_id != requester_id:
            raise AuthorizationDenied("Not authorized to update this review")
        revised = {name: value for name, value in changes.items() if value is not None}
        if "categories" in revised:
            revised["categories"] = CategoryRatings(**revised["categories"])
        review.revise(**revised)
        return self._repository.update(review)

    def delete_review(self, review_id: str, requester_id: str) -> None:
        review = self._find(review_id)
        if review.reviewer_id != requester_id:
            raise AuthorizationDenied("Not authorized to delete this review")
        self._repository.delete(review_id)
        logger.info("Review %s deleted by its reviewer", review_id)

    def respond(self, review_id: str, requester_id: str, content: str) -> Review:
        review = self._find(review_id)
        if review.reviewee_id != requester_id:
            raise AuthorizationDenied("Only the reviewee can respond to this review")
        review.add_response(content, self._clock())
        return self._repository.update(review)

    def mark_helpful(self, review_id: str) -> Review:
        require_valid_id(review_id, "Review")
        review = self._repository.increment_helpful(review_id)
        if review is None:
            raise NotFound("Review", review_id)
        return review
