"""
Create Review Use Case
======================

Business use case for reviewing another participant of a project.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from ledger_api.domain.errors import AlreadyReviewed, AuthorizationDenied, NotFound, ValidationFailed
from ledger_api.domain.models.review import CategoryRatings, Review
from ledger_api.domain.repositories.project_repository import ProjectRepository
from ledger_api.domain.repositories.review_repository import ReviewRepository
from ledger_api.domain.repositories.user_repository import UserRepository
from ledger_api.utils.datetime_utils import now
from ledger_api.utils.ids import new_id, require_valid_id

logger = logging.getLogger(__name__)


class CreateReviewUseCase:
    """
    Use case for creating a review.

    The reviewer must be the project owner or have held a team entry (of any
    status). One review per (project, reviewer), whatever the reviewee.
    """

    def __init__(
        self,
        review_repository: ReviewRepository,
        project_repository: ProjectRepository,
        user_repository: UserRepository,
        clock: Callable[[], datetime] = now,
    ):
        self._reviews = review_repository
        self._projects = project_repository
        self._users = user_repository
        self._clock = clock

    def execute(
        self,
        project_id: str,
        reviewer_id: str,
        reviewee_id: str,
        rating: int,
        title: str,
        comment: str,
        categories: Optional[CategoryRatings] = None,
        pros: Optional[List[str]] = None,
        cons: Optional[List[str]] = None,
        would_work_again: bool = True,
        is_public: bool = True,
    ) -> Review:
        """
        Execute the create review use case.

        Raises:
            NotFound: If the project or reviewee does not exist
            ValidationFailed: If reviewer and reviewee are the same user
            AuthorizationDenied: If the reviewer never took part in the project
            AlreadyReviewed: If the reviewer already reviewed this project
        """
        require_valid_id(project_id, "Project")
        require_valid_id(reviewee_id, "User")

        if reviewer_id == reviewee_id:
            raise ValidationFailed("You cannot review yourself")

        project = self._projects.find_by_id(project_id)
        if project is None:
            raise NotFound("Project", project_id)
        if not (project.is_owned_by(reviewer_id) or project.has_been_member(reviewer_id)):
            raise AuthorizationDenied("You can only review projects you participated in")
        if not self._users.exists(reviewee_id):
            raise NotFound("User", reviewee_id)

        if self._reviews.find_by_project_and_reviewer(project_id, reviewer_id):
            raise AlreadyReviewed("You have already reviewed this project")

        created_at = self._clock()
        review = Review(
            id=new_id(),
            project_id=project_id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            rating=rating,
            title=title,
            comment=comment,
            categories=categories or CategoryRatings(),
            pros=pros or [],
            cons=cons or [],
            would_work_again=would_work_again,
            is_public=is_public,
            created_at=created_at,
            updated_at=created_at,
        )
        saved = self._reviews.create(review)
        logger.info("User %s reviewed %s on project %s", reviewer_id, reviewee_id, project_id)
        return saved
