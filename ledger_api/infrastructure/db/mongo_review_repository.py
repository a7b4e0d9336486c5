"""
MongoDB Review Repository
=========================

Concrete implementation of ReviewRepository using MongoDB.
"""
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ledger_api.domain.constants.marketplace_fields import ReviewFields
from ledger_api.domain.errors import AlreadyReviewed, NotFound
from ledger_api.domain.models.review import IDENTITY_FIELDS, CategoryRatings, Review, ReviewResponse
from ledger_api.domain.repositories.review_repository import RatingStats, ReviewQuery, ReviewRepository
from ledger_api.infrastructure.db.mongo_base import MongoRepository
from ledger_api.utils.datetime_utils import ensure_aware, now


class MongoReviewRepository(MongoRepository, ReviewRepository):
    """MongoDB implementation of ReviewRepository."""

    COLLECTION_NAME = "reviews"

    def ensure_indexes(self) -> None:
        super().ensure_indexes()
        self._collection.create_index(
            [(ReviewFields.PROJECT_ID, 1), (ReviewFields.REVIEWER_ID, 1)],
            unique=True,
        )
        self._collection.create_index(ReviewFields.REVIEWEE_ID)

    def _to_entity(self, doc: dict) -> Review:
        """Convert MongoDB document to Review entity."""
        response = doc.get(ReviewFields.RESPONSE)
        return Review(
            id=doc[ReviewFields.ID],
            project_id=doc[ReviewFields.PROJECT_ID],
            reviewer_id=doc[ReviewFields.REVIEWER_ID],
            reviewee_id=doc[ReviewFields.REVIEWEE_ID],
            rating=doc[ReviewFields.RATING],
            title=doc[ReviewFields.TITLE],
            comment=doc[ReviewFields.COMMENT],
            categories=CategoryRatings(**(doc.get(ReviewFields.CATEGORIES) or {})),
            pros=doc.get(ReviewFields.PROS, []),
            cons=doc.get(ReviewFields.CONS, []),
            would_work_again=doc.get(ReviewFields.WOULD_WORK_AGAIN, True),
            is_public=doc.get(ReviewFields.IS_PUBLIC, True),
            is_verified=doc.get(ReviewFields.IS_VERIFIED, False),
            response=ReviewResponse(
                content=response["content"],
                responded_at=ensure_aware(response["responded_at"]),
            ) if response else None,
            helpful_count=doc.get(ReviewFields.HELPFUL_COUNT, 0),
            created_at=ensure_aware(doc.get(ReviewFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(ReviewFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, review: Review) -> dict:
        return asdict(review)

    @staticmethod
    def _filter(query: ReviewQuery) -> Dict[str, Any]:
        conditions: Dict[str, Any] = {}
        if query.project_id:
            conditions[ReviewFields.PROJECT_ID] = query.project_id
        if query.reviewer_id:
            conditions[ReviewFields.REVIEWER_ID] = query.reviewer_id
        if query.reviewee_id:
            conditions[ReviewFields.REVIEWEE_ID] = query.reviewee_id
        if query.is_public is not None:
            conditions[ReviewFields.IS_PUBLIC] = query.is_public
        return conditions

    def create(self, review: Review) -> Review:
        try:
            self._collection.insert_one(self._to_document(review))
        except DuplicateKeyError:
            raise AlreadyReviewed("You have already reviewed this project")
        return review

    def update(self, review: Review) -> Review:
        doc = self._to_document(review)
        locked = IDENTITY_FIELDS | {ReviewFields.CREATED_AT, ReviewFields.HELPFUL_COUNT}
        result = self._collection.find_one_and_update(
            self._by_id(review.id),
            {"$set": {k: v for k, v in doc.items() if k not in locked}},
            return_document=ReturnDocument.AFTER,
        )

        if not result:
            raise NotFound("Review", review.id)

        return self._to_entity(result)

    def find_by_id(self, review_id: str) -> Optional[Review]:
        doc = self._find_doc(review_id)
        if not doc:
            return None
        return self._to_entity(doc)

    def find_by_project_and_reviewer(self, project_id: str, reviewer_id: str) -> Optional[Review]:
        doc = self._collection.find_one(
            {ReviewFields.PROJECT_ID: project_id, ReviewFields.REVIEWER_ID: reviewer_id}
        )
        if not doc:
            return None
        return self._to_entity(doc)

    def find_page(self, query: ReviewQuery, skip: int, limit: int) -> List[Review]:
        docs = (
            self._collection.find(self._filter(query))
            .sort(ReviewFields.CREATED_AT, -1)
            .skip(skip)
            .limit(limit)
        )
        return [self._to_entity(doc) for doc in docs]

    def count(self, query: ReviewQuery) -> int:
        return self._collection.count_documents(self._filter(query))

    def delete(self, review_id: str) -> bool:
        return self._delete_doc(review_id)

    def increment_helpful(self, review_id: str) -> Optional[Review]:
        result = self._collection.find_one_and_update(
            self._by_id(review_id),
            {"$inc": {ReviewFields.HELPFUL_COUNT: 1}},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(result) if result else None

    def rating_stats(self, reviewee_id: str) -> RatingStats:
        pipeline = [
            {"$match": {ReviewFields.REVIEWEE_ID: reviewee_id, ReviewFields.IS_PUBLIC: True}},
            {
                "$group": {
                    "_id": f"${ReviewFields.REVIEWEE_ID}",
                    "avg_rating": {"$avg": f"${ReviewFields.RATING}"},
                    "total_reviews": {"$sum": 1},
                }
            },
        ]
        results = list(self._collection.aggregate(pipeline))
        if not results:
            return RatingStats()
        return RatingStats(
            avg_rating=round(results[0]["avg_rating"], 2),
            total_reviews=results[0]["total_reviews"],
        )
