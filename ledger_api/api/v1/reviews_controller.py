"""
Review Controller
=================

FastAPI controller for peer reviews between project participants.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from ledger_api.api.v1.dependencies import (
    PageParams,
    get_current_user_id,
    get_optional_user_id,
    get_page_params,
    get_review_service,
)
from ledger_api.api.v1.error_handlers import ERROR_RESPONSES
from ledger_api.api.v1.presenters import review_response
from ledger_api.application.dto.common_dto import DataResponse, MessageResponse, PageResponse, pagination_of
from ledger_api.application.dto.marketplace_dto import (
    RatingStatsSchema,
    ReviewCreateRequest,
    ReviewResponse,
    ReviewResponseRequest,
    ReviewUpdateRequest,
    UserReviewsResponse,
)
from ledger_api.application.services.review_service import ReviewService
from ledger_api.domain.repositories.review_repository import ReviewQuery

router = APIRouter(tags=["reviews"], responses=ERROR_RESPONSES)


def _page_response(page) -> PageResponse[ReviewResponse]:
    return PageResponse[ReviewResponse](
        data=[review_response(r) for r in page.items],
        pagination=pagination_of(page),
    )


@router.get(
    "",
    response_model=PageResponse[ReviewResponse],
    summary="List public reviews",
)
async def list_reviews(
    project_id: Optional[str] = None,
    reviewer_id: Optional[str] = None,
    reviewee_id: Optional[str] = None,
    paging: PageParams = Depends(get_page_params),
    service: ReviewService = Depends(get_review_service),
) -> PageResponse[ReviewResponse]:
    query = ReviewQuery(project_id=project_id, reviewer_id=reviewer_id, reviewee_id=reviewee_id)
    return _page_response(service.list_reviews(query, paging.page, paging.limit))


@router.get(
    "/user/{user_id}",
    response_model=UserReviewsResponse,
    summary="Reviews received by a user",
    description="Public reviews of the user plus average rating and review count.",
)
async def list_user_reviews(
    user_id: str,
    paging: PageParams = Depends(get_page_params),
    service: ReviewService = Depends(get_review_service),
) -> UserReviewsResponse:
    page, stats = service.reviews_for_user(user_id, paging.page, paging.limit)
    return UserReviewsResponse(
        data=[review_response(r) for r in page.items],
        stats=RatingStatsSchema(avg_rating=stats.avg_rating, total_reviews=stats.total_reviews),
        pagination=pagination_of(page),
    )


@router.get(
    "/project/{project_id}",
    response_model=PageResponse[ReviewResponse],
    summary="Reviews written within a project",
)
async def list_project_reviews(
    project_id: str,
    paging: PageParams = Depends(get_page_params),
    service: ReviewService = Depends(get_review_service),
) -> PageResponse[ReviewResponse]:
    return _page_response(service.reviews_for_project(project_id, paging.page, paging.limit))


@router.get(
    "/{review_id}",
    response_model=DataResponse[ReviewResponse],
    summary="Get review by ID",
    description="Private reviews are only visible to the reviewer and the reviewee.",
)
async def get_review(
    review_id: str,
    requester_id: Optional[str] = Depends(get_optional_user_id),
    service: ReviewService = Depends(get_review_service),
) -> DataResponse[ReviewResponse]:
    return DataResponse[ReviewResponse](data=review_response(service.get_review(review_id, requester_id)))


@router.post(
    "",
    response_model=DataResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review a fellow participant",
    description="""
    The requester is the reviewer. Rules:

    1. A user cannot review themselves (400)
    2. The reviewer must own the project or have been on its team (403)
    3. One review per reviewer per project (409)
    """,
)
async def create_review(
    request: ReviewCreateRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> DataResponse[ReviewResponse]:
    review = service.create_review(requester_id, request.model_dump())
    return DataResponse[ReviewResponse](message="Review created successfully", data=review_response(review))


@router.put("/{review_id}", response_model=DataResponse[ReviewResponse], summary="Edit a review")
async def update_review(
    review_id: str,
    request: ReviewUpdateRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> DataResponse[ReviewResponse]:
    review = service.update_review(review_id, requester_id, request.model_dump(exclude_unset=True))
    return DataResponse[ReviewResponse](message="Review updated successfully", data=review_response(review))


@router.delete("/{review_id}", response_model=MessageResponse, summary="Delete a review")
async def delete_review(
    review_id: str,
    requester_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> MessageResponse:
    service.delete_review(review_id, requester_id)
    return MessageResponse(message="Review deleted successfully")


@router.post(
    "/{review_id}/response",
    response_model=DataResponse[ReviewResponse],
    summary="Respond to a review",
    description="Only the reviewee can respond. A later response replaces the earlier one.",
)
async def respond_to_review(
    review_id: str,
    request: ReviewResponseRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> DataResponse[ReviewResponse]:
    review = service.respond(review_id, requester_id, request.content)
    return DataResponse[ReviewResponse](message="Response added successfully", data=review_response(review))


@router.post(
    "/{review_id}/helpful",
    response_model=DataResponse[ReviewResponse],
    summary="Mark a review as helpful",
    dependencies=[Depends(get_current_user_id)],
)
async def mark_review_helpful(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
) -> DataResponse[ReviewResponse]:
    review = service.mark_helpful(review_id)
    return DataResponse[ReviewResponse](message="Review marked as helpful", data=review_response(review))
