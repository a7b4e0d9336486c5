"""
User Controller
===============

FastAPI controller for marketplace user profiles.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from ledger_api.api.v1.dependencies import (
    PageParams,
    get_current_user_id,
    get_page_params,
    get_user_service,
)
from ledger_api.api.v1.error_handlers import ERROR_RESPONSES
from ledger_api.api.v1.presenters import user_response, user_stats_response
from ledger_api.application.dto.common_dto import DataResponse, MessageResponse, PageResponse, pagination_of
from ledger_api.application.dto.marketplace_dto import (
    UserCreateRequest,
    UserResponse,
    UserStatsResponse,
    UserUpdateRequest,
)
from ledger_api.application.services.user_service import UserService
from ledger_api.domain.errors import AuthorizationDenied
from ledger_api.domain.repositories.user_repository import UserQuery

router = APIRouter(tags=["users"], responses=ERROR_RESPONSES)


def _require_self(user_id: str, requester_id: str, action: str) -> None:
    if user_id != requester_id:
        raise AuthorizationDenied(f"Not authorized to {action} this user")


@router.get("", response_model=PageResponse[UserResponse], summary="List users")
async def list_users(
    experience_level: Optional[str] = None,
    is_available: Optional[bool] = None,
    skill: Optional[str] = None,
    paging: PageParams = Depends(get_page_params),
    service: UserService = Depends(get_user_service),
) -> PageResponse[UserResponse]:
    page = service.list_users(
        UserQuery(experience_level=experience_level, is_available=is_available, skill=skill),
        paging.page,
        paging.limit,
    )
    return PageResponse[UserResponse](
        data=[user_response(u) for u in page.items],
        pagination=pagination_of(page),
    )


@router.get("/me", response_model=DataResponse[UserResponse], summary="Get the requester's profile")
async def get_me(
    requester_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> DataResponse[UserResponse]:
    return DataResponse[UserResponse](data=user_response(service.get_user(requester_id)))


@router.get(
    "/stats",
    response_model=DataResponse[UserStatsResponse],
    summary="User statistics",
    description="Counts over available users: by experience level and the ten most listed skills.",
    dependencies=[Depends(get_current_user_id)],
)
async def get_user_stats(
    service: UserService = Depends(get_user_service),
) -> DataResponse[UserStatsResponse]:
    return DataResponse[UserStatsResponse](data=user_stats_response(service.get_stats()))


@router.get("/{user_id}", response_model=DataResponse[UserResponse], summary="Get user by ID")
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> DataResponse[UserResponse]:
    return DataResponse[UserResponse](data=user_response(service.get_user(user_id)))


@router.post(
    "",
    response_model=DataResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
async def create_user(
    request: UserCreateRequest,
    service: UserService = Depends(get_user_service),
) -> DataResponse[UserResponse]:
    user = service.create_user(request.model_dump())
    return DataResponse[UserResponse](message="User created successfully", data=user_response(user))


@router.put(
    "/{user_id}",
    response_model=DataResponse[UserResponse],
    summary="Update a user",
    description="Users may only update their own profile.",
)
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    requester_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> DataResponse[UserResponse]:
    _require_self(user_id, requester_id, "update")
    user = service.update_user(user_id, request.model_dump(exclude_unset=True))
    return DataResponse[UserResponse](message="User updated successfully", data=user_response(user))


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete a user",
    description="Users may only delete their own account.",
)
async def delete_user(
    user_id: str,
    requester_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    _require_self(user_id, requester_id, "delete")
    service.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
