"""
Dependency Functions
====================

FastAPI dependency functions backed by the DI container.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Query

from ledger_api.application.services.application_service import ApplicationService
from ledger_api.application.services.book_service import BookService
from ledger_api.application.services.contact_service import ContactService
from ledger_api.application.services.member_service import MemberService
from ledger_api.application.services.project_service import ProjectService
from ledger_api.application.services.review_service import ReviewService
from ledger_api.application.services.user_service import UserService
from ledger_api.core.config import Settings
from ledger_api.di.container import get_container
from ledger_api.domain.errors import AuthorizationDenied, ValidationFailed
from ledger_api.utils.ids import require_valid_id


def get_settings_dependency() -> Settings:
    """Settings the container was built with."""
    return get_container().get("settings")


def get_book_service() -> BookService:
    """
    Get book service instance (singleton).

    Returns:
        BookService instance
    """
    return get_container().get(BookService)


def get_member_service() -> MemberService:
    """
    Get member service instance (singleton).

    Returns:
        MemberService instance
    """
    return get_container().get(MemberService)


def get_user_service() -> UserService:
    return get_container().get(UserService)


def get_project_service() -> ProjectService:
    return get_container().get(ProjectService)


def get_application_service() -> ApplicationService:
    return get_container().get(ApplicationService)


def get_review_service() -> ReviewService:
    return get_container().get(ReviewService)


def get_contact_service() -> ContactService:
    return get_container().get(ContactService)


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Identity of the requester, taken from the X-User-Id header.

    Raises:
        AuthorizationDenied: If the header is missing
        InvalidReference: If it is not a valid id
    """
    if not x_user_id:
        raise AuthorizationDenied("Authentication required: missing X-User-Id header")
    return require_valid_id(x_user_id, "User")


def get_optional_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Identity of the requester if the X-User-Id header is present."""
    if not x_user_id:
        return None
    return require_valid_id(x_user_id, "User")


@dataclass
class PageParams:
    page: int
    limit: int


def get_page_params(
    page: Optional[int] = Query(None, description="1-based page number"),
    limit: Optional[int] = Query(None, description="Items per page"),
    settings: Settings = Depends(get_settings_dependency),
) -> PageParams:
    """
    Resolve page/limit query parameters.

    Raises:
        ValidationFailed: If page < 1 or limit is outside 1..MAX_PAGE_SIZE
    """
    page = 1 if page is None else page
    limit = settings.default_page_size if limit is None else limit
    if page < 1:
        raise ValidationFailed("Invalid page parameter. Page must be a positive integer.")
    if not 1 <= limit <= settings.max_page_size:
        raise ValidationFailed(
            f"Invalid limit parameter. Limit must be a positive integer between 1 and {settings.max_page_size}."
        )
    return PageParams(page=page, limit=limit)
