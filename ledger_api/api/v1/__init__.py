"""
API v1 Package
===============

Version 1 API controllers.
"""
from .applications_controller import router as application_router
from .books_controller import router as book_router
from .contacts_controller import router as contact_router
from .members_controller import router as member_router
from .projects_controller import router as project_router
from .reviews_controller import router as review_router
from .users_controller import router as user_router

__all__ = [
    "book_router",
    "member_router",
    "user_router",
    "project_router",
    "application_router",
    "review_router",
    "contact_router",
]
