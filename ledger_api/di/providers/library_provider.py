from typing import TYPE_CHECKING

from ...application.services.book_service import BookService
from ...application.services.member_service import MemberService
from ...domain.repositories.book_repository import BookRepository
from ...domain.repositories.member_repository import MemberRepository

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class LibraryProvider:
    """Library service provider - registers book and member services"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register library services.
        Services are created with repositories from container.
        """
        settings = container.get("settings")

        container.register_singleton(
            BookService,
            BookService(
                book_repository=container.get(BookRepository),
                member_repository=container.get(MemberRepository),
            )
        )

        container.register_singleton(
            MemberService,
            MemberService(
                member_repository=container.get(MemberRepository),
                book_repository=container.get(BookRepository),
                loan_period_days=settings.loan_period_days,
                clock=container.get("clock"),
            )
        )
