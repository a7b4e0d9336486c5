from typing import TYPE_CHECKING

from ...application.services.contact_service import ContactService
from ...domain.repositories.contact_repository import ContactRepository

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class ContactProvider:
    """Contact service provider"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        container.register_singleton(
            ContactService,
            ContactService(container.get(ContactRepository), clock=container.get("clock")),
        )
