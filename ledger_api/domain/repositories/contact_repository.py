"""
Contact Repository Interface
============================
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ledger_api.domain.models.contact import Contact


class ContactRepository(ABC):
    """Abstract repository interface for contacts."""

    @abstractmethod
    def create(self, contact: Contact) -> Contact:
        pass

    @abstractmethod
    def update(self, contact: Contact) -> Contact:
        pass

    @abstractmethod
    def find_by_id(self, contact_id: str) -> Optional[Contact]:
        pass

    @abstractmethod
    def find_page(self, skip: int, limit: int) -> List[Contact]:
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def delete(self, contact_id: str) -> bool:
        pass
