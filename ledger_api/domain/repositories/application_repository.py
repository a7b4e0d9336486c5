"""
Application Repository Interface
================================
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ledger_api.domain.models.application import Application


@dataclass
class ApplicationQuery:
    status: Optional[str] = None
    project_id: Optional[str] = None
    applicant_id: Optional[str] = None


class ApplicationRepository(ABC):
    """
    Abstract repository for applications.

    Implementations enforce uniqueness of (project_id, applicant_id) in
    storage; ``create`` surfaces a violation as AlreadyApplied.
    """

    @abstractmethod
    def create(self, application: Application) -> Application:
        """
        Insert a new application.

        Raises:
            AlreadyApplied: If the applicant already applied to the project
        """
        pass

    @abstractmethod
    def update(self, application: Application) -> Optional[Application]:
        """
        Persist the applicant-editable fields while the stored status is pending.

        Returns:
            Updated application, or None if it is missing or no longer pending
        """
        pass

    @abstractmethod
    def update_status(self, application: Application, expected_status: str) -> Optional[Application]:
        """
        Persist a status transition only if the stored status is still expected_status.

        Returns:
            Updated application, or None if the stored status moved on
        """
        pass

    @abstractmethod
    def find_by_id(self, application_id: str) -> Optional[Application]:
        pass

    @abstractmethod
    def find_by_project_and_applicant(self, project_id: str, applicant_id: str) -> Optional[Application]:
        pass

    @abstractmethod
    def find_page(self, query: ApplicationQuery, skip: int, limit: int) -> List[Application]:
        """Find applications matching query, newest first."""
        pass

    @abstractmethod
    def count(self, query: ApplicationQuery) -> int:
        pass

    @abstractmethod
    def delete(self, application_id: str) -> bool:
        pass
