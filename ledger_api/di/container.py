# Standard library imports
from datetime import datetime
from typing import Callable, Optional

# Local application imports
from ..core.config import Settings, get_settings
from ..utils.datetime_utils import now
from .base_container import BaseContainer
from .providers import (
    ContactProvider,
    DatabaseProvider,
    LibraryProvider,
    MarketplaceProvider,
    RepositoryProvider,
)


class DIContainer(BaseContainer):
    """
    Main dependency injection container.
    Composes all providers in the correct order.

    Registration order is important:
    1. Database connections (DatabaseProvider)
    2. Repositories (RepositoryProvider) - depends on database
    3. Services (LibraryProvider, MarketplaceProvider, ContactProvider) - depend on repositories
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        super().__init__()
        self.register_singleton("settings", settings or get_settings())
        self.register_singleton("clock", clock or now)
        self.setup()

    def setup(self) -> None:
        """
        Setup dependency registrations by composing all providers.
        Order matters: database → repositories → services
        """
        # Step 1: Register database connections (foundation)
        DatabaseProvider.register(self)

        # Step 2: Register repositories (depends on database)
        RepositoryProvider.register(self)

        # Step 3: Register services (depends on repositories)
        LibraryProvider.register(self)
        MarketplaceProvider.register(self)
        ContactProvider.register(self)


# Global container instance (singleton pattern)
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """
    Get the global DI container instance (singleton pattern)

    Returns:
        DIContainer instance with all dependencies registered
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def set_container(container: Optional[DIContainer]) -> None:
    """Install a pre-built container (tests), or drop it with None."""
    global _container
    _container = container
