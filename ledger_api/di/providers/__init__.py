"""
Providers Package
=================

Dependency injection providers for registering dependencies.
"""
from .database_provider import DatabaseProvider
from .repository_provider import RepositoryProvider
from .library_provider import LibraryProvider
from .marketplace_provider import MarketplaceProvider
from .contact_provider import ContactProvider

__all__ = [
    "DatabaseProvider",
    "RepositoryProvider",
    "LibraryProvider",
    "MarketplaceProvider",
    "ContactProvider",
]
