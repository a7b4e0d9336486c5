# Standard library imports
import os
from typing import Final, List, Optional
from dotenv import load_dotenv


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Load environment variables from .env file
        load_dotenv()

        # Timezone Configuration
        # Default to UTC, but can be set via TIMEZONE env var (e.g., "UTC", "Europe/Berlin")
        self.timezone: Final[str] = os.getenv("TIMEZONE", "UTC")

        # Storage Configuration
        # "mongo" for MongoDB, "memory" for the in-process store (tests, local demos)
        self.storage_backend: Final[str] = os.getenv("STORAGE_BACKEND", "mongo").lower()
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("DB_NAME", "catalog_ledger")

        # Collection Names
        self.books_collection: Final[str] = os.getenv("BOOKS_COLLECTION", "books")
        self.members_collection: Final[str] = os.getenv("MEMBERS_COLLECTION", "members")
        self.users_collection: Final[str] = os.getenv("USERS_COLLECTION", "users")
        self.projects_collection: Final[str] = os.getenv("PROJECTS_COLLECTION", "projects")
        self.applications_collection: Final[str] = os.getenv("APPLICATIONS_COLLECTION", "applications")
        self.reviews_collection: Final[str] = os.getenv("REVIEWS_COLLECTION", "reviews")
        self.contacts_collection: Final[str] = os.getenv("CONTACTS_COLLECTION", "contacts")

        # Library Rules
        self.loan_period_days: Final[int] = int(os.getenv("LOAN_PERIOD_DAYS", "14"))

        # Pagination
        self.default_page_size: Final[int] = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
        self.max_page_size: Final[int] = int(os.getenv("MAX_PAGE_SIZE", "100"))

        # Logging
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()

        # CORS
        self.cors_origins: Final[List[str]] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
