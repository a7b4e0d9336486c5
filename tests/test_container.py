import pytest

from ledger_api.application.services.book_service import BookService
from ledger_api.application.services.review_service import ReviewService
from ledger_api.core.config import Settings
from ledger_api.di.container import DIContainer
from ledger_api.domain.repositories.book_repository import BookRepository


def test_memory_backend_wires_every_service(monkeypatch, clock):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    container = DIContainer(Settings(), clock=clock)

    assert container.has("memory_store")
    assert not container.has("mongo_client")
    assert container.get(BookService) is container.get(BookService)
    assert isinstance(container.get(ReviewService), ReviewService)
    assert container.get(BookRepository) is not None
    assert container.get("clock") is clock


def test_unknown_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "sqlite")
    with pytest.raises(ValueError):
        DIContainer(Settings())


def test_unregistered_dependency_raises_key_error(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    container = DIContainer(Settings())
    with pytest.raises(KeyError):
        container.get("missing")


def test_settings_read_the_environment(monkeypatch):
    monkeypatch.setenv("LOAN_PERIOD_DAYS", "21")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")
    settings = Settings()
    assert settings.loan_period_days == 21
    assert settings.cors_origins == ["http://a.example", "http://b.example"]
