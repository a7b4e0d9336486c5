import os
from datetime import datetime, timedelta, timezone

import pytest

# Must be set before ledger_api reads its settings
os.environ["STORAGE_BACKEND"] = "memory"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402

from ledger_api.core.config import get_settings, reset_settings  # noqa: E402
from ledger_api.di.container import DIContainer, set_container  # noqa: E402
from ledger_api.infrastructure.memory.store import InMemoryStore  # noqa: E402


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start=None):
        self.current = start or datetime.now(timezone.utc).replace(microsecond=0)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def container(clock):
    reset_settings()
    test_container = DIContainer(get_settings(), clock=clock)
    set_container(test_container)
    yield test_container
    set_container(None)
    reset_settings()


@pytest.fixture
def client(container):
    from ledger_api.main import create_application

    with TestClient(create_application()) as test_client:
        yield test_client
