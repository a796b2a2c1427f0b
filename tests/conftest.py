"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from template_store.dependencies import get_server_backend
from template_store.main import app
from template_store.services import (
    LocalTemplatesBackend,
    MemoryByteStore,
    RestTemplatesBackend,
    VersioningService,
    reset_templates_backend,
)

API_BASE = "http://testserver/api/v1"


class TickingClock:
    """Clock advancing one second per reading, so timestamps never tie."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture(autouse=True)
def reset_backend_provider():
    """Each test resolves the configured backend afresh."""
    reset_templates_backend()
    yield
    reset_templates_backend()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def engine(clock):
    return VersioningService(clock=clock)


@pytest.fixture
def memory_store():
    return MemoryByteStore()


@pytest.fixture
def local_backend(memory_store, engine):
    """Local backend over an in-memory byte store."""
    return LocalTemplatesBackend(
        store=memory_store,
        storage_key="emailTemplates",
        engine=engine,
        send_test_delay=0,
    )


@pytest.fixture
def server_backend():
    """Store behind the API in tests."""
    return LocalTemplatesBackend(
        store=MemoryByteStore(),
        engine=VersioningService(clock=TickingClock()),
        send_test_delay=0,
    )


@pytest.fixture
def api_app(server_backend):
    app.dependency_overrides[get_server_backend] = lambda: server_backend
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_app):
    """Create test client with the in-memory store."""
    with TestClient(api_app) as c:
        yield c


@pytest.fixture
def rest_backend(api_app):
    """REST backend talking to the in-process API."""
    return RestTemplatesBackend(
        base_url=API_BASE,
        api_key="",
        transport=httpx.ASGITransport(app=api_app),
    )


@pytest.fixture(params=["local", "rest"])
def backend(request):
    """Both backends, for properties every backend must honour."""
    return request.getfixturevalue(f"{request.param}_backend")
