import pytest
from fastapi.testclient import TestClient

from user_registry_api.app.main import create_app
from user_registry_api.app.services.breach_service import StaticBreachChecker
from user_registry_api.app.services.user_service import UserService
from user_registry_api.app.services.user_store import InMemoryUserStore

LEAKED_PASSWORD = "password123"


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def checker():
    return StaticBreachChecker({LEAKED_PASSWORD})


@pytest.fixture
def service(store, checker):
    return UserService(store, checker)


@pytest.fixture
def client(store, checker):
    return TestClient(create_app(store=store, checker=checker))
