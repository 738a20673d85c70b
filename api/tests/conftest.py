import pytest
from fastapi.testclient import TestClient

from claimscore.main import app
from claimscore.services.storage import MemStorage, get_storage


@pytest.fixture
def store():
    return MemStorage()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_storage] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
