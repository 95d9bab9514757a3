import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from datespots.api.state import AppState, get_state
from tests.helpers import FakeStore, make_story


@pytest.fixture
def store():
    return FakeStore(
        [
            make_story("1", "5", "walk and talk", "Cubbon Park"),
            make_story("2", "3", "Food centric", "MTR"),
            make_story("3", "4", "walk and talk", "Lalbagh"),
        ]
    )


@pytest.fixture
def state(store):
    s = AppState(load=store.load, append=store.append)
    s.reload()
    return s


@pytest.fixture
def session(state):
    return state.session()


@pytest.fixture
def new_client(state):
    """Factory for test clients; each one is a separate visitor with its own cookies."""
    from datespots.api import app as app_module

    app_module.app.dependency_overrides[get_state] = lambda: state
    with patch("datespots.api.app.LOAD_ON_STARTUP", False):
        yield lambda: TestClient(app_module.app)
    app_module.app.dependency_overrides.clear()


@pytest.fixture
def client(new_client):
    return new_client()
