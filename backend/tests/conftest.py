import pytest

from services import store


@pytest.fixture(autouse=True)
def reset_store() -> None:
    """Isolate tests by clearing the in-memory registry, roles and leaderboards."""
    store.reset()
    yield
    store.reset()
