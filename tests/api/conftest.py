"""API test fixtures - FastAPI test client over the test database.

Invariants:
    - Each request gets its own session from the test session factory
    - db_manager is patched so notification sessions hit the same database
    - Every test starts with a fresh BroadcastHub on app.state
"""

import pytest
from httpx import ASGITransport, AsyncClient

import workboard.infrastructure.database as db_module
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.infrastructure.database import DatabaseSessionManager, get_db
from workboard.main import app


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # Patch db_manager for the notification dispatcher and readiness probe
    original_manager = db_module.db_manager
    test_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    test_manager.engine = test_engine
    test_manager._session_factory = test_session_factory
    db_module.db_manager = test_manager

    original_hub = app.state.broadcast_hub
    app.state.broadcast_hub = BroadcastHub()

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    await app.state.broadcast_hub.close()
    app.state.broadcast_hub = original_hub


@pytest.fixture
def hub(client):
    return app.state.broadcast_hub
