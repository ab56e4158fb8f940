"""API test fixtures — httpx client over the FastAPI app with in-memory SQLite.

Invariants:
    - Lifespan does not run under ASGITransport: the fixture wires
      app.state.provider / app.state.notifier and the db_manager singleton itself
    - Original app.state and db_manager restored after each test
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

import pet_provider.infrastructure.database as db_module
from pet_provider.db.base import Base
from pet_provider.infrastructure.change_notifier import ChangeNotifier
from pet_provider.infrastructure.database import DatabaseSessionManager
from pet_provider.infrastructure.sql_storage import SqlStorageEngine
from pet_provider.main import app
from pet_provider.services.pet_provider import PetProvider


@pytest.fixture
async def test_db_manager():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    manager = DatabaseSessionManager(engine=engine)
    await manager.create_all(Base.metadata)
    yield manager
    await engine.dispose()


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def provider(test_db_manager, notifier) -> PetProvider:
    return PetProvider(SqlStorageEngine(test_db_manager), notifier)


@pytest.fixture
async def client(test_db_manager, provider, notifier):
    original_manager = db_module.db_manager
    db_module.db_manager = test_db_manager
    app.state.provider = provider
    app.state.notifier = notifier

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    await notifier.wait_idle()
    del app.state.provider
    del app.state.notifier
    db_module.db_manager = original_manager
