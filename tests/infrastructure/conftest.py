"""Infrastructure fixtures — in-memory SQLite behind DatabaseSessionManager.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the pets table
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from pet_provider.db.base import Base
from pet_provider.infrastructure.database import DatabaseSessionManager
from pet_provider.infrastructure.sql_storage import SqlStorageEngine


@pytest.fixture
async def db_manager():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    manager = DatabaseSessionManager(engine=engine)
    await manager.create_all(Base.metadata)
    yield manager
    await engine.dispose()


@pytest.fixture
def storage(db_manager) -> SqlStorageEngine:
    return SqlStorageEngine(db_manager)
