"""Service test fixtures — provider over in-memory SQLite with a spying storage engine.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Every storage call is recorded (spy_storage.calls) so tests can assert
      that rejected requests never reached the engine
    - Every test gets its own ChangeNotifier with a recording observer
      subscribed on the pets collection URI

Design Decisions:
    - Spy wraps the real SqlStorageEngine instead of mocking it: rows and
      counts come from SQLite, only the call log is added
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from pet_provider.core.pet_contract import content_uri
from pet_provider.db.base import Base
from pet_provider.infrastructure.change_notifier import ChangeNotifier
from pet_provider.infrastructure.database import DatabaseSessionManager
from pet_provider.infrastructure.sql_storage import SqlStorageEngine
from pet_provider.services.pet_provider import PetProvider

PETS_URI = content_uri()


class SpyStorage:
    """Records every call, then delegates to the wrapped engine."""

    def __init__(self, inner):
        self._inner = inner
        self.calls: list[tuple[str, tuple]] = []

    async def query_rows(self, *args):
        self.calls.append(("query_rows", args))
        return await self._inner.query_rows(*args)

    async def insert_row(self, *args):
        self.calls.append(("insert_row", args))
        return await self._inner.insert_row(*args)

    async def update_rows(self, *args):
        self.calls.append(("update_rows", args))
        return await self._inner.update_rows(*args)

    async def delete_rows(self, *args):
        self.calls.append(("delete_rows", args))
        return await self._inner.delete_rows(*args)

    def writes(self) -> list[str]:
        return [name for name, _ in self.calls if name != "query_rows"]


class ChangeLog:
    """Observer that records every URI it is told about."""

    def __init__(self):
        self.uris: list[str] = []

    def __call__(self, uri: str) -> None:
        self.uris.append(uri)


@pytest.fixture
async def test_db_manager():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    manager = DatabaseSessionManager(engine=engine)
    await manager.create_all(Base.metadata)
    yield manager
    await engine.dispose()


@pytest.fixture
def spy_storage(test_db_manager) -> SpyStorage:
    return SpyStorage(SqlStorageEngine(test_db_manager))


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def change_log(notifier) -> ChangeLog:
    log = ChangeLog()
    notifier.subscribe(PETS_URI, log)
    return log


@pytest.fixture
def provider(spy_storage, notifier) -> PetProvider:
    return PetProvider(spy_storage, notifier)


@pytest.fixture
async def seed_pets(provider, notifier, change_log, spy_storage):
    """Insert three pets, then clear the change log and call log."""
    uris = [
        await provider.insert(PETS_URI, {"name": "Toto", "breed": "Terrier", "gender": 1, "weight": 7}),
        await provider.insert(PETS_URI, {"name": "Binx", "gender": 2, "weight": 4}),
        await provider.insert(PETS_URI, {"name": "Rex", "gender": 1, "weight": 30}),
    ]
    await notifier.wait_idle()
    change_log.uris.clear()
    spy_storage.calls.clear()
    return uris
