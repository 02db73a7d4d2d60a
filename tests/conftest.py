"""
Pytest configuration and fixtures.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport

from clientledger.api.deps import get_store
from clientledger.main import app
from clientledger.schemas.client import Client, ClientCreate
from clientledger.services.storage import MemoryBlobStore
from clientledger.services.store import AppStore


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock returning a fixed time that tests move forward by hand."""
    
    def __init__(self, now: datetime = NOW):
        self.current = now
    
    def __call__(self) -> datetime:
        return self.current
    
    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def store(blob_store: MemoryBlobStore, clock: FrozenClock) -> AppStore:
    """Store persisting to memory, driven by the frozen clock."""
    return AppStore(
        blob_store=blob_store,
        storage_key="test-storage",
        clock=clock,
        debt_due_days=30,
    )


@pytest.fixture
def acme(store: AppStore) -> Client:
    """A registered client."""
    return store.add_client(
        ClientCreate(
            name="Acme Garage",
            email="contact@acme.test",
            phone="555-0100",
            address="1 Main Street",
        )
    )


@pytest.fixture
async def client(store: AppStore) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with the store dependency overridden."""
    
    async def override_get_store():
        return store
    
    app.dependency_overrides[get_store] = override_get_store
    
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
    
    app.dependency_overrides.clear()
