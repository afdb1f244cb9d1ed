import pytest
import asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.models.base import Base
from app.models import booking, city, local_fare, route  # noqa: F401  registers tables
from app.core.config import settings
from app.core.enums import ErrorKind
from app.core.results import StoreError
from app.core.local_cache import LocalCache
from app.core.security import create_access_token
from app.schemas.auth import AdminSession
from app.schemas.pricing import LocalFareRates
from app.services.pricing_store import PricingStore
from app.services.table_store import TableStore


TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeRedis:
    """Dict-backed stand-in for redis.asyncio.Redis."""

    def __init__(self):
        self.data = {}
        self.fail = False

    async def ping(self):
        return True

    async def get(self, key):
        if self.fail:
            raise ConnectionError("redis down")
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        if self.fail:
            raise ConnectionError("redis down")
        self.data[key] = value
        return True

    async def delete(self, key):
        if self.fail:
            raise ConnectionError("redis down")
        return 1 if self.data.pop(key, None) is not None else 0


class FlakyTableStore:
    """Delegates to a real table store, failing the named operations."""

    def __init__(self, inner, failing=()):
        self.inner = inner
        self.failing = set(failing)

    def __getattr__(self, name):
        attr = getattr(self.inner, name)
        if name not in self.failing:
            return attr

        async def fail(*args, **kwargs):
            raise StoreError(ErrorKind.TRANSIENT_FAILURE, f"{name} unavailable")
        return fail


@pytest.fixture
def flaky_table_store():
    return FlakyTableStore


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def local_cache(fake_redis):
    return LocalCache(fake_redis)


@pytest.fixture
def table_store(session_factory):
    return TableStore(session_factory)


@pytest.fixture
def pricing_store(table_store, local_cache):
    return PricingStore(table_store, local_cache, service_area="Mumbai Local")


@pytest.fixture
def sample_rates():
    return LocalFareRates(
        normal_4_seater_rate_per_km=15,
        normal_6_seater_rate_per_km=18,
        airport_4_seater_rate_per_km=18,
        airport_6_seater_rate_per_km=22,
    )


@pytest.fixture
def no_distance_service(monkeypatch):
    monkeypatch.setattr(settings, "DISTANCE_SERVICE_URL", "")


@pytest.fixture
async def test_client(pricing_store, local_cache, no_distance_service):
    app.state.pricing_store = pricing_store
    app.state.local_cache = local_cache
    app.state.admin_session = None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def admin_token(test_client):
    session = AdminSession(id="admin", username="Administrator", session_id="test-session")
    app.state.admin_session = session
    return create_access_token(session.id, session.session_id)


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def valid_booking_data():
    return {
        "customer_name": "Asha Patel",
        "customer_phone": "9876543210",
        "customer_email": "asha@example.com",
        "pickup": "Bandra West, Mumbai",
        "drop": "Andheri East, Mumbai",
        "pickup_coords": {"lat": 19.0596, "lng": 72.8295},
        "drop_coords": {"lat": 19.1136, "lng": 72.8697},
        "car_type": "4-seater",
        "trip_type": "normal",
        "date": "2026-10-20",
        "time": "09:30",
    }


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "api: marks tests that go through the HTTP layer"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing state"
    )
    config.addinivalue_line(
        "markers", "fare: marks tests related to fare estimation"
    )
    config.addinivalue_line(
        "markers", "booking: marks tests related to booking submission"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
