"""
Shared fixtures: an isolated SQLite store per test and a FastAPI test client.
"""

import asyncio
import os
import tempfile

# Settings are read at import time, so point them at a throwaway store first
os.environ["DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{os.path.join(tempfile.mkdtemp(prefix='credit-engine-'), 'app.db')}"
)
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import credit_engine.models.domain  # noqa: F401  (registers tables on the metadata)
from credit_engine.core.rate_limit import FixedWindowRateLimiter
from credit_engine.db.base import Base
from credit_engine.deps import get_db, get_rate_limiter, get_session
from credit_engine.main import app


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    """Generous limiter so functional tests never hit the limit."""
    return FixedWindowRateLimiter(max_requests=100, window_seconds=60, clock=clock)


@pytest.fixture
def db_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'credit_engine.db'}",
        poolclass=NullPool,
    )

    async def create_schema():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_schema())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def client(db_engine, rate_limiter):
    """Test client bound to the per-test store and limiter."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_db] = override_get_session
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(client):
    """Client with the default score ranges and scoring factors installed."""
    assert client.post("/api/v1/score-range/seed").status_code == 200
    assert client.post("/api/v1/scoring-config/seed").status_code == 200
    return client


@pytest.fixture
def strong_applicant():
    """
    Applicant scoring 784 against the default factors:
    50 + 150 + 80 + 64 + 60 + 60 + 30 + 0 - 10 = 484 points over the 300 base.
    """
    return {
        "age": 35,
        "annualIncome": 75000,
        "debtToIncomeRatio": 0.25,
        "creditHistoryLength": 8,
        "creditUtilization": 0.2,
        "employmentStatus": "Employed",
        "educationLevel": "Bachelor",
        "latePayments12m": 0,
        "recentInquiries": 1,
        "creditScore": 720,
    }
