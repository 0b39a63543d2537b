"""Pytest fixtures for unit tests."""
from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from evolua.database import init_db, make_sessionmaker
from evolua.schemas.state import AppState
from evolua.schemas.user import FocusArea, UserProfile
from evolua.services.state_store import StateStore

# In-memory SQLite shared by every session of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# A Wednesday
FIXED_TODAY = date(2024, 5, 15)


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(test_engine) -> StateStore:
    return StateStore(make_sessionmaker(test_engine))


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        name="Ana",
        focus_area=FocusArea.health,
        discipline_level=6,
        available_time=45,
    )


@pytest.fixture
def state(profile) -> AppState:
    return AppState(user=profile)


@pytest.fixture
def clock():
    return lambda: FIXED_TODAY
