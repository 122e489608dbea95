"""
Pytest fixtures for persistence tests.

Every test gets a fresh SQLite database file with the schema created.
"""

import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from budgetbuddy.infrastructure.persistence.sqlalchemy import (
    create_session_maker,
    create_tables,
)


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'rates.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(async_engine):
    return create_session_maker(async_engine)


@pytest_asyncio.fixture
async def async_session(session_maker):
    async with session_maker() as session:
        yield session
        await session.rollback()
