"""
Pytest configuration and fixtures for integration tests.

This module provides:
- A fresh SQLite database file per test (schema created the same way as on startup)
- The FastAPI application built around that database
- An async HTTP client and a direct database session
- Factory fixtures for creating test data
"""

import itertools
from pathlib import Path
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from tasklist.config import Settings
from tasklist.main import create_app
from tasklist.models import Task, TaskRelationship
from tests.factories import TaskFactory


# =============================================================================
# Application fixtures
# =============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at an empty database file in the test's tmp directory.

    Override this fixture to run a module or class with different settings.
    """
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}",
        ENFORCE_FOREIGN_KEYS=True,
    )


@pytest.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """
    Application with its schema created.

    ASGITransport does not run the lifespan, so the schema setup and engine
    disposal it would do are done here.
    """
    application = create_app(test_settings)
    database = application.state.database

    await database.create_schema()
    yield application
    await database.dispose()


@pytest.fixture
async def test_session(app: FastAPI) -> AsyncGenerator[AsyncSession, None]:
    """Session on the same database the application uses."""
    async with app.state.database.session() as session:
        yield session


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Factory fixtures for creating test data
# =============================================================================


@pytest.fixture
async def task_factory(test_session: AsyncSession):
    """
    Factory fixture for creating Task instances in the test database.

    Fields default to a TaskFactory build; positions count up from 0 in
    creation order unless given.

    Usage:
        task = await task_factory(title="Write report", done=True)
    """
    positions = itertools.count()

    async def _create_task(**kwargs) -> Task:
        kwargs.setdefault("position", next(positions))

        task = TaskFactory.build(**kwargs)
        test_session.add(task)
        await test_session.commit()
        await test_session.refresh(task)
        return task

    return _create_task


@pytest.fixture
async def relationship_factory(test_session: AsyncSession):
    """
    Factory fixture for linking two tasks.

    Usage:
        await relationship_factory(parent_id=parent.id, child_id=child.id)
    """

    async def _create_relationship(parent_id: int, child_id: int) -> TaskRelationship:
        relationship = TaskRelationship(parent_id=parent_id, child_id=child_id)
        test_session.add(relationship)
        await test_session.commit()
        return relationship

    return _create_relationship
