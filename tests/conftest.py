"""Common test fixtures for the application."""

import asyncio
import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

os.environ.setdefault("ENV", "testing")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///test_app.db"
os.environ["QUEUE_BACKEND"] = "memory"
os.environ["WORKER_ENABLED"] = "false"
os.environ["PROCESSING_DELAY"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from tasktracker.app import app
from tasktracker.config.channel import get_producer
from tasktracker.config.db import get_session
from tasktracker.queue import InMemoryChannel, Producer
from tasktracker.task import SQLTaskStore

_TEST_DB = Path("test_app.db")
PUBLISH_TIMEOUT = 1.0


@pytest.fixture(scope="session", autouse=True)
def cleanup_test_db() -> Generator[None]:
    """Remove the test database before and after the test session."""
    _TEST_DB.unlink(missing_ok=True)
    yield
    _TEST_DB.unlink(missing_ok=True)


@pytest.fixture(scope="session")
def test_engine(cleanup_test_db: None) -> Generator[AsyncEngine]:  # noqa: ARG001
    """Create the test database engine and its tables.

    ``NullPool`` opens a fresh connection per session, so the engine can be
    shared between the test event loops and the TestClient loop.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{_TEST_DB}",
        poolclass=NullPool,
        connect_args={"check_same_thread": False},
    )

    async def _create_tables() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    asyncio.run(_create_tables())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def channel() -> InMemoryChannel:
    """In-memory message channel."""
    return InMemoryChannel()


@pytest.fixture
def producer(channel: InMemoryChannel) -> Producer:
    """Producer publishing to the in-memory channel."""
    return Producer(channel, PUBLISH_TIMEOUT)


@pytest.fixture
def store(test_engine: AsyncEngine) -> SQLTaskStore:
    """Status store on the test database."""
    return SQLTaskStore(test_engine)


@pytest.fixture(name="client")
def client_fixture(
    test_engine: AsyncEngine, producer: Producer
) -> Generator[TestClient]:
    """Create a test client for the FastAPI app.

    Args:
        test_engine: Engine of the test database.
        producer: Producer the task endpoints publish with.

    Returns:
        TestClient: Configured FastAPI test client.
    """

    async def get_session_override() -> AsyncGenerator[AsyncSession]:
        async with AsyncSession(test_engine, expire_on_commit=False) as session:
            yield session
            await session.commit()

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_producer] = lambda: producer
    client = TestClient(app, base_url="http://testserver")  # NOSONAR
    yield client

    app.dependency_overrides.clear()
