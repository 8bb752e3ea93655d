# ruff: noqa: S101

"""Tests for the SQL status store."""

from pathlib import Path
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel.ext.asyncio.session import AsyncSession

from tasktracker.common.task_status import TaskStatus
from tasktracker.task import SQLTaskStore, StorageError, Task, TaskNotFoundError
from tasktracker.task.repository import get_task_db, save_task_db


async def _insert_task(engine: AsyncEngine) -> str:
    async with AsyncSession(engine, expire_on_commit=False) as db:
        task = await save_task_db(db, Task(title="store test"))
        return str(task.id)


async def _read_status(engine: AsyncEngine, task_id: str) -> TaskStatus:
    async with AsyncSession(engine) as db:
        return (await get_task_db(db, task_id)).status


@pytest.mark.asyncio
@pytest.mark.task
class TestSQLTaskStore:
    """Tests for status writes against the database."""

    @classmethod
    async def test_update_status_commits(
        cls, store: SQLTaskStore, test_engine: AsyncEngine
    ) -> None:
        """Every write is visible to a new session."""
        task_id = await _insert_task(test_engine)

        await store.update_status(task_id, TaskStatus.PROCESSING)
        assert await _read_status(test_engine, task_id) == TaskStatus.PROCESSING

        await store.update_status(task_id, TaskStatus.DONE)
        assert await _read_status(test_engine, task_id) == TaskStatus.DONE

    @classmethod
    async def test_last_write_wins(
        cls, store: SQLTaskStore, test_engine: AsyncEngine
    ) -> None:
        """Writes are plain overwrites without transition checks."""
        task_id = await _insert_task(test_engine)

        await store.update_status(task_id, TaskStatus.DONE)
        await store.update_status(task_id, TaskStatus.CREATED)

        assert await _read_status(test_engine, task_id) == TaskStatus.CREATED

    @classmethod
    async def test_missing_task_is_not_found(cls, store: SQLTaskStore) -> None:
        """A write for an unknown id raises not found."""
        with pytest.raises(TaskNotFoundError):
            await store.update_status(str(uuid4()), TaskStatus.PROCESSING)

    @classmethod
    async def test_malformed_id_is_not_found(cls, store: SQLTaskStore) -> None:
        """An id that is no UUID cannot match any task."""
        with pytest.raises(TaskNotFoundError):
            await store.update_status("not-a-uuid", TaskStatus.PROCESSING)

    @classmethod
    async def test_database_failure_is_storage_error(cls, tmp_path: Path) -> None:
        """Any other database failure is reported as a storage error."""
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", poolclass=NullPool
        )
        try:
            with pytest.raises(StorageError):
                await SQLTaskStore(engine).update_status(
                    str(uuid4()), TaskStatus.PROCESSING
                )
        finally:
            await engine.dispose()
