# ruff: noqa: S101

"""Tests for the task endpoints."""

from uuid import uuid4

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from tasktracker.app import app
from tasktracker.common.task_status import TaskStatus
from tasktracker.config.channel import get_producer
from tasktracker.config.errors import ErrorCode, ErrorNames
from tasktracker.queue import InMemoryChannel, Producer, PublishTimeoutError
from tasktracker.utils.prometheus import QUEUE_PUBLISH_FAILURES
from tests.fakes import FailingPublishChannel

_TASKS = "/api/v1/tasks"


def _publish_failures() -> float:
    return QUEUE_PUBLISH_FAILURES._value.get()  # noqa: SLF001


def _create(client: TestClient, title: str = "Write report") -> dict:
    response = client.post(
        _TASKS, json={"title": title, "description": "quarterly numbers"}
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


@pytest.mark.task
class TestCreateTask:
    """Tests for POST /api/v1/tasks."""

    @staticmethod
    def test_create_task_queues_processing(
        client: TestClient, channel: InMemoryChannel
    ) -> None:
        """The new task is stored as created and its id is published."""
        body = _create(client)

        assert body["queued"] is True
        assert body["warning"] is None
        assert [m.task_id for m in channel.messages] == [body["id"]]
        assert channel.messages[0].key == body["id"]

        task = client.get(f"{_TASKS}/{body['id']}").json()
        assert task["title"] == "Write report"
        assert task["description"] == "quarterly numbers"
        assert task["status"] == TaskStatus.CREATED
        assert task["created_at"] is not None

    @staticmethod
    def test_create_task_when_queue_unavailable(client: TestClient) -> None:
        """A failed publish keeps the task and reports a warning."""
        failing = Producer(FailingPublishChannel(PublishTimeoutError(1.0)), 1.0)
        app.dependency_overrides[get_producer] = lambda: failing
        failures_before = _publish_failures()

        body = _create(client)

        assert body["queued"] is False
        assert body["warning"] == ErrorNames.QUEUE_UNAVAILABLE_WARNING
        assert _publish_failures() == failures_before + 1
        response = client.get(f"{_TASKS}/{body['id']}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == TaskStatus.CREATED

    @staticmethod
    @pytest.mark.parametrize(
        "payload",
        [{"title": ""}, {"description": "no title"}, {"title": "x" * 257}],
    )
    def test_create_task_invalid_payload(client: TestClient, payload: dict) -> None:
        """Invalid payloads are rejected before anything is published."""
        response = client.post(_TASKS, json=payload)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.task
class TestReadTasks:
    """Tests for GET /api/v1/tasks and GET /api/v1/tasks/{task_id}."""

    @staticmethod
    def test_get_unknown_task(client: TestClient) -> None:
        """An unknown id returns 404 with the error body."""
        response = client.get(f"{_TASKS}/{uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == ErrorCode.NOT_FOUND

    @staticmethod
    def test_tasks_served_under_api_prefix(client: TestClient) -> None:
        """Task routes are only mounted below the versioned API prefix."""
        assert client.get("/tasks").status_code == status.HTTP_404_NOT_FOUND
        assert client.get(_TASKS).status_code == status.HTTP_200_OK

    @staticmethod
    def test_get_task_malformed_id(client: TestClient) -> None:
        """An id that is no UUID fails validation."""
        response = client.get(f"{_TASKS}/not-a-uuid")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @staticmethod
    def test_list_tasks_paginated(client: TestClient) -> None:
        """A page holds at most ``amount`` tasks."""
        for i in range(3):
            _create(client, f"page task {i}")

        response = client.get(_TASKS, params={"amount": 2, "page": 1})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 2  # noqa: PLR2004

    @staticmethod
    def test_list_tasks_by_status(client: TestClient) -> None:
        """Only tasks in the requested status are listed."""
        body = _create(client, "finished task")
        client.patch(f"{_TASKS}/{body['id']}/status", params={"status": "done"})

        response = client.get(_TASKS, params={"status": "done"})

        assert response.status_code == status.HTTP_200_OK
        tasks = response.json()
        assert body["id"] in {task["id"] for task in tasks}
        assert all(task["status"] == TaskStatus.DONE for task in tasks)


@pytest.mark.task
class TestUpdateTaskStatus:
    """Tests for PATCH /api/v1/tasks/{task_id}/status."""

    @staticmethod
    def test_update_status(client: TestClient) -> None:
        """The status is overwritten without transition checks."""
        body = _create(client)

        response = client.patch(
            f"{_TASKS}/{body['id']}/status", params={"status": "processing"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"code": 200, "message": "task's status updated"}
        task = client.get(f"{_TASKS}/{body['id']}").json()
        assert task["status"] == TaskStatus.PROCESSING

    @staticmethod
    def test_update_status_unknown_task(client: TestClient) -> None:
        """Updating a missing task returns 404."""
        response = client.patch(
            f"{_TASKS}/{uuid4()}/status", params={"status": "done"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @staticmethod
    @pytest.mark.parametrize("params", [{"status": "finished"}, {}])
    def test_update_status_invalid(client: TestClient, params: dict) -> None:
        """A missing or unknown status is rejected."""
        body = _create(client)

        response = client.patch(f"{_TASKS}/{body['id']}/status", params=params)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.task
class TestHealth:
    """Tests for the health endpoints."""

    @staticmethod
    def test_root(client: TestClient) -> None:
        """The root endpoint answers OK."""
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.text == "OK"

    @staticmethod
    def test_health(client: TestClient) -> None:
        """The health endpoint answers without content."""
        response = client.get("/health")

        assert response.status_code == status.HTTP_204_NO_CONTENT

    @staticmethod
    def test_health_when_worker_stopped(client: TestClient) -> None:
        """The service reports unavailable once the worker task has ended."""

        class _StoppedWorker:
            @staticmethod
            def done() -> bool:
                return True

        app.state.worker_task = _StoppedWorker()
        try:
            response = client.get("/health")
        finally:
            app.state.worker_task = None

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["code"] == ErrorCode.SERVICE_UNAVAILABLE
