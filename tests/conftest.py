"""Pytest configuration and fixtures for delaycoach-mcp tests."""

from datetime import date, datetime, timezone

import pytest

from delaycoach_mcp.config import get_settings
from delaycoach_mcp.models.task import CheckInModel, TaskModel
from delaycoach_mcp.utils.storage import LocalStore, TaskRepository

# Monday morning; every test reads the clock from here
NOW = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults."""

    def _make(task_id="task-1", **overrides):
        fields = {
            "id": task_id,
            "title": f"Task {task_id}",
            "subject": "Writing",
            "due_date": date(2025, 4, 30),
            "estimated_hours": 5,
            "progress": 50,
            "last_check_in_at": datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc),
            "status": "active",
        }
        fields.update(overrides)
        return TaskModel(**fields)

    return _make


@pytest.fixture
def make_check_in():
    """Factory for check-ins with sensible defaults."""
    counter = {"n": 0}

    def _make(task_id="task-1", progress_delta=10, **overrides):
        counter["n"] += 1
        fields = {
            "id": f"checkin-{counter['n']}",
            "task_id": task_id,
            "date_time": datetime(2025, 3, 9, 18, 0, tzinfo=timezone.utc),
            "progress_delta": progress_delta,
            "mood": "neutral",
        }
        fields.update(overrides)
        return CheckInModel(**fields)

    return _make


@pytest.fixture
def data_file(tmp_path, monkeypatch):
    """Point the configured data file at a temp path."""
    path = tmp_path / "data.json"
    monkeypatch.setenv("DELAYCOACH_DATA_FILE", str(path))
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


@pytest.fixture
def repo(data_file):
    """Repository over the temp data file."""
    return TaskRepository(LocalStore(data_file))


@pytest.fixture
def frozen_now(monkeypatch):
    """Freeze the clock read by the MCP tools."""
    monkeypatch.setattr("delaycoach_mcp.tools.core.utcnow", lambda: NOW)
    monkeypatch.setattr("delaycoach_mcp.tools.intelligence.utcnow", lambda: NOW)
    return NOW
