"""Local key-value storage for tasks, check-ins and settings.

Everything lives in one JSON file mapping a key to a JSON value, the same
shape the browser app kept in local storage. Records are validated on the
way in and on the way out, so a malformed due date is rejected here and
never reaches the scoring engine.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from delaycoach_mcp.config import get_settings
from delaycoach_mcp.errors import InvalidRecordError, StorageError, TaskNotFoundError
from delaycoach_mcp.models.task import CheckInModel, CoachSettings, TaskModel
from delaycoach_mcp.utils.parsers import _describe, _parse_check_ins, _parse_record, _parse_tasks

logger = logging.getLogger(__name__)

TASKS_KEY = "delaycoach_tasks"
CHECKINS_KEY = "delaycoach_checkins"
SETTINGS_KEY = "delaycoach_settings"
ALL_KEYS = (TASKS_KEY, CHECKINS_KEY, SETTINGS_KEY)


class LocalStore:
    """A JSON file exposing get/set/delete by key."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Data file {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Data file {self.path} must contain a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".delaycoach-", suffix=".json")
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
        logger.debug("Wrote %d key(s) to %s", len(data), self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class TaskRepository:
    """Task, check-in and settings operations on top of a LocalStore."""

    def __init__(self, store: LocalStore):
        self.store = store

    # Tasks

    def get_tasks(self) -> list[TaskModel]:
        return _parse_tasks(self._list(TASKS_KEY))

    def save_tasks(self, tasks: list[TaskModel]) -> None:
        self.store.set(TASKS_KEY, [t.to_record() for t in tasks])

    def get_task(self, task_id: str) -> TaskModel:
        for task in self.get_tasks():
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    def add_task(self, task: TaskModel) -> None:
        tasks = self.get_tasks()
        tasks.append(task)
        self.save_tasks(tasks)
        logger.info("Added task %s", task.id)

    def update_task(self, task_id: str, updates: dict[str, Any], now: datetime) -> TaskModel:
        """Apply field updates (snake_case names) and stamp ``updated_at``."""
        tasks = self.get_tasks()
        for index, task in enumerate(tasks):
            if task.id != task_id:
                continue
            merged = {**task.model_dump(), **updates, "updated_at": now}
            try:
                updated = TaskModel.model_validate(merged)
            except ValidationError as e:
                raise InvalidRecordError("task", _describe(e)) from e
            tasks[index] = updated
            self.save_tasks(tasks)
            return updated
        raise TaskNotFoundError(task_id)

    def delete_task(self, task_id: str) -> int:
        """Delete a task and its check-ins. Returns the number of check-ins removed."""
        tasks = self.get_tasks()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            raise TaskNotFoundError(task_id)
        self.save_tasks(remaining)

        check_ins = self.get_check_ins()
        kept = [c for c in check_ins if c.task_id != task_id]
        self.save_check_ins(kept)
        logger.info("Deleted task %s with %d check-in(s)", task_id, len(check_ins) - len(kept))
        return len(check_ins) - len(kept)

    # Check-ins

    def get_check_ins(self) -> list[CheckInModel]:
        return _parse_check_ins(self._list(CHECKINS_KEY))

    def save_check_ins(self, check_ins: list[CheckInModel]) -> None:
        self.store.set(CHECKINS_KEY, [c.to_record() for c in check_ins])

    def add_check_in(self, check_in: CheckInModel) -> None:
        check_ins = self.get_check_ins()
        check_ins.append(check_in)
        self.save_check_ins(check_ins)

    def get_check_ins_for_task(self, task_id: str) -> list[CheckInModel]:
        return [c for c in self.get_check_ins() if c.task_id == task_id]

    # Settings

    def get_settings(self) -> CoachSettings:
        raw = self.store.get(SETTINGS_KEY)
        if raw is None:
            return CoachSettings()
        return _parse_record(CoachSettings, raw, SETTINGS_KEY)

    def save_settings(self, settings: CoachSettings) -> None:
        self.store.set(SETTINGS_KEY, settings.to_record())

    def reset_all(self) -> None:
        for key in ALL_KEYS:
            self.store.delete(key)
        logger.info("Reset all data in %s", self.store.path)

    def _list(self, key: str) -> list[Any]:
        value = self.store.get(key, [])
        if not isinstance(value, list):
            raise InvalidRecordError(key, "expected a list")
        return value


def get_repository() -> TaskRepository:
    """Repository bound to the configured data file."""
    return TaskRepository(LocalStore(get_settings().data_file))
