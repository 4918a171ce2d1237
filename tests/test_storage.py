"""Tests for the local JSON store and the task repository."""

import json
from datetime import date, datetime, timezone

import pytest

from delaycoach_mcp.enums import CoachTone, TaskStatus
from delaycoach_mcp.errors import InvalidRecordError, StorageError, TaskNotFoundError
from delaycoach_mcp.models.task import CoachSettings
from delaycoach_mcp.utils.parsers import _parse_check_in, _parse_task
from delaycoach_mcp.utils.storage import CHECKINS_KEY, SETTINGS_KEY, TASKS_KEY, LocalStore, get_repository

from .conftest import NOW


def _write_raw(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


# ============================================================================
# LocalStore Tests
# ============================================================================


class TestLocalStore:
    """Tests for LocalStore get/set/delete."""

    def test_missing_file_reads_as_empty(self, tmp_path):
        store = LocalStore(tmp_path / "nope.json")
        assert store.get("anything") is None
        assert store.get("anything", []) == []

    def test_set_get_delete(self, tmp_path):
        store = LocalStore(tmp_path / "nested" / "data.json")
        store.set("k", {"a": 1})
        assert store.get("k") == {"a": 1}
        assert (tmp_path / "nested" / "data.json").exists()

        store.delete("k")
        assert store.get("k") is None

    def test_delete_missing_key_is_noop(self, tmp_path):
        store = LocalStore(tmp_path / "data.json")
        store.delete("missing")
        assert not (tmp_path / "data.json").exists()

    def test_keys_are_independent(self, tmp_path):
        store = LocalStore(tmp_path / "data.json")
        store.set("a", 1)
        store.set("b", 2)
        store.delete("a")
        assert store.get("b") == 2

    def test_empty_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("  \n", encoding="utf-8")
        assert LocalStore(path).get("k") is None

    def test_corrupt_json_raises(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError, match="not valid JSON"):
            LocalStore(path).get("k")

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "data.json"
        _write_raw(path, [1, 2, 3])
        with pytest.raises(StorageError, match="JSON object"):
            LocalStore(path).get("k")

    def test_delete_key_holding_null(self, tmp_path):
        path = tmp_path / "data.json"
        store = LocalStore(path)
        store.set("k", None)
        store.set("other", 1)

        store.delete("k")

        assert json.loads(path.read_text(encoding="utf-8")) == {"other": 1}

    def test_failed_replace_leaves_no_temp_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.mkdir()

        with pytest.raises(StorageError, match="Cannot write"):
            LocalStore(path)._write({"k": 1})

        assert list(tmp_path.glob(".delaycoach-*")) == []

    def test_unserializable_value_raises_storage_error(self, tmp_path):
        path = tmp_path / "data.json"
        store = LocalStore(path)
        store.set("k", 1)

        with pytest.raises(StorageError, match="Cannot write"):
            store.set("bad", object())

        assert list(tmp_path.glob(".delaycoach-*")) == []
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": 1}


# ============================================================================
# Record Parsing Tests
# ============================================================================


class TestRecordParsing:
    """Tests for validating stored records."""

    def test_camel_case_record(self):
        task = _parse_task(
            {
                "id": "task-1",
                "title": "Essay",
                "dueDate": "2025-03-20",
                "estimatedHours": 6,
                "lastCheckInAt": "2025-03-09T10:00:00Z",
            }
        )
        assert task.due_date == date(2025, 3, 20)
        assert task.estimated_hours == 6
        assert task.last_check_in_at == datetime(2025, 3, 9, 10, 0, tzinfo=timezone.utc)
        assert task.status == TaskStatus.ACTIVE

    def test_due_date_with_time_part(self):
        task = _parse_task({"id": "t", "dueDate": "2025-03-20T00:00:00.000Z", "estimatedHours": 1})
        assert task.due_date == date(2025, 3, 20)

    def test_malformed_due_date_rejected(self):
        with pytest.raises(InvalidRecordError) as exc_info:
            _parse_task({"id": "t", "dueDate": "next friday", "estimatedHours": 1})
        assert exc_info.value.key == "task"
        assert "dueDate" in str(exc_info.value)

    def test_non_positive_estimate_rejected(self):
        with pytest.raises(InvalidRecordError):
            _parse_task({"id": "t", "dueDate": "2025-03-20", "estimatedHours": 0})

    def test_unknown_fields_survive(self):
        task = _parse_task({"id": "t", "dueDate": "2025-03-20", "estimatedHours": 1, "color": "red"})
        assert task.to_record()["color"] == "red"

    def test_check_in_record(self):
        check_in = _parse_check_in(
            {"id": "c1", "taskId": "t", "dateTime": "2025-03-09T10:00:00Z", "progressDelta": 15, "mood": "good"}
        )
        assert check_in.task_id == "t"
        assert check_in.to_record()["progressDelta"] == 15


# ============================================================================
# TaskRepository Tests
# ============================================================================


class TestTaskRepository:
    """Tests for TaskRepository."""

    def test_tasks_round_trip_with_camel_case(self, repo, data_file, make_task):
        repo.add_task(make_task("a"))

        raw = json.loads(data_file.read_text(encoding="utf-8"))
        record = raw[TASKS_KEY][0]
        assert record["dueDate"] == "2025-04-30"
        assert record["estimatedHours"] == 5
        assert "due_date" not in record

        assert [t.to_record() for t in repo.get_tasks()] == [make_task("a").to_record()]

    def test_get_task(self, repo, make_task):
        repo.save_tasks([make_task("a"), make_task("b")])
        assert repo.get_task("b").id == "b"

    def test_get_missing_task(self, repo):
        with pytest.raises(TaskNotFoundError, match="'ghost' not found"):
            repo.get_task("ghost")

    def test_malformed_stored_task_rejected(self, repo, data_file):
        _write_raw(data_file, {TASKS_KEY: [{"id": "t", "dueDate": "soon", "estimatedHours": 1}]})
        with pytest.raises(InvalidRecordError):
            repo.get_tasks()

    def test_stored_value_must_be_a_list(self, repo, data_file):
        _write_raw(data_file, {TASKS_KEY: {"id": "t"}})
        with pytest.raises(InvalidRecordError, match="expected a list"):
            repo.get_tasks()

    def test_update_task_stamps_updated_at(self, repo, make_task):
        repo.add_task(make_task("a"))
        updated = repo.update_task("a", {"progress": 80, "title": "Renamed"}, NOW)

        assert updated.progress == 80
        assert updated.title == "Renamed"
        assert updated.updated_at == NOW
        assert repo.get_task("a").to_record() == updated.to_record()

    def test_update_task_rejects_invalid_values(self, repo, make_task):
        repo.add_task(make_task("a"))
        with pytest.raises(InvalidRecordError):
            repo.update_task("a", {"progress": 150}, NOW)
        assert repo.get_task("a").progress == 50

    def test_update_missing_task(self, repo):
        with pytest.raises(TaskNotFoundError):
            repo.update_task("ghost", {"progress": 10}, NOW)

    def test_delete_cascades_to_check_ins(self, repo, make_task, make_check_in):
        repo.save_tasks([make_task("a"), make_task("b")])
        repo.save_check_ins([make_check_in("a"), make_check_in("b"), make_check_in("a")])

        removed = repo.delete_task("a")

        assert removed == 2
        assert [t.id for t in repo.get_tasks()] == ["b"]
        assert [c.task_id for c in repo.get_check_ins()] == ["b"]

    def test_delete_missing_task(self, repo):
        with pytest.raises(TaskNotFoundError):
            repo.delete_task("ghost")

    def test_check_ins_for_task(self, repo, make_check_in):
        repo.add_check_in(make_check_in("a", 5))
        repo.add_check_in(make_check_in("b", 10))
        repo.add_check_in(make_check_in("a", 15))
        assert [c.progress_delta for c in repo.get_check_ins_for_task("a")] == [5, 15]

    def test_settings_default_when_missing(self, repo):
        settings = repo.get_settings()
        assert settings.coach_tone == CoachTone.NORMAL
        assert settings.alert_hours == 24

    def test_settings_round_trip(self, repo, data_file):
        repo.save_settings(CoachSettings(coach_tone=CoachTone.SAVAGE, alert_hours=48))

        raw = json.loads(data_file.read_text(encoding="utf-8"))
        assert raw[SETTINGS_KEY] == {"coachTone": "savage", "alertHours": 48}
        assert repo.get_settings().coach_tone == CoachTone.SAVAGE

    def test_reset_all(self, repo, data_file, make_task, make_check_in):
        repo.add_task(make_task("a"))
        repo.add_check_in(make_check_in("a"))
        repo.save_settings(CoachSettings(coach_tone=CoachTone.GENTLE))
        data = json.loads(data_file.read_text(encoding="utf-8"))
        data["unrelated"] = True
        _write_raw(data_file, data)

        repo.reset_all()

        raw = json.loads(data_file.read_text(encoding="utf-8"))
        assert set(raw) == {"unrelated"}
        assert TASKS_KEY not in raw and CHECKINS_KEY not in raw
        assert repo.get_tasks() == []
        assert repo.get_settings() == CoachSettings()

    def test_get_repository_uses_configured_file(self, data_file):
        assert get_repository().store.path == data_file
