"""Tests for the JSON file stores."""

import json

from focustree.domain.shared import Err, Ok
from focustree.domain.timebox import TimeboxItem
from focustree.domain.timer import TimerSession
from focustree.infrastructure.storage import (
    JsonStorage,
    TimeboxRepository,
    TimerSessionRepository,
    TodoRepository,
)

from .conftest import make_todo


def session(session_id: str, started_at: str, date: str = "2024-03-01", **fields) -> TimerSession:
    return TimerSession(
        id=session_id,
        todo_id=1,
        todo_text="Write",
        started_at=started_at,
        date=date,
        **fields,
    )


class TestJsonStorage:
    def test_missing_file(self, tmp_path):
        result = JsonStorage().load_json(tmp_path / "nope.json")
        assert isinstance(result, Err)
        assert "File not found" in result.error

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        result = JsonStorage().load_json(path)
        assert isinstance(result, Err)
        assert "Invalid JSON" in result.error

    def test_ensure_creates_default_once(self, tmp_path):
        storage = JsonStorage()
        path = tmp_path / "nested" / "list.json"
        storage.ensure_json(path, [])
        assert json.loads(path.read_text()) == []

        storage.save_json(path, [1])
        storage.ensure_json(path, [])
        assert json.loads(path.read_text()) == [1]

    def test_backup_copies_current_file(self, tmp_path):
        storage = JsonStorage()
        path = tmp_path / "todos.json"
        assert storage.backup(path) == Ok(None)

        storage.save_json(path, ["old"])
        result = storage.backup(path)
        assert result == Ok(tmp_path / "todos.json.backup")
        assert json.loads(result.value.read_text()) == ["old"]

    def test_unserializable_data(self, tmp_path):
        result = JsonStorage().save_json(tmp_path / "x.json", {"bad": object()})
        assert isinstance(result, Err)


class TestTodoRepository:
    def test_first_load_creates_empty_store(self, data_dir):
        repo = TodoRepository(data_dir)
        assert repo.load() == Ok([])
        assert json.loads(repo.path.read_text()) == []

    def test_save_then_load(self, data_dir, tree):
        repo = TodoRepository(data_dir)
        assert repo.save(tree) == Ok(None)
        assert repo.load() == Ok(tree)

        stored = json.loads(repo.path.read_text())
        assert stored[0]["createdAt"] == "2024-01-01T09:00:00.000Z"
        assert "isEditing" not in stored[0]

    def test_save_keeps_previous_version_as_backup(self, data_dir, tree):
        repo = TodoRepository(data_dir)
        repo.save([make_todo(1, "First")])
        repo.save(tree)
        backup = json.loads((data_dir / "todos.json.backup").read_text())
        assert [t["text"] for t in backup] == ["First"]

    def test_invalid_payload_is_not_written(self, data_dir, tree):
        repo = TodoRepository(data_dir)
        repo.save(tree)
        result = repo.save_raw([{"id": 1, "text": "", "completed": False, "createdAt": "x"}])
        assert isinstance(result, Err)
        assert result.error.startswith("Failed to save todos")
        assert repo.load() == Ok(tree)

    def test_corrupt_file_reports_error(self, data_dir):
        repo = TodoRepository(data_dir)
        data_dir.mkdir(parents=True)
        repo.path.write_text("[{", encoding="utf-8")
        assert isinstance(repo.load(), Err)


class TestTimerSessionRepository:
    def test_add_keeps_newest_first(self, data_dir):
        repo = TimerSessionRepository(data_dir)
        repo.add(session("a", "2024-03-01T08:00:00.000Z"))
        repo.add(session("b", "2024-03-01T10:00:00.000Z"))
        repo.add(session("c", "2024-03-01T09:00:00.000Z"))
        assert [s.id for s in repo.list_all().value] == ["b", "c", "a"]

    def test_list_for_date(self, data_dir):
        repo = TimerSessionRepository(data_dir)
        repo.add(session("a", "2024-03-01T08:00:00.000Z"))
        repo.add(session("b", "2024-03-02T08:00:00.000Z", date="2024-03-02"))
        assert [s.id for s in repo.list_for_date("2024-03-02").value] == ["b"]
        assert len(repo.list_for_date().value) == 2

    def test_update_merges_fields(self, data_dir):
        repo = TimerSessionRepository(data_dir)
        repo.add(session("a", "2024-03-01T08:00:00.000Z", note="keep me"))
        result = repo.update("a", {"endedAt": "2024-03-01T08:30:00.000Z", "duration": 1800000})

        assert isinstance(result, Ok)
        stored = repo.list_all().value[0]
        assert stored.ended_at == "2024-03-01T08:30:00.000Z"
        assert stored.duration == 1800000
        assert stored.todo_text == "Write"
        assert json.loads(repo.path.read_text())[0]["note"] == "keep me"

    def test_update_and_delete_unknown_session(self, data_dir):
        repo = TimerSessionRepository(data_dir)
        assert repo.update("ghost", {"duration": 1}) == Err("Session not found")
        assert repo.delete("ghost") == Err("Session not found")

    def test_delete(self, data_dir):
        repo = TimerSessionRepository(data_dir)
        repo.add(session("a", "2024-03-01T08:00:00.000Z"))
        assert repo.delete("a") == Ok(None)
        assert repo.list_all() == Ok([])


class TestTimeboxRepository:
    def test_save_and_load(self, data_dir):
        repo = TimeboxRepository(data_dir)
        item = TimeboxItem(id="t1", todo_id=3, start_time="09:30", date="2024-03-01")
        assert repo.save([item]) == Ok(None)
        assert repo.load() == Ok([item])
        assert json.loads(repo.path.read_text())[0]["startTime"] == "09:30"

    def test_rejects_non_array(self, data_dir):
        repo = TimeboxRepository(data_dir)
        assert repo.save_raw({"id": "t1"}) == Err("Timeboxes must be an array")

    def test_rejects_invalid_items_without_writing(self, data_dir):
        repo = TimeboxRepository(data_dir)
        result = repo.save_raw([{"id": "t1", "todoId": "three", "startTime": "09:00", "date": "2024-03-01"}])
        assert isinstance(result, Err)
        assert result.error.startswith("Invalid timebox data")
        assert not repo.path.exists()

    def test_raw_save_keeps_extra_fields(self, data_dir):
        repo = TimeboxRepository(data_dir)
        raw = [{"id": "t1", "todoId": 3, "startTime": "09:30", "duration": 30, "date": "2024-03-01", "color": "red"}]
        assert repo.save_raw(raw) == Ok(None)
        assert json.loads(repo.path.read_text()) == raw
