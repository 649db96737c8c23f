"""Comprehensive tests for storage layer."""

import json
import os
import stat
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from todo.exceptions import DecodeError, StorageError
from todo.models import Task
from todo.storage import JsonStorage, Storage, task_from_record, task_to_record

UTC = timezone.utc


class TestJsonStorage:
    """Test suite for JsonStorage implementation."""

    @pytest.fixture
    def temp_file(self):
        """Create a temporary file path for testing."""
        with tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".json") as f:
            temp_path = f.name
        # Delete the file immediately - we just need the path
        Path(temp_path).unlink()
        yield temp_path
        # Cleanup
        path = Path(temp_path)
        if path.exists():
            path.unlink()

    @pytest.fixture
    def storage(self, temp_file):
        """Create a JsonStorage instance with temporary file."""
        return JsonStorage(temp_file)

    @pytest.fixture
    def sample_tasks(self):
        """Create sample tasks for testing."""
        return [
            Task(
                description="Test task 1",
                created_at=datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC),
            ),
            Task(
                description="Test task 2",
                done=True,
                created_at=datetime(2024, 1, 2, 12, 0, 0, tzinfo=UTC),
                completed_at=datetime(2024, 1, 3, 8, 15, 0, tzinfo=UTC),
            ),
        ]

    def test_storage_is_abstract(self):
        """Test that Storage is an abstract base class."""
        with pytest.raises(TypeError):
            Storage()

    def test_default_file_path(self):
        """Test that the default file lives in the working directory."""
        assert JsonStorage().file_path == Path(".todos.json")

    def test_save_creates_file(self, storage, sample_tasks):
        """Test that save creates a file if it doesn't exist."""
        assert not storage.file_path.exists()
        storage.save(sample_tasks)
        assert storage.file_path.exists()

    def test_save_writes_json_array_in_order(self, storage, sample_tasks):
        """Test that save writes one record per task in list order."""
        storage.save(sample_tasks)

        with open(storage.file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        assert isinstance(data, list)
        assert [record["task"] for record in data] == ["Test task 1", "Test task 2"]
        assert data[0]["done"] is False
        assert data[0]["completed_at"] is None
        assert data[1]["done"] is True
        assert data[1]["created_at"] == "2024-01-02T12:00:00+00:00"
        assert data[1]["completed_at"] == "2024-01-03T08:15:00+00:00"

    def test_save_sets_owner_only_permissions(self, storage, sample_tasks):
        """Test that the saved file is not readable or writable by others."""
        storage.save(sample_tasks)

        mode = stat.S_IMODE(os.stat(storage.file_path).st_mode)
        assert mode & 0o077 == 0
        assert mode & 0o600 == 0o600

    def test_save_tightens_permissions_of_existing_file(self, storage, sample_tasks):
        """Test that overwriting a world-writable file fixes its mode."""
        storage.file_path.write_text("[]")
        os.chmod(storage.file_path, 0o666)

        storage.save(sample_tasks)

        mode = stat.S_IMODE(os.stat(storage.file_path).st_mode)
        assert mode & 0o077 == 0

    def test_save_leaves_no_temporary_files(self, tmp_path, sample_tasks):
        """Test that only the target file remains after saving."""
        storage = JsonStorage(tmp_path / "todos.json")
        storage.save(sample_tasks)
        storage.save(sample_tasks[:1])

        assert [p.name for p in tmp_path.iterdir()] == ["todos.json"]

    def test_load_missing_file(self, storage):
        """Test that load returns None when file doesn't exist."""
        assert storage.load() is None

    def test_load_empty_file(self, storage):
        """Test that load returns None when file is empty."""
        storage.file_path.touch()
        assert storage.load() is None

    def test_load_whitespace_only_file(self, storage):
        """Test that a file holding only whitespace counts as empty."""
        storage.file_path.write_text("\n  \n")
        assert storage.load() is None

    def test_load_empty_array(self, storage):
        """Test that an explicit empty array loads as an empty list."""
        storage.file_path.write_text("[]")
        assert storage.load() == []

    def test_save_and_load_roundtrip(self, storage, sample_tasks):
        """Test that data survives save-load roundtrip."""
        storage.save(sample_tasks)
        assert storage.load() == sample_tasks

    def test_save_overwrites_existing_data(self, storage, sample_tasks):
        """Test that save replaces existing data instead of merging."""
        storage.save(sample_tasks)

        new_tasks = [Task(description="New task", created_at=datetime(2024, 1, 3, tzinfo=UTC))]
        storage.save(new_tasks)

        loaded = storage.load()
        assert len(loaded) == 1
        assert loaded[0].description == "New task"

    def test_delete_removes_file(self, storage, sample_tasks):
        """Test that delete removes the storage file."""
        storage.save(sample_tasks)
        assert storage.file_path.exists()

        storage.delete()
        assert not storage.file_path.exists()

    def test_delete_nonexistent_file(self, storage):
        """Test that delete on non-existent file doesn't raise error."""
        assert not storage.file_path.exists()
        storage.delete()  # Should not raise

    def test_save_creates_parent_directories(self):
        """Test that save creates parent directories if needed."""
        with tempfile.TemporaryDirectory() as tmpdir:
            file_path = Path(tmpdir) / "subdir" / "nested" / "todos.json"
            storage = JsonStorage(str(file_path))

            storage.save([Task(description="Test")])

            assert file_path.exists()

    def test_save_empty_list(self, storage):
        """Test that save handles an empty task list."""
        storage.save([])
        assert storage.load() == []

    def test_load_handles_corrupted_json(self, storage):
        """Test that corrupted JSON raises DecodeError."""
        storage.file_path.write_text("{invalid json")

        with pytest.raises(DecodeError) as exc_info:
            storage.load()

        assert exc_info.value.path == storage.file_path
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_load_rejects_non_array(self, storage):
        """Test that a JSON object at the top level is rejected."""
        storage.file_path.write_text('{"task": "x"}')

        with pytest.raises(DecodeError, match="array"):
            storage.load()

    @pytest.mark.parametrize(
        "record",
        [
            "just a string",
            {"done": False, "created_at": "2024-01-01T00:00:00+00:00"},
            {"task": 42, "done": False, "created_at": "2024-01-01T00:00:00+00:00"},
            {"task": "x", "done": "yes", "created_at": "2024-01-01T00:00:00+00:00"},
            {"task": "x", "done": False},
            {"task": "x", "done": False, "created_at": "yesterday"},
            {"task": "x", "done": True, "created_at": "2024-01-01T00:00:00+00:00", "completed_at": 5},
        ],
    )
    def test_load_rejects_malformed_records(self, storage, record):
        """Test that records with missing or ill-typed fields are rejected."""
        storage.file_path.write_text(json.dumps([record]))

        with pytest.raises(DecodeError, match="record 1"):
            storage.load()

    def test_load_invalid_utf8(self, storage):
        """Test that undecodable bytes raise DecodeError."""
        storage.file_path.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(DecodeError):
            storage.load()

    def test_load_unreadable_path_raises_storage_error(self, tmp_path):
        """Test that a read failure other than a missing file is reported."""
        storage = JsonStorage(tmp_path)  # a directory cannot be read as a file

        with pytest.raises(StorageError) as exc_info:
            storage.load()

        assert isinstance(exc_info.value, OSError)
        assert exc_info.value.path == tmp_path

    def test_save_to_unwritable_location_raises_storage_error(self, tmp_path):
        """Test that a write failure is reported as StorageError."""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        storage = JsonStorage(blocker / "todos.json")

        with pytest.raises(StorageError):
            storage.save([Task(description="Test")])

    def test_save_unencodable_description_raises_storage_error(self, tmp_path):
        """Test that text which cannot be written as UTF-8 is a write failure."""
        file_path = tmp_path / "todos.json"
        storage = JsonStorage(file_path)
        storage.save([Task(description="Keep me")])
        before = file_path.read_text(encoding="utf-8")

        with pytest.raises(StorageError, match="encode"):
            storage.save([Task(description="bad \udcff")])

        assert [p.name for p in tmp_path.iterdir()] == ["todos.json"]
        assert file_path.read_text(encoding="utf-8") == before

    def test_load_deeply_nested_json(self, storage):
        """Test that nesting too deep for the parser raises DecodeError."""
        storage.file_path.write_text("[" * 100000 + "]" * 100000)

        with pytest.raises(DecodeError, match="nesting too deep"):
            storage.load()

    def test_datetime_serialization(self, storage):
        """Test that aware datetimes survive serialization exactly."""
        now = datetime.now().astimezone()
        storage.save([Task(description="Test", created_at=now)])

        assert storage.load()[0].created_at == now

    def test_special_characters_in_description(self, storage):
        """Test that special characters are handled correctly."""
        tasks = [Task(description='Task with "quotes", ünïcode ✓ and \n newlines and \t tabs')]
        storage.save(tasks)

        assert storage.load()[0].description == tasks[0].description

    def test_large_task_list(self, storage):
        """Test that storage handles a large number of tasks in order."""
        tasks = [Task(description=f"Task {i}") for i in range(1000)]
        storage.save(tasks)
        loaded = storage.load()

        assert len(loaded) == 1000
        assert [t.description for t in loaded] == [f"Task {i}" for i in range(1000)]


class TestRecordConversion:
    """Tests for converting between tasks and JSON records."""

    def test_task_to_record_pending(self):
        task = Task(description="Buy milk", created_at=datetime(2024, 5, 1, 9, 0, tzinfo=UTC))

        assert task_to_record(task) == {
            "task": "Buy milk",
            "done": False,
            "created_at": "2024-05-01T09:00:00+00:00",
            "completed_at": None,
        }

    def test_record_without_completed_at(self):
        """Test that records written before completion tracking load."""
        task = task_from_record(
            {"task": "Old", "done": True, "created_at": "2024-01-01T10:00:00+00:00"}, 1
        )

        assert task.done is True
        assert task.completed_at is None

    def test_record_without_done_defaults_to_pending(self):
        task = task_from_record({"task": "Old", "created_at": "2024-01-01T10:00:00+00:00"}, 1)

        assert task.done is False

    def test_record_with_zero_completion_time(self):
        """Test that the zero time marks a task as not completed."""
        task = task_from_record(
            {
                "task": "Legacy",
                "done": False,
                "created_at": "2024-01-01T10:00:00+02:00",
                "completed_at": "0001-01-01T00:00:00Z",
            },
            1,
        )

        assert task.completed_at is None

    def test_record_with_nanosecond_timestamp(self):
        """Test that timestamps with more than six fractional digits parse."""
        task = task_from_record(
            {"task": "Precise", "done": False, "created_at": "2024-03-04T05:06:07.123456789+01:00"},
            1,
        )

        expected = datetime(2024, 3, 4, 5, 6, 7, 123456, tzinfo=timezone(timedelta(hours=1)))
        assert task.created_at == expected

    def test_record_with_utc_suffix(self):
        task = task_from_record({"task": "Zulu", "done": False, "created_at": "2024-03-04T05:06:07Z"}, 1)

        assert task.created_at == datetime(2024, 3, 4, 5, 6, 7, tzinfo=UTC)

    def test_record_with_naive_timestamp_is_made_aware(self):
        task = task_from_record({"task": "Naive", "done": False, "created_at": "2024-03-04T05:06:07"}, 1)

        assert task.created_at.tzinfo is not None
        assert task.created_at.replace(tzinfo=None) == datetime(2024, 3, 4, 5, 6, 7)

    def test_error_message_names_position(self):
        with pytest.raises(ValueError, match="record 3"):
            task_from_record({"task": None}, 3)
