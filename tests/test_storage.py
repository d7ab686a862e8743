"""Tests for JSON storage and block loading."""

import pytest

from conftest import utc
from devex.exceptions import StorageError
from devex.paths import get_block_path, get_data_dir
from devex.state import get_current_block, list_blocks, load_block
from devex.storage import read_json, write_json


class TestJsonStorage:
    """Test JSON document storage."""

    def test_read_missing_returns_none(self, temp_dir):
        """Test reading a missing file."""
        assert read_json(temp_dir / "missing.json") is None

    def test_write_creates_parents_and_round_trips(self, temp_dir):
        """Test writing into new directories."""
        path = temp_dir / "a" / "b" / "doc.json"

        write_json(path, {"commits": 3})

        assert read_json(path) == {"commits": 3}

    def test_write_replaces_without_leftovers(self, temp_dir):
        """Test that replacing leaves no temp files."""
        path = temp_dir / "doc.json"
        write_json(path, {"v": 1})
        write_json(path, {"v": 2})

        assert read_json(path) == {"v": 2}
        assert [p.name for p in temp_dir.iterdir()] == ["doc.json"]

    def test_unserializable_data_leaves_original(self, temp_dir):
        """Test that a failed write keeps the previous document."""
        path = temp_dir / "doc.json"
        write_json(path, {"v": 1})

        with pytest.raises(StorageError):
            write_json(path, {"v": object()})

        assert read_json(path) == {"v": 1}
        assert [p.name for p in temp_dir.iterdir()] == ["doc.json"]

    def test_invalid_json(self, temp_dir):
        """Test reading invalid JSON."""
        path = temp_dir / "bad.json"
        path.write_text("{")

        with pytest.raises(StorageError):
            read_json(path)


class TestDataDir:
    """Test data directory resolution."""

    def test_override(self, temp_dir):
        """Test an explicit data directory."""
        assert get_data_dir(temp_dir) == temp_dir

    def test_default(self, monkeypatch, temp_dir):
        """Test the default data directory."""
        monkeypatch.setenv("HOME", str(temp_dir))
        assert get_data_dir() == temp_dir / ".config" / "devex"


def write_block(data_dir, experiment, block_id, **fields):
    document = {"id": block_id, "condition": "ai", "tags": [], "expectedDuration": 14, **fields}
    write_json(get_block_path(data_dir, experiment, block_id), document)


class TestBlocks:
    """Test loading blocks."""

    def test_load_block(self, temp_dir):
        """Test loading a closed block."""
        write_block(temp_dir, "exp", "ai-1", startDate="2025-01-13T00:00:00.000Z", endDate="2025-01-27T00:00:00.000Z")

        block = load_block(temp_dir, "exp", "ai-1")

        assert block.id == "ai-1"
        assert block.start_date == utc(2025, 1, 13)
        assert block.end_date == utc(2025, 1, 27)
        assert not block.is_active

    def test_missing_block(self, temp_dir):
        """Test loading a block that does not exist."""
        assert load_block(temp_dir, "exp", "nope") is None

    def test_current_block_is_open_one(self, temp_dir):
        """Test finding the open block."""
        write_block(temp_dir, "exp", "no-ai-1", startDate="2025-01-01T00:00:00Z", endDate="2025-01-14T00:00:00Z")
        write_block(temp_dir, "exp", "ai-1", startDate="2025-01-14T00:00:00Z")

        assert [b.id for b in list_blocks(temp_dir, "exp")] == ["ai-1", "no-ai-1"]
        assert get_current_block(temp_dir, "exp").id == "ai-1"

    def test_no_current_block(self, temp_dir):
        """Test when no block is open."""
        write_block(temp_dir, "exp", "no-ai-1", startDate="2025-01-01T00:00:00Z", endDate="2025-01-14T00:00:00Z")

        assert get_current_block(temp_dir, "exp") is None
        assert get_current_block(temp_dir, "other") is None

    def test_invalid_block(self, temp_dir):
        """Test that an invalid block raises StorageError."""
        write_json(get_block_path(temp_dir, "exp", "bad"), {"id": "bad"})

        with pytest.raises(StorageError):
            load_block(temp_dir, "exp", "bad")
