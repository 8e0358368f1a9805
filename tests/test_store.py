"""Tests for LibraryStore."""

import pytest

from photo_renamer.db.models import LibrarySnapshot, PhotoRecord
from photo_renamer.db.store import LibraryStore


@pytest.fixture
def store(tmp_path):
    """Create a fresh store for each test."""
    s = LibraryStore(tmp_path / "test.db")
    yield s
    s.close()


def _snapshot() -> LibrarySnapshot:
    return LibrarySnapshot(
        tags=["sea", "sun", "unused"],
        photos=[
            PhotoRecord(
                id=4, directory="/b", base_name="img", extension="jpg",
                name="img@sun@sea.jpg", tags=["sun", "sea"],
                history=["img.jpg", "img@sun.jpg"],
            ),
            PhotoRecord(
                id=1, directory="/a", base_name="raw", extension="png",
                name="raw.png",
            ),
        ],
    )


class TestLibraryStore:
    def test_open_creates_database(self, store):
        store.open()
        assert store.is_open
        assert store.db_path.exists()

    def test_load_missing_file(self, store):
        assert store.load() is None
        assert not store.is_open

    def test_save_and_load(self, store, tmp_path):
        store.save(_snapshot())
        store.close()

        other = LibraryStore(tmp_path / "test.db")
        loaded = other.load()
        other.close()
        # Order of photos, tags and histories is kept
        assert loaded == _snapshot()

    def test_save_replaces_previous(self, store):
        store.save(_snapshot())
        store.save(LibrarySnapshot(tags=["only"]))
        loaded = store.load()
        assert loaded.tags == ["only"]
        assert loaded.photos == []

    def test_empty_snapshot(self, store):
        store.save(LibrarySnapshot())
        loaded = store.load()
        assert loaded.is_empty

    def test_corrupt_file_loads_as_none(self, tmp_path):
        path = tmp_path / "broken.db"
        path.write_bytes(b"this is not a sqlite database, just some junk" * 20)
        store = LibraryStore(path)
        assert store.load() is None
        assert not store.is_open

    def test_transaction_requires_open(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction():
                pass
