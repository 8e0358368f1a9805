"""Tests for the change log and on-disk renaming."""

from datetime import datetime

from photo_renamer.changelog.log import ChangeLog
from photo_renamer.files import rename_photo_file


class TestChangeLog:
    def test_in_memory(self):
        log = ChangeLog()
        assert log.path is None
        log.record("a.jpg", "a@x.jpg", "/p")
        log.record("a@x.jpg", "a.jpg", "/p")
        assert [(e.old_name, e.new_name) for e in log.entries()] == [
            ("a.jpg", "a@x.jpg"),
            ("a@x.jpg", "a.jpg"),
        ]

    def test_entry_format(self):
        entry = ChangeLog().record("a.jpg", "a@x.jpg", when=datetime(2020, 1, 2, 3, 4, 5))
        assert entry.timestamp == "2020/01/02 03:04.05"
        assert str(entry) == (
            "Previous name: a.jpg, New name: a@x.jpg, Date: 2020/01/02 03:04.05"
        )

    def test_csv_file(self, tmp_path):
        path = tmp_path / "logs" / "changes.csv"
        log = ChangeLog(path)
        log.record("a.jpg", "a@x.jpg", "/p")
        log.record("b.jpg", "b@y.jpg", "/q")

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "timestamp,old_name,new_name,directory"
        assert len(lines) == 3

        # A fresh reader sees everything written so far
        entries = ChangeLog(path).entries()
        assert [e.new_name for e in entries] == ["a@x.jpg", "b@y.jpg"]
        assert entries[1].directory == "/q"

    def test_missing_file_is_empty(self, tmp_path):
        assert ChangeLog(tmp_path / "none.csv").entries() == []


class TestRenamePhotoFile:
    def test_rename(self, tmp_path):
        old = tmp_path / "a.jpg"
        old.write_bytes(b"x")
        new = rename_photo_file(old, "a@x.jpg")
        assert new == tmp_path / "a@x.jpg"
        assert new.is_file()
        assert not old.exists()

    def test_same_name(self, tmp_path):
        old = tmp_path / "a.jpg"
        old.write_bytes(b"x")
        assert rename_photo_file(old, "a.jpg") == old

    def test_missing_source(self, tmp_path):
        assert rename_photo_file(tmp_path / "gone.jpg", "gone@x.jpg") is None

    def test_never_overwrites(self, tmp_path):
        old = tmp_path / "a.jpg"
        old.write_bytes(b"old")
        taken = tmp_path / "a@x.jpg"
        taken.write_bytes(b"taken")
        assert rename_photo_file(old, "a@x.jpg") is None
        assert taken.read_bytes() == b"taken"
        assert old.is_file()
