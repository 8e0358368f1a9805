"""Tests for the command line interface."""

import pytest
import yaml

from photo_renamer.cli import main, parse_args


@pytest.fixture
def env(tmp_path):
    root = tmp_path.resolve()
    photos = root / "photos"
    photos.mkdir()
    for name in ("one.jpg", "two.png", "notes.txt"):
        (photos / name).write_bytes(b"x")
    config_path = root / "config.yaml"
    config_path.write_text(yaml.safe_dump({
        "change_log": {"path": str(root / "changes.csv")},
        "logging": {"level": "WARNING"},
    }))
    return root, photos, config_path


def _run(env, *args):
    root, _photos, config_path = env
    return main([
        "--config", str(config_path),
        "--library", str(root / "library.db"),
        *args,
    ])


class TestParseArgs:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_tag_arguments(self):
        args = parse_args(["tag", "img.jpg", "a", "b"])
        assert args.command == "tag"
        assert args.file == "img.jpg"
        assert args.tags == ["a", "b"]

    def test_revert_index_is_int(self):
        assert parse_args(["revert", "img.jpg", "2"]).index == 2


class TestCommands:
    def test_scan(self, env, capsys):
        _root, photos, _config = env
        assert _run(env, "scan", str(photos)) == 0
        out = capsys.readouterr().out.splitlines()
        assert sorted(out) == [str(photos / "one.jpg"), str(photos / "two.png")]

    def test_add_and_list_tags(self, env, capsys):
        assert _run(env, "add-tag", "sun", "sea") == 0
        assert _run(env, "add-tag", "sun") == 0
        assert "Tag already exists: sun" in capsys.readouterr().out
        assert _run(env, "tags") == 0
        assert capsys.readouterr().out.splitlines() == ["sun\t0", "sea\t0"]

    def test_tag_history_and_revert(self, env, capsys):
        _root, photos, _config = env
        assert _run(env, "tag", str(photos / "one.jpg"), "sun", "sea") == 0
        tagged = photos / "one@sun@sea.jpg"
        assert capsys.readouterr().out.strip() == str(tagged)
        assert tagged.is_file()

        assert _run(env, "history", str(tagged)) == 0
        assert capsys.readouterr().out.splitlines() == ["0\tone.jpg"]

        assert _run(env, "revert", str(tagged), "0") == 0
        assert capsys.readouterr().out.strip() == str(photos / "one.jpg")
        assert (photos / "one.jpg").is_file()

    def test_delete_tag(self, env, capsys):
        _root, photos, _config = env
        _run(env, "tag", str(photos / "two.png"), "sun")
        capsys.readouterr()
        assert _run(env, "delete-tag", "sun") == 0
        assert capsys.readouterr().out.strip() == f"{photos / 'two@sun.png'} -> two.png"
        assert (photos / "two.png").is_file()

    def test_most_tagged(self, env, capsys):
        _root, photos, _config = env
        _run(env, "tag", str(photos / "two.png"), "a", "b")
        _run(env, "tag", str(photos / "one.jpg"), "a")
        capsys.readouterr()
        assert _run(env, "most-tagged", str(photos)) == 0
        assert capsys.readouterr().out.strip() == str(photos / "two@a@b.png")

    def test_log(self, env, capsys):
        _root, photos, _config = env
        assert _run(env, "log") == 0
        assert "No renames logged yet" in capsys.readouterr().out
        _run(env, "tag", str(photos / "one.jpg"), "sun")
        capsys.readouterr()
        _run(env, "log")
        out = capsys.readouterr().out
        assert "Previous name: one.jpg, New name: one@sun.jpg" in out


class TestInitConfig:
    def test_writes_effective_config(self, env, capsys):
        root, _photos, _config = env
        target = root / "written.yaml"
        assert _run(env, "init-config", str(target)) == 0
        written = yaml.safe_load(target.read_text())
        assert written["library"]["path"] == str(root / "library.db")
        assert written["logging"]["level"] == "WARNING"
        assert written["file_scanning"]["verify_images"] is False

    def test_refuses_to_overwrite(self, env, capsys):
        _root, _photos, config_path = env
        before = config_path.read_text()
        assert _run(env, "init-config", str(config_path)) == 1
        assert config_path.read_text() == before


class TestErrors:
    def test_missing_file(self, env, capsys):
        _root, photos, _config = env
        assert _run(env, "tag", str(photos / "nope.jpg"), "a") == 1
        assert "Error:" in capsys.readouterr().out

    def test_not_an_image(self, env, capsys):
        _root, photos, _config = env
        assert _run(env, "tag", str(photos / "notes.txt"), "a") == 1
        assert "Not an image file" in capsys.readouterr().out

    def test_invalid_tag_name(self, env, capsys):
        _root, photos, _config = env
        assert _run(env, "tag", str(photos / "one.jpg"), "a@b") == 1
        assert (photos / "one.jpg").is_file()

    def test_bad_revert_index(self, env, capsys):
        _root, photos, _config = env
        assert _run(env, "revert", str(photos / "one.jpg"), "5") == 1

    def test_corrupt_library_still_succeeds(self, env, capsys):
        root, photos, config_path = env
        library = root / "library.db"
        library.write_bytes(b"not a sqlite database" * 50)
        assert _run(env, "tag", str(photos / "one.jpg"), "red") == 0
        assert capsys.readouterr().out.strip() == str(photos / "one@red.jpg")
        assert (photos / "one@red.jpg").is_file()

    def test_bad_config(self, tmp_path, capsys):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- just\n- a list\n")
        assert main(["--config", str(config_path), "tags"]) == 1
        assert "Error:" in capsys.readouterr().out
