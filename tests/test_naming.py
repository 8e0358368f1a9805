"""Tests for derived file name encoding."""

import pytest

from photo_renamer.library.naming import (
    InvalidTagNameError,
    parse_tag_names,
    render_name,
    split_extension,
    split_name,
    validate_tag_name,
)


class TestRenderName:
    def test_no_tags(self):
        assert render_name("img", [], "jpg") == "img.jpg"

    def test_tags_in_order(self):
        assert render_name("img", ["Apple", "Banana"], "jpg") == "img@Apple@Banana.jpg"
        assert render_name("img", ["Banana", "Apple"], "jpg") == "img@Banana@Apple.jpg"

    def test_extension_case_kept(self):
        assert render_name("IMG_01", ["x"], "JPG") == "IMG_01@x.JPG"

    def test_no_extension(self):
        assert render_name("README", ["a"], "") == "README@a"


class TestSplitExtension:
    def test_last_dot(self):
        assert split_extension("archive.tar.gz") == ("archive.tar", "gz")

    def test_no_dot(self):
        assert split_extension("noext") == ("noext", "")


class TestParseTagNames:
    def test_round_trip(self):
        tags = ["Apple", "Banana", "v1.2"]
        assert parse_tag_names(render_name("img", tags, "png")) == tags

    def test_bare_name(self):
        assert parse_tag_names("img.jpg") == []

    @pytest.mark.parametrize("name", [
        "noextension@a",
        "@a.jpg",
        "img@@a.jpg",
        "img@a@.jpg",
        "img@a@a.jpg",
    ])
    def test_malformed_names_have_no_tags(self, name):
        assert parse_tag_names(name) == []


class TestSplitName:
    def test_plain_file(self):
        assert split_name("holiday.jpeg") == ("holiday", [], "jpeg")

    def test_tagged_file(self):
        assert split_name("holiday@beach@sun.jpeg") == ("holiday", ["beach", "sun"], "jpeg")

    def test_malformed_keeps_whole_stem(self):
        assert split_name("odd@@name.png") == ("odd@@name", [], "png")

    def test_duplicate_tags_keep_whole_stem(self):
        assert split_name("img@a@a.png") == ("img@a@a", [], "png")

    def test_invalid_tag_keeps_whole_stem(self):
        assert split_name("img@ spaced.png") == ("img@ spaced", [], "png")


class TestValidateTagName:
    def test_valid(self):
        assert validate_tag_name("Beach 2019") == "Beach 2019"

    @pytest.mark.parametrize("name", ["", " lead", "trail ", "a@b", "a/b", "a\\b"])
    def test_invalid(self, name):
        with pytest.raises(InvalidTagNameError):
            validate_tag_name(name)

    def test_is_value_error(self):
        assert issubclass(InvalidTagNameError, ValueError)
