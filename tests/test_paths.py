"""Tests for path string normalization helpers."""

import email.mime
import email.mime.text
import json.decoder
from collections import OrderedDict

import pytest

from resource_kit.paths import apply_relative_path
from resource_kit.paths import class_package_as_resource_path
from resource_kit.paths import clean_path
from resource_kit.paths import get_filename
from resource_kit.paths import path_equals


class TestCleanPath:
    """Tests for clean_path."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("file:core/../core/io/Resource.class", "file:core/io/Resource.class"),
            ("a/./b", "a/b"),
            ("/a/b/../c", "/a/c"),
            ("a\\b\\..\\c", "a/c"),
            ("C:\\app\\..\\conf\\x.yaml", "C:/conf/x.yaml"),
            ("http://example.com/a/../b", "http://example.com/b"),
            ("file:/a/./b/", "file:/a/b/"),
        ],
    )
    def test_collapses_dot_segments(self, path, expected):
        """Test that '.' and '..' segments are collapsed."""
        assert clean_path(path) == expected

    def test_keeps_scheme_prefix(self):
        """Test that the scheme prefix is preserved verbatim."""
        assert clean_path("classpath:a/../b.txt") == "classpath:b.txt"
        assert clean_path("file:./x").startswith("file:")

    def test_preserves_excess_parent_segments(self):
        """Test that leading '..' with nothing to cancel are kept."""
        assert clean_path("../../a/b") == "../../a/b"
        assert clean_path("a/../../b") == "../b"

    def test_fast_path_without_dots(self):
        """Test that a path without '.' only gets its separators normalized."""
        assert clean_path("a/b/c") == "a/b/c"
        assert clean_path("a\\b\\c") == "a/b/c"

    def test_unchanged_when_nothing_dropped(self):
        """Test that paths with dots in names come back as given."""
        assert clean_path("dir/file.txt") == "dir/file.txt"
        assert clean_path("/opt/app-1.0/lib") == "/opt/app-1.0/lib"

    def test_everything_cancelled_gives_current_dir(self):
        """Test that a fully cancelled relative path becomes '.'."""
        assert clean_path("a/..") == "."

    def test_absolute_fully_cancelled(self):
        """Test that an absolute path never becomes relative."""
        assert clean_path("/a/..") == "/"

    @pytest.mark.parametrize("path", [None, ""])
    def test_empty_input_returned_unchanged(self, path):
        """Test that None and empty strings pass through."""
        assert clean_path(path) == path

    @pytest.mark.parametrize(
        "path",
        [
            "file:core/../core/io/Resource.class",
            "../../a/b",
            "a/./b/../../../c",
            "/x/./y/../z/",
            "jar:file:/a/../b.jar!/c/./d",
            "a/..",
        ],
    )
    def test_idempotent(self, path):
        """Test that cleaning a cleaned path changes nothing."""
        once = clean_path(path)
        assert clean_path(once) == once

    def test_does_not_mutate_input(self):
        """Test that the input string object is left alone."""
        original = "a/./b"
        clean_path(original)
        assert original == "a/./b"


def test_path_equals_compares_cleaned_paths():
    """Test that equivalent paths compare equal."""
    assert path_equals("/a/./b", "/a/c/../b")
    assert not path_equals("/a/b", "/a/c")


class TestApplyRelativePath:
    """Tests for apply_relative_path."""

    def test_replaces_last_segment(self):
        assert apply_relative_path("/data/dir", "x.txt") == "/data/x.txt"

    def test_trailing_slash_resolves_inside(self):
        assert apply_relative_path("/data/dir/", "x.txt") == "/data/dir/x.txt"

    def test_no_separator_returns_relative(self):
        assert apply_relative_path("file.txt", "other.txt") == "other.txt"

    def test_relative_with_leading_slash(self):
        assert apply_relative_path("/data/dir", "/x.txt") == "/data/x.txt"


def test_get_filename():
    """Test extracting the last path segment."""
    assert get_filename("a/b/c.txt") == "c.txt"
    assert get_filename("plain.txt") == "plain.txt"
    assert get_filename("dir/") == ""
    assert get_filename(None) is None


class TestClassPackageAsResourcePath:
    """Tests for class_package_as_resource_path."""

    def test_class_in_module(self):
        assert class_package_as_resource_path(json.decoder.JSONDecoder) == "json"

    def test_class_in_package_init(self):
        assert class_package_as_resource_path(OrderedDict) == "collections"

    def test_plain_module(self):
        assert class_package_as_resource_path(email.mime.text) == "email/mime"

    def test_package_module(self):
        assert class_package_as_resource_path(email.mime) == "email/mime"

    def test_none(self):
        assert class_package_as_resource_path(None) == ""
