"""Tests for ArtifactPath — structural identity, globbing, prefixes."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from snapforge.models.paths import ArtifactPath


class TestArtifactPathConstruction:
    def test_parse_splits_on_separator(self):
        assert ArtifactPath.parse("src/main/Foo").segments == ("src", "main", "Foo")

    def test_parse_ignores_leading_and_trailing_separators(self):
        assert ArtifactPath.parse("/a/b/") == ArtifactPath.parse("a/b")

    def test_parse_and_segments_are_the_same_path(self):
        assert ArtifactPath.parse("a/b") == ArtifactPath(segments=("a", "b"))
        assert hash(ArtifactPath.parse("a/b")) == hash(ArtifactPath(segments=("a", "b")))

    def test_empty_string_is_root(self):
        assert ArtifactPath.parse("").is_root
        assert ArtifactPath().is_root

    def test_root_is_truthy(self):
        assert ArtifactPath()

    def test_coerce_accepts_strings_and_sequences(self):
        expected = ArtifactPath.parse("x/y")
        assert ArtifactPath.coerce("x/y") == expected
        assert ArtifactPath.coerce(("x", "y")) == expected
        assert ArtifactPath.coerce(["x", "y"]) == expected
        assert ArtifactPath.coerce(expected) is expected

    def test_coerce_rejects_other_types(self):
        with pytest.raises(TypeError):
            ArtifactPath.coerce(42)

    @pytest.mark.parametrize("segment", ["", ".", "..", "a/b"])
    def test_invalid_segments_rejected(self, segment):
        with pytest.raises(ValidationError):
            ArtifactPath(segments=("ok", segment))

    def test_dotdot_rejected_when_parsing(self):
        with pytest.raises(ValueError):
            ArtifactPath.parse("a/../b")

    def test_frozen(self):
        path = ArtifactPath.parse("a")
        with pytest.raises(ValidationError):
            path.segments = ("b",)


class TestArtifactPathStructure:
    def test_name_and_parent(self):
        path = ArtifactPath.parse("a/b/c")
        assert path.name == "c"
        assert path.parent == ArtifactPath.parse("a/b")
        assert path.depth == 3

    def test_root_name_is_empty(self):
        assert ArtifactPath().name == ""

    def test_truediv_appends(self):
        assert ArtifactPath.parse("a") / "b/c" == ArtifactPath.parse("a/b/c")

    def test_relative_to(self):
        path = ArtifactPath.parse("gen/classes/Foo")
        assert path.relative_to(ArtifactPath.parse("gen")) == ArtifactPath.parse("classes/Foo")
        assert path.relative_to(ArtifactPath.parse("src")) is None
        assert path.relative_to(ArtifactPath()) == path

    def test_ordering_is_by_segments(self):
        paths = [ArtifactPath.parse(p) for p in ("b", "a/z", "a")]
        assert sorted(paths) == [ArtifactPath.parse(p) for p in ("a", "a/z", "b")]

    def test_str_and_repr(self):
        path = ArtifactPath.parse("a/b")
        assert str(path) == "a/b"
        assert repr(path) == "ArtifactPath('a/b')"


class TestArtifactPathMatching:
    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("a/b", "a/b", True),
            ("a/b", "a/*", True),
            ("a/b/c", "a/*", False),
            ("a/b/c", "a/**", True),
            ("a", "a/**", True),
            ("x/y/Foo", "**/Foo", True),
            ("Foo", "**/Foo", True),
            ("x/Foo/y", "**/Foo", False),
            ("src/Main", "src/M*", True),
            ("src/Main", "**", True),
            ("src/main", "src/M*", False),
        ],
    )
    def test_glob(self, path, pattern, expected):
        assert ArtifactPath.parse(path).matches(pattern) is expected
