"""Tests for SnapShot — immutable, copy-on-write artifact collections."""

from __future__ import annotations

import pytest

from snapforge.core.content import JSON, TEXT_UTF8
from snapforge.core.errors import InvalidArgumentError
from snapforge.core.filters import Filter
from snapforge.core.repository import SnapShot
from snapforge.models.artifacts import Artifact
from snapforge.models.files import TextFile
from snapforge.models.keys import Key
from snapforge.models.paths import ArtifactPath


class TestSnapShotQueries:
    def test_empty(self):
        snapshot = SnapShot()
        assert len(snapshot) == 0
        assert snapshot.get(TEXT_UTF8, "a") is None
        assert snapshot.get_all() == []
        assert snapshot.match() == []

    def test_get(self, make_text):
        artifact = make_text("src/A", "a")
        snapshot = SnapShot([artifact])
        assert snapshot.get(TEXT_UTF8, "src/A") is artifact
        assert snapshot.get(JSON, "src/A") is None

    def test_get_all_filters_by_type_and_pattern(self, make_text):
        a = make_text("src/A")
        b = make_text("gen/B")
        c = Artifact.of(JSON, "src/meta", {"v": 1})
        snapshot = SnapShot([a, b, c])
        assert snapshot.get_all(Filter(TEXT_UTF8)) == [a, b]
        assert snapshot.get_all(Filter(pattern="src/*")) == [a, c]

    def test_match_returns_paths_and_applies_predicate(self, make_text):
        snapshot = SnapShot([make_text("a", "keep"), make_text("b", "drop")])
        matched = snapshot.match(Filter(TEXT_UTF8), lambda a: a.value.content == "keep")
        assert matched == [ArtifactPath.parse("a")]

    def test_constructor_keeps_last_artifact_per_key(self, make_text):
        first = make_text("a", "1")
        second = make_text("a", "2")
        snapshot = SnapShot([first, make_text("b"), second])
        assert len(snapshot) == 2
        assert snapshot.get(TEXT_UTF8, "a") is second
        assert snapshot.keys()[0] == Key.of(TEXT_UTF8, "a")

    def test_contains_key(self, make_text):
        snapshot = SnapShot([make_text("a")])
        assert Key.of(TEXT_UTF8, "a") in snapshot
        assert Key.of(JSON, "a") not in snapshot

    def test_repr(self, make_text):
        assert repr(SnapShot([make_text("a/b")])) == "{a/b:txt}"


class TestSnapShotUpdates:
    def test_put_leaves_original_unchanged(self, make_text):
        s1 = SnapShot([make_text("a")])
        s2 = s1.put(make_text("b"))
        assert len(s1) == 1
        assert len(s2) == 2
        assert s1.get(TEXT_UTF8, "b") is None

    def test_put_replaces_in_place(self, make_text):
        s1 = SnapShot([make_text("a", "old"), make_text("b")])
        s2 = s1.put(make_text("a", "new"))
        assert [str(k.path) for k in s2.keys()] == ["a", "b"]
        assert s2.get(TEXT_UTF8, "a").value == TextFile(content="new")
        assert s1.get(TEXT_UTF8, "a").value == TextFile(content="old")

    def test_put_is_idempotent(self, make_text):
        artifact = make_text("a")
        s1 = SnapShot().put(artifact)
        assert s1.put(artifact) == s1
        assert len(s1.put(artifact)) == 1

    def test_put_same_path_other_type_coexists(self, make_text):
        snapshot = SnapShot([make_text("a")]).put(Artifact.of(JSON, "a", [1]))
        assert len(snapshot) == 2

    def test_put_rejects_non_artifacts(self):
        with pytest.raises(InvalidArgumentError):
            SnapShot().put(None)
        with pytest.raises(InvalidArgumentError):
            SnapShot([TextFile(content="x")])

    def test_put_rejects_tasks(self, make_task):
        with pytest.raises(InvalidArgumentError):
            SnapShot().put(make_task("gen/A"))

    def test_remove(self, make_text):
        s1 = SnapShot([make_text("a"), make_text("b")])
        s2 = s1.remove(TEXT_UTF8, "a")
        assert s2.keys() == [Key.of(TEXT_UTF8, "b")]
        assert len(s1) == 2

    def test_remove_absent_returns_self(self, make_text):
        snapshot = SnapShot([make_text("a")])
        assert snapshot.remove(JSON, "a") is snapshot

    def test_root_path_is_absent(self, make_text):
        snapshot = SnapShot([make_text("a")])
        assert snapshot.get(TEXT_UTF8, "") is None
        assert snapshot.get(TEXT_UTF8, ArtifactPath.parse("")) is None
        assert snapshot.remove(TEXT_UTF8, "") is snapshot


class TestSnapShotIdentity:
    def test_equal_contents_are_equal(self, make_text):
        assert SnapShot([make_text("a")]) == SnapShot([make_text("a")])

    def test_order_matters(self, make_text):
        a, b = make_text("a"), make_text("b")
        assert SnapShot([a, b]) != SnapShot([b, a])

    def test_digest_tracks_content(self, make_text):
        s1 = SnapShot([make_text("a", "x")])
        assert s1.digest() == SnapShot([make_text("a", "x")]).digest()
        assert s1.digest() != s1.put(make_text("a", "y")).digest()
        assert s1.digest().startswith("sha256:")

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(SnapShot())
