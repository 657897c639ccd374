"""Tests for DirectoryStore — lazy loading, dirty tracking, synchronisation."""

from __future__ import annotations

from pathlib import Path

import pytest

from snapforge.config import settings
from snapforge.core.content import JSON, TEXT_UTF8
from snapforge.core.entry import EntryState
from snapforge.core.errors import ContentDecodeError, InvalidArgumentError, StoreMediumError
from snapforge.core.filters import Filter
from snapforge.core.medium import DirectoryMedium
from snapforge.core.store import DirectoryStore, MediumStore
from snapforge.models.files import TextFile
from snapforge.models.keys import Key
from snapforge.models.paths import ArtifactPath


class FailingDirectoryMedium(DirectoryMedium):
    """Directory medium that refuses to write one named file."""

    fail_on: str | None = None

    def write(self, name: str, data: bytes) -> None:
        if name == self.fail_on:
            raise StoreMediumError(f"Cannot write {name}: disk full")
        super().write(name, data)


class TestDirectoryStoreEnumeration:
    def test_missing_root_is_empty(self, directory_store):
        assert len(directory_store) == 0

    def test_enumerates_without_reading(self, mapping, store_dir, write_file):
        write_file("src/A.txt", "alpha")
        write_file("src/deep/B.json", '{"b": 2}')
        store = DirectoryStore(mapping, store_dir)
        assert sorted(str(k) for k in store.keys()) == ["src/A:txt", "src/deep/B:json"]
        assert store.entry(Key.of(TEXT_UTF8, "src/A")).state is EntryState.UNLOADED

    def test_unrecognised_files_ignored(self, mapping, store_dir, write_file):
        write_file("README", "hi")
        write_file("tool.exe", b"\x7fELF")
        write_file("a.txt", "a")
        store = DirectoryStore(mapping, store_dir)
        assert [str(k) for k in store.keys()] == ["a:txt"]

    def test_file_filter_prunes_directories(self, mapping, store_dir, write_file):
        write_file("keep/a.txt", "a")
        write_file("skip/b.txt", "b")
        store = DirectoryStore(mapping, store_dir, file_filter=lambda p: p.name != "skip")
        assert [str(k) for k in store.keys()] == ["keep/a:txt"]

    def test_max_depth_bounds_recursion(self, mapping, store_dir, write_file):
        write_file("top.txt", "t")
        write_file("one/two/deep.txt", "d")
        store = DirectoryStore(mapping, store_dir, max_depth=2)
        assert [str(k) for k in store.keys()] == ["top:txt"]

    def test_invalid_max_depth(self, store_dir):
        with pytest.raises(InvalidArgumentError):
            DirectoryMedium(store_dir, max_depth=0)

    def test_max_depth_defaults_to_setting(self, mapping, store_dir, write_file, monkeypatch):
        monkeypatch.setattr(settings, "max_depth", 1)
        write_file("top.txt", "t")
        write_file("one/deep.txt", "d")
        assert DirectoryMedium(store_dir).max_depth == 1
        assert [str(k) for k in DirectoryStore(mapping, store_dir).keys()] == ["top:txt"]


class TestDirectoryStoreAccess:
    def test_get_decodes_lazily(self, mapping, store_dir, write_file):
        write_file("a.txt", "alpha")
        store = DirectoryStore(mapping, store_dir)
        key = Key.of(TEXT_UTF8, "a")
        assert store.get(key) == TextFile(content="alpha")
        assert store.entry(key).state is EntryState.CLEAN

    def test_decode_failure_surfaces(self, mapping, store_dir, write_file):
        write_file("bad.json", "{not json")
        store = DirectoryStore(mapping, store_dir)
        with pytest.raises(ContentDecodeError):
            store.get(Key.of(JSON, "bad"))

    def test_get_all_decodes_only_matches(self, mapping, store_dir, write_file):
        write_file("src/a.txt", "a")
        write_file("gen/b.txt", "b")
        store = DirectoryStore(mapping, store_dir)
        assert store.get_all(Filter(pattern="src/**")) == [TextFile(content="a")]
        assert store.entry(Key.of(TEXT_UTF8, "gen/b")).state is EntryState.UNLOADED

    def test_match(self, mapping, store_dir, write_file):
        write_file("x/a.json", "1")
        write_file("x/b.json", "2")
        store = DirectoryStore(mapping, store_dir)
        assert store.match(Filter(JSON), lambda v: v > 1) == [ArtifactPath.parse("x/b")]

    def test_path_of(self, directory_store, store_dir):
        assert directory_store.path_of(Key.of(JSON, "a/b")) == store_dir / "a/b.json"


class TestDirectoryStoreSynchronise:
    def test_put_then_synchronise_writes(self, directory_store, store_dir):
        directory_store.put(Key.of(TEXT_UTF8, "out/hello"), TextFile(content="hi"))
        assert not (store_dir / "out/hello.txt").exists()
        report = directory_store.synchronise()
        assert report.written == ("out/hello.txt",)
        assert (store_dir / "out/hello.txt").read_text(encoding="utf-8") == "hi"

    def test_second_synchronise_writes_nothing(self, directory_store):
        directory_store.put(Key.of(JSON, "a"), [1])
        directory_store.synchronise()
        assert directory_store.dirty_count == 0
        assert not directory_store.synchronise().changed

    def test_orphan_deleted(self, mapping, store_dir, write_file):
        orphan = write_file("old.txt", "gone soon")
        store = DirectoryStore(mapping, store_dir)
        store.remove(Key.of(TEXT_UTF8, "old"))
        report = store.synchronise()
        assert report.deleted == ("old.txt",)
        assert not orphan.exists()

    def test_unread_entry_left_untouched(self, mapping, store_dir, write_file):
        kept = write_file("keep.txt", "original")
        mtime = kept.stat().st_mtime_ns
        store = DirectoryStore(mapping, store_dir)
        store.put(Key.of(JSON, "new"), {"n": 1})
        store.synchronise()
        assert kept.read_text(encoding="utf-8") == "original"
        assert kept.stat().st_mtime_ns == mtime
        assert store.entry(Key.of(TEXT_UTF8, "keep")).state is EntryState.UNLOADED

    def test_unrecognised_files_survive_synchronise(self, mapping, store_dir, write_file):
        notes = write_file("NOTES", "mine")
        store = DirectoryStore(mapping, store_dir)
        store.put(Key.of(JSON, "a"), 1)
        store.synchronise()
        assert notes.exists()

    def test_replace_rewrites_file(self, mapping, store_dir, write_file):
        path = write_file("a.json", "1")
        store = DirectoryStore(mapping, store_dir)
        store.put(Key.of(JSON, "a"), 2)
        assert store.synchronise().written == ("a.json",)
        assert path.read_bytes() == b"2"

    def test_reopened_store_sees_written_files(self, mapping, directory_store, store_dir):
        directory_store.put(Key.of(TEXT_UTF8, "x/y"), TextFile(content="z"))
        directory_store.synchronise()
        reopened = DirectoryStore(mapping, store_dir)
        assert reopened.get(Key.of(TEXT_UTF8, "x/y")) == TextFile(content="z")

    def test_root_property(self, directory_store, store_dir):
        assert directory_store.root == Path(store_dir)


class TestDirectoryStorePartialSynchronise:
    def test_failed_write_keeps_earlier_writes(self, mapping, store_dir):
        medium = FailingDirectoryMedium(store_dir)
        medium.fail_on = "b.json"
        store = MediumStore(mapping, medium)
        store.put(Key.of(JSON, "a"), 1)
        store.put(Key.of(JSON, "b"), 2)

        with pytest.raises(StoreMediumError):
            store.synchronise()

        assert (store_dir / "a.json").read_bytes() == b"1"
        assert not (store_dir / "b.json").exists()
        assert store.entry(Key.of(JSON, "a")).state is EntryState.CLEAN
        assert store.entry(Key.of(JSON, "b")).state is EntryState.DIRTY
        assert store.dirty_count == 1

    def test_retry_writes_only_what_is_left(self, mapping, store_dir):
        medium = FailingDirectoryMedium(store_dir)
        medium.fail_on = "b.json"
        store = MediumStore(mapping, medium)
        store.put(Key.of(JSON, "a"), 1)
        store.put(Key.of(JSON, "b"), 2)
        with pytest.raises(StoreMediumError):
            store.synchronise()

        medium.fail_on = None
        report = store.synchronise()
        assert report.written == ("b.json",)
        assert (store_dir / "b.json").read_bytes() == b"2"
        assert store.dirty_count == 0
