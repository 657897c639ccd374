"""Shared test fixtures for Snapforge."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from snapforge.core.content import TEXT_UTF8, ContentRegistry, default_registry
from snapforge.core.mapping import SuffixKeyMapping
from snapforge.core.repository import SnapShot
from snapforge.core.store import ArchiveStore, DirectoryStore
from snapforge.core.transaction import FunctionTask
from snapforge.models.artifacts import Artifact
from snapforge.models.files import TextFile
from snapforge.models.keys import Key


@pytest.fixture
def registry() -> ContentRegistry:
    """Provide the default registry (txt, json, bin)."""
    return default_registry()


@pytest.fixture
def mapping(registry: ContentRegistry) -> SuffixKeyMapping:
    """Provide a suffix key mapping over the default registry."""
    return SuffixKeyMapping(registry)


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Provide an (empty, not yet created) directory for a directory store."""
    return tmp_path / "store"


@pytest.fixture
def directory_store(mapping: SuffixKeyMapping, store_dir: Path) -> DirectoryStore:
    """Provide a DirectoryStore rooted at ``store_dir``."""
    return DirectoryStore(mapping, store_dir)


@pytest.fixture
def archive_path(tmp_path: Path) -> Path:
    """Provide a path for a (not yet existing) zip archive."""
    return tmp_path / "store.zip"


@pytest.fixture
def archive_store(mapping: SuffixKeyMapping, archive_path: Path) -> ArchiveStore:
    """Provide an ArchiveStore backed by ``archive_path``."""
    return ArchiveStore(mapping, archive_path)


@pytest.fixture
def write_file(store_dir: Path) -> Callable[[str, str | bytes], Path]:
    """Factory fixture: create a file under ``store_dir`` behind the store's back."""

    def _write(name: str, content: str | bytes) -> Path:
        path = store_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path

    return _write


# ---------------------------------------------------------------------------
# Artifact and task factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_text() -> Callable[..., Artifact]:
    """Factory fixture: build a UTF-8 text Artifact."""

    def _factory(path: str = "src/Main", content: str = "hello", **overrides: Any) -> Artifact:
        return Artifact.of(TEXT_UTF8, path, TextFile(content=content), **overrides)

    return _factory


@pytest.fixture
def make_task() -> Callable[..., FunctionTask]:
    """Factory fixture: a task that puts one text artifact.

    ``ok=False`` makes it report failure after putting; ``raises`` makes it
    raise that exception without producing anything. ``calls`` records each
    invocation by path.
    """
    calls: list[str] = []

    def _factory(
        path: str,
        content: str = "generated",
        ok: bool = True,
        raises: BaseException | None = None,
    ) -> FunctionTask:
        key = Key.of(TEXT_UTF8, path)

        def _run(snapshot: SnapShot) -> tuple[SnapShot, bool]:
            calls.append(path)
            if raises is not None:
                raise raises
            artifact = Artifact(key=key, value=TextFile(content=content))
            return snapshot.put(artifact), ok

        return FunctionTask(key, _run)

    _factory.calls = calls  # type: ignore[attr-defined]
    return _factory
