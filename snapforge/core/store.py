"""Mutable, synchronisable key -> content stores.

Three backings share one contract:

- ``MemoryStore``: a plain dict, nothing to synchronise.
- ``DirectoryStore``: a file-system directory.
- ``ArchiveStore``: a zip file on disk.

The medium-backed stores enumerate their medium once on construction,
creating placeholder entries without reading any content. Values are
decoded lazily on first access, and ``put``/``remove`` only touch the
in-memory index until ``synchronise()`` reconciles it with the medium.

Stores assume a single thread of control. Concurrent modification of the
medium by another process during ``synchronise()`` is not detected.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

from snapforge.config import settings
from snapforge.core.entry import Entry
from snapforge.core.errors import InvalidArgumentError
from snapforge.core.filters import ALL, Filter
from snapforge.core.mapping import KeyMapping
from snapforge.core.medium import ArchiveMedium, DirectoryMedium, FileFilter, Medium
from snapforge.models.keys import Key
from snapforge.models.paths import ArtifactPath
from snapforge.models.reports import SyncReport

logger = logging.getLogger(__name__)

ValuePredicate = Callable[[Any], bool]


class Store(abc.ABC):
    """Common query/update contract for every store backing."""

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def keys(self, filter: Filter = ALL) -> list[Key]:
        """Keys currently in the in-memory index that satisfy *filter*."""
        ...

    @abc.abstractmethod
    def get(self, key: Key) -> Any | None:
        """Return the value for *key*, or None if absent."""
        ...

    @abc.abstractmethod
    def put(self, key: Key, value: Any) -> None:
        ...

    @abc.abstractmethod
    def remove(self, key: Key) -> bool:
        """Drop *key* from the index. Returns whether it was present."""
        ...

    @abc.abstractmethod
    def synchronise(self) -> SyncReport:
        ...

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all(self, filter: Filter = ALL) -> list[Any]:
        """Values of every key satisfying *filter*, in index order."""
        return [self.get(k) for k in self.keys(filter)]

    def match(self, filter: Filter = ALL, predicate: ValuePredicate | None = None) -> list[ArtifactPath]:
        """Paths of every key satisfying *filter* (and *predicate* on its value)."""
        return [
            k.path
            for k in self.keys(filter)
            if predicate is None or predicate(self.get(k))
        ]

    def items(self, filter: Filter = ALL) -> Iterator[tuple[Key, Any]]:
        for key in self.keys(filter):
            yield key, self.get(key)

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    @abc.abstractmethod
    def __contains__(self, key: object) -> bool:
        ...

    def validate(self, key: Key, value: Any) -> None:
        """Raise InvalidArgumentError unless ``put(key, value)`` would be accepted."""
        self._check_pair(key, value)

    @staticmethod
    def _check_pair(key: Key, value: Any) -> None:
        if key is None:
            raise InvalidArgumentError("key required")
        if not isinstance(key, Key):
            raise InvalidArgumentError(f"Expected a Key, got {type(key).__name__}")
        if value is None:
            raise InvalidArgumentError(f"value required for {key}")
        if not key.content_type.accepts(value):
            raise InvalidArgumentError(
                f"invalid key-value pair: {type(value).__name__} is not "
                f"content for {key.content_type!r}"
            )


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class MemoryStore(Store):
    """Dict-backed store with no medium; ``synchronise()`` does nothing."""

    def __init__(self, items: dict[Key, Any] | None = None) -> None:
        self._items: dict[Key, Any] = {}
        for key, value in (items or {}).items():
            self.put(key, value)

    def keys(self, filter: Filter = ALL) -> list[Key]:
        return [k for k in self._items if filter.includes(k.content_type, k.path)]

    def get(self, key: Key) -> Any | None:
        return self._items.get(key)

    def put(self, key: Key, value: Any) -> None:
        self.validate(key, value)
        self._items[key] = value

    def remove(self, key: Key) -> bool:
        return self._items.pop(key, None) is not None

    def synchronise(self) -> SyncReport:
        return SyncReport()

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __repr__(self) -> str:
        return "{" + ",".join(str(k) for k in self._items) + "}"


# ---------------------------------------------------------------------------
# Medium-backed
# ---------------------------------------------------------------------------


class MediumStore(Store):
    """Lazy, dirty-tracked store over a Medium.

    Parameters
    ----------
    mapping:
        Translates keys to medium names and back.
    medium:
        The directory or archive holding the bytes.
    """

    def __init__(self, mapping: KeyMapping, medium: Medium) -> None:
        if mapping is None:
            raise InvalidArgumentError("Key mapping is required")
        if medium is None:
            raise InvalidArgumentError("Medium is required")
        self.mapping = mapping
        self.medium = medium
        self._entries: dict[Key, Entry] = {}
        for name in medium.names():
            key = mapping.decode(name)
            if key is not None:
                self._entries[key] = Entry(key, name, medium)
        logger.debug("Indexed %d entr(ies) from %r", len(self._entries), medium)

    def entry(self, key: Key) -> Entry | None:
        """The raw entry for *key*, exposing its load/dirty state."""
        return self._entries.get(key)

    def keys(self, filter: Filter = ALL) -> list[Key]:
        return [k for k in self._entries if filter.includes(k.content_type, k.path)]

    def get(self, key: Key) -> Any | None:
        entry = self._entries.get(key)
        return entry.get() if entry is not None else None

    def validate(self, key: Key, value: Any) -> None:
        self._check_pair(key, value)
        if key not in self._entries:
            self.mapping.encode(key)

    def put(self, key: Key, value: Any) -> None:
        self.validate(key, value)
        entry = self._entries.get(key)
        if entry is None:
            entry = Entry(key, self.mapping.encode(key), self.medium)
            self._entries[key] = entry
        entry.set(value)

    def remove(self, key: Key) -> bool:
        return self._entries.pop(key, None) is not None

    @property
    def dirty_count(self) -> int:
        return sum(1 for e in self._entries.values() if e.is_dirty)

    def synchronise(self) -> SyncReport:
        """Reconcile the medium with the in-memory index.

        1. Every recognised name on the medium whose key is no longer in the
           index is deleted; the index is authoritative for existence.
        2. Every dirty entry is written back.

        Enumeration happens before any write so freshly put entries are not
        mistaken for orphans. If writing one entry fails the error propagates
        and entries already written stay written.
        """
        deleted: list[str] = []
        for name in self.medium.names():
            key = self.mapping.decode(name)
            if key is not None and key not in self._entries:
                self.medium.delete(name)
                deleted.append(name)

        written: list[str] = []
        for entry in list(self._entries.values()):
            if entry.flush():
                written.append(entry.name)

        self.medium.commit()
        report = SyncReport(deleted=tuple(deleted), written=tuple(written))
        if report.changed:
            logger.info(
                "Synchronised %r: %d written, %d deleted",
                self.medium, len(written), len(deleted),
            )
        return report

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return "{" + ",".join(str(k) for k in self._entries) + "}"


class DirectoryStore(MediumStore):
    """Store backed by a file-system directory.

    Parameters
    ----------
    mapping:
        Key mapping; names are ``/``-separated paths relative to *root*.
    root:
        Root directory (created lazily on first flush).
    file_filter:
        Optional predicate restricting which files and directories are
        enumerated.
    max_depth:
        Directory recursion bound. Defaults to ``settings.max_depth``.
    """

    def __init__(
        self,
        mapping: KeyMapping,
        root: Path,
        file_filter: FileFilter | None = None,
        max_depth: int | None = None,
    ) -> None:
        medium = DirectoryMedium(root, file_filter=file_filter, max_depth=max_depth)
        super().__init__(mapping, medium)

    @property
    def root(self) -> Path:
        return self.medium.root

    def path_of(self, key: Key) -> Path:
        """File-system location *key* maps to, whether or not it exists yet."""
        return self.medium.path_of(self.mapping.encode(key))


class ArchiveStore(MediumStore):
    """Store backed by a zip file; each ``synchronise()`` rewrites the archive."""

    def __init__(
        self,
        mapping: KeyMapping,
        path: Path,
        compression: int | None = None,
    ) -> None:
        medium = ArchiveMedium(
            path,
            compression=compression if compression is not None else settings.zip_compression,
        )
        super().__init__(mapping, medium)

    @property
    def path(self) -> Path:
        return self.medium.path

