"""Zip archives as whole-container content.

A ``ZipArchive`` reads every entry of a zip byte stream once, keeps the raw
bytes, and decodes an entry's value only when it is first asked for. It is
a value like any other artifact (see ``archive_content_type``), not a live
store: nothing here is synchronised against a file on disk. Use
``ArchiveStore`` for that.
"""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Callable, Iterator
from typing import Any

from snapforge.core.content import ContentType
from snapforge.core.errors import ContentDecodeError, InvalidArgumentError
from snapforge.core.filters import ALL, Filter
from snapforge.core.mapping import KeyMapping
from snapforge.models.keys import Key
from snapforge.models.paths import ArtifactPath

logger = logging.getLogger(__name__)

FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)  # earliest date a zip header can hold


class ArchiveEntry:
    """One member of a ZipArchive: key, raw bytes, lazily decoded value."""

    def __init__(self, key: Key, data: bytes) -> None:
        self.key = key
        self.data = data
        self._value: Any = None
        self._loaded = False

    @property
    def content_type(self) -> ContentType:
        return self.key.content_type

    @property
    def path(self) -> ArtifactPath:
        return self.key.path

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get(self) -> Any:
        if not self._loaded:
            self._value = self.key.content_type.decode(self.data)
            self._loaded = True
        return self._value

    def __repr__(self) -> str:
        return f"<ArchiveEntry {self.key} {len(self.data)}B>"


class ZipArchive:
    """An ordered collection of (key, bytes) entries with zip (de)serialisation."""

    def __init__(self, entries: list[ArchiveEntry] | None = None) -> None:
        self._entries: list[ArchiveEntry] = list(entries or [])

    @classmethod
    def from_bytes(cls, data: bytes, mapping: KeyMapping) -> ZipArchive:
        """Read every entry of a zip byte stream; unrecognised names are skipped."""
        archive = cls()
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                for info in zf.infolist():
                    if info.is_dir():
                        continue
                    key = mapping.decode(info.filename)
                    if key is None:
                        logger.debug("Skipping unrecognised archive entry %s", info.filename)
                        continue
                    archive._entries.append(ArchiveEntry(key, zf.read(info)))
        except zipfile.BadZipFile as exc:
            raise ContentDecodeError(f"Not a valid zip archive: {exc}") from exc
        return archive

    def to_bytes(self, mapping: KeyMapping, compression: int = zipfile.ZIP_DEFLATED) -> bytes:
        """Write every entry, in order, into a fresh zip container.

        Entry timestamps and permissions are fixed, so equal archives encode
        to equal bytes and share a content address.
        """
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
            for entry in self._entries:
                zf.writestr(_entry_info(mapping.encode(entry.key), compression), entry.data)
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add(self, key: Key, data: bytes) -> None:
        """Append an entry holding already-encoded bytes."""
        if key is None:
            raise InvalidArgumentError("key required")
        self._entries.append(ArchiveEntry(key, bytes(data)))

    def add_value(self, key: Key, value: Any) -> None:
        """Encode *value* with the key's content type and append it."""
        if key is None:
            raise InvalidArgumentError("key required")
        if not key.content_type.accepts(value):
            raise InvalidArgumentError(
                f"invalid key-value pair: {type(value).__name__} is not content for {key.content_type!r}"
            )
        self.add(key, key.content_type.write(value))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def entry(self, index: int) -> ArchiveEntry:
        return self._entries[index]

    @property
    def entries(self) -> tuple[ArchiveEntry, ...]:
        return tuple(self._entries)

    def keys(self) -> list[Key]:
        return [e.key for e in self._entries]

    def get(self, content_type: ContentType, path: ArtifactPath | str) -> Any | None:
        """Decoded value of the first entry at (content_type, path), or None."""
        path = ArtifactPath.coerce(path)
        if path.is_root:
            return None
        wanted = Key.of(content_type, path)
        for entry in self._entries:
            if entry.key == wanted:
                return entry.get()
        return None

    def get_all(self, filter: Filter = ALL) -> list[Any]:
        return [e.get() for e in self._entries if filter.includes(e.content_type, e.path)]

    def match(
        self,
        filter: Filter = ALL,
        predicate: Callable[[Any], bool] | None = None,
    ) -> list[ArtifactPath]:
        return [
            e.path
            for e in self._entries
            if filter.includes(e.content_type, e.path)
            and (predicate is None or predicate(e.get()))
        ]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return "{" + ",".join(str(e.key) for e in self._entries) + "}"


def _entry_info(name: str, compression: int) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=FIXED_DATE_TIME)
    info.compress_type = compression
    info.external_attr = 0o644 << 16
    return info


class ArchiveContentType(ContentType[ZipArchive]):
    """Content type for zip archives whose entry names use *mapping*."""

    def __init__(
        self,
        mapping: KeyMapping,
        suffix: str = "zip",
        compression: int = zipfile.ZIP_DEFLATED,
    ) -> None:
        super().__init__(suffix)
        self.mapping = mapping
        self.compression = compression

    def read(self, data: bytes) -> ZipArchive:
        return ZipArchive.from_bytes(data, self.mapping)

    def write(self, value: ZipArchive) -> bytes:
        return value.to_bytes(self.mapping, self.compression)

    def accepts(self, value: Any) -> bool:
        return isinstance(value, ZipArchive)


def archive_content_type(
    mapping: KeyMapping,
    suffix: str = "zip",
    compression: int = zipfile.ZIP_DEFLATED,
) -> ArchiveContentType:
    return ArchiveContentType(mapping, suffix, compression)
