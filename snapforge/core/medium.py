"""Backing media for stores: a directory tree or a zip archive on disk.

A medium only knows about flat names and bytes. Translating names to keys
is the store's job (via its key mapping).
"""

from __future__ import annotations

import abc
import logging
import os
import zipfile
from collections.abc import Callable
from pathlib import Path

from snapforge.config import settings
from snapforge.core.errors import InvalidArgumentError, StoreMediumError

logger = logging.getLogger(__name__)

FileFilter = Callable[[Path], bool]


class Medium(abc.ABC):
    """Flat name -> bytes container that a store synchronises against."""

    @abc.abstractmethod
    def names(self) -> list[str]:
        """Enumerate every name currently present on the medium."""
        ...

    @abc.abstractmethod
    def read(self, name: str) -> bytes:
        ...

    @abc.abstractmethod
    def write(self, name: str, data: bytes) -> None:
        ...

    @abc.abstractmethod
    def delete(self, name: str) -> None:
        ...

    def commit(self) -> None:
        """Make preceding writes and deletes durable. Immediate media do nothing."""


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------


class DirectoryMedium(Medium):
    """A rooted file tree; names are ``/``-separated paths relative to the root.

    Parameters
    ----------
    root:
        Root directory. It need not exist until the first write.
    file_filter:
        Optional predicate applied to every file and directory found during
        enumeration; rejected directories are not descended into.
    max_depth:
        Recursion bound for enumeration (guards against symlink cycles).
        Defaults to ``settings.max_depth``.
    """

    def __init__(
        self,
        root: Path,
        file_filter: FileFilter | None = None,
        max_depth: int | None = None,
    ) -> None:
        if root is None:
            raise InvalidArgumentError("Directory root is required")
        if max_depth is None:
            max_depth = settings.max_depth
        if max_depth < 1:
            raise InvalidArgumentError(f"max_depth must be positive, got {max_depth}")
        self.root = Path(root)
        self.file_filter = file_filter
        self.max_depth = max_depth

    def names(self) -> list[str]:
        files: list[Path] = []
        self._find_all(self.max_depth, self.root, files)
        return [f.relative_to(self.root).as_posix() for f in files]

    def _find_all(self, depth: int, directory: Path, files: list[Path]) -> None:
        if depth <= 0 or not directory.is_dir():
            return
        try:
            children = sorted(directory.iterdir())
        except OSError as exc:
            raise StoreMediumError(f"Cannot list {directory}: {exc}") from exc
        for child in children:
            if self.file_filter is not None and not self.file_filter(child):
                continue
            if child.is_dir():
                self._find_all(depth - 1, child, files)
            else:
                files.append(child)

    def path_of(self, name: str) -> Path:
        return self.root / name

    def read(self, name: str) -> bytes:
        try:
            return self.path_of(name).read_bytes()
        except OSError as exc:
            raise StoreMediumError(f"Cannot read {name} from {self.root}: {exc}") from exc

    def write(self, name: str, data: bytes) -> None:
        path = self.path_of(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise StoreMediumError(f"Cannot write {name} to {self.root}: {exc}") from exc
        logger.debug("Wrote %s (%d bytes)", path, len(data))

    def delete(self, name: str) -> None:
        path = self.path_of(name)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StoreMediumError(f"Cannot delete {name} from {self.root}: {exc}") from exc
        logger.debug("Deleted %s", path)

    def __repr__(self) -> str:
        return f"DirectoryMedium({str(self.root)!r})"


# ---------------------------------------------------------------------------
# Zip archive
# ---------------------------------------------------------------------------


class ArchiveMedium(Medium):
    """A zip file on disk.

    Zip archives cannot be edited in place, so writes and deletes are staged
    in memory and ``commit()`` rewrites the whole archive to a temporary file
    that then replaces the original. Staged changes are kept if the commit
    fails, so a later commit can retry them.
    """

    def __init__(self, path: Path, compression: int = zipfile.ZIP_DEFLATED) -> None:
        if path is None:
            raise InvalidArgumentError("Archive path is required")
        self.path = Path(path)
        self.compression = compression
        self._staged: dict[str, bytes] = {}
        self._deleted: set[str] = set()

    @property
    def pending(self) -> int:
        """Number of staged writes and deletes not yet committed."""
        return len(self._staged) + len(self._deleted)

    def _listing(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            with zipfile.ZipFile(self.path) as zf:
                return [n for n in zf.namelist() if not n.endswith("/")]
        except (OSError, zipfile.BadZipFile) as exc:
            raise StoreMediumError(f"Cannot list archive {self.path}: {exc}") from exc

    def names(self) -> list[str]:
        listed = [n for n in self._listing() if n not in self._deleted]
        present = set(listed)
        return listed + [n for n in self._staged if n not in present]

    def read(self, name: str) -> bytes:
        if name in self._staged:
            return self._staged[name]
        if name in self._deleted:
            raise StoreMediumError(f"{name} was deleted from {self.path}")
        try:
            with zipfile.ZipFile(self.path) as zf:
                return zf.read(name)
        except (OSError, KeyError, zipfile.BadZipFile) as exc:
            raise StoreMediumError(f"Cannot read {name} from {self.path}: {exc}") from exc

    def write(self, name: str, data: bytes) -> None:
        self._staged[name] = data
        self._deleted.discard(name)

    def delete(self, name: str) -> None:
        self._staged.pop(name, None)
        self._deleted.add(name)

    def commit(self) -> None:
        if not self.pending:
            return
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(tmp_path, "w", compression=self.compression) as out:
                written: set[str] = set()
                if self.path.exists():
                    with zipfile.ZipFile(self.path) as src:
                        for name in src.namelist():
                            if name.endswith("/") or name in self._deleted:
                                continue
                            data = self._staged.get(name)
                            out.writestr(name, data if data is not None else src.read(name))
                            written.add(name)
                for name, data in self._staged.items():
                    if name not in written:
                        out.writestr(name, data)
            os.replace(tmp_path, self.path)
        except (OSError, zipfile.BadZipFile) as exc:
            tmp_path.unlink(missing_ok=True)
            raise StoreMediumError(f"Cannot rewrite archive {self.path}: {exc}") from exc
        logger.debug(
            "Committed %d write(s), %d delete(s) to %s",
            len(self._staged), len(self._deleted), self.path,
        )
        self._staged.clear()
        self._deleted.clear()

    def __repr__(self) -> str:
        return f"ArchiveMedium({str(self.path)!r})"
