"""Snapforge: typed, content-addressed build artifact stores.

  - Immutable, structurally shared snapshots of typed artifacts
  - Append-only repository history driven by task transactions
  - Lazy, dirty-tracked stores over a directory tree or a zip archive
  - Zip archives as nestable artifact content
"""

__version__ = "0.1.0"
__description__ = "Typed, content-addressed build artifact stores with versioned snapshots"

# models before core: core.content and the models import each other
from snapforge.models import Artifact, ArtifactPath, BinaryFile, Key, TextFile
from snapforge.core.archive import ZipArchive, archive_content_type
from snapforge.core.content import (
    BINARY,
    JSON,
    TEXT_ASCII,
    TEXT_UTF8,
    ContentRegistry,
    ContentType,
    default_registry,
)
from snapforge.core.filters import ALL, Filter
from snapforge.core.mapping import KeyMapping, SuffixKeyMapping
from snapforge.core.repository import Repository, SnapShot
from snapforge.core.store import ArchiveStore, DirectoryStore, MemoryStore, Store
from snapforge.core.transaction import FunctionTask, Task, Transaction

__all__ = [
    "Artifact",
    "ArtifactPath",
    "BinaryFile",
    "Key",
    "TextFile",
    "ZipArchive",
    "archive_content_type",
    "BINARY",
    "JSON",
    "TEXT_ASCII",
    "TEXT_UTF8",
    "ContentRegistry",
    "ContentType",
    "default_registry",
    "ALL",
    "Filter",
    "KeyMapping",
    "SuffixKeyMapping",
    "Repository",
    "SnapShot",
    "ArchiveStore",
    "DirectoryStore",
    "MemoryStore",
    "Store",
    "FunctionTask",
    "Task",
    "Transaction",
    "__version__",
]
