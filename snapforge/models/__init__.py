"""snapforge data models: all Pydantic v2, all frozen (immutable)."""

from snapforge.models.artifacts import Artifact
from snapforge.models.files import BinaryFile, Line, TextFile
from snapforge.models.keys import Key
from snapforge.models.paths import ArtifactPath
from snapforge.models.reports import SyncReport

__all__ = [
    # paths
    "ArtifactPath",
    # keys
    "Key",
    # artifacts
    "Artifact",
    # file content
    "TextFile",
    "BinaryFile",
    "Line",
    # reports
    "SyncReport",
]
