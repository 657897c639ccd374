"""Structured, hierarchical artifact paths.

Paths are segment tuples, not raw strings. Equality, hashing and ordering
are all structural, so ``ArtifactPath.parse("a/b")`` and
``ArtifactPath(segments=("a", "b"))`` are the same path.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

SEPARATOR = "/"
RECURSIVE_WILDCARD = "**"


class ArtifactPath(BaseModel):
    """A location within a store or snapshot, e.g. ``src/main/Foo``.

    The empty path is the root and cannot address an artifact on its own.
    """

    model_config = ConfigDict(frozen=True)

    segments: tuple[str, ...] = ()

    @field_validator("segments")
    @classmethod
    def _check_segments(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for segment in value:
            if not segment or SEPARATOR in segment:
                raise ValueError(f"Invalid path segment: {segment!r}")
            if segment in (".", ".."):
                raise ValueError(f"Relative path segment not allowed: {segment!r}")
        return value

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> ArtifactPath:
        """Parse a ``/``-separated string. Leading/trailing separators are ignored."""
        return cls(segments=tuple(s for s in text.split(SEPARATOR) if s))

    @classmethod
    def coerce(cls, value: Any) -> ArtifactPath:
        """Accept an ArtifactPath, a string, or a sequence of segments."""
        if isinstance(value, ArtifactPath):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, (tuple, list)):
            return cls(segments=tuple(value))
        raise TypeError(f"Cannot build an ArtifactPath from {type(value).__name__}")

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Last segment, or ``""`` for the root."""
        return self.segments[-1] if self.segments else ""

    @property
    def parent(self) -> ArtifactPath:
        return ArtifactPath(segments=self.segments[:-1])

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def depth(self) -> int:
        return len(self.segments)

    def __truediv__(self, segment: str) -> ArtifactPath:
        return ArtifactPath(segments=self.segments + ArtifactPath.parse(segment).segments)

    def is_prefix_of(self, other: ArtifactPath) -> bool:
        return other.segments[: len(self.segments)] == self.segments

    def relative_to(self, prefix: ArtifactPath) -> ArtifactPath | None:
        """Strip *prefix* from this path, or return None if it is not a prefix."""
        if not prefix.is_prefix_of(self):
            return None
        return ArtifactPath(segments=self.segments[len(prefix.segments):])

    def matches(self, pattern: str) -> bool:
        """Glob match: ``*`` matches within one segment, ``**`` spans segments."""
        patterns = tuple(p for p in pattern.split(SEPARATOR) if p)
        return _glob(self.segments, patterns)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def __lt__(self, other: ArtifactPath) -> bool:
        if not isinstance(other, ArtifactPath):
            return NotImplemented
        return self.segments < other.segments

    def __le__(self, other: ArtifactPath) -> bool:
        if not isinstance(other, ArtifactPath):
            return NotImplemented
        return self.segments <= other.segments

    def __gt__(self, other: ArtifactPath) -> bool:
        if not isinstance(other, ArtifactPath):
            return NotImplemented
        return self.segments > other.segments

    def __ge__(self, other: ArtifactPath) -> bool:
        if not isinstance(other, ArtifactPath):
            return NotImplemented
        return self.segments >= other.segments

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)

    def __repr__(self) -> str:
        return f"ArtifactPath({str(self)!r})"


def _glob(segments: tuple[str, ...], patterns: tuple[str, ...]) -> bool:
    if not patterns:
        return not segments
    head, rest = patterns[0], patterns[1:]
    if head == RECURSIVE_WILDCARD:
        return any(_glob(segments[i:], rest) for i in range(len(segments) + 1))
    if not segments:
        return False
    return fnmatchcase(segments[0], head) and _glob(segments[1:], rest)
