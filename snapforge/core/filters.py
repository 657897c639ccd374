"""Structural predicates over (content type, path) used by every query."""

from __future__ import annotations

from typing import Any

from snapforge.core.content import ContentType
from snapforge.models.paths import RECURSIVE_WILDCARD, ArtifactPath


class Filter:
    """Selects keys whose content type and path satisfy a pattern.

    ``Filter()`` matches everything; ``Filter(TEXT_UTF8, "src/**")`` matches
    UTF-8 text artifacts anywhere under ``src``. Filters compose with ``|``
    and ``&``.
    """

    def __init__(
        self,
        content_type: ContentType[Any] | None = None,
        pattern: str = RECURSIVE_WILDCARD,
    ) -> None:
        self.content_type = content_type
        self.pattern = pattern

    @classmethod
    def of(cls, content_type: ContentType[Any] | None, pattern: str = RECURSIVE_WILDCARD) -> Filter:
        return cls(content_type, pattern)

    def includes(self, content_type: ContentType[Any], path: ArtifactPath) -> bool:
        if self.content_type is not None and content_type is not self.content_type:
            return False
        return path.matches(self.pattern)

    def __or__(self, other: Filter) -> Filter:
        return _AnyOf(self, other)

    def __and__(self, other: Filter) -> Filter:
        return _AllOf(self, other)

    def __repr__(self) -> str:
        suffix = self.content_type.suffix if self.content_type is not None else "*"
        return f"Filter({self.pattern!r}:{suffix})"


class _AnyOf(Filter):
    def __init__(self, *filters: Filter) -> None:
        super().__init__()
        self.filters = filters

    def includes(self, content_type: ContentType[Any], path: ArtifactPath) -> bool:
        return any(f.includes(content_type, path) for f in self.filters)

    def __repr__(self) -> str:
        return " | ".join(repr(f) for f in self.filters)


class _AllOf(Filter):
    def __init__(self, *filters: Filter) -> None:
        super().__init__()
        self.filters = filters

    def includes(self, content_type: ContentType[Any], path: ArtifactPath) -> bool:
        return all(f.includes(content_type, path) for f in self.filters)

    def __repr__(self) -> str:
        return " & ".join(repr(f) for f in self.filters)


ALL = Filter()
