"""Key mappings: translate structured keys to flat medium-level names.

A mapping must be a stable bijection on the names it recognises. Names it
does not recognise (unknown suffix, malformed path, outside the prefix)
decode to ``None`` instead of raising, so stores can share a directory
with unrelated files.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from snapforge.core.content import ContentRegistry, ContentType
from snapforge.core.errors import InvalidArgumentError
from snapforge.models.keys import Key
from snapforge.models.paths import SEPARATOR, ArtifactPath


@runtime_checkable
class KeyMapping(Protocol):
    """Bidirectional translation between Keys and medium names."""

    def encode(self, key: Key) -> str:
        ...

    def decode(self, name: str) -> Key | None:
        ...

    def decode_type(self, name: str) -> ContentType[Any] | None:
        ...


class SuffixKeyMapping:
    """Maps ``Key(ct, a/b/c)`` to ``"a/b/c.<suffix>"``.

    Parameters
    ----------
    registry:
        Resolves suffixes back to content types on decode.
    prefix:
        Optional path every name lives under; names outside it are ignored.
    """

    def __init__(self, registry: ContentRegistry, prefix: ArtifactPath | str | None = None) -> None:
        if registry is None:
            raise InvalidArgumentError("A content registry is required")
        self.registry = registry
        self.prefix = ArtifactPath.coerce(prefix) if prefix is not None else ArtifactPath()

    def encode(self, key: Key) -> str:
        if key is None:
            raise InvalidArgumentError("key required")
        if key.content_type not in self.registry:
            raise InvalidArgumentError(f"{key.content_type!r} is not registered with this mapping")
        segments = self.prefix.segments + key.path.segments
        return f"{SEPARATOR.join(segments)}.{key.content_type.suffix}"

    def decode(self, name: str) -> Key | None:
        split = self._split(name)
        if split is None:
            return None
        content_type, path = split
        return Key(content_type=content_type, path=path)

    def decode_type(self, name: str) -> ContentType[Any] | None:
        split = self._split(name)
        return split[0] if split is not None else None

    def _split(self, name: str) -> tuple[ContentType[Any], ArtifactPath] | None:
        stem, dot, suffix = name.rpartition(".")
        if not dot or not stem or SEPARATOR in suffix:
            return None
        content_type = self.registry.content_type(suffix)
        if content_type is None:
            return None
        try:
            full = ArtifactPath.parse(stem)
        except ValueError:
            return None
        if stem.endswith(SEPARATOR) or full.is_root:
            return None
        path = full.relative_to(self.prefix)
        if path is None or path.is_root:
            return None
        return content_type, path

    def __repr__(self) -> str:
        return f"SuffixKeyMapping(prefix={str(self.prefix)!r}, suffixes={self.registry.suffixes()})"
