"""Content types: codecs between in-memory values and raw bytes.

A content type is compared by identity. Two content types are the same
codec only if they are the same instance, so the standard ones below are
module-level singletons and stores resolve suffixes to them through a
``ContentRegistry``.
"""

from __future__ import annotations

import abc
import codecs
import json
from typing import Any, Generic, TypeVar

from snapforge.config import settings
from snapforge.core.errors import ContentDecodeError, InvalidArgumentError
from snapforge.core.hasher import canonical_json_bytes
from snapforge.models.files import BinaryFile, TextFile

T = TypeVar("T")


class ContentType(abc.ABC, Generic[T]):
    """Reads and writes values of one format, identified on disk by a suffix."""

    def __init__(self, suffix: str) -> None:
        if not suffix or "." in suffix or "/" in suffix:
            raise InvalidArgumentError(f"Invalid content type suffix: {suffix!r}")
        self._suffix = suffix

    @property
    def suffix(self) -> str:
        return self._suffix

    @abc.abstractmethod
    def read(self, data: bytes) -> T:
        """Convert raw bytes into a value of this content type."""
        ...

    @abc.abstractmethod
    def write(self, value: T) -> bytes:
        """Convert a value of this content type into raw bytes."""
        ...

    def accepts(self, value: Any) -> bool:
        """Whether *value* can be written by this content type."""
        return True

    def decode(self, data: bytes) -> T:
        """``read()`` with any failure surfaced as ContentDecodeError."""
        try:
            return self.read(data)
        except ContentDecodeError:
            raise
        except Exception as exc:
            raise ContentDecodeError(
                f"Cannot decode {len(data)} bytes as {self!r}: {exc}"
            ) from exc

    def __repr__(self) -> str:
        return f"<{type(self).__name__} suffix={self._suffix!r}>"


class TextContentType(ContentType[TextFile]):
    """Text files in a fixed encoding."""

    def __init__(self, encoding: str = "utf-8", suffix: str = "txt") -> None:
        super().__init__(suffix)
        self.encoding = encoding

    def read(self, data: bytes) -> TextFile:
        return TextFile(content=data.decode(self.encoding))

    def write(self, value: TextFile) -> bytes:
        return value.get_bytes(self.encoding)

    def accepts(self, value: Any) -> bool:
        return isinstance(value, TextFile)

    def __repr__(self) -> str:
        return f"<TextContentType suffix={self.suffix!r} encoding={self.encoding!r}>"


class BinaryContentType(ContentType[BinaryFile]):
    """Opaque binary blobs; the suffix is the only thing that distinguishes them."""

    def read(self, data: bytes) -> BinaryFile:
        return BinaryFile(data=data)

    def write(self, value: BinaryFile) -> bytes:
        return value.data

    def accepts(self, value: Any) -> bool:
        return isinstance(value, BinaryFile)


class JsonContentType(ContentType[Any]):
    """JSON documents, written in canonical form so equal values hash equally."""

    def __init__(self, suffix: str = "json") -> None:
        super().__init__(suffix)

    def read(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))

    def write(self, value: Any) -> bytes:
        return canonical_json_bytes(value)

    def accepts(self, value: Any) -> bool:
        try:
            canonical_json_bytes(value)
        except (TypeError, ValueError):
            return False
        return True


def text_content_type(encoding: str = "utf-8", suffix: str = "txt") -> TextContentType:
    return TextContentType(encoding, suffix)


def binary_content_type(suffix: str) -> BinaryContentType:
    return BinaryContentType(suffix)


def json_content_type(suffix: str = "json") -> JsonContentType:
    return JsonContentType(suffix)


TEXT_UTF8 = text_content_type("utf-8")
TEXT_ASCII = text_content_type("ascii")
JSON = json_content_type()
BINARY = binary_content_type("bin")

_SHARED_TEXT = {"utf-8": TEXT_UTF8, "ascii": TEXT_ASCII}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ContentRegistry:
    """Resolves a file suffix to the ContentType instance that owns it."""

    def __init__(self, content_types: list[ContentType[Any]] | None = None) -> None:
        self._by_suffix: dict[str, ContentType[Any]] = {}
        for ct in content_types or []:
            self.register(ct)

    def register(self, content_type: ContentType[Any]) -> None:
        existing = self._by_suffix.get(content_type.suffix)
        if existing is not None and existing is not content_type:
            raise InvalidArgumentError(
                f"Suffix {content_type.suffix!r} is already registered to {existing!r}"
            )
        self._by_suffix[content_type.suffix] = content_type

    def content_type(self, suffix: str) -> ContentType[Any] | None:
        """Return the content type for *suffix*, or None if unrecognised."""
        return self._by_suffix.get(suffix)

    def suffixes(self) -> list[str]:
        return sorted(self._by_suffix)

    def __contains__(self, content_type: object) -> bool:
        return any(ct is content_type for ct in self._by_suffix.values())

    def __len__(self) -> int:
        return len(self._by_suffix)


def default_registry(text_encoding: str | None = None) -> ContentRegistry:
    """Registry with text, JSON and generic binary content types.

    Text uses *text_encoding*, falling back to ``settings.text_encoding``.
    UTF-8 and ASCII resolve to the shared ``TEXT_UTF8`` and ``TEXT_ASCII``
    instances; any other encoding gets a fresh text content type.
    """
    encoding = text_encoding or settings.text_encoding
    try:
        canonical = codecs.lookup(encoding).name
    except LookupError as exc:
        raise InvalidArgumentError(f"Unknown text encoding: {encoding!r}") from exc
    text = _SHARED_TEXT.get(canonical) or text_content_type(canonical)
    return ContentRegistry([text, JSON, BINARY])
