"""Keys: the unique addressing unit of a store or snapshot."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from snapforge.core.content import ContentType
from snapforge.core.errors import InvalidArgumentError
from snapforge.models.paths import ArtifactPath


class Key(BaseModel):
    """A content type paired with a structured path.

    Two keys are equal iff they share the same content type *instance* and
    structurally equal paths.

    A missing content type, or a missing or root path, raises
    InvalidArgumentError.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    content_type: ContentType
    path: ArtifactPath

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid key: {exc}") from exc

    @field_validator("path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Any:
        if isinstance(value, (str, tuple, list)):
            return ArtifactPath.coerce(value)
        return value

    @field_validator("path")
    @classmethod
    def _not_root(cls, value: ArtifactPath) -> ArtifactPath:
        if value.is_root:
            raise ValueError("A key cannot address the root path")
        return value

    @classmethod
    def of(cls, content_type: ContentType, path: ArtifactPath | str) -> Key:
        return cls(content_type=content_type, path=path)

    @property
    def suffix(self) -> str:
        return self.content_type.suffix

    def __str__(self) -> str:
        return f"{self.path}:{self.content_type.suffix}"

    def __repr__(self) -> str:
        return f"Key({str(self)!r})"
