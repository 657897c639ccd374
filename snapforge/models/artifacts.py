"""Build artifact model (immutable once produced by a task)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from snapforge.core.content import ContentType
from snapforge.core.errors import InvalidArgumentError
from snapforge.models.keys import Key
from snapforge.models.paths import ArtifactPath


class Artifact(BaseModel):
    """A typed, path-addressed value within a snapshot.

    ``sources`` lists the artifacts that produced this one. It is empty for
    source files and non-empty for generated artifacts; it is recorded for
    traceability only.

    A value the key's content type does not accept raises
    InvalidArgumentError.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: Key
    value: Any
    sources: tuple[Artifact, ...] = ()

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid artifact: {exc}") from exc

    @model_validator(mode="after")
    def _value_matches_type(self) -> Artifact:
        if not self.key.content_type.accepts(self.value):
            raise ValueError(
                f"Value of type {type(self.value).__name__} is not valid "
                f"content for {self.key.content_type!r}"
            )
        return self

    @classmethod
    def of(
        cls,
        content_type: ContentType,
        path: ArtifactPath | str,
        value: Any,
        sources: tuple[Artifact, ...] | list[Artifact] = (),
    ) -> Artifact:
        return cls(key=Key.of(content_type, path), value=value, sources=tuple(sources))

    @property
    def content_type(self) -> ContentType:
        return self.key.content_type

    @property
    def path(self) -> ArtifactPath:
        return self.key.path

    @property
    def is_source(self) -> bool:
        """True for artifacts that were not generated from anything else."""
        return not self.sources

    def __repr__(self) -> str:
        return f"Artifact({str(self.key)!r}, sources={len(self.sources)})"
