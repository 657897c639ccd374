"""Exception hierarchy shared by stores, codecs and the repository.

Absence (no matching artifact, file not yet present) is never an error;
lookups return ``None`` or an empty list instead.
"""

from __future__ import annotations


class SnapforgeError(RuntimeError):
    """Base exception for all snapforge failures."""


class ContentDecodeError(SnapforgeError):
    """Raised when raw bytes cannot be interpreted by a content type."""


class StoreMediumError(SnapforgeError):
    """Raised when reading or writing the backing directory or archive fails.

    A failure while synchronising one entry does not roll back entries
    already flushed in the same ``synchronise()`` call.
    """


class InvalidArgumentError(SnapforgeError, ValueError):
    """Raised before any state mutation when a required argument is missing
    or a key and value disagree on their content type."""
