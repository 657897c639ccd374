"""Canonical hashing helpers for content addressing artifacts and snapshots.

Content addresses use the ``sha256:<hex>`` form throughout.
"""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from snapforge.core.content import ContentType
    from snapforge.core.repository import SnapShot
    from snapforge.models.artifacts import Artifact


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes: sorted keys, compact separators, ASCII."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def content_address(content_type: ContentType[Any], value: Any) -> str:
    """Content-address a value by its encoding under *content_type*."""
    return f"sha256:{sha256_hex(content_type.write(value))}"


def artifact_address(artifact: Artifact) -> str:
    """Content address of an artifact's encoded value."""
    return content_address(artifact.content_type, artifact.value)


def snapshot_digest(snapshot: SnapShot) -> str:
    """SHA-256 over the ordered (key, artifact address) pairs of a snapshot.

    Two snapshots with the same artifacts in the same order share a digest.
    """
    payload = [[str(a.key), artifact_address(a)] for a in snapshot]
    return f"sha256:{sha256_hex(canonical_json_bytes(payload))}"
