"""Versioned build repository: an append-only history of immutable snapshots.

Design:
- ``SnapShot.put()`` never mutates; it returns a copy-on-write successor
  that shares storage with its predecessor.
- ``Repository.apply()`` runs a transaction's tasks strictly in order and
  appends exactly one snapshot per call, successful or not.
- There is no rollback. On a failing task its snapshot is recorded; on a
  fault the last good snapshot is recorded and the fault re-raised, so the
  history always shows where the build stood.

Not thread-safe: calls to ``apply()`` on one repository must be serialised
by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from functools import cached_property
from typing import Any

from snapforge.core.content import ContentType
from snapforge.core.errors import InvalidArgumentError
from snapforge.core.filters import ALL, Filter
from snapforge.core.hasher import snapshot_digest
from snapforge.core.persistent import PersistentVector
from snapforge.core.store import Store
from snapforge.core.transaction import Task, Transaction
from snapforge.models.artifacts import Artifact
from snapforge.models.keys import Key
from snapforge.models.paths import ArtifactPath
from snapforge.models.reports import SyncReport

logger = logging.getLogger(__name__)

ArtifactPredicate = Callable[[Artifact], bool]


class SnapShot:
    """An immutable, insertion-ordered collection of artifacts, one per key."""

    def __init__(self, artifacts: Iterable[Artifact] = ()) -> None:
        vector: PersistentVector[Artifact] = PersistentVector()
        positions: dict[Key, int] = {}
        for artifact in artifacts:
            _check_artifact(artifact)
            index = positions.get(artifact.key)
            if index is None:
                positions[artifact.key] = len(vector)
                vector = vector.append(artifact)
            else:
                vector = vector.set(index, artifact)
        self._items = vector

    @classmethod
    def _wrap(cls, items: PersistentVector[Artifact]) -> SnapShot:
        snapshot = cls.__new__(cls)
        snapshot._items = items
        return snapshot

    @cached_property
    def _positions(self) -> dict[Key, int]:
        return {artifact.key: i for i, artifact in enumerate(self._items)}

    def _index_of(self, content_type: ContentType, path: ArtifactPath | str) -> int | None:
        path = ArtifactPath.coerce(path)
        if path.is_root:
            return None
        return self._positions.get(Key.of(content_type, path))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, content_type: ContentType, path: ArtifactPath | str) -> Artifact | None:
        """The artifact at exactly (content_type, path), or None."""
        index = self._index_of(content_type, path)
        return self._items[index] if index is not None else None

    def get_all(self, filter: Filter = ALL) -> list[Artifact]:
        return [a for a in self._items if filter.includes(a.content_type, a.path)]

    def match(self, filter: Filter = ALL, predicate: ArtifactPredicate | None = None) -> list[ArtifactPath]:
        """Paths of artifacts satisfying *filter* and, if given, *predicate*."""
        return [
            a.path
            for a in self._items
            if filter.includes(a.content_type, a.path)
            and (predicate is None or predicate(a))
        ]

    def keys(self) -> list[Key]:
        return [a.key for a in self._items]

    def digest(self) -> str:
        """Content address of the whole snapshot."""
        return snapshot_digest(self)

    # ------------------------------------------------------------------
    # Copy-on-write updates
    # ------------------------------------------------------------------

    def put(self, artifact: Artifact) -> SnapShot:
        """Return a snapshot with *artifact* replacing its key in place, or appended."""
        _check_artifact(artifact)
        index = self._positions.get(artifact.key)
        if index is None:
            return SnapShot._wrap(self._items.append(artifact))
        return SnapShot._wrap(self._items.set(index, artifact))

    def remove(self, content_type: ContentType, path: ArtifactPath | str) -> SnapShot:
        """Return a snapshot without (content_type, path); self if it was absent."""
        index = self._index_of(content_type, path)
        if index is None:
            return self
        return SnapShot._wrap(self._items.delete(index))

    # ------------------------------------------------------------------
    # Protocols
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Artifact]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._positions

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnapShot):
            return NotImplemented
        return self._items == other._items

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "{" + ",".join(str(a.key) for a in self._items) + "}"


def _check_artifact(artifact: Any) -> None:
    if not isinstance(artifact, Artifact):
        raise InvalidArgumentError(f"Expected an Artifact, got {type(artifact).__name__}")


class Repository:
    """Append-only, index-addressable sequence of snapshots.

    ``states[i]`` never changes once appended and ``size()`` only grows.
    Read-through queries (``get_artifact``, ``get_all``, ``match``) look at
    ``last()``.

    Parameters
    ----------
    artifacts:
        Contents of the initial snapshot (``states[0]``).
    """

    def __init__(self, artifacts: Iterable[Artifact] = ()) -> None:
        self._states: list[SnapShot] = [SnapShot(artifacts)]

    @classmethod
    def from_store(cls, store: Store, filter: Filter = ALL) -> Repository:
        """Seed a repository with every matching entry of *store* (decoding each)."""
        return cls(
            Artifact(key=key, value=value) for key, value in store.items(filter)
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def size(self) -> int:
        return len(self._states)

    def get(self, index: int) -> SnapShot:
        """The snapshot at *index*, which must be within ``[0, size())``."""
        if not 0 <= index < len(self._states):
            raise IndexError(
                f"Snapshot {index} out of range; repository has {len(self._states)}"
            )
        return self._states[index]

    def last(self) -> SnapShot:
        return self._states[-1]

    @property
    def states(self) -> tuple[SnapShot, ...]:
        return tuple(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[SnapShot]:
        return iter(tuple(self._states))

    # ------------------------------------------------------------------
    # Read-through queries on last()
    # ------------------------------------------------------------------

    def get_artifact(self, content_type: ContentType, path: ArtifactPath | str) -> Artifact | None:
        return self.last().get(content_type, path)

    def get_all(self, filter: Filter = ALL) -> list[Artifact]:
        return self.last().get_all(filter)

    def match(self, filter: Filter = ALL, predicate: ArtifactPredicate | None = None) -> list[ArtifactPath]:
        return self.last().match(filter, predicate)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def apply(self, transaction: Transaction) -> bool:
        """Run *transaction* against ``last()`` and record the outcome.

        - Every task succeeds: the final snapshot is appended; returns True.
        - A task reports failure: its snapshot is appended, the remaining
          tasks are skipped; returns False.
        - A task raises: the snapshot from before that task is appended and
          the exception propagates.

        An empty transaction appends a copy of ``last()`` and returns True.
        """
        snapshot = self.last()
        position = 0
        try:
            for position, task in enumerate(transaction):
                result, ok = _run_task(task, snapshot)
                if not ok:
                    self._states.append(result)
                    logger.warning(
                        "Task %d/%d %r failed; recorded snapshot %d",
                        position + 1, len(transaction), task, len(self._states) - 1,
                    )
                    return False
                snapshot = result
        except Exception as exc:
            self._states.append(snapshot)
            logger.exception(
                "Task %d/%d raised %s; recorded snapshot %d",
                position + 1, len(transaction), type(exc).__name__,
                len(self._states) - 1,
            )
            raise
        self._states.append(snapshot)
        logger.info(
            "Applied %d task(s); recorded snapshot %d with %d artifact(s)",
            len(transaction), len(self._states) - 1, len(snapshot),
        )
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def write_to(self, store: Store, index: int = -1, *, prune: bool = False) -> SyncReport:
        """Persist a snapshot (``last()`` by default) into *store* and synchronise.

        With *prune*, store keys the snapshot does not contain are removed
        first, so the medium ends up mirroring the snapshot exactly.

        Every artifact is checked against the store before anything is
        removed or put, so a rejected artifact leaves the store untouched.
        """
        snapshot = self.last() if index == -1 else self.get(index)
        for artifact in snapshot:
            store.validate(artifact.key, artifact.value)
        if prune:
            for key in store.keys():
                if key not in snapshot:
                    store.remove(key)
        for artifact in snapshot:
            store.put(artifact.key, artifact.value)
        return store.synchronise()

    def __repr__(self) -> str:
        return "".join(repr(s) for s in self._states)


def _run_task(task: Task, snapshot: SnapShot) -> tuple[SnapShot, bool]:
    outcome = task.apply(snapshot)
    if (
        not isinstance(outcome, tuple)
        or len(outcome) != 2
        or not isinstance(outcome[0], SnapShot)
    ):
        raise InvalidArgumentError(
            f"{task!r} must return (SnapShot, bool), got {type(outcome).__name__}"
        )
    result, ok = outcome
    return result, bool(ok)
