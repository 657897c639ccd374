"""Build tasks and the transactions that sequence them.

A task is a function from one snapshot to the next, paired with a success
flag. It also carries the key of the artifact it intends to produce and
its declared source artifacts; these are recorded for traceability and
are never used for scheduling.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING

from snapforge.core.errors import InvalidArgumentError
from snapforge.models.artifacts import Artifact
from snapforge.models.keys import Key

if TYPE_CHECKING:
    from snapforge.core.content import ContentType
    from snapforge.core.repository import SnapShot
    from snapforge.models.paths import ArtifactPath

TaskResult = tuple["SnapShot", bool]


class Task(abc.ABC):
    """A unit of build work.

    Subclasses implement only ``apply()``. Returning ``(snapshot, False)``
    reports an expected failure (e.g. a compile error); raising is reserved
    for faults.

    Parameters
    ----------
    key:
        The artifact this task produces.
    sources:
        Artifacts the task declares as inputs.
    """

    def __init__(self, key: Key, sources: Iterable[Artifact] = ()) -> None:
        if key is None:
            raise InvalidArgumentError("A task needs the key of the artifact it produces")
        self.key = key
        self.sources: tuple[Artifact, ...] = tuple(sources)

    @property
    def content_type(self) -> ContentType:
        return self.key.content_type

    @property
    def path(self) -> ArtifactPath:
        return self.key.path

    @abc.abstractmethod
    def apply(self, snapshot: SnapShot) -> TaskResult:
        """Produce the next snapshot from *snapshot*, plus a success flag."""
        ...

    def __call__(self, snapshot: SnapShot) -> TaskResult:
        return self.apply(snapshot)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key}>"


class FunctionTask(Task):
    """Adapts a plain ``snapshot -> (snapshot, ok)`` callable into a Task."""

    def __init__(
        self,
        key: Key,
        function: Callable[[SnapShot], TaskResult],
        sources: Iterable[Artifact] = (),
    ) -> None:
        super().__init__(key, sources)
        self._function = function

    def apply(self, snapshot: SnapShot) -> TaskResult:
        return self._function(snapshot)


class Transaction:
    """A finite, ordered sequence of tasks. Order is significant."""

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: tuple[Task, ...] = tuple(tasks)
        for task in self._tasks:
            if not isinstance(task, Task):
                raise InvalidArgumentError(f"Expected a Task, got {type(task).__name__}")

    @classmethod
    def of(cls, *tasks: Task) -> Transaction:
        return cls(tasks)

    def size(self) -> int:
        return len(self._tasks)

    def get(self, index: int) -> Task:
        return self._tasks[index]

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __repr__(self) -> str:
        return f"Transaction({list(self._tasks)!r})"
