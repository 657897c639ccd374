"""A small persistent (immutable, structurally shared) vector.

Elements live in fixed-size chunks held by a spine tuple. Replacing or
appending an element copies the spine and the one chunk it touches; every
other chunk is shared with the original vector. This keeps long snapshot
histories cheap: consecutive snapshots share almost all of their storage.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar, overload

T = TypeVar("T")

CHUNK_SIZE = 32


class PersistentVector(Generic[T]):
    __slots__ = ("_chunks", "_size")

    def __init__(self, items: Iterable[T] = ()) -> None:
        flat = tuple(items)
        self._chunks: tuple[tuple[T, ...], ...] = tuple(
            flat[i:i + CHUNK_SIZE] for i in range(0, len(flat), CHUNK_SIZE)
        )
        self._size = len(flat)

    @classmethod
    def _from_chunks(cls, chunks: tuple[tuple[T, ...], ...], size: int) -> PersistentVector[T]:
        vector = cls.__new__(cls)
        vector._chunks = chunks
        vector._size = size
        return vector

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[T]:
        for chunk in self._chunks:
            yield from chunk

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        if isinstance(index, slice):
            return list(self)[index]
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError(f"index {index} out of range for vector of size {self._size}")
        return self._chunks[index // CHUNK_SIZE][index % CHUNK_SIZE]

    def set(self, index: int, value: T) -> PersistentVector[T]:
        """Return a copy with element *index* replaced."""
        if not 0 <= index < self._size:
            raise IndexError(f"index {index} out of range for vector of size {self._size}")
        c, offset = divmod(index, CHUNK_SIZE)
        chunk = self._chunks[c]
        chunk = chunk[:offset] + (value,) + chunk[offset + 1:]
        return self._from_chunks(self._chunks[:c] + (chunk,) + self._chunks[c + 1:], self._size)

    def append(self, value: T) -> PersistentVector[T]:
        """Return a copy with *value* added at the end."""
        if self._chunks and len(self._chunks[-1]) < CHUNK_SIZE:
            chunks = self._chunks[:-1] + (self._chunks[-1] + (value,),)
        else:
            chunks = self._chunks + ((value,),)
        return self._from_chunks(chunks, self._size + 1)

    def delete(self, index: int) -> PersistentVector[T]:
        """Return a copy without element *index* (re-chunks everything after it)."""
        if not 0 <= index < self._size:
            raise IndexError(f"index {index} out of range for vector of size {self._size}")
        items = list(self)
        del items[index]
        return PersistentVector(items)

    def shares_chunks_with(self, other: PersistentVector[T]) -> int:
        """Number of chunk objects this vector shares with *other*."""
        theirs = {id(c) for c in other._chunks}
        return sum(1 for c in self._chunks if id(c) in theirs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersistentVector):
            return NotImplemented
        return self._size == other._size and all(a == b for a, b in zip(self, other))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PersistentVector({list(self)!r})"
