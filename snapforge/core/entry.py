"""Lazily loaded, dirty-tracked store entries.

Lifecycle::

    UNLOADED --get()--> CLEAN --set(new value)--> DIRTY --flush()--> CLEAN

An entry enumerated from the medium starts UNLOADED and is decoded at most
once, on first ``get()``. A freshly ``put`` entry starts DIRTY.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from snapforge.models.keys import Key

if TYPE_CHECKING:
    from snapforge.core.medium import Medium


class EntryState(str, Enum):
    """Where an entry's value lives relative to the medium."""

    UNLOADED = "unloaded"  # only on the medium
    CLEAN = "clean"  # cached, identical to the medium
    DIRTY = "dirty"  # cached, diverged from the medium


class Entry:
    """One key in a medium-backed store.

    Parameters
    ----------
    key:
        The key this entry answers to.
    name:
        The medium-level name the key maps to.
    medium:
        Where the bytes are read from and flushed to.
    """

    def __init__(self, key: Key, name: str, medium: Medium) -> None:
        self.key = key
        self.name = name
        self._medium = medium
        self._state = EntryState.UNLOADED
        self._value: Any = None

    @property
    def state(self) -> EntryState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is not EntryState.UNLOADED

    @property
    def is_dirty(self) -> bool:
        return self._state is EntryState.DIRTY

    def get(self) -> Any:
        """Return the value, decoding it from the medium on first access.

        A decode or medium failure propagates and leaves the entry UNLOADED.
        """
        if self._state is EntryState.UNLOADED:
            data = self._medium.read(self.name)
            self._value = self.key.content_type.decode(data)
            self._state = EntryState.CLEAN
        return self._value

    def set(self, value: Any) -> None:
        """Replace the cached value; only a different object marks the entry dirty."""
        if self._state is EntryState.UNLOADED or value is not self._value:
            self._value = value
            self._state = EntryState.DIRTY

    def flush(self) -> bool:
        """Write the value to the medium iff dirty. Returns whether it wrote."""
        if self._state is not EntryState.DIRTY:
            return False
        self._medium.write(self.name, self.key.content_type.write(self._value))
        self._state = EntryState.CLEAN
        return True

    def __repr__(self) -> str:
        return f"<Entry {self.key} {self._state.value}>"
