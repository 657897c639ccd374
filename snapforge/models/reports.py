"""Reports returned by store synchronisation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SyncReport(BaseModel):
    """What one ``synchronise()`` call did to the medium.

    Names are medium-level names (relative file paths or archive entry
    names) as produced by the store's key mapping.
    """

    model_config = ConfigDict(frozen=True)

    deleted: tuple[str, ...] = ()
    written: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.deleted or self.written)
