"""Runtime configuration: env-driven via pydantic-settings.

Reads from a .env file and SNAPFORGE_* environment variables.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ZIP_COMPRESSION = {
    "stored": zipfile.ZIP_STORED,
    "deflated": zipfile.ZIP_DEFLATED,
    "bzip2": zipfile.ZIP_BZIP2,
    "lzma": zipfile.ZIP_LZMA,
}


class SnapforgeSettings(BaseSettings):
    """Store and CLI settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export SNAPFORGE_LOG_LEVEL=DEBUG
        export SNAPFORGE_STORE_ROOT=/data/build
        export SNAPFORGE_ARCHIVE_COMPRESSION=stored
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SNAPFORGE_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Stores
    store_root: Path = Path(".snapforge/store")
    max_depth: int = 64  # directory enumeration bound
    text_encoding: str = "utf-8"
    archive_compression: Literal["stored", "deflated", "bzip2", "lzma"] = "deflated"

    @property
    def zip_compression(self) -> int:
        """The ``zipfile`` constant for ``archive_compression``."""
        return _ZIP_COMPRESSION[self.archive_compression]


# Module-level singleton: `from snapforge.config import settings`
settings = SnapforgeSettings()
