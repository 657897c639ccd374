"""Plain file content models: text and opaque binary blobs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Line(BaseModel):
    """A single line of a TextFile, located by character offset."""

    model_config = ConfigDict(frozen=True)

    offset: int
    length: int
    number: int  # 1-based
    text: str


class TextFile(BaseModel):
    """Decoded text content (source files, generated listings, ...)."""

    model_config = ConfigDict(frozen=True)

    content: str

    def get_bytes(self, encoding: str = "utf-8") -> bytes:
        return self.content.encode(encoding)

    def enclosing_line(self, offset: int) -> Line | None:
        """Return the line containing character *offset*, or None if out of range.

        Used by diagnostics to quote the source line an error points at.
        """
        if offset < 0 or offset >= len(self.content):
            return None
        start = self.content.rfind("\n", 0, offset) + 1
        end = self.content.find("\n", offset)
        if end == -1:
            end = len(self.content)
        number = self.content.count("\n", 0, start) + 1
        return Line(
            offset=start,
            length=end - start,
            number=number,
            text=self.content[start:end],
        )

    def lines(self) -> list[str]:
        return self.content.splitlines()


class BinaryFile(BaseModel):
    """Opaque bytes, e.g. a compiled binary or a class file."""

    model_config = ConfigDict(frozen=True)

    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)
