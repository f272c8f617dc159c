"""Candidate image files selected by the user."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ImageFile:
    """A user-selected file: its name, declared MIME type, size and content source.

    Content comes either from ``path`` (read lazily) or from ``content``.
    """

    name: str
    content_type: str
    size: int
    path: Path | None = None
    content: bytes | None = None

    @classmethod
    def from_path(cls, path: Path) -> ImageFile:
        """Describe a file on disk, guessing its MIME type from the extension."""
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content_type=content_type or "",
            size=path.stat().st_size,
            path=path,
        )

    @classmethod
    def from_bytes(cls, name: str, content: bytes, content_type: str) -> ImageFile:
        return cls(name=name, content_type=content_type, size=len(content), content=content)

    def read_bytes(self) -> bytes:
        if self.content is not None:
            return self.content
        if self.path is None:
            msg = f"{self.name} has no content"
            raise ValueError(msg)
        return self.path.read_bytes()
