"""Client-side file validation: images only, at most 20 MiB each."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from bovisense.client.notifications import Notification

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bovisense.client.files import ImageFile
    from bovisense.client.notifications import Notifier

MAX_IMAGE_BYTES: int = 20 * 1024 * 1024


@dataclass(frozen=True)
class Rejection:
    """Why a file was dropped from the batch."""

    file: ImageFile
    title: str
    reason: str

    def to_notification(self) -> Notification:
        return Notification(title=self.title, description=self.reason, destructive=True)


def check_file(file: ImageFile) -> Rejection | None:
    """Return a rejection for an unacceptable file, or None if it may be classified."""
    if not file.content_type.startswith("image/"):
        return Rejection(file, "Invalid file", f"{file.name} is not an image file")
    if file.size > MAX_IMAGE_BYTES:
        return Rejection(file, "File too large", f"{file.name} exceeds 20MB limit")
    return None


def filter_valid_files(files: Iterable[ImageFile], notifier: Notifier | None = None) -> list[ImageFile]:
    """Keep acceptable files in their original order, reporting each rejection."""
    accepted: list[ImageFile] = []
    for file in files:
        rejection = check_file(file)
        if rejection is None:
            accepted.append(file)
        elif notifier is not None:
            notifier.notify(rejection.to_notification())
    return accepted
