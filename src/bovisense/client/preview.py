"""Preview encoding: turn accepted files into data URLs without blocking the event loop."""

from __future__ import annotations

import asyncio
import base64
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bovisense.client.files import ImageFile


@dataclass(frozen=True)
class Preview:
    """A file's data URL together with the file and its position in the batch."""

    file: ImageFile
    index: int
    data_url: str


def to_data_url(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


async def encode_preview(file: ImageFile, index: int) -> Preview:
    """Read a file in a worker thread and encode it as a data URL."""
    content = await asyncio.to_thread(file.read_bytes)
    return Preview(file=file, index=index, data_url=to_data_url(content, file.content_type))


async def encode_previews(files: Sequence[ImageFile]) -> list[Preview]:
    """Encode all files concurrently.

    Previews are appended in completion order, which need not match ``files``;
    use ``Preview.index`` to recover submission order.
    If any read fails, the remaining reads are cancelled before the error propagates.
    """
    previews: list[Preview] = []
    tasks = [asyncio.create_task(encode_preview(file, index)) for index, file in enumerate(files)]
    try:
        for finished in asyncio.as_completed(tasks):
            previews.append(await finished)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return previews
