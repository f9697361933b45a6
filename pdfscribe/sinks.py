"""
Image sinks.

An image sink durably stores one extracted image and returns a URL for
it, or None when storing failed. Transcription never retries and never
deduplicates: calling a sink twice with the same bytes may store two
objects.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class ImageSink(Protocol):
    """Async callable storing JPEG bytes for (book, page, index)."""

    async def __call__(
        self,
        data: bytes,
        book_id: str,
        page_number: int,
        image_index: int,
    ) -> str | None: ...


def image_object_path(owner: str, book_id: str, page_number: int, image_index: int) -> str:
    """Storage key: {owner}/{book}/page_{n}_img_{i}_{millis}.jpg"""
    timestamp = int(time.time() * 1000)
    return f"{owner}/{book_id}/page_{page_number}_img_{image_index}_{timestamp}.jpg"


class DirectoryImageSink:
    """Store images under a local directory and return file:// URLs.

    Usage:
        sink = DirectoryImageSink("/var/lib/reader/images", owner="user-1")
        pages = await transcribe_pdf("book.pdf", "book-1", upload_image=sink)
    """

    def __init__(self, root: str | Path, owner: str = "local"):
        self.root = Path(root)
        self.owner = owner

    async def __call__(
        self,
        data: bytes,
        book_id: str,
        page_number: int,
        image_index: int,
    ) -> str | None:
        path = self.root / image_object_path(self.owner, book_id, page_number, image_index)
        try:
            await asyncio.to_thread(_write, path, data)
        except OSError as e:
            logger.error("Error storing image %s: %s", path, e)
            return None
        return path.resolve().as_uri()


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
