"""
Image block extraction.

Walks a page's drawing operators, decodes every painted image XObject,
re-encodes it as a standalone JPEG and hands it to the image sink. Each
image the sink accepts becomes an image block that reads after all of
the page's text (order = IMAGE_ORDER_OFFSET + index).

Failures are contained per image: a broken or unsupported image is
skipped and extraction moves on to the next one.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Protocol

from PIL import Image

from pdfscribe.models import BlockType, ContentBlock, ContentBounds

if TYPE_CHECKING:
    from pdfscribe.readers.operators import Operator, OperatorList
    from pdfscribe.readers.pdf_reader import ImageObject
    from pdfscribe.sinks import ImageSink

logger = logging.getLogger(__name__)

# Image blocks are ordered from here up; text blocks stay below
IMAGE_ORDER_OFFSET = 1000

DEFAULT_JPEG_QUALITY = 85


class ImageSource(Protocol):
    """What the extractor needs from a page."""

    number: int

    def get_operator_list(self) -> OperatorList: ...

    def resolve_image(self, name: str, resources: int = 0) -> ImageObject | None: ...


def to_rgba(data: bytes, width: int, height: int) -> bytes | None:
    """Normalise a decoded pixel buffer to RGBA.

    RGBA buffers (4 bytes/pixel) pass through unchanged. RGB buffers
    (3 bytes/pixel) gain an opaque alpha byte per pixel. Any other length
    is an unsupported format and yields None.
    """
    if width <= 0 or height <= 0:
        return None

    pixels = width * height
    if len(data) == pixels * 4:
        return bytes(data)
    if len(data) == pixels * 3:
        return Image.frombytes("RGB", (width, height), bytes(data)).convert("RGBA").tobytes()
    return None


def encode_jpeg(rgba: bytes, width: int, height: int, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode an RGBA buffer as JPEG (alpha dropped)."""
    img = Image.frombytes("RGBA", (width, height), rgba).convert("RGB")
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def image_block(src: str, page_number: int, width: int, height: int, index: int) -> ContentBlock:
    """Image block for the index-th stored image of a page."""
    return ContentBlock(
        type=BlockType.IMAGE,
        src=src,
        alt=f"Image from page {page_number}",
        bounds=ContentBounds(x=0, y=0, width=width, height=height),
        order=IMAGE_ORDER_OFFSET + index,
    )


class ImageBlockExtractor:
    """Extract embedded raster images of a page into image blocks.

    Usage:
        extractor = ImageBlockExtractor(sink)
        blocks = await extractor.extract(page, book_id)
    """

    def __init__(self, upload_image: ImageSink, jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        """Initialize the extractor.

        Args:
            upload_image: Async sink storing encoded bytes and returning a
                URL, or None when it couldn't store them.
            jpeg_quality: JPEG quality (1-100) for re-encoded images.
        """
        self.upload_image = upload_image
        self.jpeg_quality = jpeg_quality

    async def extract(self, page: ImageSource, book_id: str) -> list[ContentBlock]:
        """Extract, store and wrap every paintable image of a page."""
        blocks: list[ContentBlock] = []

        try:
            operators = page.get_operator_list()
        except Exception as e:
            logger.warning("Error reading operators of page %d: %s", page.number, e)
            return blocks

        index = 0
        for op in operators.image_paints():
            name = op.object_name
            if name is None:
                continue

            try:
                block = await self._extract_one(page, op, book_id, index)
            except Exception as e:
                logger.warning(
                    "Could not extract image %d (%s) from page %d: %s",
                    index, name, page.number, e,
                )
                continue

            if block is not None:
                blocks.append(block)
                index += 1

        return blocks

    async def _extract_one(
        self,
        page: ImageSource,
        op: Operator,
        book_id: str,
        index: int,
    ) -> ContentBlock | None:
        name = op.object_name
        image = page.resolve_image(name, op.resources)
        if image is None or not image.data:
            return None

        rgba = to_rgba(image.data, image.width, image.height)
        if rgba is None:
            logger.debug(
                "Skipping %s on page %d: %d bytes for %dx%d is neither RGB nor RGBA",
                name, page.number, len(image.data), image.width, image.height,
            )
            return None

        encoded = encode_jpeg(rgba, image.width, image.height, self.jpeg_quality)
        url = await self.upload_image(encoded, book_id, page.number, index)
        if not url:
            return None

        return image_block(url, page.number, image.width, image.height, index)
