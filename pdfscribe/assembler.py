"""
Page assembly.

Merges a page's text and image blocks into the final PageContent.
Text blocks are ordered from 0, image blocks from IMAGE_ORDER_OFFSET,
so sorting by order always puts images after the page's text.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pdfscribe.extractors.images import IMAGE_ORDER_OFFSET
from pdfscribe.models import PageContent, utc_timestamp

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pdfscribe.extractors.text import TextExtraction
    from pdfscribe.models import ContentBlock

logger = logging.getLogger(__name__)


def assemble_page(
    page_number: int,
    text: TextExtraction,
    image_blocks: Sequence[ContentBlock] = (),
) -> PageContent:
    """Combine extracted blocks into one page.

    Args:
        page_number: 1-based page number.
        text: Output of the text reconstructor.
        image_blocks: Image blocks of the page (may be empty).

    Returns:
        PageContent with blocks sorted by order. Plain text comes from
        the text blocks only.
    """
    if len(text.blocks) >= IMAGE_ORDER_OFFSET:
        logger.warning(
            "Page %d has %d text blocks; orders from %d collide with image orders",
            page_number, len(text.blocks), IMAGE_ORDER_OFFSET,
        )

    blocks = sorted([*text.blocks, *image_blocks], key=lambda b: b.order)

    return PageContent(
        page_number=page_number,
        blocks=tuple(blocks),
        text_content=text.plain_text,
        has_images=len(image_blocks) > 0,
        extracted_at=utc_timestamp(),
    )


def placeholder_page(page_number: int) -> PageContent:
    """Empty stand-in for a page whose extraction failed."""
    return PageContent(
        page_number=page_number,
        blocks=(),
        text_content="",
        has_images=False,
        extracted_at=utc_timestamp(),
    )
