"""
Page content extraction.

- TextBlockReconstructor: positioned text runs -> paragraph/heading blocks
- ImageBlockExtractor: painted image XObjects -> stored image blocks
"""

from pdfscribe.extractors.images import (
    IMAGE_ORDER_OFFSET,
    ImageBlockExtractor,
    encode_jpeg,
    image_block,
    to_rgba,
)
from pdfscribe.extractors.text import (
    HEADING_FONT_SIZE_THRESHOLD,
    PARAGRAPH_GAP_MULTIPLIER,
    TextBlockReconstructor,
    TextExtraction,
    reconstruct_text_blocks,
)

__all__ = [
    # Text
    "TextBlockReconstructor",
    "TextExtraction",
    "reconstruct_text_blocks",
    "HEADING_FONT_SIZE_THRESHOLD",
    "PARAGRAPH_GAP_MULTIPLIER",
    # Images
    "ImageBlockExtractor",
    "IMAGE_ORDER_OFFSET",
    "to_rgba",
    "encode_jpeg",
    "image_block",
]
