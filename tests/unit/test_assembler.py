"""
Unit tests for page assembly.
"""

import logging
from datetime import datetime

from pdfscribe.assembler import assemble_page, placeholder_page
from pdfscribe.extractors.images import image_block
from pdfscribe.extractors.text import TextExtraction
from pdfscribe.models import BlockType, ContentBlock, ContentBounds


def _paragraph(content, order):
    return ContentBlock(
        type=BlockType.PARAGRAPH,
        content=content,
        bounds=ContentBounds(0, 0, 10, 10),
        order=order,
    )


class TestAssemblePage:
    """Test merging text and image blocks."""

    def test_images_sorted_after_text(self):
        """Blocks come out in order with images trailing the text."""
        text = TextExtraction(
            blocks=[_paragraph("one", 0), _paragraph("two", 1)],
            plain_text="one\n\ntwo",
        )
        images = [image_block("u1", 2, 5, 5, 1), image_block("u0", 2, 5, 5, 0)]

        page = assemble_page(2, text, images)

        assert [b.order for b in page.blocks] == [0, 1, 1000, 1001]
        assert [b.type for b in page.blocks][-2:] == [BlockType.IMAGE, BlockType.IMAGE]
        assert page.page_number == 2
        assert page.has_images is True

    def test_text_content_excludes_images(self):
        """Plain text comes from the text reconstructor only."""
        text = TextExtraction(blocks=[_paragraph("only text", 0)], plain_text="only text")
        page = assemble_page(1, text, [image_block("u", 1, 5, 5, 0)])

        assert page.text_content == "only text"

    def test_text_only_page(self):
        text = TextExtraction(blocks=[_paragraph("x", 0)], plain_text="x")
        page = assemble_page(1, text)

        assert page.has_images is False
        assert len(page.blocks) == 1

    def test_image_only_page_is_not_placeholder(self):
        """A page with just an image still counts as extracted."""
        page = assemble_page(1, TextExtraction(), [image_block("u", 1, 5, 5, 0)])

        assert page.text_content == ""
        assert page.is_placeholder is False

    def test_extracted_at_is_iso_timestamp(self):
        page = assemble_page(1, TextExtraction())
        parsed = datetime.fromisoformat(page.extracted_at.replace("Z", "+00:00"))
        assert parsed.tzinfo is not None

    def test_order_collision_warned(self, caplog):
        """Pages with as many text blocks as the image offset are flagged."""
        blocks = [_paragraph(f"p{i}", i) for i in range(1000)]
        with caplog.at_level(logging.WARNING, logger="pdfscribe.assembler"):
            assemble_page(1, TextExtraction(blocks=blocks, plain_text="..."))

        assert "collide" in caplog.text


class TestPlaceholderPage:
    """Test empty stand-in pages."""

    def test_placeholder_fields(self):
        page = placeholder_page(3)

        assert page.page_number == 3
        assert page.blocks == ()
        assert page.text_content == ""
        assert page.has_images is False
        assert page.is_placeholder is True
