"""
Text block reconstruction.

Groups a page's positioned text runs into paragraph and heading blocks
using vertical-gap heuristics:

- A run whose baseline sits more than PARAGRAPH_GAP_MULTIPLIER x its
  font size away from the previous run's starts a new block.
- A block whose font size exceeds HEADING_FONT_SIZE_THRESHOLD is a
  heading, anything else a paragraph.

Runs are taken in the order the page paints them. Multi-column pages and
out-of-order content streams are not reordered: emission order is
assumed to be single-column reading order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pdfscribe.models import BlockType, ContentBlock, ContentBounds, ContentStyle

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pdfscribe.readers.pdf_reader import TextRun

# Page units (unscaled). Strict ">" comparison: size 14 is body text.
HEADING_FONT_SIZE_THRESHOLD = 14

# A vertical gap larger than this many font sizes breaks a paragraph
PARAGRAPH_GAP_MULTIPLIER = 1.5

# Approximate line box height as a multiple of font size
LINE_HEIGHT_FACTOR = 1.2

BLOCK_SEPARATOR = "\n\n"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class TextExtraction:
    """Text blocks of one page plus their plain-text rendering."""

    blocks: list[ContentBlock] = field(default_factory=list)
    plain_text: str = ""


@dataclass
class _PendingBlock:
    """Runs accumulated since the last paragraph break."""

    font_size: float  # Size of the run that opened the block
    parts: list[str] = field(default_factory=list)
    left: float = math.inf
    right: float = 0.0
    top: float = math.inf
    bottom: float = 0.0

    def add(self, run: TextRun, screen_y: float) -> None:
        size = run.font_size
        self.parts.append(run.text)
        self.left = min(self.left, run.x)
        self.right = max(self.right, run.x + run.width)
        self.top = min(self.top, screen_y - size)
        self.bottom = max(self.bottom, screen_y + size * (LINE_HEIGHT_FACTOR - 1))

    @property
    def content(self) -> str:
        return "".join(part + " " for part in self.parts).strip()

    @property
    def bounds(self) -> ContentBounds:
        x = max(0.0, self.left)
        y = max(0.0, self.top)
        return ContentBounds(
            x=x,
            y=y,
            width=max(0.0, self.right - x),
            height=max(0.0, self.bottom - y),
        )


class TextBlockReconstructor:
    """Cluster text runs into paragraph/heading blocks.

    Usage:
        reconstructor = TextBlockReconstructor()
        result = reconstructor.reconstruct(page.get_text_runs(), page.height)
        result.blocks, result.plain_text
    """

    def __init__(
        self,
        heading_threshold: float = HEADING_FONT_SIZE_THRESHOLD,
        gap_multiplier: float = PARAGRAPH_GAP_MULTIPLIER,
    ):
        """Initialize with heuristic thresholds.

        Args:
            heading_threshold: Blocks with a larger font size are headings.
            gap_multiplier: Paragraph break when the vertical gap exceeds
                this many font sizes.
        """
        self.heading_threshold = heading_threshold
        self.gap_multiplier = gap_multiplier

    def reconstruct(self, runs: Sequence[TextRun], page_height: float) -> TextExtraction:
        """Build blocks from a page's runs.

        Args:
            runs: Text runs in painting order, transforms in PDF space.
            page_height: Page height at scale 1, for the y-axis flip.

        Returns:
            TextExtraction; empty when the page has no visible text.
        """
        blocks: list[ContentBlock] = []
        pending: _PendingBlock | None = None
        last_y: float | None = None

        for run in runs:
            if not run.text.strip():
                continue

            font_size = run.font_size
            screen_y = page_height - run.y

            if (
                pending is not None
                and last_y is not None
                and abs(screen_y - last_y) > font_size * self.gap_multiplier
            ):
                self._flush(pending, blocks)
                pending = None

            if pending is None:
                pending = _PendingBlock(font_size=font_size)
            pending.add(run, screen_y)
            last_y = screen_y

        if pending is not None:
            self._flush(pending, blocks)

        plain_text = BLOCK_SEPARATOR.join(block.content for block in blocks)
        return TextExtraction(blocks=blocks, plain_text=plain_text)

    def classify(self, font_size: float) -> BlockType:
        """Heading if strictly larger than the threshold."""
        if font_size > self.heading_threshold:
            return BlockType.HEADING
        return BlockType.PARAGRAPH

    def _flush(self, pending: _PendingBlock, blocks: list[ContentBlock]) -> None:
        content = pending.content
        if not content:
            return

        block_type = self.classify(pending.font_size)
        blocks.append(
            ContentBlock(
                type=block_type,
                content=content,
                bounds=pending.bounds,
                style=ContentStyle(
                    font_size=round_half_up(pending.font_size),
                    font_weight="bold" if block_type is BlockType.HEADING else "normal",
                ),
                order=len(blocks),
            )
        )


def reconstruct_text_blocks(runs: Sequence[TextRun], page_height: float) -> TextExtraction:
    """Reconstruct blocks with the default thresholds."""
    return TextBlockReconstructor().reconstruct(runs, page_height)
