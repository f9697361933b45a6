"""
Configuration for pdfscribe transcription runs.

All options have sensible defaults. Create options only
if you need to customize behavior.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pdfscribe.exceptions import ConfigurationError

if TYPE_CHECKING:
    from pdfscribe.models import TranscriptionProgress

ProgressCallback = Callable[["TranscriptionProgress"], None]
CancelCheck = Callable[[], bool]


@dataclass
class TranscriptionOptions:
    """
    Options for a single transcription run.

    Example:
        >>> options = TranscriptionOptions(
        ...     extract_images=False,
        ...     on_progress=lambda p: print(p.current_page, p.total_pages),
        ... )
        >>> pages = asyncio.run(transcribe_pdf("book.pdf", "book-1", options))
    """

    # Extraction options
    extract_images: bool = True
    preserve_layout: bool = True  # Reserved, extraction does not read it yet

    # Progress listener, called once before, once per page and once after the loop
    on_progress: ProgressCallback | None = None

    # Checked between pages; returning True stops the run
    should_cancel: CancelCheck | None = None

    # Image encoding
    jpeg_quality: int = 85

    def __post_init__(self):
        """Validate configuration."""
        if not 1 <= self.jpeg_quality <= 100:
            raise ConfigurationError(
                f"jpeg_quality must be between 1 and 100, got {self.jpeg_quality}"
            )
