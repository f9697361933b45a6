"""
pdfscribe: Transcribe PDFs into structured, reflowable page content.

This library turns the vector text and embedded images of a PDF into
ordered paragraph, heading and image blocks per page, with a plain-text
rendering of each page for search and text-to-speech.

Example:
    >>> import asyncio
    >>> import pdfscribe
    >>> sink = pdfscribe.DirectoryImageSink("images")
    >>> pages = asyncio.run(pdfscribe.transcribe_pdf("book.pdf", "book-1", upload_image=sink))
    >>> print(pages[0].text_content)

    >>> # Query transcribed content
    >>> for hit in pdfscribe.search_in_content(pages, "chapter"):
    ...     print(hit.page_number, hit.snippet)
"""

from pdfscribe.assembler import assemble_page, placeholder_page
from pdfscribe.config import TranscriptionOptions
from pdfscribe.exceptions import (
    ConfigurationError,
    DocumentOpenError,
    ExtractionError,
    PdfScribeError,
    TranscriptionCancelled,
)
from pdfscribe.models import (
    # Enums
    BlockType,
    # Output
    BookContent,
    ContentBlock,
    ContentBounds,
    ContentStyle,
    PageContent,
    SearchResult,
    # Progress
    TranscriptionProgress,
    TranscriptionStatus,
)
from pdfscribe.query import get_word_count, search_in_content
from pdfscribe.sinks import DirectoryImageSink, ImageSink
from pdfscribe.transcribe import (
    PageResult,
    Transcriber,
    extract_text_only,
    render_page_image,
    transcribe_pdf,
)

__version__ = "0.1.0"
__all__ = [
    # Main API
    "transcribe_pdf",
    "extract_text_only",
    "render_page_image",
    "Transcriber",
    "PageResult",
    # Query
    "get_word_count",
    "search_in_content",
    # Configuration
    "TranscriptionOptions",
    # Output
    "PageContent",
    "ContentBlock",
    "ContentBounds",
    "ContentStyle",
    "BookContent",
    "SearchResult",
    "assemble_page",
    "placeholder_page",
    # Enums
    "BlockType",
    "TranscriptionStatus",
    # Progress
    "TranscriptionProgress",
    # Sinks
    "ImageSink",
    "DirectoryImageSink",
    # Exceptions
    "PdfScribeError",
    "DocumentOpenError",
    "ExtractionError",
    "ConfigurationError",
    "TranscriptionCancelled",
]
