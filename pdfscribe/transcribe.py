"""
Transcription orchestrator.

This module provides `transcribe_pdf()`, which turns a PDF into one
PageContent per page by wiring together:
- PDFDocument (document access)
- TextBlockReconstructor (paragraphs and headings)
- ImageBlockExtractor (stored images)
- assemble_page (ordering and plain text)

Pages are processed one at a time, in document order. A page that fails
to extract becomes an empty placeholder so the output always has one
entry per page; only a document that can't be opened fails the run.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pdfscribe.assembler import assemble_page, placeholder_page
from pdfscribe.config import TranscriptionOptions
from pdfscribe.exceptions import ExtractionError, TranscriptionCancelled
from pdfscribe.extractors.images import ImageBlockExtractor
from pdfscribe.extractors.text import TextBlockReconstructor
from pdfscribe.models import PageContent, TranscriptionProgress, TranscriptionStatus
from pdfscribe.readers.pdf_reader import PDFDocument

if TYPE_CHECKING:
    from pdfscribe.readers.pdf_reader import PDFSource
    from pdfscribe.sinks import ImageSink

logger = logging.getLogger(__name__)

PAGE_MARKER = "\n\n--- Page {number} ---\n\n"


@dataclass
class PageResult:
    """Outcome of extracting one page: content or the error that stopped it."""

    page_number: int
    content: PageContent | None = None
    error: ExtractionError | None = None

    @property
    def ok(self) -> bool:
        return self.content is not None

    def unwrap_or_placeholder(self) -> PageContent:
        if self.content is not None:
            return self.content
        return placeholder_page(self.page_number)


class Transcriber:
    """
    Transcribes whole documents page by page.

    Usage:
        transcriber = Transcriber(options, upload_image=sink)
        pages = await transcriber.transcribe("book.pdf", "book-1")
    """

    def __init__(
        self,
        options: TranscriptionOptions | None = None,
        upload_image: ImageSink | None = None,
    ) -> None:
        """Initialize the transcriber.

        Args:
            options: Run options (defaults if None).
            upload_image: Image sink. Without one, images are not extracted.
        """
        self.options = options or TranscriptionOptions()
        self.reconstructor = TextBlockReconstructor()
        self.image_extractor = (
            ImageBlockExtractor(upload_image, jpeg_quality=self.options.jpeg_quality)
            if upload_image is not None
            else None
        )

    async def transcribe(self, source: PDFSource, book_id: str) -> list[PageContent]:
        """
        Transcribe every page of a document.

        Raises:
            FileNotFoundError: If a path source doesn't exist.
            DocumentOpenError: If the document can't be opened.
            TranscriptionCancelled: If should_cancel stopped the run.
        """
        doc = await asyncio.to_thread(PDFDocument.open, source)
        try:
            return await self._transcribe_document(doc, book_id)
        finally:
            doc.close()

    async def _transcribe_document(self, doc: PDFDocument, book_id: str) -> list[PageContent]:
        total_pages = doc.page_count
        pages: list[PageContent] = []

        if self.options.extract_images and self.image_extractor is None:
            logger.debug("No image sink given, skipping image extraction for %s", book_id)

        logger.info("Transcribing %s: %d pages from %s", book_id, total_pages, doc.name)
        await self._report(book_id, 0, total_pages, TranscriptionStatus.PROCESSING)

        for page_number in range(1, total_pages + 1):
            if self.options.should_cancel is not None and self.options.should_cancel():
                logger.info("Transcription of %s cancelled at page %d", book_id, page_number)
                raise TranscriptionCancelled(book_id, page_number - 1)

            result = await self.transcribe_page(doc, page_number, book_id)
            if not result.ok:
                logger.warning(
                    "Error transcribing page %d of %s: %s",
                    page_number, book_id, result.error,
                    exc_info=result.error,
                )
            pages.append(result.unwrap_or_placeholder())

            await self._report(book_id, page_number, total_pages, TranscriptionStatus.PROCESSING)
            await asyncio.sleep(0)

        await self._report(book_id, total_pages, total_pages, TranscriptionStatus.COMPLETED)

        placeholders = sum(1 for p in pages if p.is_placeholder)
        logger.info(
            "Transcribed %s: %d pages, %d placeholders", book_id, len(pages), placeholders
        )
        return pages

    async def transcribe_page(self, doc: PDFDocument, page_number: int, book_id: str) -> PageResult:
        """Extract one page. Never raises for extraction problems."""
        try:
            page = doc.get_page(page_number)
            text = self.reconstructor.reconstruct(page.get_text_runs(), page.height)

            image_blocks = []
            if self.options.extract_images and self.image_extractor is not None:
                image_blocks = await self.image_extractor.extract(page, book_id)

            return PageResult(page_number, content=assemble_page(page_number, text, image_blocks))
        except Exception as e:
            error = ExtractionError(page_number, str(e) or type(e).__name__)
            error.__cause__ = e
            return PageResult(page_number, error=error)

    async def _report(
        self,
        book_id: str,
        current_page: int,
        total_pages: int,
        status: TranscriptionStatus,
    ) -> None:
        if self.options.on_progress is None:
            return
        event = TranscriptionProgress(
            book_id=book_id,
            current_page=current_page,
            total_pages=total_pages,
            status=status,
        )
        outcome = self.options.on_progress(event)
        if inspect.isawaitable(outcome):
            await outcome


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════


async def transcribe_pdf(
    pdf_source: PDFSource,
    book_id: str,
    options: TranscriptionOptions | None = None,
    upload_image: ImageSink | None = None,
) -> list[PageContent]:
    """
    Transcribe a PDF into structured page content.

    Args:
        pdf_source: Path, raw bytes or http(s) URL of the PDF.
        book_id: Identifier passed through to progress events and the sink.
        options: Run options (defaults if None).
        upload_image: Async image sink; images are skipped without one.

    Returns:
        One PageContent per page, in page order.

    Raises:
        FileNotFoundError: If a path source doesn't exist.
        DocumentOpenError: If the document can't be opened or parsed.
        TranscriptionCancelled: If options.should_cancel stopped the run.

    Example:
        >>> sink = DirectoryImageSink("images")
        >>> pages = asyncio.run(transcribe_pdf("book.pdf", "book-1", upload_image=sink))
        >>> print(pages[0].text_content)
    """
    transcriber = Transcriber(options, upload_image)
    return await transcriber.transcribe(pdf_source, book_id)


async def extract_text_only(pdf_source: PDFSource) -> str:
    """
    Extract raw text of every page, without structure or images.

    Runs are joined with spaces, and each page is followed by a
    "--- Page N ---" marker.
    """
    doc = await asyncio.to_thread(PDFDocument.open, pdf_source)
    parts = []
    try:
        for page in doc.pages():
            for run in page.get_text_runs():
                if run.text:
                    parts.append(run.text + " ")
            parts.append(PAGE_MARKER.format(number=page.number))
    finally:
        doc.close()
    return "".join(parts)


def render_page_image(
    pdf_source: PDFSource,
    page_number: int,
    scale: float = 1.5,
    jpeg_quality: int = 90,
) -> bytes:
    """Rasterise one page to JPEG, for placeholder pages that show the original page."""
    with PDFDocument.open(pdf_source) as doc:
        return doc.get_page(page_number).render(scale=scale, jpeg_quality=jpeg_quality)
