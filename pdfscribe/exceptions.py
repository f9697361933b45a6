"""
Exception classes for pdfscribe.

All pdfscribe exceptions inherit from PdfScribeError,
making it easy to catch all library errors.

Only DocumentOpenError and TranscriptionCancelled ever cross the
transcription boundary. Page-level ExtractionErrors are recovered
inside the orchestrator and turned into placeholder pages.

Example:
    >>> try:
    ...     pages = asyncio.run(pdfscribe.transcribe_pdf("book.pdf", "book-1"))
    ... except pdfscribe.DocumentOpenError as e:
    ...     print(f"Could not open document: {e}")
    ... except pdfscribe.PdfScribeError as e:
    ...     print(f"pdfscribe error: {e}")
"""


class PdfScribeError(Exception):
    """
    Base exception for all pdfscribe errors.

    Catch this to handle any pdfscribe-specific error.
    """

    pass


class DocumentOpenError(PdfScribeError):
    """
    Raised when a PDF cannot be opened or parsed at all.

    Corrupt files, non-PDF payloads and documents encrypted with a
    password all end up here. No partial output is produced.
    """

    pass


class ExtractionError(PdfScribeError):
    """
    A single page failed to extract.

    Carried inside a PageResult rather than raised: the orchestrator
    logs it and substitutes a placeholder page.
    """

    def __init__(self, page_number: int, message: str):
        super().__init__(f"Page {page_number}: {message}")
        self.page_number = page_number


class ConfigurationError(PdfScribeError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> TranscriptionOptions(jpeg_quality=0)
        ConfigurationError: jpeg_quality must be between 1 and 100, got 0
    """

    pass


class TranscriptionCancelled(PdfScribeError):
    """Raised when the caller's cancellation hook stops a run between pages."""

    def __init__(self, book_id: str, completed_pages: int):
        super().__init__(f"Transcription of {book_id!r} cancelled after {completed_pages} pages")
        self.book_id = book_id
        self.completed_pages = completed_pages
