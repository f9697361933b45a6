"""
Read-side helpers over transcribed pages.

These operate on the PageContent list a transcription produced (or one
read back from storage) and never touch the PDF.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pdfscribe.models import SearchResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pdfscribe.models import PageContent

SNIPPET_CONTEXT = 50
ELLIPSIS = "..."


def get_word_count(pages: Iterable[PageContent]) -> int:
    """Count whitespace-separated words across all pages' plain text."""
    return sum(len(page.text_content.split()) for page in pages)


def search_in_content(pages: Iterable[PageContent], query: str) -> list[SearchResult]:
    """
    Case-insensitive substring search across pages.

    Every occurrence is reported, overlapping ones included: the scan
    resumes one character after each match start. Matching runs on the
    page text itself, so positions index into text_content.

    Args:
        pages: Transcribed pages.
        query: Text to look for. An empty query matches nothing.

    Returns:
        SearchResults in page order, then position order. Snippets hold up
        to SNIPPET_CONTEXT characters each side of the match, with "..."
        where they were cut short of the page text's ends.
    """
    if not query:
        return []

    results = []
    # Lookahead so overlapping occurrences each match
    pattern = re.compile(f"(?=({re.escape(query)}))", re.IGNORECASE)

    for page in pages:
        text = page.text_content

        for match in pattern.finditer(text):
            position = match.start()
            start = max(0, position - SNIPPET_CONTEXT)
            end = min(len(text), match.end(1) + SNIPPET_CONTEXT)
            snippet = (
                (ELLIPSIS if start > 0 else "")
                + text[start:end]
                + (ELLIPSIS if end < len(text) else "")
            )
            results.append(
                SearchResult(page_number=page.page_number, snippet=snippet, position=position)
            )

    return results
