#!/usr/bin/env python3
"""
Basic pdfscribe Usage Example

This example demonstrates the core workflow:
1. Transcribe a PDF into structured pages
2. Follow progress and handle failed pages
3. Query the transcribed content
4. Store pages as rows and load them back
"""

import asyncio
import json
import logging
from pathlib import Path

from pdfscribe import (
    BookContent,
    DirectoryImageSink,
    PageContent,
    TranscriptionOptions,
    extract_text_only,
    get_word_count,
    render_page_image,
    search_in_content,
    transcribe_pdf,
)


def print_progress(event):
    print(f"  {event.book_id}: page {event.current_page}/{event.total_pages} ({event.percent}%)")


async def main():
    logging.basicConfig(level=logging.INFO)

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Basic Transcription
    # ─────────────────────────────────────────────────────────────────────────

    # Images are written under images/ and referenced by file:// URL
    sink = DirectoryImageSink("images", owner="reader")

    options = TranscriptionOptions(
        extract_images=True,
        on_progress=print_progress,
        jpeg_quality=85,
    )

    pages = await transcribe_pdf("path/to/book.pdf", "book-1", options, upload_image=sink)

    for page in pages[:3]:
        print(f"Page {page.page_number}: {len(page.blocks)} blocks")
        for block in page.blocks:
            if block.is_image:
                print(f"  [image] {block.src}")
            else:
                print(f"  [{block.type.value}] {block.content[:60]}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Failed Pages
    # ─────────────────────────────────────────────────────────────────────────

    # Pages that failed to extract are empty placeholders;
    # a reader can show the rendered page instead
    book = BookContent.from_pages("book-1", pages)
    for number in book.placeholder_pages:
        jpeg = render_page_image("path/to/book.pdf", number)
        Path(f"output/page_{number}.jpg").write_bytes(jpeg)

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Query Content
    # ─────────────────────────────────────────────────────────────────────────

    print(f"Words: {get_word_count(pages):,}")

    for hit in search_in_content(pages, "chapter"):
        print(f"  p. {hit.page_number}: {hit.snippet}")

    # Text only, no structure or images
    text = await extract_text_only("path/to/book.pdf")
    print(f"Text length: {len(text):,} characters")

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Persistence
    # ─────────────────────────────────────────────────────────────────────────

    rows = [page.to_row("book-1") for page in pages]
    Path("output/book-1.json").write_text(json.dumps(rows))

    loaded = [PageContent.from_row(row) for row in json.loads(Path("output/book-1.json").read_text())]
    print(f"Loaded {len(loaded)} pages")


if __name__ == "__main__":
    # Note: This example uses placeholder paths.
    # Replace with an actual PDF path to run.
    asyncio.run(main())
