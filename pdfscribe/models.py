"""
Data models for pdfscribe.

These models represent the output of PDF transcription: one PageContent
per page, each holding an ordered list of ContentBlocks.

Dictionaries produced by to_dict() use the camelCase keys the reader
application stores and renders, so a round trip through JSON is lossless.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BlockType(Enum):
    """Kinds of content block a page can hold."""

    TEXT = "text"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    IMAGE = "image"

    @property
    def is_text(self) -> bool:
        return self is not BlockType.IMAGE


class TranscriptionStatus(Enum):
    """Lifecycle of a transcription run."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ContentBounds:
    """Position and size of a block in top-left-origin page space.

    Text bounds are approximate (derived from run extents, not layout
    metrics). Image bounds carry the decoded pixel size at x=0, y=0.
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContentBounds:
        return cls(
            x=data.get("x", 0),
            y=data.get("y", 0),
            width=data.get("width", 0),
            height=data.get("height", 0),
        )


@dataclass(frozen=True)
class ContentStyle:
    """Style hints for text blocks.

    font_weight is a size heuristic, not a reading of the font itself.
    font_family, font_style and color are left unset by extraction.
    """

    font_size: int | None = None
    font_weight: str | None = None  # "normal" or "bold"
    font_family: str | None = None
    font_style: str | None = None  # "normal" or "italic"
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "fontSize": self.font_size,
            "fontWeight": self.font_weight,
            "fontFamily": self.font_family,
            "fontStyle": self.font_style,
            "color": self.color,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContentStyle:
        return cls(
            font_size=data.get("fontSize"),
            font_weight=data.get("fontWeight"),
            font_family=data.get("fontFamily"),
            font_style=data.get("fontStyle"),
            color=data.get("color"),
        )


@dataclass(frozen=True)
class ContentBlock:
    """
    One unit of structured page content.

    Text blocks (heading, paragraph, text) carry `content` and usually
    `style`; image blocks carry `src` and `alt`. `order` is the reading
    order index within the page.

    Example:
        >>> block = ContentBlock(
        ...     type=BlockType.PARAGRAPH,
        ...     content="Hello World",
        ...     bounds=ContentBounds(72, 60, 80, 14),
        ...     order=0,
        ... )
    """

    type: BlockType
    bounds: ContentBounds
    order: int
    content: str | None = None
    src: str | None = None
    alt: str | None = None
    style: ContentStyle | None = None

    def __post_init__(self):
        """Validate the fields required by each block type."""
        if self.order < 0:
            raise ValueError(f"order must be >= 0, got {self.order}")
        if self.type.is_text:
            if not self.content or not self.content.strip():
                raise ValueError(f"{self.type.value} block requires non-empty content")
        elif not self.src:
            raise ValueError("image block requires src")

    @property
    def is_image(self) -> bool:
        return self.type is BlockType.IMAGE

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value}
        if self.is_image:
            data["src"] = self.src
            data["alt"] = self.alt
        else:
            data["content"] = self.content
        data["bounds"] = self.bounds.to_dict()
        if self.style is not None:
            data["style"] = self.style.to_dict()
        data["order"] = self.order
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContentBlock:
        style = data.get("style")
        return cls(
            type=BlockType(data["type"]),
            bounds=ContentBounds.from_dict(data.get("bounds", {})),
            order=data["order"],
            content=data.get("content"),
            src=data.get("src"),
            alt=data.get("alt"),
            style=ContentStyle.from_dict(style) if style else None,
        )


@dataclass(frozen=True)
class PageContent:
    """
    Structured content for a single page.

    Created once per transcription run and never patched; re-transcribing
    produces a new instance. A page whose extraction failed is a
    placeholder: no blocks and empty text_content.
    """

    page_number: int  # 1-based
    blocks: tuple[ContentBlock, ...] = ()
    text_content: str = ""  # Plain text for search/TTS
    has_images: bool = False
    extracted_at: str = field(default_factory=utc_timestamp)

    @property
    def is_placeholder(self) -> bool:
        """True for pages whose extraction failed; renderers show the raster page instead."""
        return not self.blocks and not self.text_content

    @property
    def text_blocks(self) -> list[ContentBlock]:
        return [b for b in self.blocks if not b.is_image]

    @property
    def image_blocks(self) -> list[ContentBlock]:
        return [b for b in self.blocks if b.is_image]

    def to_dict(self) -> dict[str, Any]:
        return {
            "pageNumber": self.page_number,
            "blocks": [b.to_dict() for b in self.blocks],
            "textContent": self.text_content,
            "hasImages": self.has_images,
            "extractedAt": self.extracted_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PageContent:
        return cls(
            page_number=data["pageNumber"],
            blocks=tuple(ContentBlock.from_dict(b) for b in data.get("blocks", [])),
            text_content=data.get("textContent", ""),
            has_images=data.get("hasImages", False),
            extracted_at=data.get("extractedAt") or utc_timestamp(),
        )

    def to_row(self, book_id: str) -> dict[str, Any]:
        """Row shape for the (book_id, page_number) keyed content table."""
        return {
            "book_id": book_id,
            "page_number": self.page_number,
            "content": {"blocks": [b.to_dict() for b in self.blocks]},
            "text_content": self.text_content,
            "updated_at": utc_timestamp(),
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> PageContent:
        """Rebuild a page from a stored row; has_images is derived from the blocks."""
        content = row.get("content") or {}
        blocks = tuple(ContentBlock.from_dict(b) for b in content.get("blocks") or [])
        return cls(
            page_number=row["page_number"],
            blocks=blocks,
            text_content=row.get("text_content") or "",
            has_images=any(b.is_image for b in blocks),
            extracted_at=row.get("created_at") or row.get("updated_at") or utc_timestamp(),
        )


@dataclass
class BookContent:
    """Full book content with all transcribed pages."""

    book_id: str
    pages: list[PageContent]
    total_pages: int
    status: TranscriptionStatus = TranscriptionStatus.PENDING

    @classmethod
    def from_pages(cls, book_id: str, pages: list[PageContent]) -> BookContent:
        """Aggregate a completed run's output."""
        return cls(
            book_id=book_id,
            pages=list(pages),
            total_pages=len(pages),
            status=TranscriptionStatus.COMPLETED,
        )

    @property
    def placeholder_pages(self) -> list[int]:
        """Page numbers that fell back to placeholders."""
        return [p.page_number for p in self.pages if p.is_placeholder]

    def to_dict(self) -> dict[str, Any]:
        return {
            "bookId": self.book_id,
            "pages": [p.to_dict() for p in self.pages],
            "totalPages": self.total_pages,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class TranscriptionProgress:
    """Progress event emitted during a run. Observed, never persisted."""

    book_id: str
    current_page: int
    total_pages: int
    status: TranscriptionStatus
    error: str | None = None

    @property
    def percent(self) -> int:
        """Completion as a rounded 0-100 percentage."""
        if self.total_pages <= 0:
            return 100 if self.status is TranscriptionStatus.COMPLETED else 0
        return round(self.current_page / self.total_pages * 100)


@dataclass(frozen=True)
class SearchResult:
    """One occurrence of a query within a page's text."""

    page_number: int
    snippet: str
    position: int  # Character offset in the page's text_content
