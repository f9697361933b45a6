"""
PDF document accessor using PyMuPDF (fitz).

Exposes what transcription needs from a PDF and nothing more:
page count, per-page positioned text runs, the page's image paint
operators, and decoded pixel buffers for the images they reference.

Structure detection is not done here - see pdfscribe.extractors.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Union

import fitz  # PyMuPDF
import requests
from PIL import Image

from pdfscribe.exceptions import DocumentOpenError
from pdfscribe.readers.operators import OperatorList, scan_xobject_paints

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

PDFSource = Union[str, Path, bytes]

DOWNLOAD_TIMEOUT = 60  # seconds


@dataclass(frozen=True)
class TextRun:
    """A run of glyphs with its text matrix.

    transform is (scaleX, skewX, skewY, scaleY, translateX, translateY)
    in PDF user space, origin bottom-left. translateX/translateY is the
    run's baseline origin.
    """

    text: str
    transform: tuple[float, float, float, float, float, float]
    width: float
    height: float
    font_name: str

    @property
    def x(self) -> float:
        return self.transform[4]

    @property
    def y(self) -> float:
        """Baseline position in PDF space (bottom-left origin)."""
        return self.transform[5]

    @property
    def font_size(self) -> float:
        """Approximate font size: the matrix's horizontal scale."""
        return abs(self.transform[0])


@dataclass(frozen=True)
class ImageObject:
    """Decoded pixels of an image XObject."""

    data: bytes
    width: int
    height: int


class PDFPage:
    """One page of an open PDFDocument.

    Usage:
        page = doc.get_page(1)
        runs = page.get_text_runs()
        for op in page.get_operator_list().image_paints():
            image = page.resolve_image(op.object_name, op.resources)
    """

    def __init__(self, doc: fitz.Document, page: fitz.Page, number: int):
        self._doc = doc
        self._page = page
        self.number = number  # 1-based
        self._images: dict[tuple[int, str], tuple[int, int, str | None]] | None = None
        self._forms: dict[tuple[int, str], int] | None = None

    @property
    def width(self) -> float:
        return self._page.rect.width

    @property
    def height(self) -> float:
        return self._page.rect.height

    def get_text_runs(self) -> list[TextRun]:
        """Text spans in content-stream order, with PDF-space matrices."""
        runs = []
        height = self.height

        # No sort flag: keep the order the page paints its text in
        page_dict = self._page.get_text(
            "dict", flags=fitz.TEXT_PRESERVE_WHITESPACE | fitz.TEXT_MEDIABOX_CLIP
        )

        for block in page_dict.get("blocks", []):
            # Skip image blocks
            if block.get("type") != 0:
                continue

            for line in block.get("lines", []):
                cos, sin = line.get("dir", (1.0, 0.0))
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text:
                        continue

                    size = span.get("size", 0.0)
                    x0, y0, x1, y1 = span.get("bbox", (0, 0, 0, 0))
                    origin_x, origin_y = span.get("origin", (x0, y1))

                    runs.append(
                        TextRun(
                            text=text,
                            # fitz works top-left/y-down; flip back to PDF space
                            transform=(
                                size * cos,
                                -size * sin,
                                size * sin,
                                size * cos,
                                origin_x,
                                height - origin_y,
                            ),
                            width=x1 - x0,
                            height=y1 - y0,
                            font_name=span.get("font", ""),
                        )
                    )

        return runs

    def get_operator_list(self) -> OperatorList:
        """XObject paint operators of the page, in painting order.

        Form XObjects are expanded in place, so images nested in forms are
        listed where the form is painted.
        """
        return scan_xobject_paints(
            self._page.read_contents(),
            self._image_filters(0),
            open_form=self._open_form,
        )

    def resolve_image(self, name: str, resources: int = 0) -> ImageObject | None:
        """Decode an image XObject by resource name.

        Pixels come back as RGB, or RGBA when the image has a soft mask.
        Returns None if no image has that name in the given resources
        (0 for the page, else the xref of the form XObject holding it).
        """
        entry = self._image_table().get((resources, name))
        if entry is None:
            return None
        xref, smask, _ = entry

        pix = fitz.Pixmap(self._doc, xref)
        if pix.colorspace is not None and pix.colorspace.n != 3:
            pix = fitz.Pixmap(fitz.csRGB, pix)

        if smask and not pix.alpha:
            mask = fitz.Pixmap(self._doc, smask)
            if (mask.width, mask.height) == (pix.width, pix.height):
                pix = fitz.Pixmap(pix, mask)
            else:
                logger.debug(
                    "Ignoring soft mask of %s on page %d: size %dx%d != %dx%d",
                    name, self.number, mask.width, mask.height, pix.width, pix.height,
                )

        return ImageObject(data=bytes(pix.samples), width=pix.width, height=pix.height)

    def render(self, scale: float = 1.5, jpeg_quality: int = 90) -> bytes:
        """Rasterise the whole page to JPEG bytes."""
        pix = self._page.get_pixmap(matrix=fitz.Matrix(scale, scale))
        img = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=jpeg_quality)
        return buffer.getvalue()

    def _image_table(self) -> dict[tuple[int, str], tuple[int, int, str | None]]:
        """(referencer xref, image name) -> (xref, smask xref, filter).

        The referencer is 0 for the page's own resources. PyMuPDF names
        images per resource dictionary, so a form may reuse a page name.
        """
        if self._images is None:
            table = {}
            # (xref, smask, width, height, bpc, colorspace, alt_cs, name, filter, referencer)
            for info in self._page.get_images(full=True):
                xref, smask, name, image_filter, referencer = (
                    info[0], info[1], info[7], info[8], info[9],
                )
                table[(referencer, name)] = (xref, smask, image_filter or None)
            self._images = table
        return self._images

    def _form_table(self) -> dict[tuple[int, str], int]:
        """(invoker xref, form name) -> form xref."""
        if self._forms is None:
            # (xref, name, invoker, bbox)
            self._forms = {
                (info[2], info[1]): info[0] for info in self._page.get_xobjects()
            }
        return self._forms

    def _image_filters(self, resources: int) -> dict[str, str | None]:
        return {
            name: image_filter
            for (referencer, name), (_, _, image_filter) in self._image_table().items()
            if referencer == resources
        }

    def _open_form(self, resources: int, name: str) -> tuple[int, bytes, dict[str, str | None]] | None:
        xref = self._form_table().get((resources, name))
        if xref is None:
            return None
        return xref, self._doc.xref_stream(xref) or b"", self._image_filters(xref)


class PDFDocument:
    """An open PDF.

    Usage:
        with PDFDocument.open("/path/to/book.pdf") as doc:
            for page in doc.pages():
                runs = page.get_text_runs()
    """

    def __init__(self, doc: fitz.Document, name: str = "<bytes>"):
        self._doc = doc
        self.name = name

    @classmethod
    def open(cls, source: PDFSource) -> PDFDocument:
        """Open a PDF from a path, raw bytes or an http(s) URL.

        Raises:
            FileNotFoundError: If a path source doesn't exist.
            DocumentOpenError: If the document can't be fetched, parsed,
                or is password protected.
        """
        if isinstance(source, (bytes, bytearray)):
            data, name = bytes(source), "<bytes>"
        elif isinstance(source, str) and source.startswith(("http://", "https://")):
            data, name = _download(source), source
        else:
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"PDF not found: {path}")
            data, name = path.read_bytes(), str(path)

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentOpenError(f"Failed to open PDF {name}: {e}") from e

        if doc.needs_pass:
            doc.close()
            raise DocumentOpenError(f"PDF {name} is encrypted and needs a password")

        return cls(doc, name)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def get_page(self, number: int) -> PDFPage:
        """Load a page by 1-based number."""
        if not 1 <= number <= self.page_count:
            raise IndexError(f"Page {number} out of range 1..{self.page_count}")
        return PDFPage(self._doc, self._doc.load_page(number - 1), number)

    def pages(self) -> Iterator[PDFPage]:
        for number in range(1, self.page_count + 1):
            yield self.get_page(number)

    def close(self) -> None:
        self._doc.close()

    def __enter__(self) -> PDFDocument:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _download(url: str) -> bytes:
    """Fetch a remote PDF."""
    logger.info("Downloading PDF from %s", url)
    try:
        response = requests.get(url, timeout=DOWNLOAD_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise DocumentOpenError(f"Failed to download PDF {url}: {e}") from e
    return response.content
