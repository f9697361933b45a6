"""
Pytest configuration and fixtures for pdfscribe tests.

Unit tests run against in-memory fakes of the document accessor.
PDF-backed tests build small documents with PyMuPDF on the fly.
"""

import io

import fitz
import pytest
from PIL import Image

from pdfscribe.readers import ImageObject, OperatorList, TextRun, scan_xobject_paints

PAGE_HEIGHT = 800.0


# ============================================================
# Fakes of the document accessor
# ============================================================


class FakePage:
    """In-memory page: text runs, named images and a content stream."""

    def __init__(self, number=1, runs=(), images=None, content=b"", height=PAGE_HEIGHT,
                 fail_on=None):
        self.number = number
        self.height = height
        self.width = 600.0
        self._runs = list(runs)
        self._images = dict(images or {})
        self._content = content
        self._fail_on = fail_on

    def get_text_runs(self):
        if self._fail_on == "text":
            raise RuntimeError("broken text layer")
        return list(self._runs)

    def get_operator_list(self) -> OperatorList:
        if self._fail_on == "operators":
            raise RuntimeError("broken content stream")
        filters = {name: None for name in self._images}
        return scan_xobject_paints(self._content, filters)

    def resolve_image(self, name, resources=0):
        image = self._images.get(name) if resources == 0 else None
        if isinstance(image, Exception):
            raise image
        return image


class FakeDocument:
    """In-memory document of FakePages."""

    def __init__(self, pages, name="<fake>"):
        self._pages = list(pages)
        self.name = name
        self.closed = False

    @property
    def page_count(self):
        return len(self._pages)

    def get_page(self, number):
        page = self._pages[number - 1]
        if isinstance(page, Exception):
            raise page
        return page

    def pages(self):
        for number in range(1, self.page_count + 1):
            yield self.get_page(number)

    def close(self):
        self.closed = True


class RecordingSink:
    """Image sink that remembers its calls and hands out predictable URLs."""

    def __init__(self, fail_indexes=()):
        self.calls = []
        self.fail_indexes = set(fail_indexes)

    async def __call__(self, data, book_id, page_number, image_index):
        self.calls.append((data, book_id, page_number, image_index))
        if len(self.calls) - 1 in self.fail_indexes:
            return None
        return f"https://cdn.example/{book_id}/p{page_number}/{image_index}.jpg"


# ============================================================
# Fixtures
# ============================================================


@pytest.fixture
def make_run():
    """Build a TextRun positioned by its top-left (screen) baseline y."""

    def _make(text, y, size=12.0, x=72.0, width=None, page_height=PAGE_HEIGHT):
        return TextRun(
            text=text,
            transform=(size, 0.0, 0.0, size, x, page_height - y),
            width=width if width is not None else len(text) * size * 0.5,
            height=size,
            font_name="Helvetica",
        )

    return _make


@pytest.fixture
def rgb_image():
    """A 2x2 RGB ImageObject with distinct pixels."""
    data = bytes([255, 0, 0, 0, 255, 0, 0, 0, 255, 10, 20, 30])
    return ImageObject(data=data, width=2, height=2)


@pytest.fixture
def rgba_image():
    """A 10x10 opaque RGBA ImageObject."""
    return ImageObject(data=bytes([40, 80, 120, 255]) * 100, width=10, height=10)


@pytest.fixture
def fake_page():
    return FakePage


@pytest.fixture
def fake_document():
    return FakeDocument


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def failing_sink():
    """Sink that rejects its first upload."""
    return RecordingSink(fail_indexes={0})


# ============================================================
# Synthetic PDFs
# ============================================================


def _png(mode, size, color) -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _jpeg(size, color) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture(scope="session")
def text_pdf() -> bytes:
    """One page: a 20pt heading and a 12pt paragraph below it."""
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 100), "Chapter One", fontsize=20)
    page.insert_text((72, 160), "Hello World", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(scope="session")
def hello_image_pdf() -> bytes:
    """Two pages: "Hello World" at 12pt, then a 10x10 RGBA image."""
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 100), "Hello World", fontsize=12)
    page = doc.new_page(width=595, height=842)
    page.insert_image(fitz.Rect(100, 100, 200, 200), stream=_png("RGBA", (10, 10), (0, 128, 255, 255)))
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(scope="session")
def mixed_images_pdf() -> bytes:
    """One page with a text line, an RGB PNG and a JPEG image."""
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 80), "Figures", fontsize=12)
    page.insert_image(fitz.Rect(72, 100, 172, 200), stream=_png("RGB", (8, 6), (200, 10, 10)))
    page.insert_image(fitz.Rect(72, 300, 172, 400), stream=_jpeg((12, 12), (10, 200, 10)))
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(scope="session")
def three_page_pdf() -> bytes:
    """Three pages with one line of text each."""
    doc = fitz.open()
    for number in range(1, 4):
        page = doc.new_page(width=595, height=842)
        page.insert_text((72, 100), f"Page {number} text", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(scope="session")
def nested_form_pdf() -> bytes:
    """One page painting a blue image, then a red-image page shown as a form.

    PyMuPDF names both images fzImg0, each in its own resources.
    """
    source = fitz.open()
    source_page = source.new_page(width=200, height=200)
    source_page.insert_image(fitz.Rect(20, 20, 120, 120), stream=_png("RGB", (16, 16), (255, 0, 0)))

    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    page.insert_image(fitz.Rect(72, 72, 172, 172), stream=_png("RGB", (16, 16), (0, 0, 255)))
    page.show_pdf_page(fitz.Rect(72, 300, 272, 500), source, 0)
    data = doc.tobytes()
    doc.close()
    source.close()
    return data


@pytest.fixture(scope="session")
def offpage_text_pdf() -> bytes:
    """One page with a line inside the page box and one right of it."""
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 100), "Inside", fontsize=12)
    page.insert_text((700, 200), "Outside", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data
