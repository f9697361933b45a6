"""PDF document access.

PDFDocument wraps PyMuPDF; operators holds the backend-neutral
drawing-operator model used by image extraction.
"""

from pdfscribe.readers.operators import (
    PDFJS_OPCODES,
    Operator,
    OperatorKind,
    OperatorList,
    classify_xobject,
    scan_xobject_paints,
)
from pdfscribe.readers.pdf_reader import (
    ImageObject,
    PDFDocument,
    PDFPage,
    PDFSource,
    TextRun,
)

__all__ = [
    # Classes
    "PDFDocument",
    "PDFPage",
    "TextRun",
    "ImageObject",
    "PDFSource",
    # Operators
    "Operator",
    "OperatorKind",
    "OperatorList",
    "PDFJS_OPCODES",
    "classify_xobject",
    "scan_xobject_paints",
]
