"""
Page drawing-operator model.

A PDF page's content stream decodes into a sequence of drawing
operators. Image extraction only cares about the operators that paint an
external image object, so every operator is classified into a small
closed set of kinds. Mapping a backend's own operator codes onto these
kinds happens through the lookup tables below and nowhere else.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class OperatorKind(Enum):
    """Operator kinds recognised by the image extractor."""

    PAINT_IMAGE_XOBJECT = "paint_image_xobject"
    PAINT_JPEG_XOBJECT = "paint_jpeg_xobject"
    OTHER = "other"

    @property
    def paints_image(self) -> bool:
        return self is not OperatorKind.OTHER


# pdf.js OPS constants (paintImageXObject, paintJpegXObject)
PDFJS_OPCODES: dict[int, OperatorKind] = {
    85: OperatorKind.PAINT_IMAGE_XOBJECT,
    82: OperatorKind.PAINT_JPEG_XOBJECT,
}

# XObject /Filter values that mark a JPEG-encoded image
JPEG_FILTERS: frozenset[str] = frozenset({"DCTDecode", "JPXDecode"})

# "/Name Do" paints the named XObject
_DO_PATTERN = re.compile(rb"/([^\s/\[\]<>(){}%]+)\s*Do\b")

# (resources xref, name) -> (form xref, decoded stream, image name -> /Filter), or None
FormOpener = Callable[[int, str], "tuple[int, bytes, Mapping[str, str | None]] | None"]


@dataclass(frozen=True)
class Operator:
    """A single classified drawing operator."""

    kind: OperatorKind
    args: tuple[Any, ...] = ()
    # xref of the form XObject whose resources hold the object; 0 for the page
    resources: int = 0

    @property
    def object_name(self) -> str | None:
        """Name of the referenced XObject, if the first argument is one."""
        if self.args and isinstance(self.args[0], str):
            return self.args[0]
        return None


@dataclass
class OperatorList:
    """Ordered drawing operators of one page."""

    operators: list[Operator] = field(default_factory=list)

    def __iter__(self) -> Iterator[Operator]:
        return iter(self.operators)

    def __len__(self) -> int:
        return len(self.operators)

    def image_paints(self) -> list[Operator]:
        """Operators that paint an image XObject, in painting order."""
        return [op for op in self.operators if op.kind.paints_image]

    @classmethod
    def from_arrays(
        cls,
        fn_array: Sequence[int],
        args_array: Sequence[Sequence[Any] | None],
        opcodes: dict[int, OperatorKind] | None = None,
    ) -> OperatorList:
        """Build from parallel code/argument arrays.

        Args:
            fn_array: Integer operator codes.
            args_array: Arguments for each operator (same length).
            opcodes: Code -> kind table. Defaults to PDFJS_OPCODES.
                Codes missing from the table map to OTHER.
        """
        if len(fn_array) != len(args_array):
            raise ValueError(
                f"fn_array and args_array differ in length: {len(fn_array)} != {len(args_array)}"
            )
        table = PDFJS_OPCODES if opcodes is None else opcodes
        return cls(
            [
                Operator(kind=table.get(fn, OperatorKind.OTHER), args=tuple(args or ()))
                for fn, args in zip(fn_array, args_array)
            ]
        )


def classify_xobject(image_filter: str | None) -> OperatorKind:
    """Map an image XObject's /Filter to the operator that paints it."""
    if image_filter and image_filter in JPEG_FILTERS:
        return OperatorKind.PAINT_JPEG_XOBJECT
    return OperatorKind.PAINT_IMAGE_XOBJECT


def scan_xobject_paints(
    content: bytes,
    image_filters: Mapping[str, str | None],
    open_form: FormOpener | None = None,
) -> OperatorList:
    """Collect the XObject paint operators of a decoded content stream.

    Form XObjects are followed into their own content streams, so images
    they paint appear at the point the form is painted. Their operators
    carry the form's xref in `resources`, since image names are only
    unique within one resource dictionary.

    Args:
        content: Decompressed page content stream.
        image_filters: Image XObject name -> /Filter value for the page's
            own resources. Names not in this mapping (form XObjects,
            unknown resources) become OTHER.
        open_form: Looks up a form XObject by (resources xref, name).
            Without one, forms are not entered.

    Returns:
        OperatorList with one operator per "Do", in painting order.
    """
    operators: list[Operator] = []
    _scan(content, image_filters, open_form, 0, frozenset(), operators)
    return OperatorList(operators)


def _scan(
    content: bytes,
    image_filters: Mapping[str, str | None],
    open_form: FormOpener | None,
    resources: int,
    entered: frozenset[int],
    operators: list[Operator],
) -> None:
    for match in _DO_PATTERN.finditer(content):
        name = match.group(1).decode("latin-1")
        if name in image_filters:
            kind = classify_xobject(image_filters[name])
            operators.append(Operator(kind=kind, args=(name,), resources=resources))
            continue

        operators.append(Operator(kind=OperatorKind.OTHER, args=(name,), resources=resources))
        form = open_form(resources, name) if open_form is not None else None
        if form is None:
            continue

        xref, stream, form_images = form
        # A form painting itself (directly or through others) is not re-entered
        if xref in entered:
            continue
        _scan(stream, form_images, open_form, xref, entered | {xref}, operators)
