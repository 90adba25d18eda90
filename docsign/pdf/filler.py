"""PDF text filler using a reportlab overlay merged onto the template with pypdf.

Placeholders are positioned in top-down preview space; each value is
drawn as a single line of text in one of the standard PDF fonts, sized
down (never below a floor) when it would not fit the placeholder width.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from io import BytesIO
import logging
from typing import Any, Iterable, Mapping

from pypdf import PdfReader, PdfWriter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from docsign.model.placeholder import (
    DEFAULT_FONT_FAMILY,
    MIN_HEIGHT,
    MIN_WIDTH,
    STANDARD_FONTS,
    Align,
    Placeholder,
)

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 12.0
DEFAULT_MIN_FONT_SIZE = 6.0
# Width proxy used by auto-sizing: every glyph counts as half the font size.
AUTO_SIZE_CHAR_RATIO = 0.5
WINANSI_CODEC = "cp1252"


class PdfFillError(RuntimeError):
    """Raised when a template cannot be filled."""


class InvalidPlaceholderError(PdfFillError):
    """Raised when a placeholder cannot be placed on the template."""


class UnreadableDocumentError(PdfFillError):
    """Raised when the template bytes are not a readable PDF."""


@dataclass(frozen=True, slots=True)
class FillOptions:
    font_size: float | None = None
    font_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    auto_size: bool = True
    max_font_size: float | None = None
    min_font_size: float = DEFAULT_MIN_FONT_SIZE


@dataclass(frozen=True, slots=True)
class TextPlacement:
    page: int
    text: str
    font_name: str
    font_size: float
    x: float
    y: float
    text_width: float
    text_height: float


def resolve_font(font_family: str | None) -> str:
    if font_family in STANDARD_FONTS:
        return font_family
    return DEFAULT_FONT_FAMILY


def calculate_font_size(
    text: str,
    max_width: float,
    max_font_size: float = DEFAULT_FONT_SIZE,
    min_font_size: float = DEFAULT_MIN_FONT_SIZE,
) -> float:
    """Largest size up to ``max_font_size`` whose estimated width fits ``max_width``.

    The estimate is ``len(text) * size * 0.5``. The result never drops
    below ``min_font_size`` even when the text still does not fit.
    """
    estimated_width = len(text) * max_font_size * AUTO_SIZE_CHAR_RATIO
    if estimated_width <= max_width:
        return max_font_size

    fitted = max_width / (len(text) * AUTO_SIZE_CHAR_RATIO)
    return max(min_font_size, min(max_font_size, fitted))


def plan_placement(
    placeholder: Placeholder,
    value: str,
    page_height: float,
    options: FillOptions | None = None,
    origin: tuple[float, float] = (0.0, 0.0),
) -> TextPlacement:
    """Compute where and how large ``value`` is drawn for ``placeholder``.

    ``origin`` is the lower-left corner of the page's media box.
    """
    options = options or FillOptions()
    font_name = resolve_font(placeholder.font_family)

    font_size = placeholder.font_size or options.font_size or DEFAULT_FONT_SIZE
    if options.auto_size:
        font_size = calculate_font_size(
            value,
            placeholder.width,
            options.max_font_size or font_size,
            options.min_font_size,
        )

    text_width = pdfmetrics.stringWidth(value, font_name, font_size)
    ascent, descent = pdfmetrics.getAscentDescent(font_name, font_size)
    text_height = ascent - descent

    if placeholder.align is Align.CENTER:
        x = placeholder.x + (placeholder.width - text_width) / 2
    elif placeholder.align is Align.RIGHT:
        x = placeholder.x + placeholder.width - text_width
    else:
        x = placeholder.x

    origin_x, origin_y = origin
    return TextPlacement(
        page=placeholder.page,
        text=value,
        font_name=font_name,
        font_size=font_size,
        x=origin_x + x,
        y=origin_y + page_height - placeholder.y - text_height,
        text_width=text_width,
        text_height=text_height,
    )


def _validate(placeholder: Placeholder, page_count: int) -> None:
    if placeholder.page < 1 or placeholder.page > page_count:
        raise InvalidPlaceholderError(
            f"Placeholder {placeholder.key!r} references page {placeholder.page}, "
            f"document has {page_count} page(s)"
        )
    if placeholder.width < MIN_WIDTH or placeholder.height < MIN_HEIGHT:
        raise InvalidPlaceholderError(
            f"Placeholder {placeholder.key!r} is {placeholder.width}x{placeholder.height}, "
            f"below the {MIN_WIDTH:g}x{MIN_HEIGHT:g} minimum"
        )


def _check_encodable(placeholder: Placeholder, value: str) -> None:
    """The standard fonts draw WinAnsi (cp1252) text on a single line only."""
    if any(ord(char) < 32 or ord(char) == 127 for char in value):
        raise InvalidPlaceholderError(
            f"Value for placeholder {placeholder.key!r} contains control characters"
        )
    try:
        value.encode(WINANSI_CODEC)
    except UnicodeEncodeError as exc:
        raise InvalidPlaceholderError(
            f"Value for placeholder {placeholder.key!r} has characters "
            f"{value[exc.start:exc.end]!r} that {resolve_font(placeholder.font_family)} "
            "cannot encode"
        ) from exc


def _read_template(template_pdf: bytes) -> PdfReader:
    try:
        reader = PdfReader(BytesIO(template_pdf))
        page_count = len(reader.pages)
    except Exception as exc:
        raise UnreadableDocumentError("Template PDF could not be parsed") from exc
    if page_count == 0:
        raise UnreadableDocumentError("Template PDF has no pages")
    return reader


def fill_pdf_template(
    template_pdf: bytes,
    placeholders: Iterable[Placeholder],
    data: Mapping[str, Any],
    options: FillOptions | None = None,
) -> bytes:
    """Draw ``data`` values into every matching placeholder and return the new PDF.

    Placeholders whose key has no value (or a ``None`` value) are skipped.
    Every placement is planned before anything is written, so an invalid
    placeholder aborts the whole fill.
    """
    options = options or FillOptions()
    reader = _read_template(template_pdf)
    page_count = len(reader.pages)

    placements: dict[int, list[TextPlacement]] = defaultdict(list)
    skipped = 0
    for placeholder in placeholders:
        value = data.get(placeholder.key)
        if value is None:
            logger.debug("No value for placeholder %s, leaving it blank", placeholder.key)
            skipped += 1
            continue
        _validate(placeholder, page_count)
        value = str(value)
        _check_encodable(placeholder, value)
        page = reader.pages[placeholder.page - 1]
        mediabox = page.mediabox
        placements[placeholder.page].append(
            plan_placement(
                placeholder,
                value,
                float(mediabox.height),
                options,
                origin=(float(mediabox.left), float(mediabox.bottom)),
            )
        )

    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)

    if placements:
        overlay_reader = PdfReader(_build_overlay_pdf(reader, placements, options))
        for page_number in sorted(placements):
            writer.pages[page_number - 1].merge_page(overlay_reader.pages[page_number - 1])

    drawn = sum(len(items) for items in placements.values())
    logger.info("Filled %d placeholder(s), skipped %d without a value", drawn, skipped)

    buffer = BytesIO()
    try:
        writer.write(buffer)
    except Exception as exc:
        raise PdfFillError("Failed to write filled PDF") from exc
    return buffer.getvalue()


def _build_overlay_pdf(
    reader: PdfReader,
    placements: Mapping[int, list[TextPlacement]],
    options: FillOptions,
) -> BytesIO:
    buffer = BytesIO()

    first_page = reader.pages[0]
    base_w = float(first_page.mediabox.width)
    base_h = float(first_page.mediabox.height)
    # invariant mode keeps the overlay free of timestamps and random ids
    report = canvas.Canvas(buffer, pagesize=(base_w, base_h), invariant=1)

    for page_number, page in enumerate(reader.pages, start=1):
        mediabox = page.mediabox
        report.setPageSize((float(mediabox.right), float(mediabox.top)))

        for placement in placements.get(page_number, []):
            report.setFillColorRGB(*options.font_color)
            report.setFont(placement.font_name, placement.font_size)
            report.drawString(placement.x, placement.y, placement.text)

        report.showPage()

    report.save()
    buffer.seek(0)
    return buffer
