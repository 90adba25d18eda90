"""Character-capacity and sizing heuristics for placeholders."""

from __future__ import annotations

from dataclasses import dataclass
import math

from docsign.model.placeholder import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE

# Average glyph width as a fraction of the font size.
FONT_WIDTH_RATIOS: dict[str, float] = {
    "Helvetica": 0.55,
    "Helvetica-Bold": 0.58,
    "Times-Roman": 0.50,
    "Courier": 0.60,
    "Arial": 0.55,
}
DEFAULT_WIDTH_RATIO = 0.55

LINE_HEIGHT_FACTOR = 1.2
BOX_PADDING = 8

_DOCUMENT_FONTS = {
    "form": "Helvetica",
    "contract": "Times-Roman",
    "letter": "Helvetica",
    "invoice": "Helvetica",
}

# (width, lines) per content type
_CONTENT_DIMENSIONS: dict[str, tuple[float, int]] = {
    "text": (200.0, 1),
    "email": (250.0, 1),
    "phone": (150.0, 1),
    "date": (120.0, 1),
    "signature": (200.0, 2),
    "checkbox": (20.0, 1),
}


@dataclass(frozen=True, slots=True)
class CapacityEstimate:
    capacity: int
    chars_per_line: int
    lines: int


@dataclass(frozen=True, slots=True)
class Dimensions:
    width: float
    height: int
    lines: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_character_capacity(
    width: float,
    height: float,
    font_size: float,
    font_family: str = DEFAULT_FONT_FAMILY,
) -> CapacityEstimate:
    """Estimate how many characters fit in a ``width`` x ``height`` box.

    ``capacity`` is computed from the raw line and column counts, so a box
    too small for any text reports a capacity of 0 while ``chars_per_line``
    and ``lines`` are still floored at 1.
    """
    if font_size <= 0:
        raise ValueError(f"font_size must be positive, got {font_size}")

    ratio = FONT_WIDTH_RATIOS.get(font_family, DEFAULT_WIDTH_RATIO)
    avg_char_width = font_size * ratio

    usable_width = max(0.0, width - BOX_PADDING)
    chars_per_line = math.floor(usable_width / avg_char_width)

    line_height = font_size * LINE_HEIGHT_FACTOR
    usable_height = max(0.0, height - BOX_PADDING)
    lines = math.floor(usable_height / line_height)

    return CapacityEstimate(
        capacity=max(0, chars_per_line * lines),
        chars_per_line=max(1, chars_per_line),
        lines=max(1, lines),
    )


def recommend_placeholder_height(
    font_size: float,
    number_of_lines: int = 1,
    include_padding: bool = True,
) -> int:
    text_height = font_size * LINE_HEIGHT_FACTOR * number_of_lines
    padding = BOX_PADDING if include_padding else 0
    return _round_half_up(text_height + padding)


def recommend_font_size(
    field_width: float,
    field_type: str | None = None,
    base_font_size: float = DEFAULT_FONT_SIZE,
) -> float:
    """Adjust ``base_font_size`` to the width band of the field.

    ``field_type`` is accepted for call-site symmetry and does not change
    the result.
    """
    if field_width < 100:
        return max(8, base_font_size - 2)
    if field_width < 150:
        return max(9, base_font_size - 1)
    if field_width < 250:
        return base_font_size
    return min(14, base_font_size + 1)


def recommend_font_family(document_type: str) -> str:
    return _DOCUMENT_FONTS.get(document_type, DEFAULT_FONT_FAMILY)


def recommend_placeholder_dimensions(
    content_type: str,
    font_size: float = DEFAULT_FONT_SIZE,
) -> Dimensions:
    width, lines = _CONTENT_DIMENSIONS.get(content_type, _CONTENT_DIMENSIONS["text"])
    return Dimensions(
        width=width,
        height=recommend_placeholder_height(font_size, lines),
        lines=lines,
    )
