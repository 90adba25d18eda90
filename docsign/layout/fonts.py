"""Font detection for source PDFs.

The analysis walks the text spans PyMuPDF extracts from every page,
folds each span's font onto one of the standard fill fonts and ranks the
``(font, size)`` pairs by how often they occur. The result only seeds
the font fields of new placeholders; existing placeholders are never
changed from it.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import logging
from typing import Iterable

import fitz

from docsign.layout.capacity import recommend_font_size
from docsign.model.placeholder import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, Placeholder

logger = logging.getLogger(__name__)

# PyMuPDF span flag bits
_FLAG_SERIF = 2**2
_FLAG_MONO = 2**3
_FLAG_BOLD = 2**4

FALLBACK_CONFIDENCE = 0.5


@dataclass(frozen=True, slots=True)
class DetectedFont:
    name: str
    size: float
    frequency: int


@dataclass(frozen=True, slots=True)
class FontRecommendation:
    size: float
    font: str
    confidence: float


@dataclass(slots=True)
class FontAnalysis:
    recommended_size: float = DEFAULT_FONT_SIZE
    recommended_font: str = DEFAULT_FONT_FAMILY
    confidence: float = FALLBACK_CONFIDENCE
    detected_fonts: list[DetectedFont] = field(default_factory=list)


def standard_font_for(font_name: str, flags: int = 0) -> str:
    """Map an embedded font name onto one of the six standard fill fonts."""
    lowered = font_name.lower()
    bold = bool(flags & _FLAG_BOLD) or "bold" in lowered or "black" in lowered
    if "courier" in lowered or "mono" in lowered:
        return "Courier-Bold" if bold else "Courier"
    # Names win over flags: substituted base-14 fonts can report odd flag bits.
    if any(name in lowered for name in ("helvetica", "arial", "sans")):
        return "Helvetica-Bold" if bold else "Helvetica"
    if flags & _FLAG_MONO:
        return "Courier-Bold" if bold else "Courier"
    serif = "times" in lowered or "serif" in lowered or bool(flags & _FLAG_SERIF)
    if serif:
        return "Times-Bold" if bold else "Times-Roman"
    return "Helvetica-Bold" if bold else "Helvetica"


def _iter_spans(document: fitz.Document) -> Iterable[dict]:
    for page in document:
        text_dict = page.get_text("dict")
        for block in text_dict.get("blocks", []):
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    if span.get("text", "").strip():
                        yield span


def analyze_pdf_fonts(document: fitz.Document) -> FontAnalysis:
    counts: Counter[tuple[str, float]] = Counter()
    for span in _iter_spans(document):
        font = standard_font_for(span.get("font", ""), int(span.get("flags", 0)))
        size = round(float(span.get("size", 0.0)) * 2) / 2
        if size <= 0:
            continue
        counts[(font, size)] += 1

    total = sum(counts.values())
    if total == 0:
        logger.info("No extractable text found; using default font recommendation")
        return FontAnalysis()

    ranked = counts.most_common()
    detected = [
        DetectedFont(name=font, size=size, frequency=round(100 * count / total))
        for (font, size), count in ranked
    ]
    (top_font, top_size), top_count = ranked[0]
    analysis = FontAnalysis(
        recommended_size=top_size,
        recommended_font=top_font,
        confidence=round(top_count / total, 2),
        detected_fonts=detected,
    )
    logger.debug(
        "Font analysis: %d spans, %d styles, top %s %.1fpt",
        total,
        len(detected),
        top_font,
        top_size,
    )
    return analysis


def detect_font_at_position(x: float, y: float, analysis: FontAnalysis) -> FontRecommendation:
    """Font to pre-populate at ``(x, y)``.

    The analysis is page-global, so the position does not currently refine
    the answer.
    """
    if analysis.detected_fonts:
        most_common = analysis.detected_fonts[0]
        return FontRecommendation(
            size=most_common.size,
            font=most_common.name,
            confidence=analysis.confidence,
        )
    return FontRecommendation(
        size=analysis.recommended_size,
        font=analysis.recommended_font,
        confidence=analysis.confidence,
    )


def smart_font_recommendations(
    analysis: FontAnalysis,
    placeholders: Iterable[Placeholder],
) -> list[FontRecommendation]:
    recommendations: list[FontRecommendation] = []
    for placeholder in placeholders:
        base = detect_font_at_position(placeholder.x, placeholder.y, analysis)
        recommendations.append(
            FontRecommendation(
                size=recommend_font_size(placeholder.width, placeholder.field_type.value, base.size),
                font=base.font,
                confidence=base.confidence,
            )
        )
    return recommendations
