from __future__ import annotations

import fitz
import pytest

from docsign.layout.fonts import (
    DetectedFont,
    FontAnalysis,
    analyze_pdf_fonts,
    detect_font_at_position,
    smart_font_recommendations,
    standard_font_for,
)
from docsign.model.placeholder import Placeholder


@pytest.mark.parametrize(
    "name, flags, expected",
    [
        ("Helvetica", 0, "Helvetica"),
        ("Helvetica", 4, "Helvetica"),
        ("ArialMT", 0, "Helvetica"),
        ("Arial-BoldMT", 0, "Helvetica-Bold"),
        ("TimesNewRomanPSMT", 0, "Times-Roman"),
        ("Times-Bold", 0, "Times-Bold"),
        ("Georgia", 4, "Times-Roman"),
        ("Georgia", 4 | 16, "Times-Bold"),
        ("CourierNewPSMT", 0, "Courier"),
        ("DejaVuSansMono-Bold", 0, "Courier-Bold"),
        ("Unknown", 8, "Courier"),
        ("Unknown", 0, "Helvetica"),
    ],
)
def test_standard_font_for(name, flags, expected):
    assert standard_font_for(name, flags) == expected


def test_analysis_ranks_most_frequent_style(text_pdf):
    with fitz.open(stream=text_pdf, filetype="pdf") as document:
        analysis = analyze_pdf_fonts(document)

    assert analysis.recommended_font == "Helvetica"
    assert analysis.recommended_size == 11
    assert analysis.confidence == pytest.approx(0.83)
    assert analysis.detected_fonts[0] == DetectedFont("Helvetica", 11, 83)
    assert analysis.detected_fonts[1] == DetectedFont("Times-Bold", 14, 17)


def test_analysis_without_text_uses_defaults(blank_pdf):
    with fitz.open(stream=blank_pdf, filetype="pdf") as document:
        analysis = analyze_pdf_fonts(document)
    assert analysis == FontAnalysis()


def test_detect_font_at_position_uses_top_style():
    analysis = FontAnalysis(
        recommended_size=11,
        recommended_font="Helvetica",
        confidence=0.7,
        detected_fonts=[DetectedFont("Times-Roman", 10, 70)],
    )
    recommendation = detect_font_at_position(0, 0, analysis)
    assert (recommendation.font, recommendation.size, recommendation.confidence) == (
        "Times-Roman",
        10,
        0.7,
    )


def test_smart_recommendations_follow_width_bands():
    analysis = FontAnalysis(recommended_size=11)
    placeholders = [
        Placeholder(key="narrow", label="n", x=0, y=0, width=80, height=30),
        Placeholder(key="wide", label="w", x=0, y=40, width=300, height=30),
    ]
    sizes = [r.size for r in smart_font_recommendations(analysis, placeholders)]
    assert sizes == [9, 12]
