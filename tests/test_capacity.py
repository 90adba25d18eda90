from __future__ import annotations

import pytest

from docsign.layout.capacity import (
    calculate_character_capacity,
    recommend_font_family,
    recommend_font_size,
    recommend_placeholder_dimensions,
    recommend_placeholder_height,
)


def test_capacity_for_default_text_box():
    estimate = calculate_character_capacity(200, 35, 11, "Helvetica")
    assert estimate.chars_per_line == 31
    assert estimate.lines == 2
    assert estimate.capacity == 62


def test_capacity_uses_font_width_ratio():
    courier = calculate_character_capacity(200, 35, 10, "Courier")
    times = calculate_character_capacity(200, 35, 10, "Times-Roman")
    assert courier.chars_per_line == 32
    assert times.chars_per_line == 38


def test_unknown_font_uses_default_ratio():
    assert calculate_character_capacity(180, 60, 12, "Comic Sans") == calculate_character_capacity(
        180, 60, 12, "Helvetica"
    )


def test_box_too_short_for_a_line_reports_zero_capacity():
    estimate = calculate_character_capacity(100, 20, 12, "Courier")
    assert estimate.chars_per_line == 12
    assert estimate.lines == 1
    assert estimate.capacity == 0


@pytest.mark.parametrize("width, height", [(1, 1), (8, 8), (30, 20), (5, 500)])
def test_capacity_counts_never_drop_below_one(width, height):
    estimate = calculate_character_capacity(width, height, 11)
    assert estimate.chars_per_line >= 1
    assert estimate.lines >= 1
    assert estimate.capacity >= 0


def test_capacity_is_monotonic_in_width_and_height():
    previous = 0
    for width in range(10, 400, 7):
        current = calculate_character_capacity(width, 80, 11).capacity
        assert current >= previous
        previous = current

    previous = 0
    for height in range(10, 400, 7):
        current = calculate_character_capacity(150, height, 11).capacity
        assert current >= previous
        previous = current


def test_capacity_rejects_non_positive_font_size():
    with pytest.raises(ValueError):
        calculate_character_capacity(100, 40, 0)


def test_recommend_placeholder_height():
    assert recommend_placeholder_height(11) == 21
    assert recommend_placeholder_height(10, 2) == 32
    assert recommend_placeholder_height(11, 1, include_padding=False) == 13


@pytest.mark.parametrize("font_size", [6, 8.5, 11, 14, 22, 40])
def test_recommended_height_covers_one_line(font_size):
    assert recommend_placeholder_height(font_size, 1, True) >= font_size * 1.2


@pytest.mark.parametrize(
    "width, base, expected",
    [
        (80, 11, 9),
        (80, 9, 8),
        (120, 11, 10),
        (120, 9, 9),
        (200, 11, 11),
        (300, 11, 12),
        (300, 14, 14),
    ],
)
def test_recommend_font_size_bands(width, base, expected):
    assert recommend_font_size(width, "text", base) == expected


def test_recommend_font_size_ignores_field_type():
    assert recommend_font_size(120, "signature") == recommend_font_size(120, "date")


def test_recommend_font_family():
    assert recommend_font_family("contract") == "Times-Roman"
    assert recommend_font_family("invoice") == "Helvetica"
    assert recommend_font_family("unknown") == "Helvetica"


def test_recommend_placeholder_dimensions():
    signature = recommend_placeholder_dimensions("signature")
    assert (signature.width, signature.height, signature.lines) == (200, 34, 2)
    assert recommend_placeholder_dimensions("zip").width == 200
