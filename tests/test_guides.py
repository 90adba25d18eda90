from __future__ import annotations

import pytest

from docsign.layout.guides import (
    Box,
    GuideSet,
    ResizeHandle,
    anchor_corner,
    apply_guides,
    clamp_position,
    compute_guides,
    handle_corner,
    resize_box,
    snap_position,
)
from docsign.model.placeholder import Placeholder


def _placeholder(x, y, width=100, height=40, key="other"):
    return Placeholder(key=key, label=key, x=x, y=y, width=width, height=height)


def test_guides_only_include_edges_inside_threshold():
    box = Box(100, 300, 100, 40)
    near = _placeholder(104, 50)
    at_threshold = _placeholder(105, 50)

    guides = compute_guides(box, [near, at_threshold], threshold=5)

    assert guides.left == [104]
    assert guides.right == [204]
    assert guides.top == []
    assert guides.bottom == []


def test_guides_match_same_edge_kind():
    box = Box(100, 100, 50, 40)
    # other's left edge lines up with box's right edge, which is not a guide
    other = _placeholder(150, 400)
    assert compute_guides(box, [other]).is_empty


def test_apply_guides_prefers_smaller_delta():
    box = Box(100, 0, 100, 40)
    guides = GuideSet(left=[103], right=[198])
    assert apply_guides(box, guides) == (98, 0)


def test_apply_guides_left_wins_tie():
    box = Box(100, 0, 100, 40)
    guides = GuideSet(left=[102], right=[202])
    assert apply_guides(box, guides) == (102, 0)


def test_apply_guides_top_wins_tie():
    box = Box(0, 100, 100, 40)
    guides = GuideSet(top=[97], bottom=[137])
    assert apply_guides(box, guides) == (0, 97)


def test_snap_pulls_edges_onto_nearby_placeholder():
    other = _placeholder(200, 80)
    x, y, guides = snap_position(Box(197, 83, 100, 40), [other])
    assert (x, y) == (200, 80)
    assert 200 in guides.x
    assert 80 in guides.y


def test_snap_is_idempotent_on_a_guide():
    other = _placeholder(200, 80)
    box = Box(200, 300, 60, 30)
    x, y, _ = snap_position(box, [other])
    assert (x, y) == (200, 300)
    x2, y2, _ = snap_position(Box(x, y, 60, 30), [other])
    assert (x2, y2) == (x, y)


def test_snap_without_candidates_keeps_position():
    x, y, guides = snap_position(Box(10, 10, 50, 30), [])
    assert (x, y) == (10, 10)
    assert guides.is_empty


def test_clamp_position():
    assert clamp_position(-5, -3, 50) == (0, 0)
    assert clamp_position(280, 10, 50, container_width=300) == (250, 10)
    assert clamp_position(120, 10, 50, container_width=300) == (120, 10)


def test_handle_and_anchor_corners_are_opposite():
    box = Box(10, 20, 100, 50)
    assert handle_corner(ResizeHandle.SE, box) == (110, 70)
    assert anchor_corner(ResizeHandle.SE, box) == (10, 20)
    assert handle_corner(ResizeHandle.NW, box) == (10, 20)
    assert anchor_corner(ResizeHandle.NW, box) == (110, 70)
    assert anchor_corner(ResizeHandle.NE, box) == (10, 70)
    assert anchor_corner(ResizeHandle.SW, box) == (110, 20)


def test_resize_se_grows_from_anchor():
    assert resize_box(ResizeHandle.SE, 250, 180, 100, 100) == Box(100, 100, 150, 80)


def test_resize_nw_keeps_anchor_fixed():
    box = resize_box(ResizeHandle.NW, 50, 60, 300, 135)
    assert box == Box(50, 60, 250, 75)
    assert (box.right, box.bottom) == (300, 135)


@pytest.mark.parametrize("handle", list(ResizeHandle))
def test_resize_clamps_to_minimum_size(handle):
    anchor_x, anchor_y = 200, 200
    # pointer sits almost on the anchor, so raw size would be tiny
    box = resize_box(handle, anchor_x + 1, anchor_y - 1, anchor_x, anchor_y)
    assert box.width == 30
    assert box.height == 20
    fixed_x = box.x if handle in (ResizeHandle.SE, ResizeHandle.NE) else box.right
    fixed_y = box.y if handle in (ResizeHandle.SE, ResizeHandle.SW) else box.bottom
    assert (fixed_x, fixed_y) == (anchor_x, anchor_y)
