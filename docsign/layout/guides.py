"""Alignment guides, snapping and handle resizing for the placeholder editor.

All coordinates are preview-surface pixels with ``y`` growing downward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, NamedTuple

from docsign.model.placeholder import MIN_HEIGHT, MIN_WIDTH, Placeholder

SNAP_THRESHOLD = 5.0


class ResizeHandle(str, Enum):
    SE = "se"
    SW = "sw"
    NE = "ne"
    NW = "nw"


@dataclass(frozen=True, slots=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @classmethod
    def of(cls, placeholder: Placeholder) -> Box:
        return cls(placeholder.x, placeholder.y, placeholder.width, placeholder.height)


@dataclass(slots=True)
class GuideSet:
    left: list[float] = field(default_factory=list)
    right: list[float] = field(default_factory=list)
    top: list[float] = field(default_factory=list)
    bottom: list[float] = field(default_factory=list)

    @property
    def x(self) -> list[float]:
        """Vertical guide lines."""
        return sorted(set(self.left) | set(self.right))

    @property
    def y(self) -> list[float]:
        """Horizontal guide lines."""
        return sorted(set(self.top) | set(self.bottom))

    @property
    def is_empty(self) -> bool:
        return not (self.left or self.right or self.top or self.bottom)

    def clear(self) -> None:
        self.left.clear()
        self.right.clear()
        self.top.clear()
        self.bottom.clear()


class _Snap(NamedTuple):
    line: float
    delta: float


def compute_guides(
    box: Box,
    others: Iterable[Placeholder],
    threshold: float = SNAP_THRESHOLD,
) -> GuideSet:
    """Edges of ``others`` lying within ``threshold`` of the matching edge of ``box``."""
    guides = GuideSet()
    for other in others:
        if abs(other.x - box.x) < threshold:
            guides.left.append(other.x)
        if abs(other.right - box.right) < threshold:
            guides.right.append(other.right)
        if abs(other.y - box.y) < threshold:
            guides.top.append(other.y)
        if abs(other.bottom - box.bottom) < threshold:
            guides.bottom.append(other.bottom)
    return guides


def _nearest(value: float, lines: list[float]) -> _Snap | None:
    best: _Snap | None = None
    for line in lines:
        delta = line - value
        if best is None or abs(delta) < abs(best.delta):
            best = _Snap(line, delta)
    return best


def apply_guides(box: Box, guides: GuideSet) -> tuple[float, float]:
    """Move ``box`` so its closest eligible edges sit on a guide.

    Left beats right and top beats bottom when the two deltas are equal.
    """
    x, y = box.x, box.y

    left = _nearest(box.x, guides.left)
    right = _nearest(box.right, guides.right)
    if left is not None and (right is None or abs(left.delta) <= abs(right.delta)):
        x = left.line
    elif right is not None:
        x = right.line - box.width

    top = _nearest(box.y, guides.top)
    bottom = _nearest(box.bottom, guides.bottom)
    if top is not None and (bottom is None or abs(top.delta) <= abs(bottom.delta)):
        y = top.line
    elif bottom is not None:
        y = bottom.line - box.height

    return x, y


def snap_position(
    box: Box,
    others: Iterable[Placeholder],
    threshold: float = SNAP_THRESHOLD,
) -> tuple[float, float, GuideSet]:
    """Snap a tentative position and return the guides visible after the snap."""
    others = list(others)
    x, y = apply_guides(box, compute_guides(box, others, threshold))
    snapped = Box(x, y, box.width, box.height)
    return x, y, compute_guides(snapped, others, threshold)


def clamp_position(
    x: float,
    y: float,
    width: float,
    container_width: float | None = None,
) -> tuple[float, float]:
    if container_width is not None:
        x = min(x, container_width - width)
    return max(0.0, x), max(0.0, y)


def handle_corner(handle: ResizeHandle, box: Box) -> tuple[float, float]:
    """Position of the corner a handle sits on."""
    x = box.right if handle in (ResizeHandle.SE, ResizeHandle.NE) else box.x
    y = box.bottom if handle in (ResizeHandle.SE, ResizeHandle.SW) else box.y
    return x, y


def anchor_corner(handle: ResizeHandle, box: Box) -> tuple[float, float]:
    """The corner diagonally opposite ``handle``; it stays fixed during a resize."""
    x = box.x if handle in (ResizeHandle.SE, ResizeHandle.NE) else box.right
    y = box.y if handle in (ResizeHandle.SE, ResizeHandle.SW) else box.bottom
    return x, y


def resize_box(
    handle: ResizeHandle,
    pointer_x: float,
    pointer_y: float,
    anchor_x: float,
    anchor_y: float,
) -> Box:
    if handle in (ResizeHandle.SE, ResizeHandle.NE):
        width = max(MIN_WIDTH, pointer_x - anchor_x)
        x = anchor_x
    else:
        width = max(MIN_WIDTH, anchor_x - pointer_x)
        x = anchor_x - width

    if handle in (ResizeHandle.SE, ResizeHandle.SW):
        height = max(MIN_HEIGHT, pointer_y - anchor_y)
        y = anchor_y
    else:
        height = max(MIN_HEIGHT, anchor_y - pointer_y)
        y = anchor_y - height

    return Box(x, y, width, height)
