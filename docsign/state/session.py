"""In-memory editor state: placed placeholders and the active pointer interaction."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum

from docsign.core.config import settings
from docsign.layout.capacity import recommend_font_size
from docsign.layout.fonts import FontAnalysis, detect_font_at_position
from docsign.layout.guides import (
    Box,
    GuideSet,
    ResizeHandle,
    anchor_corner,
    clamp_position,
    compute_guides,
    handle_corner,
    resize_box,
    snap_position,
)
from docsign.model.placeholder import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_SIZES,
    FieldType,
    Placeholder,
    new_placeholder_id,
)

DUPLICATE_OFFSET = 12.0


class InteractionState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


@dataclass(frozen=True, slots=True)
class Interaction:
    state: InteractionState
    placeholder_id: str
    # Pointer position relative to the dragged point (top-left or handle corner).
    offset: tuple[float, float] = (0.0, 0.0)
    handle: ResizeHandle | None = None
    anchor: tuple[float, float] | None = None

    def __post_init__(self) -> None:
        if self.state is InteractionState.RESIZING and (self.handle is None or self.anchor is None):
            raise ValueError("A resize interaction needs both a handle and an anchor corner")


@dataclass(slots=True)
class EditorSession:
    placeholders_by_page: dict[int, list[Placeholder]] = field(default_factory=dict)
    font_analysis: FontAnalysis | None = None
    snap_enabled: bool = True
    snap_threshold: float = settings.SNAP_THRESHOLD
    container_width: float | None = None
    guides: GuideSet = field(default_factory=GuideSet)
    interaction: Interaction | None = None
    selected_id: str | None = None
    _key_counter: int = 1

    @property
    def state(self) -> InteractionState:
        return self.interaction.state if self.interaction is not None else InteractionState.IDLE

    # -- placeholder collection -------------------------------------------------

    def get_page_placeholders(self, page: int) -> list[Placeholder]:
        return self.placeholders_by_page.get(page, [])

    def all_placeholders(self) -> list[Placeholder]:
        merged: list[Placeholder] = []
        for page in sorted(self.placeholders_by_page):
            merged.extend(self.placeholders_by_page[page])
        return merged

    def load(self, placeholders: list[Placeholder]) -> None:
        self.placeholders_by_page = {}
        for placeholder in placeholders:
            self.placeholders_by_page.setdefault(placeholder.page, []).append(placeholder)
        self.selected_id = None
        self.interaction = None
        self.guides.clear()
        self._sync_key_counter()

    def find(self, placeholder_id: str) -> Placeholder | None:
        for placeholder in self.all_placeholders():
            if placeholder.id == placeholder_id:
                return placeholder
        return None

    @property
    def selected(self) -> Placeholder | None:
        return self.find(self.selected_id) if self.selected_id else None

    def add_placeholder(self, field_type: FieldType, x: float, y: float, page: int) -> Placeholder:
        width, height = DEFAULT_SIZES[field_type]
        font_size = DEFAULT_FONT_SIZE
        font_family = DEFAULT_FONT_FAMILY
        if self.font_analysis is not None:
            detected = detect_font_at_position(x, y, self.font_analysis)
            font_size = recommend_font_size(width, field_type.value, detected.size)
            font_family = detected.font

        number = self._next_key_number()
        x, y = clamp_position(x, y, width, self.container_width)
        placeholder = Placeholder(
            key=f"{field_type.value}_{number}",
            label=f"{field_type.label} {number}",
            x=x,
            y=y,
            width=width,
            height=height,
            page=page,
            field_type=field_type,
            font_size=font_size,
            font_family=font_family,
            required=field_type is FieldType.SIGNATURE,
        )
        self.placeholders_by_page.setdefault(page, []).append(placeholder)
        self.selected_id = placeholder.id
        return placeholder

    def remove_placeholder(self, placeholder_id: str) -> bool:
        for page_placeholders in self.placeholders_by_page.values():
            for index, placeholder in enumerate(page_placeholders):
                if placeholder.id == placeholder_id:
                    page_placeholders.pop(index)
                    if self.selected_id == placeholder_id:
                        self.selected_id = None
                    if self.interaction and self.interaction.placeholder_id == placeholder_id:
                        self.end_interaction()
                    return True
        return False

    def duplicate_placeholder(self, placeholder_id: str) -> Placeholder | None:
        source = self.find(placeholder_id)
        if source is None:
            return None

        duplicate = deepcopy(source)
        number = self._next_key_number()
        duplicate.id = new_placeholder_id()
        duplicate.key = f"{source.field_type.value}_{number}"
        duplicate.label = f"{source.label} (copy)"
        duplicate.x, duplicate.y = clamp_position(
            source.x + DUPLICATE_OFFSET,
            source.y + DUPLICATE_OFFSET,
            source.width,
            self.container_width,
        )
        self.placeholders_by_page.setdefault(duplicate.page, []).append(duplicate)
        self.selected_id = duplicate.id
        return duplicate

    # -- pointer state machine --------------------------------------------------

    def begin_drag(self, placeholder_id: str, pointer_x: float, pointer_y: float) -> bool:
        if self.interaction is not None:
            return False
        placeholder = self.find(placeholder_id)
        if placeholder is None:
            return False

        self.selected_id = placeholder_id
        self.interaction = Interaction(
            state=InteractionState.DRAGGING,
            placeholder_id=placeholder_id,
            offset=(pointer_x - placeholder.x, pointer_y - placeholder.y),
        )
        self._refresh_guides(placeholder)
        return True

    def begin_resize(
        self,
        placeholder_id: str,
        handle: ResizeHandle,
        pointer_x: float,
        pointer_y: float,
    ) -> bool:
        if self.interaction is not None:
            return False
        placeholder = self.find(placeholder_id)
        if placeholder is None:
            return False

        box = Box.of(placeholder)
        corner_x, corner_y = handle_corner(handle, box)
        self.selected_id = placeholder_id
        self.interaction = Interaction(
            state=InteractionState.RESIZING,
            placeholder_id=placeholder_id,
            offset=(pointer_x - corner_x, pointer_y - corner_y),
            handle=handle,
            anchor=anchor_corner(handle, box),
        )
        return True

    def pointer_move(self, pointer_x: float, pointer_y: float) -> Placeholder | None:
        """Advance the active interaction; returns the placeholder that changed."""
        interaction = self.interaction
        if interaction is None:
            return None
        placeholder = self.find(interaction.placeholder_id)
        if placeholder is None:
            self.end_interaction()
            return None

        offset_x, offset_y = interaction.offset
        if interaction.state is InteractionState.DRAGGING:
            x = pointer_x - offset_x
            y = pointer_y - offset_y
            if self.snap_enabled:
                box = Box(x, y, placeholder.width, placeholder.height)
                x, y, self.guides = snap_position(box, self._others(placeholder), self.snap_threshold)
            x, y = clamp_position(x, y, placeholder.width, self.container_width)
            placeholder.update(x=x, y=y)
        elif interaction.state is InteractionState.RESIZING:
            anchor_x, anchor_y = interaction.anchor
            box = resize_box(
                interaction.handle,
                pointer_x - offset_x,
                pointer_y - offset_y,
                anchor_x,
                anchor_y,
            )
            placeholder.update(x=box.x, y=box.y, width=box.width, height=box.height)
        return placeholder

    def pointer_up(self) -> None:
        self.end_interaction()

    def end_interaction(self) -> None:
        self.interaction = None
        self.guides.clear()

    # -- helpers ----------------------------------------------------------------

    def _others(self, placeholder: Placeholder) -> list[Placeholder]:
        return [
            other
            for other in self.get_page_placeholders(placeholder.page)
            if other.id != placeholder.id
        ]

    def _refresh_guides(self, placeholder: Placeholder) -> None:
        if not self.snap_enabled:
            self.guides.clear()
            return
        self.guides = compute_guides(
            Box.of(placeholder), self._others(placeholder), self.snap_threshold
        )

    def _next_key_number(self) -> int:
        number = self._key_counter
        self._key_counter += 1
        return number

    def _sync_key_counter(self) -> None:
        highest = 0
        for placeholder in self.all_placeholders():
            parts = placeholder.key.rsplit("_", maxsplit=1)
            if len(parts) != 2:
                continue
            try:
                value = int(parts[1])
            except ValueError:
                continue
            highest = max(highest, value)
        self._key_counter = highest + 1
