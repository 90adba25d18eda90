"""Placeholder model definitions."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping, TypeVar
import uuid

_E = TypeVar("_E", bound=Enum)

MIN_WIDTH = 30.0
MIN_HEIGHT = 20.0

DEFAULT_FONT_SIZE = 11.0
DEFAULT_FONT_FAMILY = "Helvetica"
STANDARD_FONTS = (
    "Helvetica",
    "Helvetica-Bold",
    "Times-Roman",
    "Times-Bold",
    "Courier",
    "Courier-Bold",
)


class PlaceholderError(ValueError):
    """Raised when a placeholder record is malformed."""


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    EMAIL = "email"
    CHECKBOX = "checkbox"
    SIGNATURE = "signature"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# Size of a freshly dropped placeholder, per type.
DEFAULT_SIZES: dict[FieldType, tuple[float, float]] = {
    FieldType.TEXT: (200.0, 35.0),
    FieldType.SIGNATURE: (250.0, 80.0),
    FieldType.DATE: (150.0, 35.0),
    FieldType.EMAIL: (200.0, 35.0),
    FieldType.NUMBER: (120.0, 35.0),
    FieldType.CHECKBOX: (25.0, 25.0),
}


def new_placeholder_id() -> str:
    return uuid.uuid4().hex


def _coerce(enum_type: type[_E], value: Any, key: str, attribute: str) -> _E:
    try:
        return enum_type(value)
    except ValueError as exc:
        raise PlaceholderError(f"Placeholder {key!r} has unknown {attribute} {value!r}") from exc


@dataclass(slots=True)
class Placeholder:
    key: str
    label: str
    x: float
    y: float
    width: float
    height: float
    page: int = 1
    field_type: FieldType = FieldType.TEXT
    font_size: float = DEFAULT_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY
    align: Align = Align.LEFT
    required: bool = False
    default_value: str = ""
    max_length: int | None = None
    id: str = field(default_factory=new_placeholder_id)

    def __post_init__(self) -> None:
        self.field_type = _coerce(FieldType, self.field_type, self.key, "type")
        self.align = _coerce(Align, self.align, self.key, "align")
        self.clamp_size()

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def clamp_size(self) -> None:
        self.width = max(MIN_WIDTH, float(self.width))
        self.height = max(MIN_HEIGHT, float(self.height))

    def update(self, **changes: Any) -> None:
        """Apply attribute changes, then re-clamp to the minimum size."""
        for name, value in changes.items():
            if name not in _EDITABLE_FIELDS:
                raise PlaceholderError(f"Unknown or read-only placeholder attribute: {name}")
            if name == "field_type":
                value = _coerce(FieldType, value, self.key, "type")
            elif name == "align":
                value = _coerce(Align, value, self.key, "align")
            setattr(self, name, value)
        self.clamp_size()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "key": self.key,
            "label": self.label,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "page": self.page,
            "type": self.field_type.value,
            "fontSize": self.font_size,
            "fontFamily": self.font_family,
            "align": self.align.value,
            "required": self.required,
        }
        if self.default_value:
            data["defaultValue"] = self.default_value
        if self.max_length is not None:
            data["maxLength"] = self.max_length
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Placeholder:
        try:
            key = str(data["key"])
            x = float(data["x"])
            y = float(data["y"])
            width = float(data["width"])
            height = float(data["height"])
            page = int(data.get("page", 1))
            font_size = float(data.get("fontSize") or DEFAULT_FONT_SIZE)
        except KeyError as exc:
            raise PlaceholderError(f"Placeholder is missing field {exc.args[0]!r}") from exc
        except (TypeError, ValueError) as exc:
            raise PlaceholderError(f"Placeholder {data.get('key')!r} has non-numeric geometry") from exc

        if not key:
            raise PlaceholderError("Placeholder key must not be empty")
        if page < 1:
            raise PlaceholderError(f"Placeholder {key!r} has invalid page {page}")
        if font_size <= 0:
            raise PlaceholderError(f"Placeholder {key!r} has invalid font size {font_size}")

        field_type = _coerce(FieldType, data.get("type", FieldType.TEXT.value), key, "type")
        align = _coerce(Align, data.get("align") or Align.LEFT.value, key, "align")

        max_length = data.get("maxLength")
        return cls(
            id=str(data.get("id") or new_placeholder_id()),
            key=key,
            label=str(data.get("label") or key),
            x=x,
            y=y,
            width=width,
            height=height,
            page=page,
            field_type=field_type,
            font_size=font_size,
            font_family=str(data.get("fontFamily") or DEFAULT_FONT_FAMILY),
            align=align,
            required=bool(data.get("required", False)),
            default_value=str(data.get("defaultValue") or ""),
            max_length=int(max_length) if max_length is not None else None,
        )


_EDITABLE_FIELDS = frozenset(f.name for f in fields(Placeholder)) - {"id"}


def placeholders_from_records(records: list[Mapping[str, Any]]) -> list[Placeholder]:
    return [Placeholder.from_dict(record) for record in records]
