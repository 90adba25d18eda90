"""Template model: a document plus its placeholder array."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any, Mapping

from docsign.model.placeholder import Placeholder, PlaceholderError, new_placeholder_id


class DuplicateKeyError(PlaceholderError):
    """Raised when two placeholders of a template share a key."""

    def __init__(self, keys: list[str]) -> None:
        super().__init__(f"Duplicate placeholder keys: {', '.join(keys)}")
        self.keys = keys


@dataclass(slots=True)
class Template:
    title: str
    placeholders: list[Placeholder] = field(default_factory=list)
    file_name: str = ""
    owner_id: str = ""
    api_key: str | None = None
    webhook_url: str | None = None
    id: str = field(default_factory=new_placeholder_id)

    def duplicate_keys(self) -> list[str]:
        counts = Counter(placeholder.key for placeholder in self.placeholders)
        return sorted(key for key, count in counts.items() if count > 1)

    def ensure_unique_keys(self) -> None:
        duplicates = self.duplicate_keys()
        if duplicates:
            raise DuplicateKeyError(duplicates)

    def missing_required(self, values: Mapping[str, Any]) -> list[str]:
        """Keys of required placeholders with no usable value."""
        missing: list[str] = []
        for placeholder in self.placeholders:
            if not placeholder.required or placeholder.key in missing:
                continue
            value = values.get(placeholder.key)
            if value is None or value == "":
                missing.append(placeholder.key)
        return missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "fileName": self.file_name,
            "ownerId": self.owner_id,
            "apiKey": self.api_key,
            "webhookUrl": self.webhook_url,
            "placeholders": [placeholder.to_dict() for placeholder in self.placeholders],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Template:
        return cls(
            id=str(data.get("id") or new_placeholder_id()),
            title=str(data.get("title") or "Untitled Template"),
            file_name=str(data.get("fileName") or ""),
            owner_id=str(data.get("ownerId") or ""),
            api_key=data.get("apiKey"),
            webhook_url=data.get("webhookUrl"),
            placeholders=[Placeholder.from_dict(item) for item in data.get("placeholders") or []],
        )


def save_template(template: Template, path: str | Path) -> None:
    template.ensure_unique_keys()
    Path(path).write_text(json.dumps(template.to_dict(), indent=2), encoding="utf-8")


def load_template(path: str | Path) -> Template:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise PlaceholderError(f"Template file does not contain an object: {path}")
    return Template.from_dict(data)
