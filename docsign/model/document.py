"""Document model for a loaded source PDF."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import fitz


@dataclass(slots=True)
class PdfDocument:
    data: bytes
    handle: fitz.Document
    path: Path | None = None

    @property
    def page_count(self) -> int:
        return self.handle.page_count

    @property
    def name(self) -> str:
        return self.path.name if self.path is not None else "document.pdf"

    def page_size(self, page: int) -> tuple[float, float]:
        """Width and height in points of a 1-based page."""
        rect = self.handle.load_page(page - 1).rect
        return float(rect.width), float(rect.height)

    def close(self) -> None:
        if not self.handle.is_closed:
            self.handle.close()
