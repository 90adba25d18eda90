"""Page preview rendering using PyMuPDF."""

from __future__ import annotations

import fitz
from PySide6.QtGui import QImage

# Placeholders are stored in preview pixels that the filler reads as PDF
# points, so the editor preview is rendered at 1:1.
PREVIEW_ZOOM = 1.0


class PdfRenderError(RuntimeError):
    """Raised when a page cannot be rendered."""


def render_page_image(document: fitz.Document, page: int, zoom: float = PREVIEW_ZOOM) -> QImage:
    if page < 1 or page > document.page_count:
        raise PdfRenderError(f"Page out of range: {page}")

    try:
        pdf_page = document.load_page(page - 1)
        matrix = fitz.Matrix(zoom, zoom)
        pix = pdf_page.get_pixmap(matrix=matrix, alpha=False, annots=False)
    except Exception as exc:  # pragma: no cover
        raise PdfRenderError(f"Failed to render page {page}") from exc

    image = QImage(pix.samples, pix.width, pix.height, pix.stride, QImage.Format.Format_RGB888)
    return image.copy()
