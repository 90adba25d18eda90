"""PDF loading helpers."""

from __future__ import annotations

from pathlib import Path

import fitz

from docsign.model.document import PdfDocument


class PdfLoadError(RuntimeError):
    """Raised when a PDF cannot be opened."""


def load_pdf(source: str | Path | bytes) -> PdfDocument:
    """Open a PDF from a path or from raw bytes.

    The document is always opened from an in-memory copy so the source
    file is never held open or modified.
    """
    path: Path | None = None
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        path = Path(source)
        if not path.exists():
            raise PdfLoadError(f"File not found: {path}")
        data = path.read_bytes()

    try:
        handle = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:  # PyMuPDF raises several unrelated types here
        raise PdfLoadError(f"Failed to open PDF: {path or 'in-memory document'}") from exc

    if handle.page_count == 0:
        handle.close()
        raise PdfLoadError(f"PDF has no pages: {path or 'in-memory document'}")

    return PdfDocument(data=data, handle=handle, path=path)
