"""Import existing AcroForm fields from a PDF as placeholders."""

from __future__ import annotations

from io import BytesIO
import re

from pypdf import PdfReader

from docsign.model.placeholder import DEFAULT_FONT_SIZE, FieldType, Placeholder

_FIELD_TYPES = {
    "/Tx": FieldType.TEXT,
    "/Btn": FieldType.CHECKBOX,
    "/Sig": FieldType.SIGNATURE,
}
_DA_FONT_SIZE = re.compile(r"/[^\s]+\s+([\d.]+)\s+Tf")
_QUADDING = {1: "center", 2: "right"}


class PdfImportError(RuntimeError):
    """Raised when existing form fields cannot be imported."""


def _inherited(annot, parent_obj, key: str):
    value = annot.get(key)
    if value is None and parent_obj is not None:
        value = parent_obj.get(key)
    return value


def import_placeholders(template_pdf: bytes) -> list[Placeholder]:
    """Convert the widgets of an AcroForm into top-down placeholders."""
    imported: list[Placeholder] = []

    try:
        reader = PdfReader(BytesIO(template_pdf))
        for page_number, page in enumerate(reader.pages, start=1):
            page_top = float(page.mediabox.top)
            page_left = float(page.mediabox.left)
            annots = page.get("/Annots") or []
            for annot_ref in annots:
                annot = annot_ref.get_object()
                if annot.get("/Subtype") != "/Widget":
                    continue

                parent = annot.get("/Parent")
                parent_obj = parent.get_object() if parent is not None else None

                field_type = _FIELD_TYPES.get(str(_inherited(annot, parent_obj, "/FT") or ""))
                rect = annot.get("/Rect")
                if field_type is None or rect is None:
                    continue

                llx, lly, urx, ury = (float(value) for value in rect)
                left, right = sorted((llx, urx))
                bottom, top = sorted((lly, ury))

                name = str(_inherited(annot, parent_obj, "/T") or "")
                if not name:
                    continue
                required = bool(int(_inherited(annot, parent_obj, "/Ff") or 0) & 2)

                font_size = DEFAULT_FONT_SIZE
                appearance = _inherited(annot, parent_obj, "/DA")
                match = _DA_FONT_SIZE.search(str(appearance or ""))
                if match and float(match.group(1)) > 0:
                    font_size = float(match.group(1))

                default_value = ""
                if field_type is FieldType.TEXT:
                    default_value = str(_inherited(annot, parent_obj, "/V") or "")

                record = {
                    "key": name,
                    "label": name,
                    "x": left - page_left,
                    "y": page_top - top,
                    "width": right - left,
                    "height": top - bottom,
                    "page": page_number,
                    "type": field_type.value,
                    "fontSize": font_size,
                    "align": _QUADDING.get(int(_inherited(annot, parent_obj, "/Q") or 0), "left"),
                    "required": required,
                    "defaultValue": default_value,
                }
                imported.append(Placeholder.from_dict(record))
    except Exception as exc:
        raise PdfImportError("Failed to import form fields") from exc

    return imported
