"""Import existing AcroForm fields from a PDF into a template."""

from __future__ import annotations

from io import BytesIO
import logging
import re

from pypdf import PdfReader

from formpdf import config
from formpdf.model.field import FieldType, FormField
from formpdf.model.template import FormTemplate
from formpdf.render.transform import pdf_rect_to_design

logger = logging.getLogger(__name__)

FLAG_REQUIRED = 1 << 1
FLAG_MULTILINE = 1 << 12
FLAG_RADIO = 1 << 15
FLAG_PUSHBUTTON = 1 << 16

_FONT_SIZE = re.compile(r"(\d+(?:\.\d+)?)\s+Tf")


class PdfImportError(RuntimeError):
    """Raised when existing form fields cannot be imported."""


def import_template(data: bytes) -> FormTemplate:
    """Build a template whose base PDF is ``data`` and whose pages hold its widgets."""
    return FormTemplate(schemas=import_pdf_fields(data), base_pdf=data)


def import_pdf_fields(data: bytes) -> list[list[FormField]]:
    imported: list[list[FormField]] = []

    try:
        reader = PdfReader(BytesIO(data))
        for page_index, page in enumerate(reader.pages):
            page_height = float(page.mediabox.height)
            page_bottom = float(page.mediabox.bottom)
            page_left = float(page.mediabox.left)
            page_fields: list[FormField] = []
            seen: set[str] = set()

            annots = page.get("/Annots")
            annots = annots.get_object() if annots is not None else []
            for annot_ref in annots:
                annot = annot_ref.get_object()
                if annot.get("/Subtype") != "/Widget":
                    continue

                parent = annot.get("/Parent")
                parent_obj = parent.get_object() if parent is not None else None

                pdf_type = _inherited(annot, parent_obj, "/FT")
                rect = annot.get("/Rect")
                if pdf_type is None or rect is None:
                    continue

                flags = int(_inherited(annot, parent_obj, "/Ff") or 0)
                field_type = _field_type(pdf_type, flags)
                if field_type is None:
                    continue

                name = str(_inherited(annot, parent_obj, "/T") or "")
                if not name or name in seen:
                    logger.warning("Skipping unnamed or repeated widget '%s' on page %d", name, page_index + 1)
                    continue
                seen.add(name)

                x, y, width, height = pdf_rect_to_design(
                    float(rect[0]) - page_left,
                    float(rect[1]) - page_bottom,
                    float(rect[2]) - page_left,
                    float(rect[3]) - page_bottom,
                    page_height,
                )
                if width <= 0 or height <= 0:
                    logger.warning("Skipping zero-size widget '%s' on page %d", name, page_index + 1)
                    continue

                page_fields.append(
                    FormField(
                        name=name,
                        field_type=field_type,
                        x=max(0.0, x),
                        y=max(0.0, y),
                        width=width,
                        height=height,
                        font_size=_font_size(_inherited(annot, parent_obj, "/DA")),
                        required=bool(flags & FLAG_REQUIRED),
                    )
                )
            imported.append(page_fields)
    except Exception as exc:
        raise PdfImportError("Failed to import form fields") from exc

    return imported


def _field_type(pdf_type: object, flags: int) -> FieldType | None:
    if pdf_type == "/Tx":
        return FieldType.MULTILINE_TEXT if flags & FLAG_MULTILINE else FieldType.TEXT
    if pdf_type == "/Btn" and not flags & (FLAG_RADIO | FLAG_PUSHBUTTON):
        return FieldType.BOOLEAN
    return None


def _font_size(appearance: object) -> float:
    match = _FONT_SIZE.search(str(appearance or ""))
    if match is None or float(match.group(1)) <= 0:
        # 0 Tf means auto size
        return config.DEFAULT_FONT_SIZE
    return float(match.group(1))


def _inherited(annot, parent_obj, key: str):
    value = annot.get(key)
    if value is None and parent_obj is not None:
        value = parent_obj.get(key)
    return value
