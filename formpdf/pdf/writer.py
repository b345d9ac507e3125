"""Filled PDF export: reportlab overlay drawn from primitives, merged with pypdf."""

from __future__ import annotations

from contextlib import contextmanager
from io import BytesIO
import logging
from pathlib import Path
from typing import Iterator

from pypdf import PdfReader, PdfWriter, Transformation
from pypdf.generic import ArrayObject, NameObject
from reportlab.lib.colors import HexColor
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from formpdf import config
from formpdf.model.template import DataRecord, FormTemplate
from formpdf.pdf.loader import base_page_sizes
from formpdf.render.composer import RenderedDocument, RenderMode, compose
from formpdf.render.primitives import DrawGlyph, DrawLines, DrawRect, DrawText, Primitive
from formpdf.render.transform import Box, Origin

logger = logging.getLogger(__name__)

CHECK_FONT = "ZapfDingbats"
CHECK_CHAR = "4"


class PdfWriteError(RuntimeError):
    """Raised when output generation fails."""


def write_filled_pdf(
    template: FormTemplate,
    record: DataRecord | None,
    output_path: str | Path | None = None,
    *,
    mode: RenderMode = RenderMode.EXPORT,
    strip_widgets: bool = True,
) -> bytes:
    """Render ``record`` into ``template`` and return the finished PDF bytes.

    Render conditions propagate unchanged; failures inside pypdf or
    reportlab are reported as ``PdfWriteError``.
    """
    base_sizes = base_page_sizes(template.base_pdf) if template.base_pdf else None
    document = compose(
        template,
        record,
        origin=Origin.BOTTOM_LEFT,
        mode=mode,
        base_sizes=base_sizes,
    )

    try:
        overlay = draw_document(document)
        if template.base_pdf:
            data = _merge_onto_base(template.base_pdf, overlay, strip_widgets)
        else:
            data = overlay.getvalue()
    except PdfWriteError:
        raise
    except Exception as exc:
        raise PdfWriteError("Failed to generate PDF") from exc

    if output_path is not None:
        output = Path(output_path)
        try:
            output.write_bytes(data)
        except OSError as exc:
            raise PdfWriteError(f"Failed to write output PDF: {output}") from exc
        logger.info("Wrote %d page(s) to %s", len(document.pages), output)

    return data


def draw_document(document: RenderedDocument) -> BytesIO:
    if document.origin is not Origin.BOTTOM_LEFT:
        raise PdfWriteError("PDF export needs primitives composed for a bottom-left origin")

    buffer = BytesIO()
    first = document.pages[0] if document.pages else None
    pagesize = (first.width, first.height) if first else config.DEFAULT_PAGE_SIZE
    report = canvas.Canvas(buffer, pagesize=pagesize, invariant=1)
    report.setCreator("formpdf")

    for page in document.pages:
        report.setPageSize((page.width, page.height))
        for primitive in page.primitives:
            draw_primitive(report, primitive)
        report.showPage()

    report.save()
    buffer.seek(0)
    return buffer


def draw_primitive(report: canvas.Canvas, primitive: Primitive) -> None:
    if isinstance(primitive, DrawRect):
        box = primitive.box
        report.setLineWidth(primitive.line_width)
        report.setStrokeColor(HexColor(primitive.color))
        report.rect(box.x, box.y, box.width, box.height, stroke=1, fill=0)
    elif isinstance(primitive, DrawText):
        with _clipped(report, primitive.clip):
            report.setFont(primitive.font_name, primitive.font_size)
            report.setFillColor(HexColor(primitive.color))
            report.drawString(primitive.x, primitive.baseline, primitive.text)
    elif isinstance(primitive, DrawLines):
        with _clipped(report, primitive.clip):
            report.setFont(primitive.font_name, primitive.font_size)
            report.setFillColor(HexColor(primitive.color))
            for line in primitive.lines:
                report.drawString(primitive.x, line.baseline, line.text)
    elif isinstance(primitive, DrawGlyph):
        ascent, descent = pdfmetrics.getAscentDescent(CHECK_FONT, primitive.size)
        width = pdfmetrics.stringWidth(CHECK_CHAR, CHECK_FONT, primitive.size)
        with _clipped(report, primitive.clip):
            report.setFont(CHECK_FONT, primitive.size)
            report.setFillColor(HexColor(primitive.color))
            report.drawString(
                primitive.center_x - width / 2.0,
                primitive.center_y - (ascent + descent) / 2.0,
                CHECK_CHAR,
            )
    else:
        raise PdfWriteError(f"Unknown draw primitive: {type(primitive).__name__}")


@contextmanager
def _clipped(report: canvas.Canvas, box: Box) -> Iterator[None]:
    report.saveState()
    try:
        path = report.beginPath()
        path.rect(box.x, box.y, box.width, box.height)
        report.clipPath(path, stroke=0, fill=0)
        yield
    finally:
        report.restoreState()


def _merge_onto_base(base_pdf: bytes, overlay: BytesIO, strip_widgets: bool) -> bytes:
    reader = PdfReader(BytesIO(base_pdf))
    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)

    if strip_widgets:
        _strip_existing_form_widgets(writer)

    overlay_reader = PdfReader(overlay)
    for page_index, overlay_page in enumerate(overlay_reader.pages):
        target_page = writer.pages[page_index]
        left = float(target_page.mediabox.left)
        bottom = float(target_page.mediabox.bottom)
        if left or bottom:
            target_page.merge_transformed_page(
                overlay_page, Transformation().translate(left, bottom)
            )
        else:
            target_page.merge_page(overlay_page)

    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def _strip_existing_form_widgets(writer: PdfWriter) -> None:
    for page in writer.pages:
        annots = page.get("/Annots")
        annots = annots.get_object() if annots is not None else None
        if not annots:
            continue

        kept = ArrayObject()
        for annot_ref in annots:
            annot = annot_ref.get_object()
            if annot.get("/Subtype") == "/Widget":
                continue
            kept.append(annot_ref)

        if kept:
            page[NameObject("/Annots")] = kept
        elif "/Annots" in page:
            del page["/Annots"]

    if "/AcroForm" in writer._root_object:
        del writer._root_object["/AcroForm"]
