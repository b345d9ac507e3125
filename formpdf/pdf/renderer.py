"""Raster preview: base page via PyMuPDF with fields painted on top."""

from __future__ import annotations

import logging
from typing import Sequence

import fitz
from PySide6.QtGui import QColor, QImage, QPainter

from formpdf import config
from formpdf.model.template import DataRecord, FormTemplate
from formpdf.pdf.loader import open_pdf
from formpdf.render.composer import RenderedPage, RenderMode, compose
from formpdf.render.transform import Origin
from formpdf.viewer.painter import paint_primitives

logger = logging.getLogger(__name__)


class PdfRenderError(RuntimeError):
    """Raised when a page cannot be rendered."""


def render_page_image(document: fitz.Document, page_index: int, zoom: float = config.PREVIEW_ZOOM) -> QImage:
    if page_index < 0 or page_index >= document.page_count:
        raise PdfRenderError(f"Page index out of range: {page_index}")

    try:
        page = document.load_page(page_index)
        matrix = fitz.Matrix(zoom, zoom)
        pix = page.get_pixmap(matrix=matrix, alpha=False, annots=False)
    except Exception as exc:  # pragma: no cover - defensive for PyMuPDF errors
        raise PdfRenderError(f"Failed to render page {page_index + 1}") from exc

    image_format = QImage.Format_RGB888
    image = QImage(pix.samples, pix.width, pix.height, pix.stride, image_format)
    return image.copy()


def blank_page_image(width: float, height: float) -> QImage:
    image = QImage(max(1, round(width)), max(1, round(height)), QImage.Format_RGB888)
    image.fill(QColor("white"))
    return image


def render_preview_pages(
    template: FormTemplate,
    record: DataRecord | None,
    zoom: float = config.PREVIEW_ZOOM,
    mode: RenderMode = RenderMode.EXPORT,
    page_indices: Sequence[int] | None = None,
) -> list[QImage]:
    """Rasterize template pages with their fields painted in.

    The whole template is composed before any page is rasterized, so render
    conditions surface without producing partial output.
    """
    if not template.base_pdf:
        document = compose(template, record, origin=Origin.TOP_LEFT, scale=zoom, mode=mode)
        return [
            _paint_page(blank_page_image(page.width, page.height), page)
            for page in _select(document.pages, page_indices)
        ]

    with open_pdf(template.base_pdf) as base:
        document = compose(
            template,
            record,
            origin=Origin.TOP_LEFT,
            scale=zoom,
            mode=mode,
            base_sizes=base.page_sizes(),
        )
        images = [
            _paint_page(render_page_image(base.handle, page.index, zoom), page)
            for page in _select(document.pages, page_indices)
        ]
    logger.debug("Rendered %d preview page(s) at zoom %.2f", len(images), zoom)
    return images


def render_preview_image(
    template: FormTemplate,
    record: DataRecord | None,
    page_index: int,
    zoom: float = config.PREVIEW_ZOOM,
    mode: RenderMode = RenderMode.EXPORT,
) -> QImage:
    if page_index < 0 or page_index >= template.page_count:
        raise PdfRenderError(f"Page index out of range: {page_index}")
    return render_preview_pages(template, record, zoom, mode, [page_index])[0]


def _select(pages: Sequence[RenderedPage], page_indices: Sequence[int] | None) -> list[RenderedPage]:
    if page_indices is None:
        return list(pages)
    return [pages[index] for index in page_indices]


def _paint_page(image: QImage, page: RenderedPage) -> QImage:
    painter = QPainter(image)
    try:
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing, True)
        paint_primitives(painter, page.primitives)
    finally:
        painter.end()
    return image
