"""PDF loading helpers."""

from __future__ import annotations

from io import BytesIO
import logging
from pathlib import Path

import fitz
from pypdf import PdfReader

from formpdf.model.document import PdfDocument

logger = logging.getLogger(__name__)


class PdfLoadError(RuntimeError):
    """Raised when a PDF cannot be opened."""


def read_pdf_bytes(path: str | Path) -> bytes:
    source_path = Path(path)
    if not source_path.exists():
        raise PdfLoadError(f"File not found: {source_path}")
    try:
        data = source_path.read_bytes()
    except OSError as exc:
        raise PdfLoadError(f"Failed to read PDF: {source_path}") from exc

    # Reject files PyMuPDF cannot parse before they reach a template
    open_pdf(data).close()
    return data


def open_pdf(data: bytes) -> PdfDocument:
    try:
        handle = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:  # pragma: no cover - defensive for PyMuPDF errors
        raise PdfLoadError("Failed to open PDF data") from exc

    if handle.page_count == 0:
        handle.close()
        raise PdfLoadError("PDF has no pages")
    return PdfDocument(data=data, handle=handle)


def base_page_sizes(data: bytes) -> list[tuple[float, float]]:
    """Page sizes in points, in page order, read from the media boxes."""
    try:
        reader = PdfReader(BytesIO(data))
        sizes = [
            (float(page.mediabox.width), float(page.mediabox.height))
            for page in reader.pages
        ]
    except Exception as exc:
        raise PdfLoadError("Failed to read base PDF page sizes") from exc

    logger.debug("Base PDF has %d page(s)", len(sizes))
    return sizes
