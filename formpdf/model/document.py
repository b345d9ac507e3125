"""Base document model: the PDF a template's fields are overlaid onto."""

from __future__ import annotations

from dataclasses import dataclass

import fitz


@dataclass(slots=True)
class PdfDocument:
    data: bytes
    handle: fitz.Document

    @property
    def page_count(self) -> int:
        return self.handle.page_count

    def page_size(self, page_index: int) -> tuple[float, float]:
        rect = self.handle.load_page(page_index).rect
        return float(rect.width), float(rect.height)

    def page_sizes(self) -> list[tuple[float, float]]:
        return [self.page_size(index) for index in range(self.page_count)]

    def close(self) -> None:
        if not self.handle.is_closed:
            self.handle.close()

    def __enter__(self) -> PdfDocument:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
