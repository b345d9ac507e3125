"""Render conditions raised by the transform, field renderer and composer."""

from __future__ import annotations


class RenderError(RuntimeError):
    """Base class for deterministic render failures."""


class InvalidGeometry(RenderError):
    """Raised for non-positive extents, negative origins or a degenerate page."""


class UnsupportedFieldKind(RenderError):
    """Raised when a field declares a kind the renderer does not implement."""

    def __init__(self, kind: object, field_name: str = "") -> None:
        self.kind = kind
        self.field_name = field_name
        label = f" on field '{field_name}'" if field_name else ""
        super().__init__(f"Unsupported field kind {kind!r}{label}")


class PageIndexOutOfRange(RenderError):
    """Raised when a template has more pages than its base document."""

    def __init__(self, page_index: int, page_count: int) -> None:
        self.page_index = page_index
        self.page_count = page_count
        super().__init__(
            f"Template page {page_index + 1} has no base document page "
            f"(base document has {page_count} page(s))"
        )
