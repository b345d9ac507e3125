"""Coordinate conversion between the design surface and render targets.

Fields are laid out on a design surface whose origin is the top-left corner
of the page. Two targets consume them:

- Screen (Qt canvas, raster preview): origin top-left, optionally scaled by a
  zoom factor. The conversion is a pure scale.
- PDF content stream: origin bottom-left, units are points. The vertical axis
  flips around the page height, so the bottom edge of a box lands at
  ``H - (y + height)``. A field pinned to the visual top of the page ends up
  near ``H - height``, not near ``H``.

Every function here is pure and raises ``InvalidGeometry`` instead of
returning degenerate boxes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from formpdf.model.field import FormField
from formpdf.render.errors import InvalidGeometry


class Origin(str, Enum):
    TOP_LEFT = "top-left"
    BOTTOM_LEFT = "bottom-left"


@dataclass(frozen=True, slots=True)
class Target:
    """Output space description: origin convention, page height and scale."""

    origin: Origin
    page_height: float
    scale: float = 1.0

    @classmethod
    def screen(cls, page_height: float, scale: float = 1.0) -> Target:
        return cls(Origin.TOP_LEFT, page_height * scale, scale)

    @classmethod
    def pdf(cls, page_height: float, scale: float = 1.0) -> Target:
        return cls(Origin.BOTTOM_LEFT, page_height, scale)


@dataclass(frozen=True, slots=True)
class Box:
    """Rectangle in output space.

    ``(x, y)`` is the corner nearest the origin: top-left for screen boxes,
    bottom-left for PDF boxes.
    """

    x: float
    y: float
    width: float
    height: float
    origin: Origin = Origin.TOP_LEFT

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        if self.origin is Origin.BOTTOM_LEFT:
            return self.y + self.height
        return self.y

    @property
    def bottom(self) -> float:
        if self.origin is Origin.BOTTOM_LEFT:
            return self.y
        return self.y + self.height

    def below_top(self, distance: float) -> float:
        """Vertical coordinate ``distance`` units below the top edge."""
        if self.origin is Origin.BOTTOM_LEFT:
            return self.top - distance
        return self.top + distance

    def square(self, side: float) -> Box:
        """Box of ``side`` x ``side`` pinned to this box's top-left corner."""
        if self.origin is Origin.BOTTOM_LEFT:
            return Box(self.x, self.top - side, side, side, self.origin)
        return Box(self.x, self.y, side, side, self.origin)


def check_rect(x: float, y: float, width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise InvalidGeometry(f"Field extents must be positive, got {width}x{height}")
    if x < 0 or y < 0:
        raise InvalidGeometry(f"Field origin must be non-negative, got ({x}, {y})")


def to_screen(x: float, y: float, width: float, height: float, scale: float = 1.0) -> Box:
    if scale <= 0:
        raise InvalidGeometry(f"Scale must be positive, got {scale}")
    check_rect(x, y, width, height)
    return Box(x * scale, y * scale, width * scale, height * scale, Origin.TOP_LEFT)


def to_pdf(
    x: float,
    y: float,
    width: float,
    height: float,
    page_height: float,
    scale: float = 1.0,
) -> Box:
    if page_height <= 0:
        raise InvalidGeometry(f"Page height must be positive, got {page_height}")
    if scale <= 0:
        raise InvalidGeometry(f"Scale must be positive, got {scale}")
    check_rect(x, y, width, height)
    return Box(
        x * scale,
        page_height - (y + height) * scale,
        width * scale,
        height * scale,
        Origin.BOTTOM_LEFT,
    )


def field_box(field: FormField, target: Target) -> Box:
    if target.page_height <= 0:
        raise InvalidGeometry(f"Page height must be positive, got {target.page_height}")
    if target.origin is Origin.BOTTOM_LEFT:
        return to_pdf(
            field.x, field.y, field.width, field.height, target.page_height, target.scale
        )
    return to_screen(field.x, field.y, field.width, field.height, target.scale)


def screen_to_design(px: float, py: float, scale: float = 1.0) -> tuple[float, float]:
    if scale <= 0:
        raise InvalidGeometry(f"Scale must be positive, got {scale}")
    return px / scale, py / scale


def pdf_rect_to_design(
    llx: float,
    lly: float,
    urx: float,
    ury: float,
    page_height: float,
) -> tuple[float, float, float, float]:
    """Convert a PDF ``/Rect`` (lower-left, upper-right) to top-left design space."""
    if page_height <= 0:
        raise InvalidGeometry(f"Page height must be positive, got {page_height}")
    left, right = sorted((llx, urx))
    low, high = sorted((lly, ury))
    return left, page_height - high, right - left, high - low
