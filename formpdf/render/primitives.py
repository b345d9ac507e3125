"""Draw primitives shared by every export driver.

Coordinates are absolute in the target space the primitive was produced
for. Text coordinates are baselines. Every text-bearing primitive carries
the field box it must be clipped to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from formpdf import config
from formpdf.render.transform import Box


@dataclass(frozen=True, slots=True)
class DrawRect:
    box: Box
    line_width: float = config.CHECKBOX_BORDER_WIDTH
    color: str = config.TEXT_COLOR


@dataclass(frozen=True, slots=True)
class DrawText:
    x: float
    baseline: float
    text: str
    font_name: str
    font_size: float
    clip: Box
    color: str = config.TEXT_COLOR


@dataclass(frozen=True, slots=True)
class TextLine:
    baseline: float
    text: str


@dataclass(frozen=True, slots=True)
class DrawLines:
    x: float
    lines: tuple[TextLine, ...]
    font_name: str
    font_size: float
    clip: Box
    color: str = config.TEXT_COLOR


@dataclass(frozen=True, slots=True)
class DrawGlyph:
    """Check mark centered on ``(center_x, center_y)`` spanning ``size`` units."""

    center_x: float
    center_y: float
    size: float
    clip: Box
    color: str = config.TEXT_COLOR


Primitive = Union[DrawRect, DrawText, DrawLines, DrawGlyph]
