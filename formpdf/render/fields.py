"""Per-kind layout of a single field into draw primitives."""

from __future__ import annotations

import re
from typing import Any, Callable

from reportlab.pdfbase import pdfmetrics

from formpdf import config
from formpdf.model.field import FieldType, FormField
from formpdf.render.errors import UnsupportedFieldKind
from formpdf.render.primitives import (
    DrawGlyph,
    DrawLines,
    DrawRect,
    DrawText,
    Primitive,
    TextLine,
)
from formpdf.render.transform import Box, Target, field_box

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_FALSE_STRINGS = frozenset({"", "false", "0", "off", "no"})


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    # Integral floats print without a fraction, 3.0 as "3"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def is_checked(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def split_lines(text: str) -> list[str]:
    return _LINE_BREAK.split(text)


def visible_line_count(line_total: int, font_size: float, height: float) -> int:
    """Number of stacked lines whose top lies strictly inside ``height``."""
    line_height = font_size * config.LINE_HEIGHT_FACTOR
    count = 0
    while count < line_total and count * line_height < height:
        count += 1
    return count


class FieldRenderer:
    """Lays out fields for one target space.

    ``render`` is the data path: absent values produce nothing. ``render_design``
    is the design path: outlines and placeholder labels, never data.
    """

    def __init__(self, target: Target, font_name: str = config.DEFAULT_FONT_NAME) -> None:
        self.target = target
        self.font_name = font_name
        self._layouts: dict[FieldType, Callable[[FormField, Box, Any], list[Primitive]]] = {
            FieldType.TEXT: self._single_line,
            FieldType.NUMBER: self._single_line,
            FieldType.EMAIL: self._single_line,
            FieldType.DATE: self._single_line,
            FieldType.MULTILINE_TEXT: self._multiline,
            FieldType.BOOLEAN: self._checkbox,
        }

    def render(self, field: FormField, value: Any) -> list[Primitive]:
        layout = self._layout_for(field)
        box = field_box(field, self.target)
        if value is None:
            return []
        return layout(field, box, value)

    def render_design(self, field: FormField) -> list[Primitive]:
        self._layout_for(field)
        box = field_box(field, self.target)
        if field.field_type is FieldType.BOOLEAN:
            return self._checkbox(field, box, False, color=config.OUTLINE_COLOR)

        label = field.placeholder or field.type_name
        outline = DrawRect(box, config.CHECKBOX_BORDER_WIDTH * self.target.scale, config.OUTLINE_COLOR)
        if field.field_type is FieldType.MULTILINE_TEXT:
            text = self._multiline(field, box, label, color=config.PLACEHOLDER_COLOR)
        else:
            text = self._single_line(field, box, label, color=config.PLACEHOLDER_COLOR)
        return [outline, *text]

    def _layout_for(self, field: FormField) -> Callable[[FormField, Box, Any], list[Primitive]]:
        layout = self._layouts.get(field.field_type)  # type: ignore[arg-type]
        if layout is None:
            raise UnsupportedFieldKind(field.field_type, field.name)
        return layout

    def _baseline_offset(self, band_height: float, font_size: float) -> float:
        ascent, descent = pdfmetrics.getAscentDescent(self.font_name, font_size)
        return (band_height - (ascent - descent)) / 2.0 + ascent

    def _single_line(
        self,
        field: FormField,
        box: Box,
        value: Any,
        color: str = config.TEXT_COLOR,
    ) -> list[Primitive]:
        scale = self.target.scale
        font_size = field.font_size * scale
        baseline = box.below_top(self._baseline_offset(box.height, font_size))
        text = " ".join(split_lines(stringify(value)))
        return [
            DrawText(
                x=box.left + config.TEXT_PADDING * scale,
                baseline=baseline,
                text=text,
                font_name=self.font_name,
                font_size=font_size,
                clip=box,
                color=color,
            )
        ]

    def _multiline(
        self,
        field: FormField,
        box: Box,
        value: Any,
        color: str = config.TEXT_COLOR,
    ) -> list[Primitive]:
        scale = self.target.scale
        lines = split_lines(stringify(value))
        visible = visible_line_count(len(lines), field.font_size, field.height)

        font_size = field.font_size * scale
        line_height = font_size * config.LINE_HEIGHT_FACTOR
        offset = self._baseline_offset(line_height, font_size)
        runs = tuple(
            TextLine(baseline=box.below_top(index * line_height + offset), text=text)
            for index, text in enumerate(lines[:visible])
        )
        return [
            DrawLines(
                x=box.left + config.TEXT_PADDING * scale,
                lines=runs,
                font_name=self.font_name,
                font_size=font_size,
                clip=box,
                color=color,
            )
        ]

    def _checkbox(
        self,
        field: FormField,
        box: Box,
        value: Any,
        color: str = config.TEXT_COLOR,
    ) -> list[Primitive]:
        del field
        square = box.square(min(box.width, box.height))
        primitives: list[Primitive] = [
            DrawRect(square, config.CHECKBOX_BORDER_WIDTH * self.target.scale, color)
        ]
        if is_checked(value):
            center_y = square.below_top(square.height / 2.0)
            primitives.append(
                DrawGlyph(
                    center_x=square.left + square.width / 2.0,
                    center_y=center_y,
                    size=square.width * config.CHECK_GLYPH_RATIO,
                    clip=square,
                    color=color,
                )
            )
        return primitives
