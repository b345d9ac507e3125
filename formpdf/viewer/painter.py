"""QPainter adapter: paints screen-space draw primitives."""

from __future__ import annotations

from typing import Iterable

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QPainter, QPainterPath, QPen

from formpdf.render.primitives import DrawGlyph, DrawLines, DrawRect, DrawText, Primitive
from formpdf.render.transform import Box


def box_to_rect(box: Box) -> QRectF:
    return QRectF(box.left, min(box.top, box.bottom), box.width, box.height)


def make_font(font_name: str, font_size: float) -> QFont:
    font = QFont(font_name)
    font.setPixelSize(max(1, round(font_size)))
    return font


def paint_primitives(painter: QPainter, primitives: Iterable[Primitive]) -> None:
    for primitive in primitives:
        paint_primitive(painter, primitive)


def paint_primitive(painter: QPainter, primitive: Primitive) -> None:
    painter.save()
    try:
        if isinstance(primitive, DrawRect):
            pen = QPen(QColor(primitive.color))
            pen.setWidthF(primitive.line_width)
            painter.setPen(pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(box_to_rect(primitive.box))
        elif isinstance(primitive, DrawText):
            painter.setClipRect(box_to_rect(primitive.clip))
            painter.setFont(make_font(primitive.font_name, primitive.font_size))
            painter.setPen(QColor(primitive.color))
            painter.drawText(QPointF(primitive.x, primitive.baseline), primitive.text)
        elif isinstance(primitive, DrawLines):
            painter.setClipRect(box_to_rect(primitive.clip))
            painter.setFont(make_font(primitive.font_name, primitive.font_size))
            painter.setPen(QColor(primitive.color))
            for line in primitive.lines:
                painter.drawText(QPointF(primitive.x, line.baseline), line.text)
        elif isinstance(primitive, DrawGlyph):
            painter.setClipRect(box_to_rect(primitive.clip))
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            size = primitive.size
            cx, cy = primitive.center_x, primitive.center_y
            path = QPainterPath(QPointF(cx - 0.4 * size, cy))
            path.lineTo(QPointF(cx - 0.1 * size, cy + 0.3 * size))
            path.lineTo(QPointF(cx + 0.4 * size, cy - 0.35 * size))
            pen = QPen(QColor(primitive.color))
            pen.setWidthF(max(1.0, size * 0.12))
            painter.setPen(pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawPath(path)
        else:
            raise TypeError(f"Unknown draw primitive: {type(primitive).__name__}")
    finally:
        painter.restore()
