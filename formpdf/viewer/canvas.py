"""Preview canvas: shows a rendered page and lets the designer select and drag fields."""

from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QWidget

from formpdf.model.field import FieldType, FormField
from formpdf.render.errors import InvalidGeometry
from formpdf.render.transform import screen_to_design, to_screen
from formpdf.state.session import TemplateSession
from formpdf.viewer.painter import box_to_rect

MIN_FIELD_PX = 7.0


class PreviewCanvas(QWidget):
    field_selection_changed = Signal(object)
    fields_changed = Signal()

    def __init__(self) -> None:
        super().__init__()
        self._pixmap: QPixmap | None = None
        self._session: TemplateSession | None = None
        self._page_index = 0
        self._zoom = 1.0
        self._editable = False
        self._selected_name: str | None = None
        self._drag_offset_px: QPointF | None = None
        self._interaction: str | None = None
        self._resize_start: QPointF | None = None
        self._resize_start_size: tuple[float, float] | None = None

        self.setMouseTracking(True)
        self.setMinimumSize(500, 600)

    @property
    def selected_name(self) -> str | None:
        return self._selected_name

    def set_page(
        self,
        pixmap: QPixmap,
        session: TemplateSession,
        page_index: int,
        zoom: float,
        editable: bool,
    ) -> None:
        # A re-render of the page being edited keeps an in-progress drag
        same_page = (
            session is self._session
            and page_index == self._page_index
            and zoom == self._zoom
            and editable
        )
        self._pixmap = pixmap
        self._session = session
        self._page_index = page_index
        self._zoom = zoom
        self._editable = editable
        if self._selected_name is not None and self._find(self._selected_name) is None:
            self._select(None)
        if not same_page or self._selected_name is None:
            self._reset_interaction()
        self.resize(pixmap.size())
        self.update()

    def clear_page(self) -> None:
        self._pixmap = None
        self._session = None
        self._select(None)
        self._reset_interaction()
        self.resize(500, 600)
        self.update()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        del event
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#e9eaee"))

        if self._pixmap is None:
            return

        painter.drawPixmap(0, 0, self._pixmap)
        if not self._editable:
            return

        selected = self._find(self._selected_name) if self._selected_name else None
        if selected is None:
            return
        rect_px = self._field_rect_to_pixels(selected)
        if rect_px is None:
            return
        pen = QPen(QColor("#c62828"))
        pen.setWidth(2)
        painter.setPen(pen)
        painter.drawRect(rect_px)
        painter.fillRect(self._resize_handle_rect(rect_px), QColor("#c62828"))

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if self._pixmap is None or not self._editable:
            return
        if event.button() != Qt.MouseButton.LeftButton:
            return

        clicked = self._field_at(event.position())
        self._select(clicked.name if clicked is not None else None)

        if clicked is not None:
            rect = self._field_rect_to_pixels(clicked)
            if rect is not None and self._resize_handle_rect(rect).contains(event.position()):
                self._interaction = "resize"
                self._resize_start = event.position()
                self._resize_start_size = (clicked.width, clicked.height)
            elif rect is not None:
                self._interaction = "move"
                self._drag_offset_px = event.position() - rect.topLeft()

        self.update()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if self._session is None or self._selected_name is None:
            return
        field = self._find(self._selected_name)
        if field is None:
            return

        if self._interaction == "move":
            offset = self._drag_offset_px or QPointF(0, 0)
            top_left_px = event.position() - offset
            x, y = screen_to_design(top_left_px.x(), top_left_px.y(), self._zoom)
            self._session.move_field(self._page_index, field.name, x, y)
            self.fields_changed.emit()
            self.update()
        elif self._interaction == "resize":
            if self._resize_start is None or self._resize_start_size is None:
                return
            dx, dy = screen_to_design(
                event.position().x() - self._resize_start.x(),
                event.position().y() - self._resize_start.y(),
                self._zoom,
            )
            start_w, start_h = self._resize_start_size
            page_w, page_h = self._session.page_size(self._page_index)
            min_side = MIN_FIELD_PX / self._zoom

            if field.field_type is FieldType.BOOLEAN:
                side = max(start_w + dx, start_h + dy, min_side)
                side = min(side, page_w - field.x, page_h - field.y)
                width = height = max(min_side, side)
            else:
                width = min(max(min_side, start_w + dx), page_w - field.x)
                height = min(max(min_side, start_h + dy), page_h - field.y)
            self._session.update_field(self._page_index, field.name, width=width, height=height)
            self.fields_changed.emit()
            self.update()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        del event
        self._reset_interaction()

    def _select(self, name: str | None) -> None:
        self._selected_name = name
        selected = self._find(name) if name else None
        self.field_selection_changed.emit(selected)

    def _reset_interaction(self) -> None:
        self._interaction = None
        self._drag_offset_px = None
        self._resize_start = None
        self._resize_start_size = None

    def _find(self, name: str | None) -> FormField | None:
        if self._session is None or name is None:
            return None
        for field in self._session.get_page_fields(self._page_index):
            if field.name == name:
                return field
        return None

    def _field_rect_to_pixels(self, field: FormField) -> QRectF | None:
        try:
            box = to_screen(field.x, field.y, field.width, field.height, self._zoom)
        except InvalidGeometry:
            return None
        return box_to_rect(box)

    def _resize_handle_rect(self, field_rect: QRectF) -> QRectF:
        handle_size = 10.0
        return QRectF(
            field_rect.right() - handle_size / 2.0,
            field_rect.bottom() - handle_size / 2.0,
            handle_size,
            handle_size,
        )

    def _field_at(self, pos: QPointF) -> FormField | None:
        if self._session is None:
            return None
        page_fields = self._session.get_page_fields(self._page_index)
        # Topmost first: later fields draw on top
        for field in reversed(page_fields):
            rect = self._field_rect_to_pixels(field)
            if rect is not None and rect.contains(pos):
                return field
        return None
