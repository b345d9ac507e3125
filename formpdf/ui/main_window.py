"""Main application window for template design, filled preview, and export."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QKeySequence, QPixmap
from PySide6.QtWidgets import (
    QFileDialog,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QSplitter,
    QToolBar,
)

from formpdf import config
from formpdf.model.field import FieldType
from formpdf.model.template import FormTemplate, TemplateError
from formpdf.model.validation import default_record, field_count, filled_field_count, validate_record
from formpdf.pdf.importer import PdfImportError, import_template
from formpdf.pdf.loader import PdfLoadError, base_page_sizes, read_pdf_bytes
from formpdf.pdf.renderer import PdfRenderError, render_preview_image
from formpdf.pdf.writer import PdfWriteError, write_filled_pdf
from formpdf.render.composer import RenderMode
from formpdf.render.errors import PageIndexOutOfRange, RenderError
from formpdf.state.session import TemplateSession
from formpdf.summary import SummaryError, summarize_submission
from formpdf.viewer.canvas import PreviewCanvas

logger = logging.getLogger(__name__)

GENERATION_ERRORS = (RenderError, PdfLoadError, PdfRenderError, PdfWriteError)


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Form PDF Designer")
        self.resize(1300, 850)

        self._template_path: Path | None = None
        self._session = TemplateSession()
        self._record: dict[str, Any] = {}
        self._mode = RenderMode.DESIGN
        self._current_page_index = 0
        self._zoom = config.PREVIEW_ZOOM

        self.page_list = QListWidget()
        self.page_list.currentRowChanged.connect(self._on_page_selected)

        self.canvas = PreviewCanvas()
        self.canvas.fields_changed.connect(self._on_canvas_fields_changed)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(False)
        self.scroll_area.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.scroll_area.setWidget(self.canvas)

        splitter = QSplitter()
        splitter.addWidget(self.page_list)
        splitter.addWidget(self.scroll_area)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 4)
        self.setCentralWidget(splitter)

        self._build_toolbar()
        self._populate_page_list()
        self.statusBar().showMessage("Ready")

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        for label, handler in (
            ("Open Template", self.open_template),
            ("Save Template", self.save_template),
            ("Import PDF", self.import_pdf),
            ("Open Data", self.open_data),
            ("Export PDF", self.export_pdf),
            ("AI Summary", self.summarize),
        ):
            action = QAction(label, self)
            action.triggered.connect(handler)
            toolbar.addAction(action)

        toolbar.addSeparator()

        prev_action = QAction("Previous", self)
        prev_action.triggered.connect(self.show_previous_page)
        toolbar.addAction(prev_action)

        next_action = QAction("Next", self)
        next_action.triggered.connect(self.show_next_page)
        toolbar.addAction(next_action)

        add_page_action = QAction("Add Page", self)
        add_page_action.triggered.connect(self.add_page)
        toolbar.addAction(add_page_action)

        toolbar.addSeparator()

        mode_group = QActionGroup(self)
        mode_group.setExclusive(True)

        design_action = QAction("Design", self)
        design_action.setCheckable(True)
        design_action.setChecked(True)
        design_action.triggered.connect(lambda: self._set_mode(RenderMode.DESIGN))
        mode_group.addAction(design_action)
        toolbar.addAction(design_action)

        data_action = QAction("Filled", self)
        data_action.setCheckable(True)
        data_action.triggered.connect(lambda: self._set_mode(RenderMode.EXPORT))
        mode_group.addAction(data_action)
        toolbar.addAction(data_action)

        toolbar.addSeparator()

        for field_type in FieldType:
            action = QAction(f"Add {field_type.value}", self)
            action.triggered.connect(lambda _=False, kind=field_type: self.add_field(kind))
            toolbar.addAction(action)

        delete_action = QAction("Delete Field", self)
        delete_action.triggered.connect(self.delete_selected_field)
        toolbar.addAction(delete_action)

        copy_action = QAction("Copy Field", self)
        copy_action.setShortcut("Ctrl+D")
        copy_action.triggered.connect(self.copy_selected_field)
        toolbar.addAction(copy_action)

    def open_template(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open Template",
            str(Path.home()),
            "Template Files (*.json)",
        )
        if not file_path:
            return

        try:
            template = FormTemplate.load(file_path)
            sizes = base_page_sizes(template.base_pdf) if template.base_pdf else None
        except (TemplateError, PdfLoadError) as exc:
            QMessageBox.critical(self, "Open Failed", str(exc))
            return

        self._template_path = Path(file_path)
        self._load_session(TemplateSession.from_template(template, sizes))
        self._record = default_record(template)
        self.statusBar().showMessage(f"Loaded: {file_path}")

    def save_template(self) -> None:
        start = str(self._template_path or Path.home() / "template.json")
        output_path, _ = QFileDialog.getSaveFileName(self, "Save Template", start, "Template Files (*.json)")
        if not output_path:
            return

        try:
            Path(output_path).write_text(self._session.to_template().to_json(), encoding="utf-8")
        except OSError as exc:
            QMessageBox.critical(self, "Save Failed", str(exc))
            return
        self._template_path = Path(output_path)
        self.statusBar().showMessage(f"Saved: {output_path}")

    def import_pdf(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Import PDF", str(Path.home()), "PDF Files (*.pdf)")
        if not file_path:
            return

        try:
            data = read_pdf_bytes(file_path)
            template = import_template(data)
            sizes = base_page_sizes(data)
        except (PdfLoadError, PdfImportError) as exc:
            QMessageBox.critical(self, "Import Failed", str(exc))
            return

        if not template.schemas:
            template.schemas.append([])
        self._template_path = None
        self._load_session(TemplateSession.from_template(template, sizes))
        self.statusBar().showMessage(
            f"Imported {field_count(template)} field(s) from {Path(file_path).name}"
        )

    def open_data(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Open Data", str(Path.home()), "Data Files (*.json)")
        if not file_path:
            return

        try:
            parsed = json.loads(Path(file_path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            QMessageBox.critical(self, "Open Failed", str(exc))
            return

        record = parsed[0] if isinstance(parsed, list) and parsed else parsed
        if not isinstance(record, dict):
            record = default_record(self._session.template)
        self._record = record
        self._set_mode(RenderMode.EXPORT)

    def export_pdf(self) -> None:
        errors = validate_record(self._session.template, self._record)
        if errors:
            details = "\n".join(errors.values())
            QMessageBox.warning(self, "Invalid Data", details)
            return

        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Export PDF",
            str(Path.home() / "form.pdf"),
            "PDF Files (*.pdf)",
        )
        if not output_path:
            return

        try:
            write_filled_pdf(self._session.to_template(), self._record, output_path)
        except GENERATION_ERRORS as exc:
            logger.error("PDF export failed: %s", exc)
            if self._offer_retry(exc):
                self.export_pdf()
            return
        self.statusBar().showMessage(f"Exported: {output_path}")

    def summarize(self) -> None:
        if not self._record:
            QMessageBox.information(self, "No Data", "Open a data record first.")
            return

        name = self._template_path.stem if self._template_path else "Form"
        try:
            summary = summarize_submission(name, self._record)
        except SummaryError as exc:
            QMessageBox.critical(self, "AI Summary", f"Failed to generate AI summary. {exc}")
            return
        QMessageBox.information(self, "AI Summary", summary)

    def show_previous_page(self) -> None:
        if self._current_page_index <= 0:
            return
        self.page_list.setCurrentRow(self._current_page_index - 1)

    def show_next_page(self) -> None:
        if self._current_page_index >= self._session.template.page_count - 1:
            return
        self.page_list.setCurrentRow(self._current_page_index + 1)

    def add_page(self) -> None:
        try:
            index = self._session.add_page()
        except PageIndexOutOfRange as exc:
            QMessageBox.warning(self, "Add Page", str(exc))
            return
        self._populate_page_list(index)

    def add_field(self, field_type: FieldType) -> None:
        new_field = self._session.add_field(self._current_page_index, field_type)
        self._set_mode(RenderMode.DESIGN)
        self.statusBar().showMessage(f"Added {new_field.name}")

    def delete_selected_field(self) -> None:
        name = self.canvas.selected_name
        if name is None:
            self.statusBar().showMessage("No selected field to delete.")
            return
        self._session.delete_field(self._current_page_index, name)
        self._render_current_page()
        self._on_canvas_fields_changed()

    def copy_selected_field(self) -> None:
        name = self.canvas.selected_name
        if name is None:
            self.statusBar().showMessage("No selected field to copy.")
            return
        self._session.duplicate_field(self._current_page_index, name)
        self._render_current_page()
        self._on_canvas_fields_changed()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Delete:
            self.delete_selected_field()
            event.accept()
            return
        if event.matches(QKeySequence.StandardKey.Copy):
            self.copy_selected_field()
            event.accept()
            return
        super().keyPressEvent(event)

    def _load_session(self, session: TemplateSession) -> None:
        self._session = session
        self._populate_page_list()

    def _set_mode(self, mode: RenderMode) -> None:
        self._mode = mode
        self._render_current_page()

    def _populate_page_list(self, current: int = 0) -> None:
        self.page_list.blockSignals(True)
        self.page_list.clear()
        for page_number in range(1, self._session.template.page_count + 1):
            self.page_list.addItem(QListWidgetItem(f"Page {page_number}"))
        self.page_list.blockSignals(False)

        self._current_page_index = min(current, max(0, self._session.template.page_count - 1))
        self.page_list.setCurrentRow(self._current_page_index)
        self._render_current_page()

    def _on_page_selected(self, row: int) -> None:
        if row < 0:
            return
        self._current_page_index = row
        self._render_current_page()

    def _on_canvas_fields_changed(self) -> None:
        self._render_current_page()
        template = self._session.template
        self.statusBar().showMessage(
            f"Page {self._current_page_index + 1}: "
            f"{len(template.get_page_fields(self._current_page_index))} field(s), "
            f"{filled_field_count(template, self._record)}/{field_count(template)} filled"
        )

    def _render_current_page(self) -> None:
        if self._session.template.page_count == 0:
            self.canvas.clear_page()
            return

        try:
            image = render_preview_image(
                self._session.template,
                self._record,
                self._current_page_index,
                zoom=self._zoom,
                mode=self._mode,
            )
        except GENERATION_ERRORS as exc:
            logger.error("Preview failed: %s", exc)
            self.canvas.clear_page()
            if self._offer_retry(exc):
                self._render_current_page()
            return

        self.canvas.set_page(
            pixmap=QPixmap.fromImage(image),
            session=self._session,
            page_index=self._current_page_index,
            zoom=self._zoom,
            editable=self._mode is RenderMode.DESIGN,
        )

    def _offer_retry(self, exc: Exception) -> bool:
        answer = QMessageBox.critical(
            self,
            "PDF Generation Failed",
            str(exc),
            QMessageBox.StandardButton.Retry | QMessageBox.StandardButton.Cancel,
        )
        return answer == QMessageBox.StandardButton.Retry
