"""Main application window for placeholder editing, template saving and filling."""

from __future__ import annotations

import json
import logging
from pathlib import Path

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

from docsign.layout.capacity import calculate_character_capacity
from docsign.layout.fonts import analyze_pdf_fonts
from docsign.model.document import PdfDocument
from docsign.model.placeholder import FieldType, Placeholder, PlaceholderError
from docsign.model.template import Template, load_template, save_template
from docsign.pdf.filler import PdfFillError, fill_pdf_template
from docsign.pdf.importer import PdfImportError, import_placeholders
from docsign.pdf.loader import PdfLoadError, load_pdf
from docsign.pdf.renderer import PdfRenderError, render_page_image
from docsign.state.session import EditorSession
from docsign.viewer.canvas import PdfCanvas

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("DocSign Template Editor")
        self.resize(1300, 850)

        self._document: PdfDocument | None = None
        self._session = EditorSession()
        self._template: Template | None = None
        self._current_page = 1

        self.page_list = QListWidget()
        self.page_list.currentRowChanged.connect(self._on_page_selected)

        self.canvas = PdfCanvas()
        self.canvas.placeholders_changed.connect(self._on_placeholders_changed)
        self.canvas.placeholder_created.connect(self._on_placeholder_created)
        self.canvas.placeholder_selection_changed.connect(self._on_selection_changed)

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
        self.statusBar().showMessage("Ready")

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        for label, handler in (
            ("Open PDF", self.open_pdf),
            ("Open Template", self.open_template),
            ("Save Template", self.save_template),
            ("Import Fields", self.import_fields),
            ("Fill From JSON", self.fill_from_json),
        ):
            action = QAction(label, self)
            action.triggered.connect(handler)
            toolbar.addAction(action)

        toolbar.addSeparator()

        delete_action = QAction("Delete", self)
        delete_action.triggered.connect(self.delete_selected_placeholder)
        toolbar.addAction(delete_action)

        copy_action = QAction("Duplicate", self)
        copy_action.setShortcut("Ctrl+D")
        copy_action.triggered.connect(self.duplicate_selected_placeholder)
        toolbar.addAction(copy_action)

        self._guides_action = QAction("Guides", self)
        self._guides_action.setCheckable(True)
        self._guides_action.setChecked(self._session.snap_enabled)
        self._guides_action.toggled.connect(self._set_guides_enabled)
        toolbar.addAction(self._guides_action)

        toolbar.addSeparator()

        prev_action = QAction("Previous", self)
        prev_action.triggered.connect(self.show_previous_page)
        toolbar.addAction(prev_action)

        next_action = QAction("Next", self)
        next_action.triggered.connect(self.show_next_page)
        toolbar.addAction(next_action)

        toolbar.addSeparator()

        mode_group = QActionGroup(self)
        mode_group.setExclusive(True)

        self._pointer_action = QAction("Pointer", self)
        self._pointer_action.setCheckable(True)
        self._pointer_action.setChecked(True)
        self._pointer_action.triggered.connect(lambda: self._set_mode(None))
        mode_group.addAction(self._pointer_action)
        toolbar.addAction(self._pointer_action)

        for field_type in FieldType:
            action = QAction(f"Add {field_type.label}", self)
            action.setCheckable(True)
            action.triggered.connect(lambda _checked=False, t=field_type: self._set_mode(t))
            mode_group.addAction(action)
            toolbar.addAction(action)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._close_document()
        super().closeEvent(event)

    def open_pdf(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open PDF",
            str(Path.home()),
            "PDF Files (*.pdf)",
        )
        if not file_path:
            return

        self._close_document()
        try:
            self._document = load_pdf(file_path)
        except PdfLoadError as exc:
            QMessageBox.critical(self, "Open Failed", str(exc))
            return

        logger.info("Opened %s (%d pages)", file_path, self._document.page_count)
        self._session = EditorSession(
            font_analysis=analyze_pdf_fonts(self._document.handle),
            snap_enabled=self._guides_action.isChecked(),
        )
        self._template = Template(title=Path(file_path).stem, file_name=Path(file_path).name)
        self._current_page = 1
        self._populate_page_list()
        analysis = self._session.font_analysis
        self.statusBar().showMessage(
            f"Loaded: {file_path} (suggested font {analysis.recommended_font} "
            f"{analysis.recommended_size:g}pt)"
        )

    def open_template(self) -> None:
        if self._document is None:
            QMessageBox.information(self, "No Document", "Open a PDF first.")
            return
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Template", str(Path.home()), "Template Files (*.json)"
        )
        if not file_path:
            return
        try:
            self._template = load_template(file_path)
        except (OSError, ValueError) as exc:
            QMessageBox.critical(self, "Open Failed", str(exc))
            return
        self._session.load(self._template.placeholders)
        self._render_current_page()
        self.statusBar().showMessage(
            f"Loaded template: {len(self._template.placeholders)} placeholder(s)"
        )

    def save_template(self) -> None:
        if self._document is None or self._template is None:
            QMessageBox.information(self, "No Document", "Open a PDF first.")
            return

        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Template",
            str(Path.home() / f"{self._template.title}.json"),
            "Template Files (*.json)",
        )
        if not output_path:
            return

        self._template.placeholders = self._session.all_placeholders()
        try:
            save_template(self._template, output_path)
        except (PlaceholderError, OSError) as exc:
            QMessageBox.critical(self, "Save Failed", str(exc))
            return
        self.statusBar().showMessage(f"Saved: {output_path}")

    def import_fields(self) -> None:
        if self._document is None:
            return
        try:
            imported = import_placeholders(self._document.data)
        except PdfImportError as exc:
            QMessageBox.warning(self, "Field Import Warning", str(exc))
            return
        self._session.load(self._session.all_placeholders() + imported)
        self._render_current_page()
        self.statusBar().showMessage(f"Imported {len(imported)} form field(s)")

    def fill_from_json(self) -> None:
        if self._document is None:
            QMessageBox.information(self, "No Document", "Open a PDF first.")
            return
        values_path, _ = QFileDialog.getOpenFileName(
            self, "Values", str(Path.home()), "JSON Files (*.json)"
        )
        if not values_path:
            return
        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Filled PDF",
            str(Path.home() / f"{Path(self._document.name).stem}_filled.pdf"),
            "PDF Files (*.pdf)",
        )
        if not output_path:
            return

        try:
            values = json.loads(Path(values_path).read_text(encoding="utf-8"))
            if not isinstance(values, dict):
                raise ValueError("Values file must contain a JSON object")
            filled = fill_pdf_template(self._document.data, self._session.all_placeholders(), values)
            Path(output_path).write_bytes(filled)
        except (PdfFillError, OSError, ValueError) as exc:
            QMessageBox.critical(self, "Fill Failed", str(exc))
            return
        self.statusBar().showMessage(f"Filled: {output_path}")

    def show_previous_page(self) -> None:
        if self._document is None or self._current_page <= 1:
            return
        self.page_list.setCurrentRow(self._current_page - 2)

    def show_next_page(self) -> None:
        if self._document is None or self._current_page >= self._document.page_count:
            return
        self.page_list.setCurrentRow(self._current_page)

    def delete_selected_placeholder(self) -> None:
        if self._document is None:
            return
        selected_id = self._session.selected_id
        if selected_id and self._session.remove_placeholder(selected_id):
            self.canvas.update()
            self._show_page_count("Deleted placeholder.")
        else:
            self.statusBar().showMessage("No selected placeholder to delete.")

    def duplicate_selected_placeholder(self) -> None:
        if self._document is None:
            return
        selected_id = self._session.selected_id
        if selected_id and self._session.duplicate_placeholder(selected_id) is not None:
            self.canvas.update()
            self._show_page_count("Duplicated placeholder.")
        else:
            self.statusBar().showMessage("No selected placeholder to duplicate.")

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Delete:
            self.delete_selected_placeholder()
            event.accept()
            return
        if event.matches(QKeySequence.StandardKey.Copy):
            self.duplicate_selected_placeholder()
            event.accept()
            return
        super().keyPressEvent(event)

    def _set_mode(self, mode: FieldType | None) -> None:
        self.canvas.set_placement_type(mode)
        label = "Pointer mode" if mode is None else f"Placement mode: {mode.value}"
        self.statusBar().showMessage(label)

    def _set_guides_enabled(self, enabled: bool) -> None:
        self._session.snap_enabled = enabled
        self.statusBar().showMessage(f"Guides {'on' if enabled else 'off'}")

    def _populate_page_list(self) -> None:
        self.page_list.clear()
        if self._document is None:
            return

        for page_number in range(1, self._document.page_count + 1):
            self.page_list.addItem(QListWidgetItem(f"Page {page_number}"))

        self.page_list.setCurrentRow(0)

    def _on_page_selected(self, row: int) -> None:
        if self._document is None or row < 0:
            return

        self._current_page = row + 1
        self._render_current_page()

    def _on_placeholders_changed(self) -> None:
        self._on_selection_changed(self._session.selected)

    def _on_placeholder_created(self) -> None:
        self._pointer_action.setChecked(True)
        self._set_mode(None)

    def _on_selection_changed(self, placeholder: Placeholder | None) -> None:
        if placeholder is None:
            self._show_page_count()
            return
        estimate = calculate_character_capacity(
            placeholder.width, placeholder.height, placeholder.font_size, placeholder.font_family
        )
        self.statusBar().showMessage(
            f"{placeholder.key}: {placeholder.width:.0f}x{placeholder.height:.0f} at "
            f"({placeholder.x:.0f}, {placeholder.y:.0f}), ~{estimate.capacity} chars "
            f"({estimate.chars_per_line}/line x {estimate.lines} lines)"
        )

    def _show_page_count(self, prefix: str = "") -> None:
        count = len(self._session.get_page_placeholders(self._current_page))
        message = f"Page {self._current_page}: {count} placeholder(s)"
        self.statusBar().showMessage(f"{prefix} {message}".strip())

    def _render_current_page(self) -> None:
        if self._document is None:
            self.canvas.clear_page()
            return

        try:
            image = render_page_image(self._document.handle, self._current_page)
        except PdfRenderError as exc:
            QMessageBox.critical(self, "Render Failed", str(exc))
            return

        self.canvas.set_page(
            pixmap=QPixmap.fromImage(image),
            session=self._session,
            page=self._current_page,
        )
        self.statusBar().showMessage(
            f"Page {self._current_page}/{self._document.page_count}"
        )

    def _close_document(self) -> None:
        if self._document is not None:
            self._document.close()
            self._document = None
        self._session = EditorSession()
        self._template = None
        self.page_list.clear()
        self.canvas.clear_page()
