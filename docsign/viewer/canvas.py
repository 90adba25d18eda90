"""Interactive PDF page canvas for placeholder placement, dragging and resizing."""

from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QWidget

from docsign.layout.guides import Box, ResizeHandle, handle_corner
from docsign.model.placeholder import FieldType, Placeholder
from docsign.state.session import EditorSession

HANDLE_SIZE = 10.0


class PdfCanvas(QWidget):
    placeholder_selection_changed = Signal(object)
    placeholders_changed = Signal()
    placeholder_created = Signal()

    def __init__(self) -> None:
        super().__init__()
        self._pixmap: QPixmap | None = None
        self._session: EditorSession | None = None
        self._page = 1
        self._placement_type: FieldType | None = None

        self.setMouseTracking(True)
        self.setMinimumSize(500, 600)

    def set_page(self, pixmap: QPixmap, session: EditorSession, page: int) -> None:
        self._pixmap = pixmap
        self._session = session
        self._page = page
        session.end_interaction()
        session.selected_id = None
        session.container_width = float(pixmap.width())
        self.placeholder_selection_changed.emit(None)
        self.resize(pixmap.size())
        self.update()

    def clear_page(self) -> None:
        self._pixmap = None
        self._session = None
        self.resize(500, 600)
        self.update()

    def set_placement_type(self, field_type: FieldType | None) -> None:
        self._placement_type = field_type

    def paintEvent(self, event) -> None:  # type: ignore[override]
        del event
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#e9eaee"))

        if self._pixmap is None or self._session is None:
            return

        painter.drawPixmap(0, 0, self._pixmap)
        selected_id = self._session.selected_id
        for placeholder in self._session.get_page_placeholders(self._page):
            rect = self._placeholder_rect(placeholder)
            selected = placeholder.id == selected_id
            color = QColor("#c62828") if selected else QColor("#1565c0")
            pen = QPen(color)
            pen.setWidth(2)
            painter.setPen(pen)
            painter.drawRect(rect)
            painter.drawText(rect.adjusted(4, 2, -4, -2), Qt.AlignmentFlag.AlignLeft, placeholder.label)
            if selected:
                for handle in ResizeHandle:
                    painter.fillRect(self._handle_rect(placeholder, handle), color)

        guides = self._session.guides
        if not guides.is_empty:
            painter.setPen(QPen(QColor("#2563eb"), 1, Qt.PenStyle.DashLine))
            for x in guides.x:
                painter.drawLine(QPointF(x, 0), QPointF(x, self.height()))
            painter.setPen(QPen(QColor("#dc2626"), 1, Qt.PenStyle.DashLine))
            for y in guides.y:
                painter.drawLine(QPointF(0, y), QPointF(self.width(), y))

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if self._pixmap is None or self._session is None:
            return
        if event.button() != Qt.MouseButton.LeftButton:
            return

        pos = event.position()
        if self._placement_type is not None:
            self._session.add_placeholder(self._placement_type, pos.x(), pos.y(), self._page)
            self.placeholder_selection_changed.emit(self._session.selected)
            self.placeholders_changed.emit()
            self.placeholder_created.emit()
            self.update()
            return

        selected = self._session.selected
        if selected is not None and selected.page == self._page:
            for handle in ResizeHandle:
                if self._handle_rect(selected, handle).contains(pos):
                    self._session.begin_resize(selected.id, handle, pos.x(), pos.y())
                    self.update()
                    return

        clicked = self._placeholder_at(pos)
        if clicked is None:
            self._session.selected_id = None
        else:
            self._session.begin_drag(clicked.id, pos.x(), pos.y())
        self.placeholder_selection_changed.emit(clicked)
        self.update()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if self._session is None:
            return
        pos = event.position()
        if self._session.pointer_move(pos.x(), pos.y()) is not None:
            self.placeholders_changed.emit()
            self.update()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        del event
        if self._session is None:
            return
        self._session.pointer_up()
        self.update()

    def _placeholder_rect(self, placeholder: Placeholder) -> QRectF:
        return QRectF(placeholder.x, placeholder.y, placeholder.width, placeholder.height)

    def _handle_rect(self, placeholder: Placeholder, handle: ResizeHandle) -> QRectF:
        x, y = handle_corner(handle, Box.of(placeholder))
        return QRectF(x - HANDLE_SIZE / 2.0, y - HANDLE_SIZE / 2.0, HANDLE_SIZE, HANDLE_SIZE)

    def _placeholder_at(self, pos: QPointF) -> Placeholder | None:
        if self._session is None:
            return None
        for placeholder in reversed(self._session.get_page_placeholders(self._page)):
            if self._placeholder_rect(placeholder).contains(pos):
                return placeholder
        return None
