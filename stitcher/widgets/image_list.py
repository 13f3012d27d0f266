# widgets/image_list.py
"""
Defines ImageListWidget: the ordered list of pending images.

Rows can be reordered with the mouse (native drag-and-drop) or with touch
(hit-testing the point under the finger).  Both channels go through the
shared ReorderController so they behave identically; the widget itself
only renders ``OrderedItemList.ordered_entries()``.
"""
from typing import List, Optional, Sequence
import logging

from PySide6.QtCore import QEvent, QMimeData, QPoint, Qt, Signal
from PySide6.QtGui import QDrag
from PySide6.QtWidgets import QAbstractItemView, QApplication, QListWidget, QListWidgetItem

from .. import config
from ..controllers import (
    NotFoundError,
    PointerDragAdapter,
    ReorderController,
    RowGeometry,
    TouchDragAdapter,
)
from ..models import ImageEntry

ENTRY_MIME_TYPE = "application/x-stitch-entry"
ENTRY_ID_ROLE = Qt.UserRole

LOGGER = logging.getLogger("image_stitcher.widgets.image_list")


def entry_mime_data(entry_id: str) -> QMimeData:
    mime = QMimeData()
    mime.setData(ENTRY_MIME_TYPE, entry_id.encode("utf-8"))
    return mime


def entry_id_from_mime(mime: QMimeData) -> Optional[str]:
    if not mime.hasFormat(ENTRY_MIME_TYPE):
        return None
    return bytes(mime.data(ENTRY_MIME_TYPE)).decode("utf-8")


class ImageListWidget(QListWidget):
    """List of image rows with mouse and touch reordering."""

    orderChanged = Signal()
    dragActiveChanged = Signal(bool)
    filesDropped = Signal(list)

    def __init__(self, controller: ReorderController, parent=None):
        super().__init__(parent)
        self._controller = controller
        self._pointer = PointerDragAdapter(controller)
        self._touch = TouchDragAdapter(controller, self.entry_id_at)
        self._press_pos: Optional[QPoint] = None
        controller.set_geometry(RowGeometry(top_of=self.row_top))

        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setAcceptDrops(True)
        self.viewport().setAcceptDrops(True)
        self.viewport().setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setAccessibleName("Images to stitch")

    # --- Rendering ---
    def set_entries(self, entries: Sequence[ImageEntry]) -> None:
        """Rebuild the rows from *entries* in order."""
        current = self.selected_entry_id()
        self.clear()
        for entry in entries:
            item = QListWidgetItem(f"{config.IMAGE_SYMBOL} {entry.label}")
            item.setData(ENTRY_ID_ROLE, entry.id)
            self.addItem(item)
            if entry.id == current:
                item.setSelected(True)

    def entry_ids(self) -> List[str]:
        return [self.item(row).data(ENTRY_ID_ROLE) for row in range(self.count())]

    def selected_entry_id(self) -> Optional[str]:
        items = self.selectedItems()
        return items[0].data(ENTRY_ID_ROLE) if items else None

    # --- Geometry adapters ---
    def _item_for(self, entry_id: str) -> Optional[QListWidgetItem]:
        for row in range(self.count()):
            item = self.item(row)
            if item.data(ENTRY_ID_ROLE) == entry_id:
                return item
        return None

    def row_top(self, entry_id: str) -> float:
        item = self._item_for(entry_id)
        if item is None:
            raise NotFoundError(f"No entry with id {entry_id}")
        return float(self.visualItemRect(item).top())

    def entry_id_at(self, point: QPoint) -> Optional[str]:
        item = self.itemAt(point)
        return item.data(ENTRY_ID_ROLE) if item is not None else None

    # --- Mouse drag channel ---
    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._press_pos = event.position().toPoint()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if not (event.buttons() & Qt.LeftButton) or self._press_pos is None:
            return super().mouseMoveEvent(event)
        pos = event.position().toPoint()
        if (pos - self._press_pos).manhattanLength() < QApplication.startDragDistance():
            return
        entry_id = self.entry_id_at(self._press_pos)
        self._press_pos = None
        if entry_id is None:
            return
        self._run_drag(entry_id)

    def mouseReleaseEvent(self, event):
        self._press_pos = None
        super().mouseReleaseEvent(event)

    def _run_drag(self, entry_id: str) -> None:
        self._pointer.drag_started(entry_id)
        self.dragActiveChanged.emit(True)
        drag = QDrag(self)
        drag.setMimeData(entry_mime_data(entry_id))
        try:
            drag.exec(Qt.MoveAction)
        finally:
            self._pointer.drag_finished()
            self.dragActiveChanged.emit(False)
            self.orderChanged.emit()

    def dragEnterEvent(self, event):
        mime = event.mimeData()
        if mime.hasFormat(ENTRY_MIME_TYPE) or mime.hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        self.dragEnterEvent(event)

    def dropEvent(self, event):
        mime = event.mimeData()
        if entry_id_from_mime(mime) is not None:
            target_id = self.entry_id_at(event.position().toPoint())
            if target_id is not None:
                self._pointer.dropped_on_row(target_id)
            event.setDropAction(Qt.MoveAction)
            event.accept()
            return
        if mime.hasUrls():
            self.filesDropped.emit([url.toLocalFile() or url.toString() for url in mime.urls()])
            event.acceptProposedAction()
            return
        event.ignore()

    # --- Touch drag channel ---
    def viewportEvent(self, event):
        kind = event.type()
        if kind == QEvent.TouchBegin:
            points = event.points()
            if points and self._touch.touch_started(points[0].position().toPoint()):
                self.dragActiveChanged.emit(True)
                event.accept()
                return True
        elif kind == QEvent.TouchUpdate and self._controller.is_dragging:
            points = event.points()
            if points:
                self._touch.touch_moved(points[0].position().toPoint())
                self.orderChanged.emit()
            event.accept()
            return True
        elif kind in (QEvent.TouchEnd, QEvent.TouchCancel) and self._controller.is_dragging:
            self._touch.touch_ended()
            self.dragActiveChanged.emit(False)
            event.accept()
            return True
        return super().viewportEvent(event)
