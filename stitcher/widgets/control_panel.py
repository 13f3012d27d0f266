"""Control panel, drop zone and discard target for the stitcher window."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QCheckBox,
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QRadioButton,
    QSizePolicy,
)

from .. import config
from ..controllers import ReorderController
from .image_list import ENTRY_MIME_TYPE


def _set_drag_over(widget, active: bool) -> None:
    widget.setProperty("dragOver", "true" if active else "false")
    style = widget.style()
    if style:
        style.unpolish(widget)
        style.polish(widget)
    widget.update()


@dataclass(frozen=True)
class StitchDefaults:
    """Initial state of the stitch controls."""

    mode: str
    keep_aspect: bool
    themes: Tuple[str, ...]
    theme: str


class DropZone(QLabel):
    """Target for image files dragged in from outside the application."""

    filesDropped = Signal(list)

    def __init__(self, controller: ReorderController, parent=None) -> None:
        super().__init__("Drop images here", parent)
        self._controller = controller
        self.setObjectName("dropZone")
        self.setAlignment(Qt.AlignCenter)
        self.setAcceptDrops(True)
        self.setAccessibleName("Image drop zone")

    def dragEnterEvent(self, event):
        # Internal row drags must not light up the intake target.
        if self._controller.is_dragging or not event.mimeData().hasUrls():
            event.ignore()
            return
        _set_drag_over(self, True)
        event.acceptProposedAction()

    def dragLeaveEvent(self, event):
        _set_drag_over(self, False)
        event.accept()

    def dropEvent(self, event):
        _set_drag_over(self, False)
        urls = event.mimeData().urls()
        if not urls:
            event.ignore()
            return
        self.filesDropped.emit([url.toLocalFile() or url.toString() for url in urls])
        event.acceptProposedAction()


class DiscardButton(QPushButton):
    """The Clear button; dropping a dragged row on it removes that row."""

    discarded = Signal()

    def __init__(self, controller: ReorderController, parent=None) -> None:
        super().__init__("Clear", parent)
        self._controller = controller
        self.setObjectName("discardButton")
        self.setAcceptDrops(True)
        self.setToolTip("Clear the list, or drop an image here to remove it")

    def set_drag_active(self, active: bool) -> None:
        _set_drag_over(self, active)

    def dragEnterEvent(self, event):
        if event.mimeData().hasFormat(ENTRY_MIME_TYPE):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        self.dragEnterEvent(event)

    def dropEvent(self, event):
        _set_drag_over(self, False)
        if not event.mimeData().hasFormat(ENTRY_MIME_TYPE):
            event.ignore()
            return
        self._controller.drop_on_discard()
        event.acceptProposedAction()
        self.discarded.emit()


class ControlPanel(QFrame):
    """Toolbar exposing intake, stitch, save and theme controls."""

    addImagesRequested = Signal()
    clearRequested = Signal()
    stitchRequested = Signal()
    saveRequested = Signal()
    themeSelected = Signal(str)

    def __init__(
        self,
        controller: ReorderController,
        *,
        defaults: StitchDefaults,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._defaults = defaults
        self.setObjectName("controlPanel")
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self._build_layout()

    # Public control accessors -------------------------------------------------
    @property
    def discard_button(self) -> DiscardButton:
        return self._clear_btn

    @property
    def save_button(self) -> QPushButton:
        return self._save_btn

    @property
    def stitch_button(self) -> QPushButton:
        return self._stitch_btn

    @property
    def keep_aspect_checkbox(self) -> QCheckBox:
        return self._keep_aspect_chk

    @property
    def theme_combo(self) -> QComboBox:
        return self._theme_combo

    def mode(self) -> str:
        return config.VERTICAL_MODE if self._vertical_radio.isChecked() else config.HORIZONTAL_MODE

    def settings(self) -> config.StitchSettings:
        return config.StitchSettings(
            mode=self.mode(), keep_aspect=self._keep_aspect_chk.isChecked()
        )

    def _build_layout(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        add_btn = QPushButton("Add Images…")
        add_btn.setToolTip("Choose image files to stitch")
        add_btn.clicked.connect(self.addImagesRequested)
        layout.addWidget(add_btn)

        self._clear_btn = DiscardButton(self._controller)
        self._clear_btn.clicked.connect(self.clearRequested)
        layout.addWidget(self._clear_btn)

        self._horizontal_radio = QRadioButton("Horizontal")
        self._vertical_radio = QRadioButton("Vertical")
        self._mode_group = QButtonGroup(self)
        self._mode_group.addButton(self._horizontal_radio)
        self._mode_group.addButton(self._vertical_radio)
        if self._defaults.mode == config.VERTICAL_MODE:
            self._vertical_radio.setChecked(True)
        else:
            self._horizontal_radio.setChecked(True)
        layout.addWidget(self._horizontal_radio)
        layout.addWidget(self._vertical_radio)

        self._keep_aspect_chk = QCheckBox("Keep aspect")
        self._keep_aspect_chk.setToolTip("Stretch every image to the same cross-axis size")
        self._keep_aspect_chk.setChecked(self._defaults.keep_aspect)
        layout.addWidget(self._keep_aspect_chk)

        self._stitch_btn = QPushButton("Stitch")
        self._stitch_btn.clicked.connect(self.stitchRequested)
        layout.addWidget(self._stitch_btn)

        self._save_btn = QPushButton("Save")
        self._save_btn.setEnabled(False)
        self._save_btn.clicked.connect(self.saveRequested)
        layout.addWidget(self._save_btn)

        layout.addStretch(1)

        layout.addWidget(QLabel("Theme:"))
        self._theme_combo = QComboBox()
        self._theme_combo.addItems(list(self._defaults.themes))
        self._theme_combo.setCurrentText(self._defaults.theme)
        self._theme_combo.currentTextChanged.connect(self.themeSelected)
        layout.addWidget(self._theme_combo)
