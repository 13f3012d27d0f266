# widgets/result_view.py
"""
Defines ResultView: the scrollable stitched image with its zoom slider.
"""
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image
from PySide6.QtCore import QByteArray, Qt, Signal
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QHBoxLayout, QLabel, QScrollArea, QSlider, QVBoxLayout, QWidget

from .. import config


def pil_to_qpixmap(pil_img: Image.Image) -> QPixmap:
    out = BytesIO()
    pil_img.save(out, format='PNG')
    ba = QByteArray(out.getvalue())
    qimg = QImage.fromData(ba, 'PNG')
    return QPixmap.fromImage(qimg)


class ResultView(QWidget):
    """Shows the current stitch result at the chosen zoom level."""

    zoomChanged = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._pixmap: Optional[QPixmap] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._image_label = QLabel()
        self._image_label.setAlignment(Qt.AlignCenter)
        self._image_label.setAccessibleName("Stitched image")
        self._scroll = QScrollArea()
        self._scroll.setObjectName("resultArea")
        self._scroll.setWidget(self._image_label)
        self._scroll.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._scroll, 1)

        zoom_row = QHBoxLayout()
        zoom_row.addWidget(QLabel("Zoom:"))
        self._zoom_slider = QSlider(Qt.Horizontal)
        self._zoom_slider.setRange(config.ZOOM_MIN, config.ZOOM_MAX)
        self._zoom_slider.setValue(config.ZOOM_DEFAULT)
        self._zoom_slider.valueChanged.connect(self.zoomChanged)
        zoom_row.addWidget(self._zoom_slider, 1)
        self._zoom_value = QLabel(f"{config.ZOOM_DEFAULT}%")
        zoom_row.addWidget(self._zoom_value)
        layout.addLayout(zoom_row)

    @property
    def zoom_slider(self) -> QSlider:
        return self._zoom_slider

    @property
    def has_image(self) -> bool:
        return self._pixmap is not None

    def show_image(self, pixmap: Optional[QPixmap]) -> None:
        self._pixmap = pixmap
        if pixmap is None:
            self._image_label.clear()
        else:
            self._image_label.setPixmap(pixmap)
        self._image_label.adjustSize()

    def clear(self) -> None:
        self.show_image(None)

    def set_zoom(self, percent: int, size: Optional[Tuple[int, int]]) -> None:
        """Sync the slider and label with *percent* and rescale the preview."""
        self._zoom_slider.blockSignals(True)
        self._zoom_slider.setValue(percent)
        self._zoom_slider.blockSignals(False)
        self._zoom_value.setText(f"{percent}%")
        if self._pixmap is None or size is None:
            return
        width, height = size
        self._image_label.setPixmap(
            self._pixmap.scaled(max(1, width), max(1, height), Qt.IgnoreAspectRatio, Qt.SmoothTransformation)
        )
        self._image_label.adjustSize()
