"""Auto-closing error dialog."""
from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QDialog, QLabel, QVBoxLayout

from .. import config


class ErrorDialog(QDialog):
    """Shows the latest error; closes on click or after a timeout."""

    def __init__(self, parent=None, timeout_ms: int = config.ERROR_DIALOG_TIMEOUT_MS):
        super().__init__(parent)
        self.setWindowTitle("Error")
        self.setModal(False)
        self._message = QLabel()
        self._message.setObjectName("errorMessage")
        self._message.setWordWrap(True)
        self._message.setTextInteractionFlags(Qt.NoTextInteraction)
        layout = QVBoxLayout(self)
        layout.addWidget(self._message)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(timeout_ms)
        self._timer.timeout.connect(self.close)

    @property
    def message(self) -> str:
        return self._message.text()

    def show_message(self, message: str) -> None:
        self._message.setText(message)
        self.show()
        self.raise_()
        self._timer.start()

    def mousePressEvent(self, event):
        self._timer.stop()
        self.close()
        event.accept()
