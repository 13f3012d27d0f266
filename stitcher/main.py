# main.py
"""
Main application window for Image Stitcher.
"""
import logging
import os
from pathlib import Path
from typing import Optional, Sequence, Tuple

from PySide6.QtCore import QSettings, QStandardPaths, Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

try:
    # Preferred package-relative imports
    from . import config, style_tokens
    from .composition import CompositeRaster
    from .decoding import DecodeCohort
    from .log_config import configure_logging, install_excepthook
    from .presenter import StitchPresenter
    from .widgets.control_panel import ControlPanel, DropZone, StitchDefaults
    from .widgets.error_dialog import ErrorDialog
    from .widgets.image_list import ImageListWidget
    from .widgets.result_view import ResultView, pil_to_qpixmap
    from .workers import QtTaskRunner
except ImportError:
    # Fallback for running `python stitcher/main.py` directly
    import sys as _sys

    _sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
    from stitcher import config, style_tokens
    from stitcher.composition import CompositeRaster
    from stitcher.decoding import DecodeCohort
    from stitcher.log_config import configure_logging, install_excepthook
    from stitcher.presenter import StitchPresenter
    from stitcher.widgets.control_panel import ControlPanel, DropZone, StitchDefaults
    from stitcher.widgets.error_dialog import ErrorDialog
    from stitcher.widgets.image_list import ImageListWidget
    from stitcher.widgets.result_view import ResultView, pil_to_qpixmap
    from stitcher.workers import QtTaskRunner

logger = configure_logging()
install_excepthook(logger)


def load_theme(settings: QSettings) -> str:
    """Return the theme from the environment, else the stored one."""
    override = os.environ.get(config.THEME_ENV_VAR)
    if override:
        return style_tokens.normalize_theme(override)
    return style_tokens.normalize_theme(settings.value(config.SETTINGS_THEME_KEY, config.DEFAULT_THEME))


class MainWindow(QMainWindow):
    def __init__(self, settings: Optional[QSettings] = None):
        super().__init__()
        self.setWindowTitle("Image Stitcher")
        self.resize(960, 720)
        self.settings = settings or QSettings(
            config.SETTINGS_ORGANIZATION, config.SETTINGS_APPLICATION
        )
        self.theme = load_theme(self.settings)

        self.presenter = StitchPresenter(self, DecodeCohort(QtTaskRunner()))
        controller = self.presenter.controller

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(8, 6, 8, 6)
        main_layout.setSpacing(8)

        self.control_panel = ControlPanel(
            controller,
            defaults=StitchDefaults(
                mode=config.DEFAULT_MODE,
                keep_aspect=config.DEFAULT_KEEP_ASPECT,
                themes=config.THEMES,
                theme=self.theme,
            ),
            parent=self,
        )
        main_layout.addWidget(self.control_panel)

        sep = QFrame()
        sep.setFrameShape(QFrame.HLine)
        sep.setFrameShadow(QFrame.Sunken)
        sep.setFixedHeight(1)
        main_layout.addWidget(sep)

        body = QHBoxLayout()
        side = QVBoxLayout()
        self.drop_zone = DropZone(controller)
        side.addWidget(self.drop_zone)
        self.image_list = ImageListWidget(controller)
        side.addWidget(self.image_list, 1)
        body.addLayout(side, 1)
        self.result_view = ResultView()
        body.addWidget(self.result_view, 3)
        main_layout.addLayout(body, 1)

        self.error_dialog = ErrorDialog(self)

        self._bind_signals()
        self._create_shortcuts()
        self._apply_theme(self.theme, persist=False)

        logger.info("MainWindow initialized.")

    def _bind_signals(self) -> None:
        panel = self.control_panel
        panel.addImagesRequested.connect(self._add_images)
        panel.clearRequested.connect(self.presenter.clear_all)
        panel.stitchRequested.connect(self.presenter.stitch)
        panel.saveRequested.connect(self._save_result)
        panel.themeSelected.connect(self._apply_theme)
        panel.discard_button.discarded.connect(self.presenter.refresh_items)

        self.drop_zone.filesDropped.connect(self.presenter.add_paths)
        self.image_list.filesDropped.connect(self.presenter.add_paths)
        self.image_list.orderChanged.connect(self.presenter.refresh_items)
        self.image_list.dragActiveChanged.connect(panel.discard_button.set_drag_active)
        self.result_view.zoomChanged.connect(self.presenter.set_zoom)

    def _create_shortcuts(self) -> None:
        QShortcut(QKeySequence(config.OPEN_SHORTCUT), self, activated=self._add_images)
        QShortcut(QKeySequence(config.SAVE_SHORTCUT), self, activated=self._save_result)
        QShortcut(QKeySequence(config.STITCH_SHORTCUT), self, activated=self.presenter.stitch)
        QShortcut(QKeySequence(config.CLEAR_SHORTCUT), self, activated=self.presenter.clear_all)
        QShortcut(QKeySequence.Delete, self, activated=self._remove_selected)

    # --- View protocol used by StitchPresenter ---
    def refresh_items(self, entries) -> None:
        self.image_list.set_entries(entries)

    def clear_result(self) -> None:
        self.result_view.clear()

    def show_result(self, raster: CompositeRaster) -> None:
        if raster.is_empty:
            self.result_view.clear()
            return
        self.result_view.show_image(pil_to_qpixmap(raster.image))

    def show_error(self, message: str) -> None:
        self.error_dialog.show_message(message)

    def set_save_enabled(self, enabled: bool) -> None:
        self.control_panel.save_button.setEnabled(enabled)

    def set_zoom(self, percent: int, size: Optional[Tuple[int, int]]) -> None:
        self.result_view.set_zoom(percent, size)

    def stitch_settings(self) -> config.StitchSettings:
        return self.control_panel.settings()

    # --- Actions ---
    def _pictures_dir(self) -> str:
        return QStandardPaths.writableLocation(QStandardPaths.PicturesLocation) or ""

    def _add_images(self) -> None:
        pattern = " ".join(f"*.{ext}" for ext in config.SUPPORTED_IMAGE_FORMATS)
        files, _ = QFileDialog.getOpenFileNames(
            self, "Add Images", self._pictures_dir(), f"Images ({pattern})"
        )
        if files:
            self.presenter.add_paths(files)

    def add_initial_paths(self, paths: Sequence[str]) -> int:
        return self.presenter.add_paths(paths)

    def _remove_selected(self) -> None:
        entry_id = self.image_list.selected_entry_id()
        if entry_id is not None:
            self.presenter.remove(entry_id)

    def _save_result(self) -> None:
        if self.presenter.raster is None:
            return
        default = str(Path(self._pictures_dir()) / config.DEFAULT_EXPORT_NAME)
        patterns = ";;".join(f"{fmt.upper()} (*.{fmt})" for fmt in config.EXPORT_FORMATS)
        path, _ = QFileDialog.getSaveFileName(self, "Save Stitched Image", default, patterns)
        if not path:
            return
        if not Path(path).suffix:
            path = f"{path}.png"
        saved = self.presenter.export(path)
        if saved is not None:
            self.statusBar().showMessage(f"Saved: {saved}", config.ERROR_DIALOG_TIMEOUT_MS)

    def _apply_theme(self, theme: str, persist: bool = True) -> None:
        app = QApplication.instance()
        if app is not None:
            theme = style_tokens.apply_theme(app, theme)
        else:
            theme = style_tokens.normalize_theme(theme)
        self.theme = theme
        if persist:
            self.settings.setValue(config.SETTINGS_THEME_KEY, theme)
        logger.info("Theme set to %s", theme)

    def closeEvent(self, event):
        self.error_dialog.close()
        super().closeEvent(event)


def main() -> int:
    import sys

    app = QApplication(sys.argv)
    app.setStyle("Fusion")
    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
