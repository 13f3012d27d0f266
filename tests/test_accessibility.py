import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PySide6.QtWidgets", exc_type=ImportError)

from PySide6.QtCore import QEvent, QPointF, Qt  # noqa: E402
from PySide6.QtGui import QMouseEvent  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from stitcher import config, style_tokens  # noqa: E402
from stitcher.controllers import OrderedItemList, ReorderController  # noqa: E402
from stitcher.widgets.control_panel import ControlPanel, StitchDefaults  # noqa: E402
from stitcher.widgets.error_dialog import ErrorDialog  # noqa: E402
from stitcher.widgets.image_list import ImageListWidget  # noqa: E402


@pytest.fixture
def app():
    if not QApplication.instance():
        return QApplication([])
    return QApplication.instance()


def _panel(controller):
    defaults = StitchDefaults(
        mode=config.DEFAULT_MODE,
        keep_aspect=False,
        themes=config.THEMES,
        theme=config.DEFAULT_THEME,
    )
    return ControlPanel(controller, defaults=defaults)


def test_list_is_focusable_and_named(app):
    widget = ImageListWidget(ReorderController(OrderedItemList()))
    assert widget.accessibleName() == "Images to stitch"
    widget.show()
    widget.setFocus()
    assert widget.focusPolicy() != Qt.NoFocus
    widget.close()


def test_discard_button_is_styled_by_object_name(app):
    panel = _panel(ReorderController(OrderedItemList()))
    assert panel.discard_button.objectName() == "discardButton"
    assert "#discardButton" in style_tokens.build_qss(style_tokens.get_colors("dark"))


def test_error_dialog_closes_on_click(app):
    dialog = ErrorDialog(timeout_ms=60_000)
    dialog.show_message("Broken File: x.png")
    assert dialog.isVisible()
    click = QMouseEvent(
        QEvent.MouseButtonPress, QPointF(1, 1), QPointF(1, 1),
        Qt.LeftButton, Qt.LeftButton, Qt.NoModifier,
    )
    dialog.mousePressEvent(click)
    assert not dialog.isVisible()


def test_themes_differ():
    light = style_tokens.build_qss(style_tokens.get_colors("light"))
    dark = style_tokens.build_qss(style_tokens.get_colors("dark"))
    assert light != dark
    assert style_tokens.normalize_theme("DARK") == "dark"
    assert style_tokens.normalize_theme(None) == config.DEFAULT_THEME
