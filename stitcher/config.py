# config.py
"""
Application configuration constants for Image Stitcher
"""
from dataclasses import dataclass

# Stitch modes
HORIZONTAL_MODE = "horizontal"
VERTICAL_MODE = "vertical"
STITCH_MODES = (HORIZONTAL_MODE, VERTICAL_MODE)

# Stitch defaults
DEFAULT_MODE = HORIZONTAL_MODE
DEFAULT_KEEP_ASPECT = False

# Supported image formats
SUPPORTED_IMAGE_FORMATS = ['png', 'jpg', 'jpeg', 'bmp', 'webp', 'gif', 'tiff']

# Decoding
MAX_DECODE_WORKERS = 4

# Result zoom (percent)
ZOOM_MIN = 10
ZOOM_MAX = 300
ZOOM_DEFAULT = 100

# Export
DEFAULT_EXPORT_NAME = "stitched-image.png"
EXPORT_FORMATS = ['png', 'jpg', 'jpeg', 'webp']
QUALITY_DEFAULT = 95

# Error dialog
ERROR_DIALOG_TIMEOUT_MS = 4000

# List rows
IMAGE_SYMBOL = "\N{ARTIST PALETTE}"

# Themes
THEMES = ("light", "dark")
DEFAULT_THEME = THEMES[0]
THEME_ENV_VAR = "STITCHER_THEME"
SETTINGS_ORGANIZATION = "ImageStitcher"
SETTINGS_APPLICATION = "ImageStitcher"
SETTINGS_THEME_KEY = "theme"

# Shortcuts
SAVE_SHORTCUT = "Ctrl+S"
OPEN_SHORTCUT = "Ctrl+O"
STITCH_SHORTCUT = "Ctrl+Return"
CLEAR_SHORTCUT = "Ctrl+Shift+C"


@dataclass(frozen=True)
class StitchSettings:
    """Stitch options read from the controls when a stitch starts."""

    mode: str = DEFAULT_MODE
    keep_aspect: bool = DEFAULT_KEEP_ASPECT

    def __post_init__(self) -> None:
        if self.mode not in STITCH_MODES:
            raise ValueError(f"Unknown stitch mode: {self.mode!r}")

    @property
    def is_horizontal(self) -> bool:
        return self.mode == HORIZONTAL_MODE
