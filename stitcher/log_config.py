"""Project-wide logging setup shared by the GUI and the command line launcher."""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "image_stitcher"


def configure_logging(log_path: Optional[Path] = None) -> logging.Logger:
    """Configure and return the application logger.

    The handler setup is idempotent to avoid duplicate handlers when the module
    is imported multiple times (e.g., in tests). A rotating file handler limits
    on-disk log growth while mirroring output to stdout for developer visibility.
    """

    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    if log_path is None:
        log_path = Path(__file__).resolve().parents[1] / "image_stitcher.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=1_048_576,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)
    logger.propagate = False

    return logger


def install_excepthook(logger: logging.Logger) -> None:
    """Route uncaught exceptions through *logger* before the default hook."""

    def global_exception_handler(exc_type, value, tb):
        logger.error("Uncaught exception", exc_info=(exc_type, value, tb))
        sys.__excepthook__(exc_type, value, tb)

    sys.excepthook = global_exception_handler
