"""Command line launcher: stitch headlessly or open the window with images preloaded."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from stitcher import config
from stitcher.composition import CompositionEngine
from stitcher.controllers import OrderedItemList
from stitcher.decoding import DecodeCohort
from stitcher.export import ExportError, export_raster
from stitcher.intake import collect_sources, make_entries
from stitcher.log_config import configure_logging
from stitcher.runners import ThreadPoolTaskRunner

logger = logging.getLogger("image_stitcher.launcher")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="image-stitcher",
        description="Concatenate images horizontally or vertically into one image.",
    )
    p.add_argument("images", nargs="*", help="Image files, in stitch order.")
    p.add_argument(
        "--vertical",
        action="store_true",
        help="Stack images top to bottom instead of left to right.",
    )
    p.add_argument(
        "--keep-aspect",
        action="store_true",
        help="Stretch every image to the canvas's cross-axis size.",
    )
    p.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the stitched image here and exit without opening a window.",
    )
    return p


def stitch_files(
    paths: Sequence[str],
    output: Path,
    settings: config.StitchSettings,
) -> int:
    """Stitch *paths* into *output*; returns a process exit code."""
    intake = collect_sources(paths)
    for rejection in intake.rejected:
        logger.error(rejection.message)

    items = OrderedItemList()
    for entry in make_entries(intake.accepted):
        items.append(entry)

    with ThreadPoolTaskRunner() as runner:
        result = DecodeCohort(runner).run(items.ordered_entries())
    for failure in result.failures:
        logger.error(failure.message)

    raster = CompositionEngine().compose(result.successes, settings.mode, settings.keep_aspect)
    try:
        saved = export_raster(raster, output)
    except ExportError as exc:
        logger.error("%s", exc)
        return 1
    logger.info("Stitched %d image(s) into %s", len(raster.placements), saved)
    return 0 if not (intake.rejected or result.failures) else 2


def launch_window(paths: Sequence[str]) -> int:
    from PySide6.QtWidgets import QApplication

    from stitcher.main import MainWindow

    app = QApplication([sys.argv[0]])
    app.setStyle("Fusion")
    window = MainWindow()
    if paths:
        window.add_initial_paths(paths)
    window.show()
    return app.exec()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging()
    if args.output is None:
        return launch_window(args.images)
    settings = config.StitchSettings(
        mode=config.VERTICAL_MODE if args.vertical else config.HORIZONTAL_MODE,
        keep_aspect=args.keep_aspect,
    )
    return stitch_files(args.images, args.output, settings)


if __name__ == "__main__":
    sys.exit(main())
