"""Zoom and export helpers for the finished raster."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from utils.image_operations import flatten_image
from utils.validation import validate_output_path

from . import config
from .composition import CompositeRaster
from .models import StitcherError

LOGGER = logging.getLogger("image_stitcher.export")


class ExportError(StitcherError):
    """Raised when the stitched raster cannot be written."""


def clamp_zoom(percent: int) -> int:
    return max(config.ZOOM_MIN, min(config.ZOOM_MAX, int(percent)))


def zoomed_size(raster: CompositeRaster, percent: int) -> Tuple[int, int]:
    """Return the on-screen size of *raster* at *percent* zoom."""
    factor = clamp_zoom(percent) / 100
    return round(raster.width * factor), round(raster.height * factor)


def _save_params(fmt: str, quality: int) -> Dict[str, Any]:
    params: Dict[str, Any] = {'format': fmt}
    if fmt == 'JPEG':
        params.update({
            'quality': quality,
            'optimize': True,
            'progressive': True,
        })
    elif fmt == 'WEBP':
        params.update({
            'quality': quality,
            'method': 6,
        })
    elif fmt == 'PNG':
        params.update({
            'optimize': True,
            'compress_level': 6,
        })
    return params


def export_raster(
    raster: CompositeRaster,
    path: Union[str, Path],
    *,
    quality: int = config.QUALITY_DEFAULT,
) -> Path:
    """Write *raster* to *path*; the format follows the file extension."""
    if raster.is_empty:
        raise ExportError("Nothing to export: the stitched image is empty")
    try:
        target = validate_output_path(path, config.EXPORT_FORMATS)
    except ValueError as exc:
        raise ExportError(f"Cannot save stitched image: {exc}") from exc

    fmt = target.suffix[1:].upper()
    if fmt == 'JPG':
        fmt = 'JPEG'
    image = flatten_image(raster.image) if fmt == 'JPEG' else raster.image
    try:
        image.save(str(target), **_save_params(fmt, quality))
    except OSError as exc:
        raise ExportError(f"Could not save stitched image: {exc}") from exc
    LOGGER.info("Saved %dx%d image to %s", raster.width, raster.height, target)
    return target
