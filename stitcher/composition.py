"""Composition of decoded images into one stitched raster.

The engine concatenates images along the main axis (x for horizontal, y for
vertical).  The canvas is the sum of the main-axis extents by the largest
cross-axis extent.  With ``keep_aspect`` every image is stretched to the
canvas's cross-axis extent while keeping its native main-axis extent; true
proportions are not preserved.  The cursor always advances by the native
main-axis extent and never moves on the cross axis.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from PIL import Image

from utils.image_operations import new_canvas, paste_image, resize_image

from . import config
from .decoding import DecodedImage

LOGGER = logging.getLogger("image_stitcher.composition")


@dataclass(frozen=True)
class Placement:
    """Where and how large one image is drawn on the canvas."""

    entry_id: str
    x: int
    y: int
    width: int
    height: int
    scaled: bool


@dataclass(frozen=True)
class CompositeRaster:
    """The current stitch result: pixels plus the geometry used to draw them."""

    image: Image.Image
    placements: Tuple[Placement, ...]
    mode: str
    keep_aspect: bool

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


def canvas_size(images: Sequence[DecodedImage], mode: str) -> Tuple[int, int]:
    """Return ``(width, height)`` of the canvas for *images* in *mode*."""
    if not images:
        return 0, 0
    widths = [image.width for image in images]
    heights = [image.height for image in images]
    if mode == config.HORIZONTAL_MODE:
        return sum(widths), max(heights)
    return max(widths), sum(heights)


class CompositionEngine:
    """Lay out and draw decoded images in list order."""

    def layout(
        self,
        images: Sequence[DecodedImage],
        mode: str = config.DEFAULT_MODE,
        keep_aspect: bool = config.DEFAULT_KEEP_ASPECT,
    ) -> Tuple[Tuple[int, int], Tuple[Placement, ...]]:
        if mode not in config.STITCH_MODES:
            raise ValueError(f"Unknown stitch mode: {mode!r}")
        horizontal = mode == config.HORIZONTAL_MODE
        canvas_width, canvas_height = canvas_size(images, mode)
        x = y = 0
        placements = []
        for image in images:
            if keep_aspect:
                width = image.width if horizontal else canvas_width
                height = canvas_height if horizontal else image.height
            else:
                width, height = image.width, image.height
            placements.append(
                Placement(
                    entry_id=image.entry_id,
                    x=x,
                    y=y,
                    width=width,
                    height=height,
                    scaled=(width, height) != (image.width, image.height),
                )
            )
            if horizontal:
                x += image.width
            else:
                y += image.height
        return (canvas_width, canvas_height), tuple(placements)

    def compose(
        self,
        images: Sequence[DecodedImage],
        mode: str = config.DEFAULT_MODE,
        keep_aspect: bool = config.DEFAULT_KEEP_ASPECT,
    ) -> CompositeRaster:
        """Draw *images* into a fresh raster."""
        size, placements = self.layout(images, mode, keep_aspect)
        canvas = new_canvas(size)
        for image, placement in zip(images, placements):
            drawn = resize_image(image.image, (placement.width, placement.height))
            paste_image(canvas, drawn, (placement.x, placement.y))
        LOGGER.info(
            "Composed %d image(s) %s into %dx%d (keep aspect: %s)",
            len(placements),
            mode,
            size[0],
            size[1],
            keep_aspect,
        )
        return CompositeRaster(
            image=canvas, placements=placements, mode=mode, keep_aspect=keep_aspect
        )
