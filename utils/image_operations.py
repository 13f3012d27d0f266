"""Reusable image manipulation operations.

This module centralizes the small Pillow helpers shared by the compositor
and the exporter.  Functions are intentionally small and pure to keep them
easy to test and to encourage reuse.
"""

from __future__ import annotations

from PIL import Image

ColorValue = int | tuple[int, ...]

TRANSPARENT: tuple[int, int, int, int] = (0, 0, 0, 0)


def _default_background(mode: str) -> ColorValue:
    """Return a sensible default background colour for ``mode``."""

    if mode in {"RGB", "P"}:
        return (255, 255, 255)
    if mode == "RGBA":
        return (255, 255, 255, 255)
    if mode == "L":
        return 255
    if mode == "LA":
        return (255, 255)
    try:
        return Image.new(mode, (1, 1), "white").getpixel((0, 0))
    except ValueError:
        return 255


def new_canvas(size: tuple[int, int], *, mode: str = "RGBA") -> Image.Image:
    """Return a blank, fully transparent canvas of ``size``.

    Zero-sized canvases are allowed so an empty stitch still yields a raster.
    """
    width, height = size
    if width < 0 or height < 0:
        raise ValueError(f"Canvas size must not be negative, got {width}x{height}")
    return Image.new(mode, (width, height), TRANSPARENT if mode == "RGBA" else 0)


def resize_image(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Stretch ``image`` to exactly ``size`` without preserving proportions.

    Returns ``image`` itself when it already has the requested size.
    """
    if image.size == tuple(size):
        return image
    return image.resize(size, Image.Resampling.LANCZOS)


def paste_image(canvas: Image.Image, image: Image.Image, position: tuple[int, int]) -> None:
    """Copy ``image`` onto ``canvas`` at ``position``, replacing pixels."""
    if image.mode != canvas.mode:
        image = image.convert(canvas.mode)
    canvas.paste(image, position)


def flatten_image(image: Image.Image, mode: str = "RGB") -> Image.Image:
    """Composite ``image`` onto an opaque background for formats without alpha."""
    if "A" not in image.getbands():
        return image.convert(mode) if image.mode != mode else image
    background = Image.new("RGBA", image.size, _default_background("RGBA"))
    background.alpha_composite(image.convert("RGBA"))
    return background.convert(mode)


__all__ = [
    "TRANSPARENT",
    "flatten_image",
    "new_canvas",
    "paste_image",
    "resize_image",
]
