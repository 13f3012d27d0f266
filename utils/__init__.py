"""Utility package for image stitcher."""

from . import image_operations, validation

__all__ = ["image_operations", "validation"]
