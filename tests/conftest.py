"""Shared fixtures for building test images and entries."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, Tuple

import pytest
from PIL import Image

from stitcher.decoding import DecodedImage
from stitcher.models import DecodedSize, ImageEntry, MemorySource

Color = Tuple[int, int, int, int]


def png_bytes(size: Tuple[int, int], color: Color = (255, 0, 0, 255)) -> bytes:
    out = BytesIO()
    Image.new("RGBA", size, color).save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def memory_entry() -> Callable[..., ImageEntry]:
    """Build an entry whose source is an in-memory PNG of the given size."""

    def factory(size=(10, 10), label="image.png", color: Color = (255, 0, 0, 255), entry_id=None):
        return ImageEntry(MemorySource(png_bytes(size, color), label), label, entry_id=entry_id)

    return factory


@pytest.fixture
def decoded() -> Callable[..., DecodedImage]:
    """Build a decoded image of a solid colour without touching the decoder."""

    def factory(entry_id: str, size: Tuple[int, int], color: Color = (255, 0, 0, 255)):
        image = Image.new("RGBA", size, color)
        return DecodedImage(entry_id, f"{entry_id}.png", image, DecodedSize(*size))

    return factory


@pytest.fixture
def write_image(tmp_path: Path) -> Callable[..., Path]:
    def factory(name="img.png", size=(10, 10), color="red") -> Path:
        path = tmp_path / name
        Image.new("RGB", size, color=color).save(path)
        return path

    return factory


class ManualRunner:
    """Collects submitted tasks and runs them only when asked."""

    def __init__(self):
        self.tasks = []

    def submit(self, fn, arg, callback):
        self.tasks.append((fn, arg, callback))

    def drain(self):
        self.run_in(range(len(self.tasks)))

    def run_in(self, order):
        tasks, self.tasks = self.tasks, []
        for index in order:
            fn, arg, callback = tasks[index]
            callback(fn(arg))


@pytest.fixture
def manual_runner() -> ManualRunner:
    return ManualRunner()
