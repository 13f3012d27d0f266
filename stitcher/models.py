"""Plain data types shared by the list, the decoder and the compositor.

Nothing here knows about Qt, so the core can be driven from the command line
launcher and from tests without a running application.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlparse


class StitcherError(Exception):
    """Base class for errors raised by the stitching core."""


@dataclass(frozen=True)
class FileSource:
    """Image bytes stored in a file on disk."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class MemorySource:
    """Image bytes held in memory (drag payloads, generated images)."""

    data: bytes = field(repr=False)
    name: str = "image"

    def read_bytes(self) -> bytes:
        return self.data


SourceRef = Union[FileSource, MemorySource]


def source_from_uri(uri: Union[str, Path]) -> FileSource:
    """Return a :class:`FileSource` for a plain path or a ``file://`` URI.

    Single-letter schemes such as ``"C"`` are Windows drive letters and are
    treated as plain paths. Every other scheme is rejected.
    """
    text = str(uri)
    parsed = urlparse(text)
    if parsed.scheme == "file":
        return FileSource(Path(unquote(parsed.path)))
    if parsed.scheme and len(parsed.scheme) > 1:
        raise ValueError("URLs are not allowed")
    return FileSource(Path(text))


@dataclass(frozen=True)
class DecodedSize:
    """Pixel dimensions of a decoded image."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Decoded size must be positive, got {self.width}x{self.height}"
            )


def new_entry_id() -> str:
    return uuid.uuid4().hex


class ImageEntry:
    """One user supplied image waiting to be ordered and stitched."""

    __slots__ = ("id", "source", "label", "_decoded")

    def __init__(
        self,
        source: SourceRef,
        label: str,
        *,
        entry_id: Optional[str] = None,
    ) -> None:
        self.id = entry_id or new_entry_id()
        self.source = source
        self.label = label
        self._decoded: Optional[DecodedSize] = None

    @property
    def decoded(self) -> Optional[DecodedSize]:
        return self._decoded

    def set_decoded(self, size: DecodedSize) -> None:
        """Record the decoded size; it cannot change once set."""
        if self._decoded is not None and self._decoded != size:
            raise ValueError(
                f"Image size changed from {self._decoded.width}x{self._decoded.height} "
                f"to {size.width}x{size.height}; remove and re-add it."
            )
        self._decoded = size

    def __repr__(self) -> str:
        return f"ImageEntry(id={self.id!r}, label={self.label!r})"
