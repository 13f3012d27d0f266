"""File intake: turn user supplied paths into list entries.

Only image files get through.  Everything else is reported back as an
:class:`IntakeRejection` so the view can show one error per rejected file.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from utils.validation import suffixes_for, validate_image_path

from . import config
from .models import FileSource, ImageEntry, SourceRef, source_from_uri

LOGGER = logging.getLogger("image_stitcher.intake")


@dataclass(frozen=True)
class IntakeRejection:
    """A file refused by intake, with the reason shown to the user."""

    path: str
    reason: str

    @property
    def name(self) -> str:
        return Path(self.path).name or self.path

    @property
    def message(self) -> str:
        return f"{self.reason} File: {self.name}"


@dataclass
class IntakeResult:
    accepted: List[Tuple[SourceRef, str]] = field(default_factory=list)
    rejected: List[IntakeRejection] = field(default_factory=list)


def collect_sources(
    paths: Iterable[Union[str, Path]],
    allowed_formats: Sequence[str] = config.SUPPORTED_IMAGE_FORMATS,
) -> IntakeResult:
    """Validate *paths* (plain paths or ``file://`` URIs) in the given order."""
    allowed = suffixes_for(allowed_formats)
    result = IntakeResult()
    for raw in paths:
        try:
            source = source_from_uri(raw)
            resolved = validate_image_path(source.path, allowed)
        except ValueError as exc:
            LOGGER.warning("Rejected %s: %s", raw, exc)
            result.rejected.append(IntakeRejection(path=str(raw), reason=str(exc)))
            continue
        result.accepted.append((FileSource(resolved), resolved.name))
    return result


def make_entries(accepted: Iterable[Tuple[SourceRef, str]]) -> List[ImageEntry]:
    return [ImageEntry(source, label) for source, label in accepted]
