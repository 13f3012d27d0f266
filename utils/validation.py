"""Input validation helpers for secure file handling."""
from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Iterable, Set, Union
from urllib.parse import urlparse

INVALID_TYPE_MESSAGE = "Invalid file type. Only image files are allowed."

# Older interpreters do not map .webp.
mimetypes.add_type("image/webp", ".webp")


class ValidationError(ValueError):
    """Raised when a user supplied path is rejected."""


def _has_url_scheme(path_str: str) -> bool:
    """Return True if *path_str* looks like a URL with a scheme.

    Single-letter schemes such as ``"C"`` are treated as drive letters on
    Windows and therefore ignored.
    """
    parsed = urlparse(path_str)
    return bool(parsed.scheme and len(parsed.scheme) > 1)


def suffixes_for(formats: Iterable[str]) -> Set[str]:
    """Turn format names (``"png"``, ``".JPG"``) into lowercase suffixes."""
    return {f".{fmt.lower().lstrip('.')}" for fmt in formats}


def is_image_mime(path: Union[str, Path]) -> bool:
    """Return True if *path*'s guessed MIME type is an ``image/*`` type."""
    mime, _ = mimetypes.guess_type(str(path))
    return bool(mime and mime.startswith("image/"))


def validate_image_path(path: Union[str, Path], allowed_exts: Iterable[str]) -> Path:
    """Validate a user-supplied image *path*.

    The path must point to an existing file whose MIME type is an image type
    and whose extension is allowed.  URL schemes are refused.  Returns the
    resolved ``Path``.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise ValidationError("URLs are not allowed")

    p = Path(path_str).expanduser()
    try:
        p = p.resolve(strict=True)
    except FileNotFoundError as exc:
        raise ValidationError(f"File does not exist: {path_str}") from exc

    if not p.is_file():
        raise ValidationError(f"Not a file: {path_str}")

    if not is_image_mime(p) or p.suffix.lower() not in suffixes_for(allowed_exts):
        raise ValidationError(INVALID_TYPE_MESSAGE)

    return p


def validate_output_path(path: Union[str, Path], allowed_exts: Iterable[str]) -> Path:
    """Validate an output file *path*.

    Ensures the directory exists and the extension is allowed.  URL schemes
    are refused.  Returns the resolved ``Path``.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise ValidationError("URLs are not allowed")

    p = Path(path_str).expanduser().resolve()

    if not p.parent.exists():
        raise ValidationError(f"Directory does not exist: {p.parent}")

    if p.suffix.lower() not in suffixes_for(allowed_exts):
        raise ValidationError(f"Unsupported file extension: {p.suffix or '(none)'}")

    return p
