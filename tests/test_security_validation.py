import pytest

from utils.validation import (
    INVALID_TYPE_MESSAGE,
    ValidationError,
    suffixes_for,
    validate_image_path,
    validate_output_path,
)
from stitcher import config
from stitcher.intake import collect_sources, make_entries
from stitcher.models import FileSource, source_from_uri

ALLOWED = suffixes_for(config.SUPPORTED_IMAGE_FORMATS)


def test_validate_image_path_rejects_urls(tmp_path):
    with pytest.raises(ValueError):
        validate_image_path("http://example.com/a.png", ALLOWED)


def test_validate_image_path_rejects_bad_extension(tmp_path):
    f = tmp_path / "evil.txt"
    f.write_text("not an image")
    with pytest.raises(ValidationError, match=INVALID_TYPE_MESSAGE):
        validate_image_path(f, ALLOWED)


def test_validate_image_path_rejects_missing_file(tmp_path):
    with pytest.raises(ValidationError):
        validate_image_path(tmp_path / "ghost.png", ALLOWED)


def test_validate_image_path_accepts_image(write_image):
    path = write_image("ok.PNG")
    assert validate_image_path(path, ALLOWED) == path.resolve()


def test_validate_output_path_checks_directory(tmp_path):
    bad_dir = tmp_path / "missing" / "out.png"
    with pytest.raises(ValueError):
        validate_output_path(bad_dir, {".png"})


def test_validate_output_path_checks_extension(tmp_path):
    with pytest.raises(ValidationError):
        validate_output_path(tmp_path / "out.gif", config.EXPORT_FORMATS)


def test_suffixes_for_normalizes_names():
    assert suffixes_for(["PNG", ".jpg", "webp"]) == {".png", ".jpg", ".webp"}


def test_source_from_uri_accepts_file_uris(tmp_path):
    path = tmp_path / "with space.png"
    source = source_from_uri(path.as_uri())
    assert source == FileSource(path)


def test_source_from_uri_rejects_remote_urls():
    with pytest.raises(ValueError):
        source_from_uri("https://example.com/cat.png")


def test_collect_sources_reports_each_rejection_in_order(tmp_path, write_image):
    good = write_image("a.png")
    text = tmp_path / "notes.txt"
    text.write_text("hello")
    other = write_image("b.jpg")

    result = collect_sources([good, text, "ftp://host/x.png", other])

    assert [label for _, label in result.accepted] == ["a.png", "b.jpg"]
    assert [r.name for r in result.rejected] == ["notes.txt", "x.png"]
    assert result.rejected[0].message == f"{INVALID_TYPE_MESSAGE} File: notes.txt"


def test_make_entries_gives_unique_ids(write_image):
    paths = [write_image("a.png"), write_image("b.png")]
    entries = make_entries(collect_sources(paths).accepted)
    assert [e.label for e in entries] == ["a.png", "b.png"]
    assert len({e.id for e in entries}) == 2
    assert all(e.decoded is None for e in entries)
