import pytest
from unittest.mock import MagicMock

from stitcher import config
from stitcher.decoding import DecodeCohort
from stitcher.models import ImageEntry, MemorySource
from stitcher.presenter import StitchPresenter
from stitcher.runners import ThreadPoolTaskRunner


@pytest.fixture
def runner():
    with ThreadPoolTaskRunner(max_workers=2) as pool:
        yield pool


@pytest.fixture
def mock_view():
    view = MagicMock()
    view.stitch_settings.return_value = config.StitchSettings(
        mode=config.HORIZONTAL_MODE, keep_aspect=False
    )
    return view


@pytest.fixture
def presenter(mock_view, runner):
    return StitchPresenter(mock_view, DecodeCohort(runner))


def _last_raster(view):
    return view.show_result.call_args.args[0]


def test_add_paths_appends_images_and_reports_rejections(presenter, mock_view, write_image, tmp_path):
    bad = tmp_path / "notes.txt"
    bad.write_text("x")
    added = presenter.add_paths([write_image("a.png"), bad, write_image("b.png")])

    assert added == 2
    assert [e.label for e in presenter.items.ordered_entries()] == ["a.png", "b.png"]
    mock_view.show_error.assert_called_once()
    assert mock_view.show_error.call_args.args[0].endswith("File: notes.txt")
    entries = mock_view.refresh_items.call_args.args[0]
    assert [e.label for e in entries] == ["a.png", "b.png"]


def test_stitch_composes_in_list_order(presenter, mock_view, runner, memory_entry):
    presenter.add_entries([
        memory_entry(size=(10, 10), label="a.png"),
        memory_entry(size=(20, 30), label="b.png"),
        memory_entry(size=(5, 5), label="c.png"),
    ])
    cohort = presenter.stitch()
    mock_view.show_result.assert_not_called()
    runner.drain()

    assert cohort.is_complete
    raster = _last_raster(mock_view)
    assert raster.size == (35, 30)
    assert presenter.raster is raster
    mock_view.set_save_enabled.assert_called_with(True)
    mock_view.show_error.assert_not_called()


def test_stitch_uses_reordered_list(presenter, mock_view, runner, memory_entry):
    first = memory_entry(size=(4, 4), label="first.png")
    second = memory_entry(size=(6, 4), label="second.png")
    presenter.add_entries([first, second])
    presenter.controller.begin(second.id)
    presenter.controller.move_over(first.id)
    presenter.controller.end()

    presenter.stitch()
    runner.drain()

    raster = _last_raster(mock_view)
    assert [p.entry_id for p in raster.placements] == [second.id, first.id]


def test_stitch_skips_undecodable_entries(presenter, mock_view, runner, memory_entry):
    bad = ImageEntry(MemorySource(b"garbage", "bad.png"), "bad.png")
    presenter.add_entries([memory_entry(size=(10, 10)), bad, memory_entry(size=(5, 5))])

    presenter.stitch()
    runner.drain()

    mock_view.show_error.assert_called_once()
    assert mock_view.show_error.call_args.args[0].endswith("File: bad.png")
    assert _last_raster(mock_view).size == (15, 10)


def test_stitch_with_no_entries_gives_empty_result(presenter, mock_view):
    presenter.stitch()
    raster = _last_raster(mock_view)
    assert raster.is_empty
    mock_view.set_save_enabled.assert_called_with(False)


def test_newer_stitch_supersedes_pending_one(presenter, mock_view, runner, memory_entry):
    presenter.add_entries([memory_entry(size=(10, 10))])
    presenter.stitch()
    presenter.add_entries([memory_entry(size=(3, 10))])
    presenter.stitch()
    runner.drain()

    assert mock_view.show_result.call_count == 1
    assert _last_raster(mock_view).size == (13, 10)


def test_clear_all_drops_items_and_result(presenter, mock_view, runner, memory_entry):
    presenter.add_entries([memory_entry()])
    presenter.stitch()
    runner.drain()
    mock_view.reset_mock()

    presenter.clear_all()

    assert len(presenter.items) == 0
    assert presenter.raster is None
    mock_view.clear_result.assert_called_once()
    mock_view.set_save_enabled.assert_called_with(False)
    mock_view.refresh_items.assert_called_once_with(())


def test_set_zoom_reports_scaled_size(presenter, mock_view, runner, memory_entry):
    presenter.add_entries([memory_entry(size=(40, 20))])
    presenter.stitch()
    runner.drain()

    presenter.set_zoom(50)
    mock_view.set_zoom.assert_called_with(50, (20, 10))
    presenter.set_zoom(5)
    assert presenter.zoom == config.ZOOM_MIN


def test_export_without_result_shows_error(presenter, mock_view, tmp_path):
    assert presenter.export(tmp_path / "out.png") is None
    mock_view.show_error.assert_called_once()


def test_export_writes_file(presenter, mock_view, runner, memory_entry, tmp_path):
    presenter.add_entries([memory_entry(size=(8, 8))])
    presenter.stitch()
    runner.drain()

    saved = presenter.export(tmp_path / "out.png")
    assert saved is not None and saved.exists()
    assert presenter.export(tmp_path / "nope" / "out.png") is None
    mock_view.show_error.assert_called_once()


def test_remove_refreshes_only_when_present(presenter, mock_view, memory_entry):
    entry = memory_entry()
    presenter.add_entries([entry])
    mock_view.reset_mock()

    presenter.remove("unknown")
    mock_view.refresh_items.assert_not_called()
    presenter.remove(entry.id)
    mock_view.refresh_items.assert_called_once_with(())


def test_entry_added_during_stitch_waits_for_next_one(mock_view, manual_runner, memory_entry):
    presenter = StitchPresenter(mock_view, DecodeCohort(manual_runner))
    first = memory_entry(size=(10, 10))
    presenter.add_entries([first])
    cohort = presenter.stitch()
    late = memory_entry(size=(7, 10))
    presenter.add_entries([late])
    manual_runner.drain()

    assert cohort.expected == 1
    assert cohort.entry_ids == (first.id,)
    raster = _last_raster(mock_view)
    assert raster.size == (10, 10)
    assert [p.entry_id for p in raster.placements] == [first.id]
    assert len(presenter.items) == 2


def test_restitch_after_file_changed_still_completes(mock_view, manual_runner, write_image):
    presenter = StitchPresenter(mock_view, DecodeCohort(manual_runner))
    path = write_image("a.png", size=(10, 10))
    presenter.add_paths([path, write_image("b.png", size=(5, 5))])
    presenter.stitch()
    manual_runner.drain()

    write_image("a.png", size=(20, 10))
    mock_view.reset_mock()
    cohort = presenter.stitch()
    manual_runner.drain()

    assert cohort.is_complete
    mock_view.show_error.assert_called_once()
    assert mock_view.show_error.call_args.args[0].endswith("File: a.png")
    assert _last_raster(mock_view).size == (5, 5)
    assert presenter.raster is not None
    mock_view.set_save_enabled.assert_called_with(True)
