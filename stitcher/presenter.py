"""
StitchPresenter: application logic for the stitcher, decoupled from MainWindow.

The view only needs a handful of methods (``refresh_items``, ``clear_result``,
``show_result``, ``show_error``, ``set_save_enabled``, ``set_zoom`` and
``stitch_settings``) so tests can drive the presenter with a mock.
"""
from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Iterable, Optional, Union

from . import config
from .composition import CompositeRaster, CompositionEngine
from .controllers import OrderedItemList, ReorderController
from .decoding import Cohort, CohortResult, DecodeCohort
from .export import ExportError, clamp_zoom, export_raster, zoomed_size
from .intake import collect_sources, make_entries
from .models import ImageEntry


class StitchPresenter:
    def __init__(
        self,
        view,
        cohorts: DecodeCohort,
        *,
        items: Optional[OrderedItemList] = None,
        controller: Optional[ReorderController] = None,
        engine: Optional[CompositionEngine] = None,
    ):
        self.view = view
        self.items = items if items is not None else OrderedItemList()
        self.controller = controller or ReorderController(self.items)
        self.cohorts = cohorts
        self.engine = engine or CompositionEngine()
        self.logger = logging.getLogger("image_stitcher.presenter")
        self._raster: Optional[CompositeRaster] = None
        self._current_cohort: Optional[Cohort] = None
        self._zoom = config.ZOOM_DEFAULT

    @property
    def raster(self) -> Optional[CompositeRaster]:
        return self._raster

    @property
    def zoom(self) -> int:
        return self._zoom

    # --- Intake -------------------------------------------------------------
    def add_paths(self, paths: Iterable[Union[str, Path]]) -> int:
        """Validate and append *paths*; each rejected file is reported."""
        intake = collect_sources(paths)
        for rejection in intake.rejected:
            self.view.show_error(rejection.message)
        return self.add_entries(make_entries(intake.accepted))

    def add_entries(self, entries: Iterable[ImageEntry]) -> int:
        added = 0
        for entry in entries:
            self.items.append(entry)
            added += 1
        if added:
            self.logger.info("Added %d image(s); %d listed", added, len(self.items))
            self.refresh_items()
        return added

    # --- List changes -------------------------------------------------------
    def refresh_items(self) -> None:
        self.view.refresh_items(self.items.ordered_entries())

    def remove(self, entry_id: str) -> None:
        if self.items.remove(entry_id):
            self.refresh_items()

    def clear_all(self) -> None:
        """Drop every entry and the current result."""
        self.controller.end()
        self.items.clear()
        self._current_cohort = None
        self._discard_result()
        self.refresh_items()

    # --- Stitching ----------------------------------------------------------
    def stitch(self) -> Cohort:
        """Decode the current order and compose it once every entry resolved.

        A newer stitch supersedes an older one that is still decoding.
        """
        settings = self.view.stitch_settings()
        self._discard_result()
        cohort = self.cohorts.start(self.items.ordered_entries())
        self._current_cohort = cohort
        cohort.add_done_callback(partial(self._on_cohort_done, cohort, settings))
        return cohort

    def _on_cohort_done(
        self, cohort: Cohort, settings: config.StitchSettings, result: CohortResult
    ) -> None:
        if cohort is not self._current_cohort:
            self.logger.info("Ignoring superseded cohort of %d entries", cohort.expected)
            return
        self._current_cohort = None
        for failure in result.failures:
            self.logger.error("Skipping %s: %s", failure.label, failure.cause)
            self.view.show_error(failure.message)
        raster = self.engine.compose(result.successes, settings.mode, settings.keep_aspect)
        self._raster = raster
        self.view.show_result(raster)
        self.view.set_save_enabled(not raster.is_empty)

    def _discard_result(self) -> None:
        self._raster = None
        self.view.clear_result()
        self.view.set_save_enabled(False)
        self.set_zoom(config.ZOOM_DEFAULT)

    # --- Zoom / export ------------------------------------------------------
    def set_zoom(self, percent: int) -> None:
        self._zoom = clamp_zoom(percent)
        size = zoomed_size(self._raster, self._zoom) if self._raster else None
        self.view.set_zoom(self._zoom, size)

    def export(self, path: Union[str, Path]) -> Optional[Path]:
        if self._raster is None:
            self.view.show_error("Nothing to save yet. Stitch some images first.")
            return None
        try:
            return export_raster(self._raster, path)
        except ExportError as exc:
            self.logger.error("Save failed: %s", exc)
            self.view.show_error(str(exc))
            return None
