"""Concurrent decoding of a snapshot of list entries.

A :class:`DecodeCohort` submits one decode task per entry to a task runner and
collects the outcomes in a :class:`Cohort`.  Each entry resolves on its own:
an unreadable source becomes a :class:`DecodeFailure` value and never stops
the other entries.  Outcomes are folded on the runner's owning thread, in
whatever order they arrive, into running aggregates built only from
``min``, ``max`` and ``+`` so the totals do not depend on arrival order.
When the last outcome lands the cohort resolves its ``completion`` future once,
with outcomes listed in snapshot order.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field, replace
from io import BytesIO
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageOps

from .models import DecodedSize, ImageEntry, StitcherError
from .runners import TaskRunner

LOGGER = logging.getLogger("image_stitcher.decoding")


@dataclass(frozen=True)
class DecodedImage:
    """A successfully decoded entry."""

    entry_id: str
    label: str
    image: Image.Image = field(repr=False, compare=False)
    size: DecodedSize

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height


@dataclass(frozen=True)
class DecodeFailure:
    """An entry whose source could not be read or decoded."""

    entry_id: str
    label: str
    cause: Exception = field(compare=False)

    @property
    def message(self) -> str:
        return f"{self.cause} File: {self.label}"


DecodeOutcome = Union[DecodedImage, DecodeFailure]


class DecodeError(StitcherError):
    """Exception form of a :class:`DecodeFailure` for callers that must raise."""

    def __init__(self, failure: DecodeFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure


def decode_source(entry: ImageEntry) -> DecodeOutcome:
    """Read and decode *entry*'s source; failures are returned, not raised."""
    try:
        data = entry.source.read_bytes()
        with Image.open(BytesIO(data)) as opened:
            oriented = ImageOps.exif_transpose(opened)
            image = oriented.convert("RGBA")
        return DecodedImage(
            entry_id=entry.id,
            label=entry.label,
            image=image,
            size=DecodedSize(image.width, image.height),
        )
    except Exception as exc:
        LOGGER.warning("Failed to decode %s: %s", entry.label, exc)
        return DecodeFailure(entry_id=entry.id, label=entry.label, cause=exc)


def _min(current: Optional[int], value: int) -> int:
    return value if current is None else min(current, value)


def _max(current: Optional[int], value: int) -> int:
    return value if current is None else max(current, value)


@dataclass(frozen=True)
class CohortAggregates:
    """Running extremes and sums over the decoded sizes of a cohort."""

    min_width: Optional[int] = None
    max_width: Optional[int] = None
    sum_width: int = 0
    min_height: Optional[int] = None
    max_height: Optional[int] = None
    sum_height: int = 0

    def fold(self, size: DecodedSize) -> "CohortAggregates":
        return CohortAggregates(
            min_width=_min(self.min_width, size.width),
            max_width=_max(self.max_width, size.width),
            sum_width=self.sum_width + size.width,
            min_height=_min(self.min_height, size.height),
            max_height=_max(self.max_height, size.height),
            sum_height=self.sum_height + size.height,
        )

    def merge(self, other: "CohortAggregates") -> "CohortAggregates":
        """Combine two partial aggregates (associative and commutative)."""
        merged = self
        for name, pick in (
            ("min_width", _min),
            ("max_width", _max),
            ("min_height", _min),
            ("max_height", _max),
        ):
            value = getattr(other, name)
            if value is not None:
                merged = replace(merged, **{name: pick(getattr(merged, name), value)})
        return replace(
            merged,
            sum_width=merged.sum_width + other.sum_width,
            sum_height=merged.sum_height + other.sum_height,
        )


@dataclass(frozen=True)
class CohortResult:
    """Completion payload: outcomes in snapshot order plus aggregates."""

    outcomes: Tuple[DecodeOutcome, ...]
    aggregates: CohortAggregates

    @property
    def successes(self) -> Tuple[DecodedImage, ...]:
        return tuple(o for o in self.outcomes if isinstance(o, DecodedImage))

    @property
    def failures(self) -> Tuple[DecodeFailure, ...]:
        return tuple(o for o in self.outcomes if isinstance(o, DecodeFailure))


class Cohort:
    """The fixed snapshot of entries submitted to one stitch."""

    def __init__(self, entries: Iterable[ImageEntry]) -> None:
        self.entries: Tuple[ImageEntry, ...] = tuple(entries)
        self.expected = len(self.entries)
        self.completed = 0
        self.results: Dict[str, DecodeOutcome] = {}
        self.aggregates = CohortAggregates()
        self.completion: "Future[CohortResult]" = Future()
        self._callbacks: List[Callable[[CohortResult], None]] = []
        self._by_id = {entry.id: entry for entry in self.entries}
        if self.expected == 0:
            self._finish()

    @property
    def is_complete(self) -> bool:
        return self.completion.done()

    @property
    def entry_ids(self) -> Tuple[str, ...]:
        return tuple(entry.id for entry in self.entries)

    def record(self, outcome: DecodeOutcome) -> None:
        """Fold one resolved entry into the cohort.

        A decode whose size disagrees with the size the entry already holds
        is recorded as a failure for that entry.
        """
        entry = self._by_id.get(outcome.entry_id)
        if entry is None:
            raise ValueError(f"Entry {outcome.entry_id} is not part of this cohort")
        if outcome.entry_id in self.results:
            raise ValueError(f"Entry {outcome.entry_id} was already recorded")
        if isinstance(outcome, DecodedImage):
            try:
                entry.set_decoded(outcome.size)
            except ValueError as exc:
                LOGGER.warning("Rejected decode of %s: %s", outcome.label, exc)
                outcome = DecodeFailure(entry_id=entry.id, label=outcome.label, cause=exc)
        self.results[outcome.entry_id] = outcome
        self.completed += 1
        try:
            if isinstance(outcome, DecodedImage):
                self.aggregates = self.aggregates.fold(outcome.size)
        finally:
            if self.completed == self.expected:
                self._finish()

    def add_done_callback(self, callback: Callable[[CohortResult], None]) -> None:
        """Call *callback* with the result once the cohort completes.

        Callbacks run on the thread that records the last outcome, or right
        away when the cohort is already complete.  Their exceptions propagate.
        """
        if self.completion.done():
            callback(self.completion.result())
            return
        self._callbacks.append(callback)

    def _finish(self) -> None:
        outcomes = tuple(self.results[entry.id] for entry in self.entries)
        result = CohortResult(outcomes, self.aggregates)
        self.completion.set_result(result)
        failed = len(result.failures)
        LOGGER.info(
            "Cohort complete: %d decoded, %d failed", len(outcomes) - failed, failed
        )
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(result)


class DecodeCohort:
    """Start cohorts that decode every entry through a task runner."""

    def __init__(
        self,
        runner: TaskRunner,
        decoder: Callable[[ImageEntry], DecodeOutcome] = decode_source,
    ) -> None:
        self._runner = runner
        self._decoder = decoder

    @property
    def runner(self) -> TaskRunner:
        return self._runner

    def start(self, entries: Sequence[ImageEntry]) -> Cohort:
        cohort = Cohort(entries)
        LOGGER.info("Decoding cohort of %d entries", cohort.expected)
        for entry in cohort.entries:
            self._runner.submit(self._decoder, entry, cohort.record)
        return cohort

    def run(self, entries: Sequence[ImageEntry]) -> CohortResult:
        """Start a cohort and block until it completes."""
        cohort = self.start(entries)
        self._runner.drain()
        return cohort.completion.result()
