"""Gesture state machine for reordering the image list.

:class:`ReorderController` owns a single :class:`DragSession` and exposes one
abstract protocol (``begin`` / ``move_over`` / ``end`` / ``drop_on_discard``).
Mouse drag-and-drop and touch dragging are thin adapters over that protocol so
both channels share the same comparison and transitions.  Row positions are
read through a :class:`RowGeometry` adapter, which lets the Qt list widget,
the command line and tests supply their own notion of "top".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from .ordered_list import NotFoundError, OrderedItemList

LOGGER = logging.getLogger("image_stitcher.reorder")

PointT = TypeVar("PointT")


@dataclass(frozen=True)
class RowGeometry:
    """Adapter returning the current top coordinate of a row by entry id."""

    top_of: Callable[[str], float]


def list_index_geometry(items: OrderedItemList, row_height: float = 1.0) -> RowGeometry:
    """Return a geometry that lays rows out top to bottom in list order."""

    def top_of(entry_id: str) -> float:
        return items.index_of(entry_id) * row_height

    return RowGeometry(top_of=top_of)


@dataclass
class DragSession:
    """State of the one drag that may be in progress."""

    active: bool = False
    source_id: Optional[str] = None

    def reset(self) -> None:
        self.active = False
        self.source_id = None


class ReorderController:
    """Mutate list order in response to drag gestures."""

    def __init__(self, items: OrderedItemList, geometry: Optional[RowGeometry] = None) -> None:
        self._items = items
        self._geometry = geometry or list_index_geometry(items)
        self._session = DragSession()

    @property
    def session(self) -> DragSession:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._session.active

    @property
    def source_id(self) -> Optional[str]:
        return self._session.source_id

    def set_geometry(self, geometry: RowGeometry) -> None:
        self._geometry = geometry

    def begin(self, entry_id: str) -> None:
        """Start dragging *entry_id*, replacing any session in progress."""
        if entry_id not in self._items:
            raise NotFoundError(f"No entry with id {entry_id}")
        if self._session.active:
            LOGGER.info(
                "Drag of %s superseded by %s", self._session.source_id, entry_id
            )
        self._session.active = True
        self._session.source_id = entry_id

    def move_over(self, target_id: str) -> None:
        """Reposition the dragged row relative to the row under the pointer.

        A source row below the target moves before it; otherwise (ties
        included) it moves after it.
        """
        source_id = self._live_source()
        if source_id is None or target_id == source_id:
            return
        source_top = self._geometry.top_of(source_id)
        target_top = self._geometry.top_of(target_id)
        if source_top > target_top:
            self._items.move_before(source_id, target_id)
        else:
            self._items.move_after(source_id, target_id)

    def end(self) -> None:
        self._session.reset()

    def drop_on_discard(self) -> None:
        """Remove the dragged entry and finish the session."""
        source_id = self._live_source()
        if source_id is None:
            return
        self._items.remove(source_id)
        self._session.reset()
        LOGGER.info("Discarded %s by drag", source_id)

    def _live_source(self) -> Optional[str]:
        if not self._session.active:
            return None
        source_id = self._session.source_id
        if source_id not in self._items:
            # The entry was removed under the drag (e.g. the list was cleared).
            self._session.reset()
            return None
        return source_id


class PointerDragAdapter:
    """Feeds native drag-and-drop events into a :class:`ReorderController`."""

    def __init__(self, controller: ReorderController) -> None:
        self._controller = controller

    def drag_started(self, entry_id: str) -> None:
        self._controller.begin(entry_id)

    def dropped_on_row(self, target_id: str) -> None:
        self._controller.move_over(target_id)

    def dropped_on_discard(self) -> None:
        self._controller.drop_on_discard()

    def drag_finished(self) -> None:
        self._controller.end()


class TouchDragAdapter(Generic[PointT]):
    """Emulates dragging for touch input by hit-testing the touch point.

    ``hit_test`` maps a screen point to the id of the row under it, or
    ``None`` when the point is not over a row.
    """

    def __init__(
        self,
        controller: ReorderController,
        hit_test: Callable[[PointT], Optional[str]],
    ) -> None:
        self._controller = controller
        self._hit_test = hit_test

    def touch_started(self, point: PointT) -> bool:
        entry_id = self._hit_test(point)
        if entry_id is None:
            return False
        self._controller.begin(entry_id)
        return True

    def touch_moved(self, point: PointT) -> None:
        if not self._controller.is_dragging:
            return
        target_id = self._hit_test(point)
        if target_id is None:
            return
        self._controller.move_over(target_id)

    def touch_ended(self) -> None:
        self._controller.end()
