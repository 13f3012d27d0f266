"""Ordered list of pending image entries.

Order is the only record of stitch order: there is no separate rank field.
The list is mutated by intake (``append``), by the reorder controller
(``move_before`` / ``move_after`` / ``remove``) and by a full reset
(``clear``).  Readers receive tuples so they can never alter the internal
sequence.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from ..models import ImageEntry, StitcherError

LOGGER = logging.getLogger("image_stitcher.items")


class DuplicateIdError(StitcherError, ValueError):
    """Raised when appending an entry whose id is already listed."""


class NotFoundError(StitcherError, KeyError):
    """Raised when a reposition references an id that is not listed."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class OrderedItemList:
    """Ordered, duplicate-free sequence of :class:`ImageEntry`."""

    def __init__(self) -> None:
        self._entries: List[ImageEntry] = []
        self._by_id: Dict[str, ImageEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ImageEntry]:
        return iter(self.ordered_entries())

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._by_id

    def get(self, entry_id: str) -> Optional[ImageEntry]:
        return self._by_id.get(entry_id)

    def index_of(self, entry_id: str) -> int:
        entry = self._require(entry_id)
        return self._entries.index(entry)

    def append(self, entry: ImageEntry) -> None:
        """Insert *entry* at the end of the list."""
        if entry.id in self._by_id:
            raise DuplicateIdError(f"Entry {entry.id} is already in the list")
        self._entries.append(entry)
        self._by_id[entry.id] = entry
        LOGGER.debug("Appended %s (%s)", entry.id, entry.label)

    def remove(self, entry_id: str) -> bool:
        """Remove *entry_id* if present; absent ids are ignored."""
        entry = self._by_id.pop(entry_id, None)
        if entry is None:
            return False
        self._entries.remove(entry)
        LOGGER.debug("Removed %s (%s)", entry.id, entry.label)
        return True

    def move_before(self, entry_id: str, target_id: str) -> None:
        """Place *entry_id* immediately before *target_id*."""
        self._move(entry_id, target_id, after=False)

    def move_after(self, entry_id: str, target_id: str) -> None:
        """Place *entry_id* immediately after *target_id*."""
        self._move(entry_id, target_id, after=True)

    def clear(self) -> None:
        self._entries.clear()
        self._by_id.clear()

    def ordered_ids(self) -> Tuple[str, ...]:
        return tuple(entry.id for entry in self._entries)

    def ordered_entries(self) -> Tuple[ImageEntry, ...]:
        return tuple(self._entries)

    def _require(self, entry_id: str) -> ImageEntry:
        try:
            return self._by_id[entry_id]
        except KeyError:
            raise NotFoundError(f"No entry with id {entry_id}") from None

    def _move(self, entry_id: str, target_id: str, *, after: bool) -> None:
        entry = self._require(entry_id)
        target = self._require(target_id)
        if entry is target:
            return
        self._entries.remove(entry)
        index = self._entries.index(target)
        self._entries.insert(index + 1 if after else index, entry)
