"""Unit tests for the ordered image list."""

from __future__ import annotations

import random

import pytest

from stitcher.controllers import DuplicateIdError, NotFoundError, OrderedItemList
from stitcher.models import ImageEntry, MemorySource


def _entry(entry_id: str) -> ImageEntry:
    return ImageEntry(MemorySource(b"", f"{entry_id}.png"), f"{entry_id}.png", entry_id=entry_id)


def _list_of(*ids: str) -> OrderedItemList:
    items = OrderedItemList()
    for entry_id in ids:
        items.append(_entry(entry_id))
    return items


def test_append_keeps_insertion_order():
    items = _list_of("a", "b", "c")
    assert items.ordered_ids() == ("a", "b", "c")
    assert len(items) == 3
    assert "b" in items


def test_append_duplicate_id_raises():
    items = _list_of("a")
    with pytest.raises(DuplicateIdError):
        items.append(_entry("a"))
    assert items.ordered_ids() == ("a",)


def test_remove_absent_id_is_a_no_op():
    items = _list_of("a", "b")
    assert items.remove("zzz") is False
    assert items.ordered_ids() == ("a", "b")


def test_remove_present_id():
    items = _list_of("a", "b", "c")
    assert items.remove("b") is True
    assert items.ordered_ids() == ("a", "c")
    assert items.get("b") is None


def test_move_before_and_after():
    items = _list_of("a", "b", "c", "d")
    items.move_before("d", "b")
    assert items.ordered_ids() == ("a", "d", "b", "c")
    items.move_after("a", "c")
    assert items.ordered_ids() == ("d", "b", "c", "a")


def test_move_onto_itself_is_a_no_op():
    items = _list_of("a", "b", "c")
    items.move_before("b", "b")
    items.move_after("b", "b")
    assert items.ordered_ids() == ("a", "b", "c")


@pytest.mark.parametrize("entry_id, target_id", [("x", "a"), ("a", "x")])
def test_move_with_unknown_id_raises(entry_id, target_id):
    items = _list_of("a", "b")
    with pytest.raises(NotFoundError):
        items.move_before(entry_id, target_id)
    with pytest.raises(NotFoundError):
        items.move_after(entry_id, target_id)
    assert items.ordered_ids() == ("a", "b")


def test_snapshots_are_detached_from_internal_state():
    items = _list_of("a", "b")
    ids = list(items.ordered_ids())
    entries = list(items.ordered_entries())
    ids.reverse()
    entries.clear()
    assert items.ordered_ids() == ("a", "b")


def test_clear_empties_the_list():
    items = _list_of("a", "b")
    items.clear()
    assert items.ordered_ids() == ()
    items.append(_entry("a"))
    assert items.ordered_ids() == ("a",)


def test_random_moves_never_lose_or_duplicate_ids():
    ids = [f"e{i}" for i in range(8)]
    items = _list_of(*ids)
    rng = random.Random(1234)
    for _ in range(500):
        entry_id, target_id = rng.choice(ids), rng.choice(ids)
        if rng.random() < 0.5:
            items.move_before(entry_id, target_id)
        else:
            items.move_after(entry_id, target_id)
        ordered = items.ordered_ids()
        assert len(ordered) == len(ids)
        assert sorted(ordered) == sorted(ids)


def test_moves_keep_relative_order_of_other_entries():
    items = _list_of("a", "b", "c", "d", "e")
    items.move_after("b", "d")
    others = [i for i in items.ordered_ids() if i != "b"]
    assert others == ["a", "c", "d", "e"]


def test_move_before_then_after_round_trip():
    items = _list_of("a", "b", "c")
    items.move_before("a", "c")
    assert items.ordered_ids() == ("b", "a", "c")
    items.move_after("a", "c")
    assert items.ordered_ids() == ("b", "c", "a")

    items = _list_of("a", "b", "c")
    items.move_before("c", "b")
    assert items.ordered_ids() == ("a", "c", "b")
    items.move_after("c", "b")
    assert items.ordered_ids() == ("a", "b", "c")
