"""Controller layer for decoupling list and gesture state from widgets."""

from .ordered_list import DuplicateIdError, NotFoundError, OrderedItemList
from .reorder import (
    DragSession,
    PointerDragAdapter,
    ReorderController,
    RowGeometry,
    TouchDragAdapter,
    list_index_geometry,
)

__all__ = [
    "DragSession",
    "DuplicateIdError",
    "NotFoundError",
    "OrderedItemList",
    "PointerDragAdapter",
    "ReorderController",
    "RowGeometry",
    "TouchDragAdapter",
    "list_index_geometry",
]
