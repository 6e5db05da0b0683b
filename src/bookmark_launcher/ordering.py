# ordering.py - display order helpers
#
# Orders are always renumbered densely (0..N-1) from the desired display
# order. A drag therefore rewrites every sibling's sort_order at the storage
# boundary; in exchange there are no fractional keys or gaps to run out of.

from __future__ import annotations

from typing import Dict, Hashable, List, Sequence, TypeVar

T = TypeVar("T")


def assign_sort_orders(ordered_ids: Sequence[Hashable]) -> Dict[Hashable, int]:
    """Map each id to its position in ``ordered_ids``."""
    orders = {}
    for pos, item_id in enumerate(ordered_ids):
        if item_id in orders:
            raise ValueError(f"duplicate id in ordering: {item_id!r}")
        orders[item_id] = pos
    return orders


def array_move(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Copy of ``items`` with the element at ``old_index`` moved to ``new_index``."""
    out = list(items)
    out.insert(new_index, out.pop(old_index))
    return out
