"""
Row consolidation: keeps exactly one empty row at the end of an item list.

1. While the last two items are both empty, drop the last one.
2. If the last item now has a width or height, append a fresh empty item.

A single all-empty item is left as-is. Running this twice gives the same
list as running it once.
"""

from typing import Callable

from .initial_state import is_empty_item


def consolidate_empty_rows(items: list, make_empty_item: Callable[[], dict]) -> list:
    """Returns a new list; the input list is never modified."""
    new_items = list(items)
    if not new_items:
        return []

    while len(new_items) > 1 and is_empty_item(new_items[-1]) and is_empty_item(new_items[-2]):
        new_items.pop()

    last_item = new_items[-1]
    if last_item.get("width") or last_item.get("height"):
        new_items.append(make_empty_item())

    return new_items
