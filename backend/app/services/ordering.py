from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


def apply_saved_order(items: Iterable[T], saved_order: Sequence[str] | None, *, key: Callable[[T], str]) -> list[T]:
    """Items whose id appears in ``saved_order`` come first, in that order.

    The rest keep their incoming order, so callers pass them pre-sorted.
    Ids in ``saved_order`` that no longer exist are ignored.
    """
    items = list(items)
    if not saved_order:
        return items
    positions = {item_id: index for index, item_id in enumerate(saved_order)}
    known = sorted((item for item in items if key(item) in positions), key=lambda item: positions[key(item)])
    unknown = [item for item in items if key(item) not in positions]
    return known + unknown
