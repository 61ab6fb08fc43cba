from dataclasses import replace
from typing import Sequence, TypeVar

T = TypeVar("T")


def compact_order(items: Sequence[T], order_field: str = "order") -> list[T]:
    """
    Re-assigns sequential order values (0..N-1) following sequence position.

    Items are frozen dataclasses; an item whose order already matches its
    position is reused as-is, every other item is replaced by a copy.
    """
    return [
        item if getattr(item, order_field) == index
        else replace(item, **{order_field: index})
        for index, item in enumerate(items)
    ]
