"""Set-equality and deduplication helpers (core domain)."""

from __future__ import annotations

from typing import Hashable, Iterable, List, Sequence, Tuple, TypeVar

from core.models import Filter, Source

T = TypeVar("T")


def are_sets_equal(left: Iterable[Hashable], right: Iterable[Hashable]) -> bool:
    """Compare two sequences as unordered sets.

    Order and duplicates in either input are irrelevant.
    """

    left_set = set(left)
    right_set = set(right)
    return len(left_set) == len(right_set) and all(item in right_set for item in left_set)


def unique_filters(sources: Iterable[Source]) -> List[Filter]:
    """Return the union of every source's filters, keyed by filter id.

    The first occurrence of an id wins and the original order is kept.
    """

    seen: set = set()
    filters: List[Filter] = []
    for source in sources:
        for item in source.applicable_filters:
            if item.id in seen:
                continue
            seen.add(item.id)
            filters.append(item)
    return filters


def replace_item(items: Sequence[T], old: T, new: T) -> Tuple[T, ...]:
    """Return ``items`` with the first element identical to ``old`` swapped for ``new``."""

    for index, item in enumerate(items):
        if item is old:
            return (*items[:index], new, *items[index + 1 :])
    return tuple(items)
