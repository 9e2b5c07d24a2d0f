"""Ordered grouping of catalog rows."""

from typing import Callable, Dict, Hashable, Iterable, List, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_ordered(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Group items by key.

    Groups appear in first-seen order and keep the relative order of their
    members, regardless of how the source rows are sorted.
    """
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups
