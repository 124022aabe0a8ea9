"""Sibling ranking shared by folders and files.

Both resources keep an integer ``order`` among the items that share a parent
(``parent_id`` for folders, ``folder_id`` for files). Moving an item runs the
same algorithm for either, so it lives here as pure functions over anything
with an ``order`` attribute.
"""

from typing import Optional, Protocol, Sequence, List, Tuple, TypeVar


class Ordered(Protocol):
    order: int


T = TypeVar("T", bound=Ordered)


def next_order(max_sibling_order: Optional[int]) -> int:
    """Rank for an item appended after its siblings (0 when there are none)."""
    return 0 if max_sibling_order is None else max_sibling_order + 1


def reindex_siblings(siblings: Sequence[T], insert_at: int) -> List[Tuple[T, int]]:
    """Compute new ranks for *siblings* when an item is inserted at *insert_at*.

    *siblings* must exclude the moved item and be sorted by current rank.
    Each sibling gets its index in that list, pushed down by one when the
    index is at or past the insertion point. Only siblings whose rank
    actually changes are returned, as ``(sibling, new_order)`` pairs.
    """
    changes: List[Tuple[T, int]] = []
    for index, sibling in enumerate(siblings):
        new_order = index + 1 if index >= insert_at else index
        if sibling.order != new_order:
            changes.append((sibling, new_order))
    return changes
