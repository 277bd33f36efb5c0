from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .aggregate import SectionSymbolIndex
from .model import SortOrder


def resolve_size(index: SectionSymbolIndex, type_name: str) -> Optional[int]:
    """Size of the first symbol filed under `type_name`; later duplicates are ignored."""
    entries = index.get(type_name)
    if not entries:
        return None
    return entries[0].size


def resolve_sizes(indices: Sequence[SectionSymbolIndex], type_name: str) -> Tuple[Optional[int], ...]:
    return tuple(resolve_size(index, type_name) for index in indices)


def size_difference(sizes: Sequence[Optional[int]]) -> int:
    """Baseline size minus the sum of every other binary's size (None counts as 0)."""
    diff = sizes[0] or 0
    for s in sizes[1:]:
        diff -= s or 0
    return diff


def sort_key(order: SortOrder, type_name: str, sizes: Sequence[Optional[int]]) -> tuple:
    if order is SortOrder.BY_NAME:
        return (type_name,)
    if order is SortOrder.BY_SIZE:
        # descending per binary in input order, later binaries break ties
        return tuple(-(s or 0) for s in sizes) + (type_name,)
    return (size_difference(sizes), type_name)


def sort_type_names(type_names: Iterable[str], indices: Sequence[SectionSymbolIndex],
                    order: SortOrder = SortOrder.BY_SIZE_DIFFERENCE) -> List[str]:
    return sorted(type_names, key=lambda tn: sort_key(order, tn, resolve_sizes(indices, tn)))


def sizes_differ(sizes: Sequence[Optional[int]]) -> bool:
    """True if any two symbol sizes differ; a missing symbol equals an explicit 0."""
    return len({s or 0 for s in sizes}) > 1


def totals_differ(totals: Sequence[Optional[int]]) -> bool:
    """True if any two section totals differ; a missing section is not the same as 0."""
    return len(set(totals)) > 1
