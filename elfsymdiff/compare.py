"""
Cross-binary comparison, one section at a time.

Binary 0 is the baseline: every delta is "this binary vs binary 0". A
section's indices are built, turned into rows and dropped before the next
section starts.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from .aggregate import build_section_indices, union_type_names
from .model import UNCHANGED, ComparisonRow, Delta, ElfBinary, SectionReport, SortOrder
from .ranking import resolve_sizes, sizes_differ, sort_type_names, totals_differ

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS = (".text", ".data", ".bss")
TOTAL_LABEL = "Total"


def default_sections() -> List[str]:
    return list(DEFAULT_SECTIONS)


def collect_section_names(binaries: Iterable[ElfBinary]) -> List[str]:
    """Every section name of every binary, once, in order of first appearance."""
    seen = {}
    for binary in binaries:
        for sec in binary.sections:
            seen.setdefault(sec.name, None)
    return list(seen)


def format_delta(size: Optional[int], base: Optional[int]) -> Delta:
    size = size or 0
    base = base or 0
    if size > base:
        return Delta.grew(size - base)
    if size < base:
        return Delta.shrank(base - size)
    return UNCHANGED


def build_row(name: str, sizes: Sequence[Optional[int]], is_total: bool = False) -> ComparisonRow:
    base = sizes[0]
    deltas = tuple(format_delta(s, base) for s in sizes[1:])
    return ComparisonRow(name=name, sizes=tuple(sizes), deltas=deltas, is_total=is_total)


def compare_section(binaries: Sequence[ElfBinary], section: str,
                    sort_order: SortOrder = SortOrder.BY_SIZE_DIFFERENCE,
                    show_all_sections: bool = False) -> SectionReport:
    report = SectionReport(section=section)

    totals = [b.section_size(section) for b in binaries]
    if show_all_sections and not totals_differ(totals):
        logger.debug(f"Section {section!r}: identical in all binaries, skipped")
        return report

    indices = build_section_indices(binaries, section)
    for type_name in sort_type_names(union_type_names(indices), indices, sort_order):
        sizes = resolve_sizes(indices, type_name)
        if sizes_differ(sizes):
            report.rows.append(build_row(type_name, sizes))

    report.total = build_row(TOTAL_LABEL, totals, is_total=True)
    logger.debug(f"Section {section!r}: {len(report.rows)} differing symbols")
    return report


def resolve_sections(binaries: Sequence[ElfBinary], sections: Optional[Sequence[str]] = None,
                     show_all_sections: bool = False) -> List[str]:
    """With show_all_sections the list comes from the binaries and `sections`
    is ignored; otherwise it defaults to .text/.data/.bss."""
    if show_all_sections:
        return collect_section_names(binaries)
    if sections:
        return list(sections)
    return default_sections()


def iter_section_reports(binaries: Sequence[ElfBinary], sections: Optional[Sequence[str]] = None,
                         sort_order: SortOrder = SortOrder.BY_SIZE_DIFFERENCE,
                         show_all_sections: bool = False) -> Iterator[SectionReport]:
    """Yield one report per section, each finished before the next is started."""
    for section in resolve_sections(binaries, sections, show_all_sections):
        yield compare_section(binaries, section, sort_order, show_all_sections)


def compare_binaries(binaries: Sequence[ElfBinary], sections: Optional[Sequence[str]] = None,
                     sort_order: SortOrder = SortOrder.BY_SIZE_DIFFERENCE,
                     show_all_sections: bool = False) -> List[SectionReport]:
    return list(iter_section_reports(binaries, sections, sort_order, show_all_sections))
