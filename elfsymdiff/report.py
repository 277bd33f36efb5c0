"""
Console table for a SectionReport.

Layout per section:

    .text        old.elf   new.elf
    init.######       50        60  (+10)
    Total           1000      1100  (+100)     <- bold

One size column per binary; every non-baseline binary also gets a delta
column right after its size. Missing sizes (symbol or section absent) are
left blank, which keeps them apart from a real 0.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from colorama import Fore, Style
from tabulate import tabulate

from .model import ComparisonRow, Delta, DeltaKind, SectionReport


def human_readable_size(n: int) -> str:
    sign = "-" if n < 0 else ""
    n = abs(n)
    if n >= 1024 ** 2:
        return f"{sign}{n / 1024 ** 2:.2f} MB"
    elif n >= 1024:
        return f"{sign}{n / 1024:.2f} KB"
    else:
        return f"{sign}{n} B"


def format_size(size: Optional[int], readable: bool = False) -> str:
    if size is None:
        return ""
    return human_readable_size(size) if readable else str(size)


def format_delta_text(delta: Delta, readable: bool = False, color: bool = True) -> str:
    """`(+n)` in red for growth, `(-n)` in green for shrinkage, blank otherwise."""
    if delta.kind is DeltaKind.UNCHANGED:
        return ""
    amount = human_readable_size(delta.by) if readable else str(delta.by)
    if delta.kind is DeltaKind.GREW:
        text, fg = f"(+{amount})", Fore.LIGHTRED_EX
    else:
        text, fg = f"(-{amount})", Fore.LIGHTGREEN_EX
    return f"{fg}{text}{Fore.RESET}" if color else text


def _bold(cell: str, color: bool) -> str:
    if not color or cell == "":
        return cell
    return f"{Style.BRIGHT}{cell}{Style.NORMAL}"


def header_row(section: str, labels: Sequence[str]) -> List[str]:
    cells = [section]
    for i, label in enumerate(labels):
        cells.append(label)
        if i > 0:
            cells.append("")
    return cells


def row_cells(row: ComparisonRow, readable: bool = False, color: bool = True) -> List[str]:
    cells = [row.name, format_size(row.sizes[0], readable)]
    for size, delta in zip(row.sizes[1:], row.deltas):
        cells.append(format_size(size, readable))
        cells.append(format_delta_text(delta, readable, color))
    if row.is_total:
        cells = [_bold(c, color) for c in cells]
    return cells


def column_alignment(binary_count: int) -> List[str]:
    align = ["left", "right"]
    for _ in range(binary_count - 1):
        align += ["right", "left"]
    return align


def render_section(report: SectionReport, labels: Sequence[str],
                   readable: bool = False, color: bool = True) -> str:
    """Aligned table for one section; empty string when the section was skipped."""
    if report.skipped:
        return ""
    rows = [row_cells(r, readable, color) for r in report.rows]
    rows.append(row_cells(report.total, readable, color))
    return tabulate(
        rows,
        headers=header_row(report.section, labels),
        tablefmt="plain",
        colalign=column_alignment(len(labels)),
        disable_numparse=True,
    )
