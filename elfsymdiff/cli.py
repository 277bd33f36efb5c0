from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import colorama

from .compare import iter_section_reports
from .config import build_settings, load_config
from .errors import ConfigError, ElfLoadError
from .export import chart_section_totals, write_section_csvs
from .loader import load_binaries
from .model import SortOrder
from .report import render_section

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="elfsymdiff",
        description="Compares sizes of two or more ELF binaries, down to individual functions and variables. "
                    "The first binary is the baseline.",
    )
    p.add_argument("binaries", nargs="*", help="List of at least two ELF binaries")
    which = p.add_mutually_exclusive_group()
    which.add_argument("--show-all-sections", action="store_true",
                       help="Compare every section instead of only .text, .data and .bss; "
                            "sections of identical size in all binaries are skipped")
    which.add_argument("--section", action="append", metavar="NAME",
                       help="Section to compare instead of the defaults. Repeatable.")
    p.add_argument("--type-sort-order", choices=[o.value for o in SortOrder], default=None,
                   help="Ordering of types in each section (default: BySizeDifference)")
    p.add_argument("--readable", action="store_true", help="Print sizes as B/KB/MB")
    p.add_argument("--no-color", action="store_true", help="Plain output without ANSI colors")
    p.add_argument("--csv-output-dir", help="Write one CSV per compared section into this directory")
    p.add_argument("--chart-path", help="Save a bar chart of section totals (PNG)")
    p.add_argument("--config", type=str, help="JSON config file; command line flags override it")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    return p


def binary_labels(paths: Sequence[str]) -> List[str]:
    """Column labels: the paths as given, numbered when the same path repeats."""
    labels = []
    seen = {}
    for path in paths:
        count = seen.get(path, 0)
        seen[path] = count + 1
        labels.append(path if count == 0 else f"{path}#{count + 1}")
    return labels


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    try:
        settings = build_settings(args, load_config(args.config))
    except ConfigError as e:
        logger.error(str(e))
        return 2

    if settings.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if len(settings.binaries) < 2:
        parser.print_help()
        return 0

    if settings.color:
        colorama.just_fix_windows_console()

    try:
        binaries = load_binaries(settings.binaries)
    except ElfLoadError as e:
        logger.error(str(e))
        return 1

    labels = binary_labels(settings.binaries)
    reports = []
    for report in iter_section_reports(binaries, settings.sections,
                                       settings.type_sort_order, settings.show_all_sections):
        text = render_section(report, labels, settings.readable, settings.color)
        if text:
            print(text)
            print()
        else:
            logger.info(f"Section {report.section!r} skipped (same size everywhere)")
        reports.append(report)

    if settings.csv_output_dir:
        write_section_csvs(reports, labels, settings.csv_output_dir)
        print(f" CSV written to: {Path(settings.csv_output_dir).resolve()}")
    if settings.chart_path:
        chart_section_totals(reports, labels, settings.chart_path)
        print(f" Section chart saved to: {settings.chart_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
