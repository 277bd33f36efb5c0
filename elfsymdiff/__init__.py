"""Per-symbol size comparison of two or more ELF binaries."""

from .compare import compare_binaries, compare_section, format_delta
from .loader import load_binaries, load_binary
from .model import (
    ComparisonRow,
    Delta,
    DeltaKind,
    ElfBinary,
    SectionInfo,
    SectionReport,
    SortOrder,
    SymbolEntry,
)
from .normalize import normalize_symbol_name

__version__ = "0.1.0"

__all__ = [
    "ComparisonRow",
    "Delta",
    "DeltaKind",
    "ElfBinary",
    "SectionInfo",
    "SectionReport",
    "SortOrder",
    "SymbolEntry",
    "compare_binaries",
    "compare_section",
    "format_delta",
    "load_binaries",
    "load_binary",
    "normalize_symbol_name",
]
