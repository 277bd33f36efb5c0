from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


# ---------------------------
# Loaded binary snapshot
# ---------------------------

@dataclass(frozen=True)
class SymbolEntry:
    name: str
    size: int
    section_name: Optional[str]          # None for UND/ABS/COMMON symbols


@dataclass(frozen=True)
class SectionInfo:
    name: str
    size: int


@dataclass
class ElfBinary:
    path: str
    sections: List[SectionInfo] = field(default_factory=list)
    symbol_tables: List[List[SymbolEntry]] = field(default_factory=list)

    def section_size(self, name: str) -> Optional[int]:
        """Size of the first section called `name`, None if there is none."""
        for sec in self.sections:
            if sec.name == name:
                return sec.size
        return None

    def iter_symbols(self):
        for table in self.symbol_tables:
            yield from table

    @property
    def symbol_count(self) -> int:
        return sum(len(t) for t in self.symbol_tables)


# ---------------------------
# Sort policies
# ---------------------------

class SortOrder(Enum):
    BY_SIZE_DIFFERENCE = "BySizeDifference"
    BY_SIZE = "BySize"
    BY_NAME = "ByName"

    @classmethod
    def from_name(cls, value: str) -> "SortOrder":
        for order in cls:
            if order.value.lower() == value.lower() or order.name.lower() == value.lower():
                return order
        raise ValueError(f"unknown sort order: {value!r}")


# ---------------------------
# Comparison results
# ---------------------------

class DeltaKind(Enum):
    GREW = "grew"
    SHRANK = "shrank"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class Delta:
    kind: DeltaKind
    by: int = 0

    @classmethod
    def grew(cls, by: int) -> "Delta":
        return cls(DeltaKind.GREW, by)

    @classmethod
    def shrank(cls, by: int) -> "Delta":
        return cls(DeltaKind.SHRANK, by)

    @classmethod
    def unchanged(cls) -> "Delta":
        return cls(DeltaKind.UNCHANGED, 0)

    @property
    def signed(self) -> int:
        if self.kind is DeltaKind.GREW:
            return self.by
        if self.kind is DeltaKind.SHRANK:
            return -self.by
        return 0


UNCHANGED = Delta.unchanged()


@dataclass(frozen=True)
class ComparisonRow:
    name: str
    sizes: Tuple[Optional[int], ...]
    deltas: Tuple[Delta, ...]            # deltas[i] is binary i+1 vs the baseline
    is_total: bool = False


@dataclass
class SectionReport:
    section: str
    rows: List[ComparisonRow] = field(default_factory=list)
    total: Optional[ComparisonRow] = None

    @property
    def skipped(self) -> bool:
        return self.total is None
