from __future__ import annotations

from typing import Dict, Iterable, List, Set

from .model import ElfBinary, SymbolEntry
from .normalize import normalize_symbol_name

SectionSymbolIndex = Dict[str, List[SymbolEntry]]


def build_section_index(binary: ElfBinary, section: str) -> SectionSymbolIndex:
    """Group the binary's symbols defined in `section` by normalized name.

    Entries keep symbol-table order, so index[name][0] is the first symbol
    encountered under that name. Symbols without a defining section never
    match.
    """
    index: SectionSymbolIndex = {}
    for sym in binary.iter_symbols():
        if sym.section_name != section:
            continue
        index.setdefault(normalize_symbol_name(sym.name), []).append(sym)
    return index


def build_section_indices(binaries: Iterable[ElfBinary], section: str) -> List[SectionSymbolIndex]:
    return [build_section_index(b, section) for b in binaries]


def union_type_names(indices: Iterable[SectionSymbolIndex]) -> Set[str]:
    names: Set[str] = set()
    for index in indices:
        names.update(index.keys())
    return names
