"""
ELF reader: turns a file on disk into an ElfBinary snapshot.

The whole file is read into memory first and parsed from a BytesIO, so no
file handle outlives load_binary(). Every SymbolTableSection is read
(.symtab and .dynsym alike); a symbol's section is resolved through its
st_shndx, and special indices (SHN_UNDEF, SHN_ABS, SHN_COMMON, ...) map to
no section at all.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Iterable, List, Optional

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import SymbolTableSection

from .errors import ElfLoadError
from .model import ElfBinary, SectionInfo, SymbolEntry

logger = logging.getLogger(__name__)

ELF_MAGIC = b"\x7fELF"


def has_elf_magic(head: bytes) -> bool:
    return head[:4] == ELF_MAGIC


def _pointed_section_name(shndx, section_names: List[str]) -> Optional[str]:
    # pyelftools reports reserved indices as strings ('SHN_UNDEF', 'SHN_ABS', ...)
    if not isinstance(shndx, int):
        return None
    if shndx <= 0 or shndx >= len(section_names):
        return None
    return section_names[shndx]


def read_elf(elf: ELFFile, path: str) -> ElfBinary:
    """Extract sections and symbol tables from an already opened ELFFile."""
    sections: List[SectionInfo] = []
    section_names: List[str] = []
    symtabs = []
    for sec in elf.iter_sections():
        section_names.append(sec.name)
        sections.append(SectionInfo(sec.name, int(sec['sh_size'])))
        if isinstance(sec, SymbolTableSection):
            symtabs.append(sec)

    symbol_tables: List[List[SymbolEntry]] = []
    for symtab in symtabs:
        entries = []
        for sym in symtab.iter_symbols():
            entries.append(SymbolEntry(
                name=sym.name,
                size=int(sym['st_size']),
                section_name=_pointed_section_name(sym['st_shndx'], section_names),
            ))
        symbol_tables.append(entries)

    return ElfBinary(path=path, sections=sections, symbol_tables=symbol_tables)


def load_binary(path) -> ElfBinary:
    path = str(path)
    try:
        with open(path, 'rb') as f:
            data = BytesIO(f.read())
    except OSError as e:
        raise ElfLoadError(path, e.strerror or str(e)) from e

    if not has_elf_magic(data.getvalue()):
        raise ElfLoadError(path, "not an ELF file (bad magic)")

    try:
        binary = read_elf(ELFFile(data), path)
    except ELFError as e:
        raise ElfLoadError(path, f"not a valid ELF file ({e})") from e

    logger.debug(f"Loaded {path}: {len(binary.sections)} sections, "
                 f"{len(binary.symbol_tables)} symbol tables, {binary.symbol_count} symbols")
    return binary


def load_binaries(paths: Iterable) -> List[ElfBinary]:
    """Load every path in order; the first failure aborts the whole run."""
    return [load_binary(p) for p in paths]
