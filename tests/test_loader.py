from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from elftools.common.exceptions import ELFError

from elfsymdiff.errors import ElfLoadError
from elfsymdiff.loader import has_elf_magic, load_binaries, load_binary
from elfsymdiff.model import SectionInfo, SymbolEntry


class FakeSection:
    def __init__(self, name, size):
        self.name = name
        self.header = {"sh_size": size}

    def __getitem__(self, key):
        return self.header[key]


class FakeSymbol:
    def __init__(self, name, size, shndx):
        self.name = name
        self.entry = {"st_size": size, "st_shndx": shndx}

    def __getitem__(self, key):
        return self.entry[key]


class FakeSymtab(FakeSection):
    def __init__(self, name, symbols):
        super().__init__(name, 24 * len(symbols))
        self.symbols = symbols

    def iter_symbols(self):
        return iter(self.symbols)


class FakeELFFile:
    def __init__(self, sections):
        self.sections = sections

    def iter_sections(self):
        return iter(self.sections)


def _fake_elf():
    symtab = FakeSymtab(".symtab", [
        FakeSymbol("", 0, "SHN_UNDEF"),
        FakeSymbol("main", 200, 1),
        FakeSymbol("init.2", 50, 1),
        FakeSymbol("counter", 4, 2),
        FakeSymbol("puts", 0, "SHN_UNDEF"),
        FakeSymbol("abs_value", 0, "SHN_ABS"),
        FakeSymbol("bogus", 8, 99),
    ])
    dynsym = FakeSymtab(".dynsym", [FakeSymbol("main", 200, 1)])
    return FakeELFFile([
        FakeSection("", 0),
        FakeSection(".text", 1000),
        FakeSection(".bss", 64),
        symtab,
        dynsym,
    ])


class LoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        self.elf_path = self.root / "a.elf"
        self.elf_path.write_bytes(b"\x7fELF" + b"\0" * 60)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def _patched(self, elf):
        self.elffile_mock = mock.Mock(return_value=elf)
        return mock.patch.multiple(
            "elfsymdiff.loader",
            ELFFile=self.elffile_mock,
            SymbolTableSection=FakeSymtab,
        )

    def test_has_elf_magic(self) -> None:
        self.assertTrue(has_elf_magic(self.elf_path.read_bytes()))
        self.assertFalse(has_elf_magic(b"hello"))
        self.assertFalse(has_elf_magic(b""))

    def test_non_elf_file_is_rejected_before_parsing(self) -> None:
        notes = self.root / "notes.txt"
        notes.write_text("hello", encoding="utf-8")
        with self._patched(_fake_elf()):
            with self.assertRaises(ElfLoadError) as ctx:
                load_binary(notes)
            self.elffile_mock.assert_not_called()
        self.assertEqual(ctx.exception.path, str(notes))
        self.assertIn("not an ELF file", str(ctx.exception))

    def test_load_binary_reads_sections_and_symbols(self) -> None:
        with self._patched(_fake_elf()):
            binary = load_binary(self.elf_path)

        self.assertEqual(binary.path, str(self.elf_path))
        self.assertEqual(binary.sections[1], SectionInfo(".text", 1000))
        self.assertEqual(binary.section_size(".bss"), 64)
        self.assertIsNone(binary.section_size(".data"))
        self.assertEqual(len(binary.symbol_tables), 2)

        symtab = binary.symbol_tables[0]
        self.assertEqual(symtab[1], SymbolEntry("main", 200, ".text"))
        self.assertEqual(symtab[3], SymbolEntry("counter", 4, ".bss"))
        self.assertEqual(binary.symbol_tables[1], [SymbolEntry("main", 200, ".text")])

    def test_special_and_out_of_range_indices_have_no_section(self) -> None:
        with self._patched(_fake_elf()):
            binary = load_binary(self.elf_path)

        by_name = {s.name: s for s in binary.symbol_tables[0]}
        self.assertIsNone(by_name["puts"].section_name)
        self.assertIsNone(by_name["abs_value"].section_name)
        self.assertIsNone(by_name["bogus"].section_name)
        self.assertIsNone(by_name[""].section_name)

    def test_missing_file_raises_load_error(self) -> None:
        missing = self.root / "missing.elf"
        with self.assertRaises(ElfLoadError) as ctx:
            load_binary(missing)
        self.assertEqual(ctx.exception.path, str(missing))
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_malformed_elf_raises_load_error(self) -> None:
        bad = mock.Mock(side_effect=ELFError("Magic number does not match"))
        with mock.patch("elfsymdiff.loader.ELFFile", bad):
            with self.assertRaises(ElfLoadError) as ctx:
                load_binary(self.elf_path)
        self.assertIn("not a valid ELF file", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, ELFError)

    def test_load_binaries_stops_at_first_failure(self) -> None:
        second = self.root / "b.elf"
        with self._patched(_fake_elf()):
            with self.assertRaises(ElfLoadError):
                load_binaries([self.elf_path, second, self.elf_path])
            self.assertEqual(self.elffile_mock.call_count, 1)

    def test_load_binaries_keeps_order(self) -> None:
        second = self.root / "b.elf"
        second.write_bytes(self.elf_path.read_bytes())
        with self._patched(_fake_elf()):
            binaries = load_binaries([second, self.elf_path])
        self.assertEqual([os.path.basename(b.path) for b in binaries], ["b.elf", "a.elf"])


if __name__ == "__main__":
    unittest.main()
