"""
Tests for the size tool output parser.

Tests cover:
- Layout detection (SysV and objdump headers)
- Row parsing and radix handling
- Malformed rows and unknown layouts
"""

from __future__ import annotations

import pytest

from pretty_size.errors import MalformedRow, UnrecognizedFormat
from pretty_size.memory import Section
from pretty_size.parsers.size_listing import ListingFormat, detect_format, parse_size_listing


class TestFormatDetection:
    def test_sysv_header(self, sysv_listing):
        listing_format, header_index = detect_format(sysv_listing.splitlines())
        assert listing_format == ListingFormat.SYSV
        assert header_index == 1

    def test_objdump_header(self, objdump_listing):
        listing_format, _ = detect_format(objdump_listing.splitlines())
        assert listing_format == ListingFormat.OBJDUMP

    def test_unrecognized(self):
        text = "   text    data     bss     dec     hex filename\n  1234     56     78    1368    558 fw.elf\n"
        with pytest.raises(UnrecognizedFormat) as exc_info:
            parse_size_listing(text)
        assert exc_info.value.header.startswith("text")

    def test_empty_output(self):
        with pytest.raises(UnrecognizedFormat):
            parse_size_listing("")


class TestSysvListing:
    """``size -A`` output."""

    def test_sections_in_listing_order(self, sysv_listing):
        sections = parse_size_listing(sysv_listing)

        assert [s.name for s in sections] == [
            ".isr_vector",
            ".text",
            ".rodata",
            ".data",
            ".bss",
            "._user_heap_stack",
            ".ARM.attributes",
            ".comment",
            ".debug_info",
        ]
        assert sections[0] == Section(".isr_vector", 0x08004000, 392)
        assert sections[3] == Section(".data", 0x20000000, 256)

    def test_total_row_ends_listing(self, sysv_listing):
        sections = parse_size_listing(sysv_listing + "\n.junk  1 2\n")
        assert all(s.name != "Total" for s in sections)
        assert all(s.name != ".junk" for s in sections)

    def test_zero_size_rows_are_kept(self):
        text = "section  size  addr\n.empty   0   134217728\n"
        sections = parse_size_listing(text)
        assert sections == [Section(".empty", 0x08000000, 0)]

    def test_hex_values(self):
        """``size -A -x`` prints 0x-prefixed numbers."""
        text = "fw.elf  :\nsection   size         addr\n.text     0x2800   0x8004188\nTotal     0x2800\n"
        assert parse_size_listing(text) == [Section(".text", 0x08004188, 0x2800)]

    def test_non_numeric_size(self):
        text = "section  size  addr\n.text    12a4   134217728\n"
        with pytest.raises(MalformedRow) as exc_info:
            parse_size_listing(text)
        assert exc_info.value.field == "size"
        assert exc_info.value.line_number == 2
        assert ".text" in exc_info.value.row

    def test_non_numeric_address(self):
        text = "section  size  addr\n.text    100   0x08zz\n"
        with pytest.raises(MalformedRow) as exc_info:
            parse_size_listing(text)
        assert exc_info.value.field == "addr"

    def test_missing_address(self):
        text = "section  size  addr\n.text    100\n"
        with pytest.raises(MalformedRow) as exc_info:
            parse_size_listing(text)
        assert exc_info.value.field == "addr"


class TestObjdumpListing:
    """``objdump -h`` output."""

    def test_matches_sysv(self, sysv_listing, objdump_listing):
        """Both layouts of the same image yield the same allocated sections."""
        from_objdump = parse_size_listing(objdump_listing)
        from_sysv = {s.name: s for s in parse_size_listing(sysv_listing)}

        assert len(from_objdump) == 7
        for section in from_objdump:
            assert from_sysv[section.name] == section

    def test_flag_lines_are_skipped(self, objdump_listing):
        names = [s.name for s in parse_size_listing(objdump_listing)]
        assert "CONTENTS," not in names
        assert "ALLOC" not in names

    def test_bad_vma(self):
        text = "Idx Name          Size      VMA       LMA       File off  Algn\n  0 .text  00000100  zz000000  0  0  2**2\n"
        with pytest.raises(MalformedRow) as exc_info:
            parse_size_listing(text)
        assert exc_info.value.field == "VMA"
        assert exc_info.value.line_number == 2


class TestAllocation:
    """Sections that take no target memory are marked, not dropped."""

    def test_sysv_names(self, sysv_listing):
        allocated = {s.name: s.allocated for s in parse_size_listing(sysv_listing)}

        assert allocated[".text"]
        assert allocated[".bss"]
        assert not allocated[".ARM.attributes"]
        assert not allocated[".comment"]
        assert not allocated[".debug_info"]

    def test_sysv_stabs(self):
        text = "section  size  addr\n.stabstr  300  0\n.stack  1024  536870912\n"
        sections = parse_size_listing(text)
        assert [s.allocated for s in sections] == [False, True]

    def test_objdump_flags(self, objdump_listing):
        allocated = {s.name: s.allocated for s in parse_size_listing(objdump_listing)}

        assert allocated[".text"]
        assert allocated[".bss"]
        assert not allocated[".comment"]

    def test_objdump_flags_win_over_name(self):
        """A custom section without ALLOC is non-allocated whatever its name."""
        text = (
            "Idx Name          Size      VMA       LMA       File off  Algn\n"
            "  0 .text         00000100  00000000  00000000  00010000  2**2\n"
            "                  CONTENTS, ALLOC, LOAD, READONLY, CODE\n"
            "  1 .build_notes  00000040  00000000  00000000  00010100  2**0\n"
            "                  CONTENTS, READONLY\n"
        )
        sections = parse_size_listing(text)
        assert [(s.name, s.allocated) for s in sections] == [(".text", True), (".build_notes", False)]
