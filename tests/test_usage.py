"""
Tests for the usage calculator.

Tests cover:
- Per-region used/free/percent
- Address containment and unassigned sections
- Overflow detection
- Zero-length regions
- Output ordering and totals
- Skipping of empty and non-allocated sections
"""

from __future__ import annotations

import math

import pytest

from pretty_size.errors import OverlappingRegions, RegionOverflow, UnassignedSection
from pretty_size.memory import Region, Section
from pretty_size.memory.index import AddressIndex
from pretty_size.usage import calculate_usage, percent_of


class TestPerRegionUsage:
    def test_single_section(self):
        report = calculate_usage(
            [Region("FLASH", 0x08000000, 0x100)],
            [Section("flash_text", 0x08000000, 0x50)],
        )
        flash = report.region("FLASH")

        assert flash.used == 0x50
        assert flash.free == 0xB0
        assert flash.percent_used == round(0x50 / 0x100 * 100, 1)
        assert [s.name for s in flash.sections] == ["flash_text"]

    def test_sample_layout(self, regions, sections):
        report = calculate_usage(regions, sections)

        assert report.region("BOOT").used == 0
        assert report.region("FLASH").used == 392 + 10240 + 1024
        assert report.region("RAM").used == 256 + 1024
        assert report.region("RAM").free == 0x10000 - 1280
        assert report.region("RAM").percent_used == 2.0

    def test_full_region(self):
        report = calculate_usage([Region("RAM", 0, 64)], [Section(".bss", 0, 64)])
        assert report.region("RAM").free == 0
        assert report.region("RAM").percent_used == 100.0

    def test_last_byte_belongs_to_region(self):
        report = calculate_usage([Region("RAM", 0x1000, 0x10)], [Section(".tail", 0x100F, 1)])
        assert report.region("RAM").used == 1


class TestFailures:
    def test_section_outside_every_region(self, regions):
        with pytest.raises(UnassignedSection) as exc_info:
            calculate_usage(regions, [Section(".ext", 0x90000000, 16)])
        assert exc_info.value.name == ".ext"
        assert exc_info.value.address == 0x90000000

    def test_address_at_region_end_is_outside(self):
        with pytest.raises(UnassignedSection):
            calculate_usage([Region("RAM", 0x1000, 0x10)], [Section(".x", 0x1010, 1)])

    def test_overflow(self):
        with pytest.raises(RegionOverflow) as exc_info:
            calculate_usage(
                [Region("RAM", 0x20000000, 0x100)],
                [Section(".data", 0x20000000, 0x80), Section(".bss", 0x20000080, 0x90)],
            )
        assert exc_info.value.region_name == "RAM"
        assert exc_info.value.used == 0x110
        assert exc_info.value.length == 0x100

    def test_synthetic_section_of_missing_region(self):
        with pytest.raises(UnassignedSection):
            calculate_usage([Region("RAM", 0, 0x100)], [Section("boot", 0x1000, 0x10, region="FLASH")])

    def test_overlapping_regions(self):
        with pytest.raises(OverlappingRegions):
            calculate_usage([Region("A", 0, 0x100), Region("B", 0x80, 0x100)], [])


class TestZeroLengthRegion:
    def test_percent_is_undefined(self):
        report = calculate_usage([Region("NOINIT", 0x20010000, 0)], [])
        noinit = report.region("NOINIT")

        assert noinit.zero_length
        assert noinit.percent_used is None
        assert noinit.used == 0
        assert noinit.free == 0

    def test_totals_without_length(self):
        report = calculate_usage([Region("NOINIT", 0x20010000, 0)], [])
        assert report.totals.percent_used is None

    def test_percent_helper(self):
        assert percent_of(0, 0) is None
        assert percent_of(1, 3) == 33.3
        assert not math.isnan(percent_of(0, 10))


class TestOrderingAndTotals:
    def test_regions_sorted_by_origin(self):
        regions = [
            Region("RAM", 0x20000000, 0x100),
            Region("FLASH", 0x08000000, 0x100),
            Region("ITCM", 0x0, 0x100),
        ]
        report = calculate_usage(regions, [])
        assert [r.name for r in report.regions] == ["ITCM", "FLASH", "RAM"]

    def test_sections_sorted_by_address(self):
        sections = [
            Section(".data", 0x20000040, 8),
            Section(".bss", 0x20000000, 8),
        ]
        report = calculate_usage([Region("RAM", 0x20000000, 0x100)], sections)
        assert [s.name for s in report.region("RAM").sections] == [".bss", ".data"]

    def test_totals(self, regions, sections):
        report = calculate_usage(regions, sections)
        total_length = 0x4000 + 0x3C000 + 0x10000
        total_used = 392 + 10240 + 1024 + 256 + 1024

        assert report.totals.length == total_length
        assert report.totals.used == total_used
        assert report.totals.free == total_length - total_used
        assert report.totals.percent_used == percent_of(total_used, total_length)

    def test_warnings_are_carried(self, regions, sections):
        from pretty_size.models import EditWarning

        warning = EditWarning(edit_index=0, region="FLASH", section="x", message="alias")
        report = calculate_usage(regions, sections, warnings=[warning])
        assert report.warnings == [warning]


class TestSkippedSections:
    def test_zero_size_sections_skipped(self):
        report = calculate_usage([Region("RAM", 0, 0x100)], [Section(".empty", 0x5000, 0)])
        assert report.region("RAM").sections == []

    def test_zero_size_sections_kept_on_request(self):
        report = calculate_usage(
            [Region("RAM", 0, 0x100)],
            [Section(".empty", 0x10, 0)],
            skip_empty=False,
        )
        assert [s.name for s in report.region("RAM").sections] == [".empty"]

    def test_unallocated_sections_skipped(self, regions):
        report = calculate_usage(regions, [Section(".comment", 0, 121), Section(".debug_info", 0, 5000)])
        assert report.totals.used == 0

    def test_unallocated_sections_strict(self, regions):
        with pytest.raises(UnassignedSection):
            calculate_usage(regions, [Section(".comment", 0, 121)], skip_unallocated=False)

    def test_region_at_address_zero_counts_them(self):
        report = calculate_usage([Region("ITCM", 0, 0x1000)], [Section(".itcm_text", 0, 0x20)])
        assert report.region("ITCM").used == 0x20

    def test_flash_at_zero_leaves_out_debug_sections(self):
        """nRF5x/SAMD style FLASH at 0 shares its origin with debug sections."""
        sections = [
            Section(".text", 0, 40000),
            Section(".comment", 0, 121, allocated=False),
            Section(".debug_info", 0, 600000, allocated=False),
        ]
        report = calculate_usage([Region("FLASH", 0, 0x80000)], sections)

        assert report.region("FLASH").used == 40000
        assert [s.name for s in report.region("FLASH").sections] == [".text"]

    def test_flash_at_zero_strict_counts_everything(self):
        sections = [Section(".text", 0, 0x100), Section(".comment", 0, 0x10, allocated=False)]
        report = calculate_usage([Region("FLASH", 0, 0x1000)], sections, skip_unallocated=False)
        assert report.region("FLASH").used == 0x110


class TestAddressIndex:
    def test_lookup(self, regions):
        index = AddressIndex(regions)
        assert index.lookup(0x08000000).name == "BOOT"
        assert index.lookup(0x08003FFF).name == "BOOT"
        assert index.lookup(0x08004000).name == "FLASH"
        assert index.lookup(0x07FFFFFF) is None
        assert index.lookup(0x30000000) is None

    def test_zero_length_regions_hold_nothing(self):
        index = AddressIndex([Region("EMPTY", 0x100, 0), Region("RAM", 0x100, 0x10)])
        assert index.lookup(0x100).name == "RAM"
        assert "EMPTY" in index

    def test_owner_of_synthetic(self, regions):
        index = AddressIndex(regions)
        assert index.owner_of(Section("boot", 0x0, 1, region="FLASH")).name == "FLASH"
