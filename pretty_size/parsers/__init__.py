"""
Input parsers for pretty-size.

- parse_linker_script: MEMORY block of a GNU ld script -> Regions
- parse_size_listing: ``size -A`` or ``objdump -h`` output -> Sections

Usage:
    from pretty_size.parsers import parse_linker_script, parse_size_listing

    regions = parse_linker_script(Path("STM32F405.ld").read_text())
    sections = parse_size_listing(size_output)
"""

from __future__ import annotations

from pretty_size.parsers.linker_script import load_linker_script, parse_linker_script
from pretty_size.parsers.size_listing import ListingFormat, detect_format, parse_size_listing

__all__ = [
    "ListingFormat",
    "detect_format",
    "load_linker_script",
    "parse_linker_script",
    "parse_size_listing",
]
