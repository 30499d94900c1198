"""
Size tool output parser.

Two layouts are recognized by their header line:

SysV (``size -A``, GNU or LLVM)::

    firmware.elf  :
    section            size        addr
    .isr_vector         392   134217728
    .text             12345   134218120
    Total             12737

    Values are decimal, or hexadecimal with a ``0x`` prefix (``size -A -x``).

objdump (``objdump -h``)::

    Idx Name          Size      VMA       LMA       File off  Algn
      0 .isr_vector   00000188  08000000  08000000  00010000  2**2
                      CONTENTS, ALLOC, LOAD, READONLY, DATA

    Values are bare hexadecimal. The flag line under each row decides
    whether the section is allocated: sections without ``ALLOC`` take no
    target memory.

The SysV layout carries no flags, so well-known non-allocated sections
(``.debug*``, ``.stab*``, ``.comment``, ``.ARM.attributes``) are recognized
by name.

Zero-size and non-allocated sections are kept here. Deciding what counts
towards usage is up to the usage calculator.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from enum import Enum
from typing import List, Optional, Tuple

from pretty_size.errors import MalformedRow, UnrecognizedFormat
from pretty_size.memory.models import U64_LIMIT, Section

LOG = logging.getLogger("parsers.size_listing")


class ListingFormat(str, Enum):
    """Supported size tool output layouts."""

    SYSV = "sysv"
    OBJDUMP = "objdump"


_HEADERS: Tuple[Tuple[ListingFormat, re.Pattern], ...] = (
    (ListingFormat.SYSV, re.compile(r"^\s*section\s+size\s+addr\s*$", re.IGNORECASE)),
    (
        ListingFormat.OBJDUMP,
        re.compile(r"^\s*Idx\s+Name\s+Size\s+VMA\s+LMA\s+File\s+off\s+Algn\s*$", re.IGNORECASE),
    ),
)

_DEC_NUMBER = re.compile(r"^[0-9]+$")
_PREFIXED_HEX = re.compile(r"^0[xX][0-9A-Fa-f]+$")
_BARE_HEX = re.compile(r"^[0-9A-Fa-f]+$")

# Sections the toolchain emits without SHF_ALLOC
_NON_ALLOCATED_NAME = re.compile(r"^(\.debug.*|\.stab.*|\.comment|\.ARM\.attributes)$")


def is_allocated_name(name: str) -> bool:
    return _NON_ALLOCATED_NAME.match(name) is None


def _in_range(value: int) -> Optional[int]:
    return value if value < U64_LIMIT else None


def _sysv_value(token: str) -> Optional[int]:
    if _PREFIXED_HEX.match(token):
        return _in_range(int(token, 16))
    if _DEC_NUMBER.match(token):
        return _in_range(int(token, 10))
    return None


def _hex_value(token: str) -> Optional[int]:
    if _BARE_HEX.match(token):
        return _in_range(int(token, 16))
    return None


def detect_format(lines: List[str]) -> Tuple[ListingFormat, int]:
    """
    Find the header line of a size listing.

    Returns:
        The detected layout and the index of its header line

    Raises:
        UnrecognizedFormat: If no known header is present
    """
    for index, line in enumerate(lines):
        for listing_format, pattern in _HEADERS:
            if pattern.match(line):
                LOG.debug("Detected %s listing (header at line %d)", listing_format.value, index + 1)
                return listing_format, index

    first = next((line.strip() for line in lines if line.strip()), "")
    raise UnrecognizedFormat(first)


def _parse_sysv_rows(lines: List[str], start: int) -> List[Section]:
    sections: List[Section] = []
    for index in range(start, len(lines)):
        row = lines[index]
        parts = row.split()
        if not parts:
            continue
        if parts[0] == "Total":
            break

        line_number = index + 1
        if len(parts) < 2:
            raise MalformedRow(line_number, row, "size")
        if len(parts) < 3:
            raise MalformedRow(line_number, row, "addr")
        if len(parts) > 3:
            raise MalformedRow(line_number, row, "section")

        name, size_token, addr_token = parts
        size = _sysv_value(size_token)
        if size is None:
            raise MalformedRow(line_number, row, "size")
        address = _sysv_value(addr_token)
        if address is None:
            raise MalformedRow(line_number, row, "addr")

        sections.append(Section(name=name, address=address, size=size, allocated=is_allocated_name(name)))
    return sections


def _parse_objdump_rows(lines: List[str], start: int) -> List[Section]:
    sections: List[Section] = []
    # The flag line belongs to the row right above it
    awaiting_flags = False
    for index in range(start, len(lines)):
        row = lines[index]
        parts = row.split()
        if not parts:
            continue
        if not parts[0].isdigit():
            if awaiting_flags:
                flags = {flag.strip() for flag in row.split(",")}
                sections[-1] = replace(sections[-1], allocated="ALLOC" in flags)
                awaiting_flags = False
            continue

        line_number = index + 1
        if len(parts) < 3:
            raise MalformedRow(line_number, row, "Size")
        if len(parts) < 4:
            raise MalformedRow(line_number, row, "VMA")

        name = parts[1]
        size = _hex_value(parts[2])
        if size is None:
            raise MalformedRow(line_number, row, "Size")
        address = _hex_value(parts[3])
        if address is None:
            raise MalformedRow(line_number, row, "VMA")

        sections.append(Section(name=name, address=address, size=size, allocated=is_allocated_name(name)))
        awaiting_flags = True
    return sections


def parse_size_listing(text: str) -> List[Section]:
    """
    Parse size tool output into sections, in listing order.

    Raises:
        UnrecognizedFormat: If the header matches neither known layout
        MalformedRow: If a row has a missing or non-numeric field
    """
    lines = text.splitlines()
    listing_format, header_index = detect_format(lines)

    if listing_format == ListingFormat.SYSV:
        sections = _parse_sysv_rows(lines, header_index + 1)
    elif listing_format == ListingFormat.OBJDUMP:
        sections = _parse_objdump_rows(lines, header_index + 1)
    else:  # pragma: no cover - enum is closed
        raise UnrecognizedFormat(lines[header_index])

    LOG.info("Parsed %d sections from %s listing", len(sections), listing_format.value)
    return sections
