"""
Exception hierarchy for the memory report pipeline.

Every failure is terminal: callers get one of these instead of a partial
report. Each exception keeps its context (line number, region, section,
edit index) as attributes so the CLI and tests can inspect it.
"""

from __future__ import annotations

from typing import Optional


class PrettySizeError(Exception):
    """Base exception for all pipeline failures."""

    pass


# =============================================================================
# Linker script
# =============================================================================


class LinkerScriptError(PrettySizeError):
    """Base exception for linker script errors."""

    pass


class ParseError(LinkerScriptError):
    """A MEMORY entry does not have the expected shape."""

    def __init__(self, line_number: Optional[int], expectation: str):
        self.line_number = line_number
        self.expectation = expectation
        where = f"line {line_number}" if line_number is not None else "linker script"
        super().__init__(f"{where}: {expectation}")


class UnsupportedExpression(LinkerScriptError):
    """ORIGIN or LENGTH is not a plain hexadecimal or decimal literal."""

    def __init__(self, region: str, literal: str, line_number: Optional[int] = None):
        self.region = region
        self.literal = literal
        self.line_number = line_number
        super().__init__(
            f"region {region}: unsupported expression {literal!r} "
            f"(only hexadecimal or decimal literals are supported)"
        )


class DuplicateRegion(LinkerScriptError):
    """The same region name is declared twice."""

    def __init__(self, name: str, line_number: Optional[int] = None):
        self.name = name
        self.line_number = line_number
        super().__init__(f"region {name} declared more than once (line {line_number})")


class OverlappingRegions(LinkerScriptError):
    """Two regions share part of the address space."""

    def __init__(self, first: str, second: str):
        self.first = first
        self.second = second
        super().__init__(f"regions {first} and {second} overlap")


# =============================================================================
# Size listing
# =============================================================================


class SizeListingError(PrettySizeError):
    """Base exception for size tool output errors."""

    pass


class UnrecognizedFormat(SizeListingError):
    """No known header line was found in the size tool output."""

    def __init__(self, header: str):
        self.header = header
        super().__init__(f"unrecognized size listing format (first line: {header!r})")


class MalformedRow(SizeListingError):
    """A listing row has a missing or non-numeric field."""

    def __init__(self, line_number: int, row: str, field: str):
        self.line_number = line_number
        self.row = row
        self.field = field
        super().__init__(f"line {line_number}: bad {field} field in row {row.strip()!r}")


# =============================================================================
# Edits
# =============================================================================


class EditError(PrettySizeError):
    """Base exception for edit list errors."""

    pass


class UnknownRegion(EditError):
    """An edit names a region that does not exist (anymore)."""

    def __init__(self, name: str, edit_index: Optional[int] = None):
        self.name = name
        self.edit_index = edit_index
        super().__init__(f"edit #{edit_index}: unknown region {name}")


class InvalidEdit(EditError):
    """An edit entry is not one of the supported edit kinds."""

    def __init__(self, edit_index: Optional[int], reason: str):
        self.edit_index = edit_index
        self.reason = reason
        where = f"edit #{edit_index}" if edit_index is not None else "edit list"
        super().__init__(f"{where}: {reason}")


# =============================================================================
# Usage
# =============================================================================


class UsageError(PrettySizeError):
    """Base exception for usage computation errors."""

    pass


class UnassignedSection(UsageError):
    """A section lies outside every remaining region."""

    def __init__(self, name: str, address: int):
        self.name = name
        self.address = address
        super().__init__(f"section {name} at {address:#x} is not inside any memory region")


class RegionOverflow(UsageError):
    """The sections of a region need more bytes than the region has."""

    def __init__(self, region_name: str, used: int, length: int):
        self.region_name = region_name
        self.used = used
        self.length = length
        super().__init__(
            f"region {region_name} overflowed: {used} bytes used of {length} "
            f"({used - length} bytes over)"
        )


# =============================================================================
# Size tool
# =============================================================================


class SizeToolError(PrettySizeError):
    """The external size program could not be run or failed."""

    def __init__(self, command: list[str], message: str):
        self.command = command
        super().__init__(f"{' '.join(command)}: {message}")


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(PrettySizeError):
    """An environment setting has a value that cannot be used."""

    def __init__(self, variable: str, value: str, expectation: str):
        self.variable = variable
        self.value = value
        super().__init__(f"{variable}={value!r}: expected {expectation}")
