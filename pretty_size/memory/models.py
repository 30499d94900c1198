"""
Memory region and section values.

Regions come from the linker script, sections from the size tool. Both are
immutable; every pipeline stage builds new sequences instead of mutating
these records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

U64_LIMIT = 1 << 64


def _check_u64(field_name: str, value: int) -> None:
    if not 0 <= value < U64_LIMIT:
        raise ValueError(f"{field_name} must be an unsigned 64-bit value, got {value}")


@dataclass(frozen=True)
class Attributes:
    """
    Access flags of a memory region.

    Parsed from the linker script attribute string (``rx``, ``xrw``, ``!w``).
    The raw text is kept for display.

    Examples:
        >>> Attributes.from_string("rx").executable
        True
        >>> Attributes.from_string("rw!x").executable
        False
    """

    readable: bool = False
    writable: bool = False
    executable: bool = False
    raw: str = ""

    VALID_CHARS = frozenset("rwxailRWXAIL!")

    @classmethod
    def from_string(cls, text: str) -> "Attributes":
        """
        Parse an attribute string.

        ``r``, ``w`` and ``x`` set the matching flag; ``a``, ``i`` and ``l``
        are accepted without effect. ``!`` inverts every character after it.

        Raises:
            ValueError: On a character ld does not accept
        """
        flags = {"r": False, "w": False, "x": False}
        negated = False
        for char in text.strip():
            if char not in cls.VALID_CHARS:
                raise ValueError(f"invalid attribute character {char!r} in {text!r}")
            if char == "!":
                negated = True
                continue
            key = char.lower()
            if key in flags:
                flags[key] = not negated

        return cls(
            readable=flags["r"],
            writable=flags["w"],
            executable=flags["x"],
            raw=text.strip(),
        )

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class Region:
    """
    A named memory area from the linker script's MEMORY block.

    The region covers the half-open range ``[origin, origin + length)``.
    A zero-length region covers no address at all.
    """

    name: str
    origin: int
    length: int
    attributes: Attributes = Attributes()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("region name cannot be empty")
        _check_u64("origin", self.origin)
        _check_u64("length", self.length)
        if self.origin + self.length > U64_LIMIT:
            raise ValueError(f"region {self.name} extends past the 64-bit address space")

    @property
    def end(self) -> int:
        """First address after the region."""
        return self.origin + self.length

    def contains(self, address: int) -> bool:
        return self.origin <= address < self.end

    def overlaps(self, other: "Region") -> bool:
        if self.length == 0 or other.length == 0:
            return False
        return self.origin < other.end and other.origin < self.end

    def __repr__(self) -> str:
        return f"Region({self.name!r}, {self.origin:#x}, {self.length:#x})"


@dataclass(frozen=True)
class Section:
    """
    A chunk of code or data reported by the size tool.

    ``region`` is only set on synthetic sections produced by grouping a
    whole region into another one; it names the region the section was
    inserted into. Other sections are placed by address.

    ``allocated`` is False for sections that take no target memory (debug
    info, comments, build attributes) even though the listing gives them an
    address, usually 0.
    """

    name: str
    address: int
    size: int
    region: Optional[str] = None
    allocated: bool = True

    def __post_init__(self) -> None:
        _check_u64("address", self.address)
        _check_u64("size", self.size)

    @property
    def synthetic(self) -> bool:
        return self.region is not None

    @property
    def end(self) -> int:
        return self.address + self.size

    def overlaps(self, other: "Section") -> bool:
        """True when both sections share an address, or start at the same one."""
        if self.address == other.address:
            return True
        return self.address < other.end and other.address < self.end
