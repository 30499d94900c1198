"""
Memory layout values for pretty-size.

- Region: a named address range from the linker script's MEMORY block
- Section: a sized chunk at an address, as reported by the size tool
- AddressIndex: containment lookup from an address to its region
"""

from pretty_size.memory.index import AddressIndex
from pretty_size.memory.models import Attributes, Region, Section

__all__ = [
    "AddressIndex",
    "Attributes",
    "Region",
    "Section",
]
