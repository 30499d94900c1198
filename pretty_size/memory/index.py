"""
Address lookup over a set of regions.

The index is built once from a settled region list and answers "which
region holds this address" with a binary search over region origins.
"""

from __future__ import annotations

import bisect
import logging
from typing import Iterable, Optional

from pretty_size.errors import OverlappingRegions
from pretty_size.memory.models import Region, Section

LOG = logging.getLogger("memory.index")


class AddressIndex:
    """
    Sorted, non-overlapping view of regions for containment queries.

    Zero-length regions are still reachable by name but never match an
    address.

    Raises:
        OverlappingRegions: If two regions share any address
    """

    def __init__(self, regions: Iterable[Region]):
        self._by_name: dict[str, Region] = {}
        spans: list[Region] = []
        for region in regions:
            self._by_name[region.name] = region
            if region.length > 0:
                spans.append(region)

        spans.sort(key=lambda r: (r.origin, r.name))
        for previous, current in zip(spans, spans[1:]):
            if previous.overlaps(current):
                raise OverlappingRegions(previous.name, current.name)

        self._spans = spans
        self._origins = [r.origin for r in spans]
        LOG.debug("Indexed %d regions (%d with addresses)", len(self._by_name), len(spans))

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def lookup(self, address: int) -> Optional[Region]:
        """Return the region containing ``address``, or None."""
        pos = bisect.bisect_right(self._origins, address) - 1
        if pos < 0:
            return None
        candidate = self._spans[pos]
        if candidate.contains(address):
            return candidate
        return None

    def owner_of(self, section: Section) -> Optional[Region]:
        """
        Resolve the region a section belongs to.

        Synthetic sections are resolved by the region name they carry,
        everything else by address containment.
        """
        if section.region is not None:
            return self._by_name.get(section.region)
        return self.lookup(section.address)
