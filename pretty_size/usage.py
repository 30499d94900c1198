"""
Per-region memory usage from a settled layout.

Every section is placed in exactly one region through an address index
built once. Sections that land nowhere and regions that hold more bytes
than they have are hard errors: a budget report must never hide them.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from pretty_size.errors import RegionOverflow, UnassignedSection
from pretty_size.memory.index import AddressIndex
from pretty_size.memory.models import Region, Section
from pretty_size.models import EditWarning, RegionUsage, Report, ReportTotals, SectionUsage

LOG = logging.getLogger("usage")


def percent_of(used: int, length: int) -> Optional[float]:
    """Usage percentage rounded to one decimal, or None for an empty region."""
    if length == 0:
        return None
    return round(used / length * 100, 1)


def _counted(section: Section, index: AddressIndex, skip_empty: bool, skip_unallocated: bool) -> bool:
    if skip_empty and section.size == 0:
        LOG.debug("Skipping empty section %s", section.name)
        return False
    if not skip_unallocated or section.synthetic:
        return True
    if not section.allocated:
        LOG.debug("Skipping non-allocated section %s", section.name)
        return False
    # Unknown sections listed at address 0 with no region there
    if section.address == 0 and index.lookup(0) is None:
        LOG.debug("Skipping section %s at address 0 outside every region", section.name)
        return False
    return True


def calculate_usage(
    regions: Sequence[Region],
    sections: Sequence[Section],
    warnings: Sequence[EditWarning] = (),
    skip_empty: bool = True,
    skip_unallocated: bool = True,
) -> Report:
    """
    Compute used/free bytes per region and the grand totals.

    Args:
        regions: Regions left after edits
        sections: Sections left after edits
        warnings: Accepted edit warnings to carry into the report
        skip_empty: Leave zero-size sections out of the report
        skip_unallocated: Leave out non-allocated sections (debug info,
            comments, build attributes), and sections at address 0 when no
            region holds address 0

    Returns:
        Report with regions sorted by origin

    Raises:
        OverlappingRegions: If two regions share addresses
        UnassignedSection: If a section is not inside any region
        RegionOverflow: If a region's sections exceed its length
    """
    index = AddressIndex(regions)
    assigned: Dict[str, List[Section]] = {region.name: [] for region in regions}

    for section in sections:
        if not _counted(section, index, skip_empty, skip_unallocated):
            continue
        owner = index.owner_of(section)
        if owner is None:
            raise UnassignedSection(section.name, section.address)
        assigned[owner.name].append(section)

    usages: List[RegionUsage] = []
    for region in sorted(regions, key=lambda r: (r.origin, r.name)):
        members = sorted(assigned[region.name], key=lambda s: (s.address, s.name))
        used = sum(s.size for s in members)
        if used > region.length:
            raise RegionOverflow(region.name, used, region.length)

        usages.append(
            RegionUsage(
                name=region.name,
                attributes=region.attributes.raw,
                origin=region.origin,
                length=region.length,
                used=used,
                free=region.length - used,
                percent_used=percent_of(used, region.length),
                zero_length=region.length == 0,
                sections=[
                    SectionUsage(name=s.name, address=s.address, size=s.size, synthetic=s.synthetic)
                    for s in members
                ],
            )
        )
        LOG.debug("Region %s: %d / %d bytes used", region.name, used, region.length)

    total_used = sum(u.used for u in usages)
    total_length = sum(u.length for u in usages)
    totals = ReportTotals(
        used=total_used,
        length=total_length,
        free=total_length - total_used,
        percent_used=percent_of(total_used, total_length),
    )

    return Report(regions=usages, totals=totals, warnings=list(warnings))
