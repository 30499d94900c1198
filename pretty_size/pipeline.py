"""
End-to-end report construction.

    linker script ──> parse_linker_script ─┐
                                           ├─> apply_edits ─> calculate_usage ─> Report
    size listing  ──> parse_size_listing  ─┘

The two parsers are independent; the edit engine starts once both are done.
"""

from __future__ import annotations

import logging
from typing import Sequence

from pretty_size.edits import apply_edits
from pretty_size.memory.models import Region, Section
from pretty_size.models import Edit, Report
from pretty_size.parsers.linker_script import parse_linker_script
from pretty_size.parsers.size_listing import parse_size_listing
from pretty_size.usage import calculate_usage

LOG = logging.getLogger("pipeline")


def build_report(
    script_text: str,
    listing_text: str,
    edits: Sequence[Edit] = (),
    skip_empty: bool = True,
    skip_unallocated: bool = True,
) -> Report:
    """
    Build the memory usage report from raw inputs.

    Args:
        script_text: Linker script source
        listing_text: Captured output of the size tool
        edits: Edits to apply, in order
        skip_empty: Leave zero-size sections out of the report
        skip_unallocated: Leave out sections that take no target memory

    Returns:
        The finished Report

    Raises:
        PrettySizeError: Any parse, edit or usage failure; no partial report
            is ever returned
    """
    return report_from_layout(
        parse_linker_script(script_text),
        parse_size_listing(listing_text),
        edits,
        skip_empty=skip_empty,
        skip_unallocated=skip_unallocated,
    )


def report_from_layout(
    regions: Sequence[Region],
    sections: Sequence[Section],
    edits: Sequence[Edit] = (),
    skip_empty: bool = True,
    skip_unallocated: bool = True,
) -> Report:
    """Apply edits to already parsed regions and sections and compute usage."""
    layout = apply_edits(regions, sections, edits)
    LOG.info(
        "Applied %d edits: %d regions, %d sections remain",
        len(edits),
        len(layout.regions),
        len(layout.sections),
    )

    return calculate_usage(
        layout.regions,
        layout.sections,
        warnings=layout.warnings,
        skip_empty=skip_empty,
        skip_unallocated=skip_unallocated,
    )
