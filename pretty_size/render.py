"""
Terminal rendering of a usage Report.

Layout of one region block::

    FLASH used:        170.82 KiB  /  512.00 KiB   (33.4%)
    ▓▓▓▓▓▓▓▓▓▓▓▓▓▓▓▓░░░░░░░░░░░░░░░░░░░░░░░░░░░░░░░░░░
    bootloader:        128.00 KiB                  (25.0%)
    .text:             124.68 KiB     +24          (24.4%)

    ^                ^                          ^       ^
    +-- TITLE_WIDTH -+------ SIZE_INFO_WIDTH ---+-USAGE-+

Sections alternate between two colors, and the bar segments use the same
colors as their section lines.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from pretty_size.history import Snapshot
from pretty_size.models import RegionUsage, Report
from pretty_size.usage import percent_of

TITLE_WIDTH = 18
USAGE_WIDTH = 8
SINGLE_SIZE_WIDTH = 10
TITLE_SUFFIX = ": "
SIZE_INFO_WIDTH = 2 * SINGLE_SIZE_WIDTH + 5
FULL_LINE_WIDTH = TITLE_WIDTH + SIZE_INFO_WIDTH + USAGE_WIDTH

PURPLE = "rgb(141,128,255)"
PINK = "rgb(255,128,221)"
MINT = "rgb(127,255,191)"
GROWTH = "yellow"
BACKGROUND = "rgb(125,125,125)"

FILLED = "▓"
EMPTY = "░"


def sizeof_fmt(num: int) -> str:
    """Human readable byte count: plain below 1 KiB, binary units above."""
    if num < 1024:
        return f"{num}"
    value = num / 1024.0
    for unit in ("Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi"):
        if abs(value) < 1024.0:
            return f"{value:.2f} {unit}B"
        value /= 1024.0
    return f"{value:.2f} YiB"


def title_format(title: str) -> str:
    """Title with suffix, cut with an ellipsis when it does not fit."""
    max_length = TITLE_WIDTH - len(TITLE_SUFFIX)
    if len(title) > max_length:
        return title[: max_length - 1] + "…" + TITLE_SUFFIX
    return title + TITLE_SUFFIX


def percent_format(percent: Optional[float]) -> str:
    if percent is None:
        return "(n/a)"
    return f"({percent:.1f}%)"


def delta_format(delta: int) -> str:
    if delta > 0:
        return f"+{sizeof_fmt(delta)}"
    if delta < 0:
        return f"-{sizeof_fmt(-delta)}"
    return ""


def _size_info(left: str, separator: str, right: str) -> str:
    return f"{left:>{SINGLE_SIZE_WIDTH}}  {separator:1}  {right:<{SINGLE_SIZE_WIDTH}}"


def region_line(region: RegionUsage) -> str:
    size_info = _size_info(sizeof_fmt(region.used), "/", sizeof_fmt(region.length))
    return (
        f"{title_format(region.name + ' used'):<{TITLE_WIDTH}}"
        f"{size_info}"
        f"{percent_format(region.percent_used):>{USAGE_WIDTH}}"
    )


def section_line(name: str, size: int, delta: str, percent: Optional[float]) -> str:
    size_info = _size_info(sizeof_fmt(size), "", delta)
    return (
        f"{title_format(name):<{TITLE_WIDTH}}"
        f"{size_info}"
        f"{percent_format(percent):>{USAGE_WIDTH}}"
    )


def bar_segments(sizes: Sequence[int], length: int, width: int) -> List[int]:
    """Number of bar cells for each size, never more than ``width`` in total."""
    if length == 0:
        return [0 for _ in sizes]
    cells: List[int] = []
    remaining = width
    for size in sizes:
        count = min(round(size / length * width), remaining)
        cells.append(count)
        remaining -= count
    return cells


def _section_color(position: int) -> str:
    return PINK if position % 2 == 0 else PURPLE


def render_region(
    console: Console,
    region: RegionUsage,
    deltas: Optional[dict] = None,
    width: int = FULL_LINE_WIDTH,
) -> None:
    deltas = deltas or {}

    console.print(Text(region_line(region)))

    bar = Text()
    cells = bar_segments([s.size for s in region.sections], region.length, width)
    for position, count in enumerate(cells):
        bar.append(FILLED * count, style=_section_color(position))
    bar.append(EMPTY * (width - sum(cells)), style=BACKGROUND)
    console.print(bar)

    for position, section in enumerate(region.sections):
        delta = deltas.get(section.name, 0)
        delta_text = delta_format(delta)
        line = Text(
            section_line(section.name, section.size, delta_text, percent_of(section.size, region.length)),
            style=_section_color(position),
        )
        if delta_text:
            start = TITLE_WIDTH + SINGLE_SIZE_WIDTH + 5
            line.stylize(GROWTH if delta > 0 else MINT, start, start + len(delta_text))
        console.print(line)
    console.print()


def render_report(
    report: Report,
    deltas: Optional[Snapshot] = None,
    console: Optional[Console] = None,
    width: int = FULL_LINE_WIDTH,
) -> None:
    """Print every region block, the totals and any edit warnings."""
    console = console or Console(highlight=False)
    deltas = deltas or {}

    for region in report.regions:
        render_region(console, region, deltas.get(region.name), width)

    totals = report.totals
    console.print(
        Text(
            f"{title_format('Total used'):<{TITLE_WIDTH}}"
            f"{_size_info(sizeof_fmt(totals.used), '/', sizeof_fmt(totals.length))}"
            f"{percent_format(totals.percent_used):>{USAGE_WIDTH}}",
            style="bold",
        )
    )

    for warning in report.warnings:
        console.print(Text(f"warning: edit #{warning.edit_index}: {warning.message}", style=GROWTH))
