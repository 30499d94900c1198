"""
Snapshot of the previous build's section sizes.

After each run the per-section sizes are written as JSON next to the
analyzed binary (``fw-size.last`` by default). The next run loads it and
reports how much every section grew or shrank.

File format:
    {"regions": {"FLASH": {".text": 12345, ".data": 120}, "RAM": {...}}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from pretty_size.models import Report

LOG = logging.getLogger("history")

Snapshot = Dict[str, Dict[str, int]]


def snapshot_of(report: Report) -> Snapshot:
    """Per-region section sizes; same-named sections of a region are summed."""
    result: Snapshot = {}
    for region in report.regions:
        sizes: Dict[str, int] = {}
        for section in region.sections:
            sizes[section.name] = sizes.get(section.name, 0) + section.size
        result[region.name] = sizes
    return result


def history_path(binary: str | Path, file_name: str) -> Path:
    return Path(binary).resolve().parent / file_name


def load_snapshot(path: Path) -> Optional[Snapshot]:
    """Load a previous snapshot, or None if there is no usable one."""
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        LOG.warning("Ignoring unreadable size history %s", path)
        return None

    regions = data.get("regions") if isinstance(data, dict) else None
    if not isinstance(regions, dict):
        LOG.warning("Ignoring size history %s without a regions table", path)
        return None

    previous: Snapshot = {}
    for region_name, sections in regions.items():
        if not isinstance(sections, dict):
            continue
        previous[region_name] = {
            name: int(size) for name, size in sections.items() if isinstance(size, int)
        }
    return previous


def save_snapshot(path: Path, report: Report) -> None:
    payload = {"regions": snapshot_of(report)}
    with path.open("w", encoding="utf-8") as handle:
        handle.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")
    LOG.debug("Saved size history to %s", path)


def section_deltas(report: Report, previous: Optional[Snapshot]) -> Snapshot:
    """
    Size change of every section since the previous snapshot.

    Sections new since the last run count as grown by their full size.
    Without a previous snapshot no deltas are reported.
    """
    if previous is None:
        return {}

    deltas: Snapshot = {}
    for region_name, sizes in snapshot_of(report).items():
        before = previous.get(region_name, {})
        deltas[region_name] = {name: size - before.get(name, 0) for name, size in sizes.items()}
    return deltas
