"""
User edits applied to the parsed memory layout.

Two edit kinds exist and both are handled explicitly here:

- GroupRegions: remove a region and show it as one section of another
  region (typically a bootloader area reserved inside FLASH)
- Ignore: drop a named section of a region from the report

Edits run strictly in list order and each one sees the result of the
previous ones. Failures name the zero-based index of the offending edit.

Edit list JSON:
    [
        {"GroupRegions": {"region_to_insert_as_section": "BOOT",
                          "output_region": "FLASH",
                          "output_section_name": "bootloader"}},
        {"Ignore": {"region_name": "RAM", "section_name_to_ignore": ".heap"}}
    ]
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple

from pydantic import ValidationError

from pretty_size.errors import InvalidEdit, UnknownRegion
from pretty_size.memory.index import AddressIndex
from pretty_size.memory.models import Region, Section
from pretty_size.models import Edit, EditEntry, EditWarning, GroupRegions, Ignore

LOG = logging.getLogger("edits")


@dataclass(frozen=True)
class EditedLayout:
    """Regions and sections after all edits, plus accepted warnings."""

    regions: Tuple[Region, ...]
    sections: Tuple[Section, ...]
    warnings: Tuple[EditWarning, ...] = field(default_factory=tuple)


def load_edits(text: str) -> List[Edit]:
    """
    Parse and validate an edit list.

    Raises:
        InvalidEdit: If the JSON is not an array of single-kind edit objects
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidEdit(None, f"invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise InvalidEdit(None, f"expected a JSON array, got {type(data).__name__}")

    edits: List[Edit] = []
    for index, record in enumerate(data):
        try:
            entry = EditEntry.model_validate(record)
        except ValidationError as exc:
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'entry'}: {err['msg']}"
                for err in exc.errors()
            )
            raise InvalidEdit(index, reasons) from exc
        edits.append(entry.edit)

    LOG.debug("Loaded %d edits", len(edits))
    return edits


def load_edits_file(path: str | Path) -> List[Edit]:
    edits_path = Path(path)
    if not edits_path.exists():
        raise FileNotFoundError(f"Edits file not found: {edits_path}")
    return load_edits(edits_path.read_text(encoding="utf-8"))


def _region_named(regions: Sequence[Region], name: str, edit_index: int) -> Region:
    for region in regions:
        if region.name == name:
            return region
    raise UnknownRegion(name, edit_index)


def _sections_of(region: Region, regions: Sequence[Region], sections: Sequence[Section]) -> List[Section]:
    index = AddressIndex(regions)
    result = []
    for section in sections:
        owner = index.owner_of(section)
        if owner is not None and owner.name == region.name:
            result.append(section)
    return result


def _group_regions(
    edit: GroupRegions,
    edit_index: int,
    regions: List[Region],
    sections: List[Section],
) -> Tuple[List[Region], List[Section], List[EditWarning]]:
    source = _region_named(regions, edit.region_to_insert_as_section, edit_index)
    target = _region_named(regions, edit.output_region, edit_index)
    if source.name == target.name:
        raise InvalidEdit(edit_index, f"cannot group region {source.name} into itself")

    synthetic = Section(
        name=edit.output_section_name,
        address=source.origin,
        size=source.length,
        region=target.name,
    )

    # Aliasing an existing section is allowed; both sizes stay in the totals
    warnings = []
    for existing in _sections_of(target, regions, sections):
        if existing.allocated and existing.overlaps(synthetic):
            message = (
                f"section {synthetic.name} ({synthetic.address:#x}+{synthetic.size:#x}) "
                f"overlaps section {existing.name} ({existing.address:#x}+{existing.size:#x}) "
                f"of region {target.name}"
            )
            LOG.warning("Edit #%d: %s", edit_index, message)
            warnings.append(
                EditWarning(
                    edit_index=edit_index,
                    region=target.name,
                    section=synthetic.name,
                    message=message,
                )
            )

    LOG.debug(
        "Edit #%d: grouped region %s into %s as section %s",
        edit_index,
        source.name,
        target.name,
        synthetic.name,
    )
    remaining = [r for r in regions if r.name != source.name]
    return remaining, sections + [synthetic], warnings


def _ignore(
    edit: Ignore,
    edit_index: int,
    regions: List[Region],
    sections: List[Section],
) -> List[Section]:
    region = _region_named(regions, edit.region_name, edit_index)
    index = AddressIndex(regions)

    kept = []
    for section in sections:
        owner = index.owner_of(section)
        if section.name == edit.section_name_to_ignore and owner is not None and owner.name == region.name:
            continue
        kept.append(section)

    dropped = len(sections) - len(kept)
    if not dropped:
        LOG.debug(
            "Edit #%d: no section %s in region %s, nothing to ignore",
            edit_index,
            edit.section_name_to_ignore,
            region.name,
        )
        return sections

    LOG.debug(
        "Edit #%d: ignoring %d section(s) named %s in region %s",
        edit_index,
        dropped,
        edit.section_name_to_ignore,
        region.name,
    )
    return kept


def apply_edits(
    regions: Sequence[Region],
    sections: Sequence[Section],
    edits: Sequence[Edit],
) -> EditedLayout:
    """
    Apply edits in order to a parsed layout.

    Args:
        regions: Regions in declaration order
        sections: Sections in listing order
        edits: Edits in the order they were declared

    Returns:
        New regions and sections with the edits applied, plus warnings for
        grouped sections that alias existing ones

    Raises:
        UnknownRegion: If an edit names a region that is absent at that point
        InvalidEdit: If an edit cannot be applied as written
    """
    current_regions = list(regions)
    current_sections = list(sections)
    warnings: List[EditWarning] = []

    for edit_index, edit in enumerate(edits):
        if isinstance(edit, GroupRegions):
            current_regions, current_sections, new_warnings = _group_regions(
                edit, edit_index, current_regions, current_sections
            )
            warnings.extend(new_warnings)
        elif isinstance(edit, Ignore):
            current_sections = _ignore(edit, edit_index, current_regions, current_sections)
        else:
            raise InvalidEdit(edit_index, f"unsupported edit type {type(edit).__name__}")

    return EditedLayout(
        regions=tuple(current_regions),
        sections=tuple(current_sections),
        warnings=tuple(warnings),
    )
