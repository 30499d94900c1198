from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GroupRegions(BaseModel):
    """Fold a whole region into another region as one synthetic section."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    region_to_insert_as_section: str
    output_region: str
    output_section_name: str


class Ignore(BaseModel):
    """Drop a named section of a region from the report."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    region_name: str
    section_name_to_ignore: str


Edit = Union[GroupRegions, Ignore]


class EditEntry(BaseModel):
    """One element of the edits JSON array: exactly one edit kind as its key."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    group_regions: Optional[GroupRegions] = Field(default=None, alias="GroupRegions")
    ignore: Optional[Ignore] = Field(default=None, alias="Ignore")

    @model_validator(mode="after")
    def check_exactly_one_kind(self) -> "EditEntry":
        if (self.group_regions is None) == (self.ignore is None):
            raise ValueError("expected exactly one of 'GroupRegions' or 'Ignore'")
        return self

    @property
    def edit(self) -> Edit:
        return self.group_regions if self.group_regions is not None else self.ignore


class SectionUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    address: int
    size: int
    synthetic: bool = False


class RegionUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    attributes: str
    origin: int
    length: int
    used: int
    free: int
    # None when the region has no bytes at all
    percent_used: Optional[float]
    zero_length: bool = False
    sections: List[SectionUsage]


class ReportTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    used: int
    length: int
    free: int
    percent_used: Optional[float]


class EditWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    edit_index: int
    region: str
    section: str
    message: str


class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    regions: List[RegionUsage]
    totals: ReportTotals
    warnings: List[EditWarning] = Field(default_factory=list)

    def region(self, name: str) -> Optional[RegionUsage]:
        return next((r for r in self.regions if r.name == name), None)
