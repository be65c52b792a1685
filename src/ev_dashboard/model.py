from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class VehicleType(str, Enum):
    BEV = "BEV"
    PHEV = "PHEV"

    @property
    def label(self) -> str:
        return VEHICLE_TYPE_LABELS[self]


VEHICLE_TYPE_LABELS = {
    VehicleType.BEV: "Battery Electric Vehicle (BEV)",
    VehicleType.PHEV: "Plug-in Hybrid Electric Vehicle (PHEV)",
}
VEHICLE_TYPE_KEYS = [VehicleType.BEV.value, VehicleType.PHEV.value]


def parse_vehicle_type(value: object) -> str | None:
    """Map a source label such as ``Battery Electric Vehicle (BEV)`` to its short code."""
    if value is None:
        return None
    text = str(value).strip().upper()
    if not text or text == "NAN":
        return None
    if "PHEV" in text or "PLUG-IN" in text:
        return VehicleType.PHEV.value
    if "BEV" in text or text.startswith("BATTERY"):
        return VehicleType.BEV.value
    return None


class ChartKind(str, Enum):
    BAR = "bar"
    PIE = "pie"
    STACKED = "stacked"
    LINE = "line"
    GROUPED = "grouped"
    SCATTER = "scatter"
    MAP = "map"


class DropdownId(str, Enum):
    BAR_MAKES = "bar_makes"
    LINE_MAKES = "line_makes"


CHART_DROPDOWNS: dict[ChartKind, DropdownId] = {
    ChartKind.BAR: DropdownId.BAR_MAKES,
    ChartKind.LINE: DropdownId.LINE_MAKES,
}


class BarMode(str, Enum):
    MAKE = "make"
    MODEL = "model"

    @classmethod
    def for_context(cls, context: FilterContext | None) -> BarMode:
        if context is not None and context.has_search:
            return cls.MODEL
        return cls.MAKE


@dataclass(frozen=True)
class Row:
    make: str
    model: str
    model_year: int | None
    vehicle_type: str | None
    cafv_eligibility: str
    electric_range: float = math.nan
    latitude: float = math.nan
    longitude: float = math.nan


ROW_COLUMNS = [
    "make",
    "model",
    "model_year",
    "vehicle_type",
    "cafv_eligibility",
    "electric_range",
    "latitude",
    "longitude",
]


@dataclass(frozen=True)
class FilterContext:
    search_term: str = ""
    checked_categories: dict[DropdownId, frozenset[str]] = field(default_factory=dict)

    @property
    def normalized_search(self) -> str:
        return self.search_term.strip()

    @property
    def has_search(self) -> bool:
        return bool(self.normalized_search)

    def checked_for(self, dropdown: DropdownId) -> frozenset[str]:
        return self.checked_categories.get(dropdown, frozenset())


@dataclass(frozen=True)
class CategoryCount:
    category: str
    count: int


@dataclass(frozen=True)
class PieSlice:
    category: str
    count: int
    value: float


@dataclass(frozen=True)
class YearPoint:
    year: int
    count: int


@dataclass(frozen=True)
class YearSeries:
    series_key: str
    points: tuple[YearPoint, ...]

    @property
    def total(self) -> int:
        return sum(point.count for point in self.points)


@dataclass(frozen=True)
class GroupCount:
    group_key: str
    count: int


@dataclass(frozen=True)
class YearGroupBucket:
    year: int
    groups: tuple[GroupCount, ...]
    total: int

    def count_for(self, group_key: str) -> int:
        for group in self.groups:
            if group.group_key == group_key:
                return group.count
        return 0


@dataclass(frozen=True)
class StackSegment:
    year: int
    lower: int
    upper: int

    @property
    def count(self) -> int:
        return self.upper - self.lower


@dataclass(frozen=True)
class StackedSeries:
    key: str
    segments: tuple[StackSegment, ...]


@dataclass(frozen=True)
class ScatterPoint:
    year: int
    average_range: float

    @property
    def is_defined(self) -> bool:
        return not math.isnan(self.average_range)

    def __eq__(self, other: object) -> bool:
        # Two undefined averages for the same year are the same point.
        if not isinstance(other, ScatterPoint):
            return NotImplemented
        if self.year != other.year:
            return False
        if not self.is_defined and not other.is_defined:
            return True
        return self.average_range == other.average_range

    def __hash__(self) -> int:
        return hash((self.year, self.average_range if self.is_defined else None))


@dataclass(frozen=True)
class GeoCluster:
    latitude: float
    longitude: float
    count: int


Aggregate = Union[
    list[CategoryCount],
    list[PieSlice],
    list[YearGroupBucket],
    list[YearSeries],
    list[ScatterPoint],
    list[GeoCluster],
]
