from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from ev_dashboard.config import ChartDimensions
from ev_dashboard.layout.scales import BandScale, LinearScale, ZoomExtent
from ev_dashboard.model import ChartKind

TRANSITION_MS = 800
LEGEND_ENTRIES_PER_ROW = 7

Shape = Literal["rect", "circle", "wedge", "path", "polygon", "text"]


@dataclass(frozen=True)
class Mark:
    """One visual primitive in chart-inner pixel coordinates.

    ``attrs`` is the resolved geometry/style, ``baseline`` the attribute
    values the entry transition starts from.
    """

    key: str
    shape: Shape
    attrs: dict[str, Any]
    baseline: dict[str, Any] = field(default_factory=dict)
    tooltip: tuple[str, ...] = ()
    datum: dict[str, Any] = field(default_factory=dict)
    hover: bool = True


@dataclass(frozen=True)
class AxisTick:
    position: float
    label: str


@dataclass(frozen=True)
class Axis:
    orientation: Literal["bottom", "left"]
    offset: float
    ticks: tuple[AxisTick, ...]
    label: str = ""
    length: float = 0.0
    gridlines: bool = False


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str


@dataclass(frozen=True)
class ChartView:
    kind: ChartKind
    title: str
    dimensions: ChartDimensions
    marks: tuple[Mark, ...] = ()
    axes: tuple[Axis, ...] = ()
    legend_rows: tuple[tuple[LegendEntry, ...], ...] = ()
    zoom: ZoomExtent | None = None
    transition_ms: int = TRANSITION_MS

    @property
    def is_empty(self) -> bool:
        return not any(mark.hover for mark in self.marks)

    def to_payload(self) -> dict[str, Any]:
        margin = self.dimensions.margin
        return {
            "kind": self.kind.value,
            "title": self.title,
            "width": self.dimensions.width,
            "height": self.dimensions.height,
            "margin": margin.model_dump(),
            "marks": [asdict(mark) for mark in self.marks],
            "axes": [asdict(axis) for axis in self.axes],
            "legend_rows": [[asdict(entry) for entry in row] for row in self.legend_rows],
            "zoom": asdict(self.zoom) if self.zoom is not None else None,
            "transition_ms": self.transition_ms,
        }


def truncate_label(label: str, limit: int = 6) -> str:
    return label[:5] + "..." if len(label) > limit else label


def format_count(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"


def band_axis(
    scale: BandScale,
    orientation: Literal["bottom", "left"],
    offset: float,
    label: str,
    *,
    truncate: bool = False,
) -> Axis:
    ticks = []
    for value, position in scale.positions().items():
        text = str(value)
        ticks.append(
            AxisTick(
                position=position + scale.bandwidth / 2,
                label=truncate_label(text) if truncate else text,
            )
        )
    r0, r1 = scale.range
    return Axis(
        orientation=orientation,
        offset=offset,
        ticks=tuple(ticks),
        label=label,
        length=abs(r1 - r0),
    )


def linear_axis(
    scale: LinearScale,
    orientation: Literal["bottom", "left"],
    offset: float,
    label: str,
    *,
    gridlines: bool = False,
    length: float = 0.0,
) -> Axis:
    ticks = tuple(
        AxisTick(position=scale(tick), label=format_count(tick)) for tick in scale.ticks()
    )
    return Axis(
        orientation=orientation,
        offset=offset,
        ticks=ticks,
        label=label,
        length=length,
        gridlines=gridlines,
    )


def wrap_legend(
    entries: list[LegendEntry], per_row: int = LEGEND_ENTRIES_PER_ROW
) -> tuple[tuple[LegendEntry, ...], ...]:
    return tuple(
        tuple(entries[start : start + per_row]) for start in range(0, len(entries), per_row)
    )
