from __future__ import annotations

from ev_dashboard.config import ChartDimensions
from ev_dashboard.features.aggregates import group_keys, stack_buckets
from ev_dashboard.layout.resolve import ResolvedScales
from ev_dashboard.model import ChartKind, VehicleType, YearGroupBucket
from ev_dashboard.viz.marks import (
    ChartView,
    LegendEntry,
    Mark,
    band_axis,
    format_count,
    linear_axis,
    wrap_legend,
)


def _display_label(key: str) -> str:
    try:
        return VehicleType(key).label
    except ValueError:
        return key


def render_stacked_bar_chart(
    buckets: list[YearGroupBucket], scales: ResolvedScales, dimensions: ChartDimensions
) -> ChartView:
    position = scales.position
    value = scales.value
    keys = group_keys(buckets)
    floor = value(0)

    marks: list[Mark] = []
    legend: list[LegendEntry] = []
    for series in stack_buckets(buckets, keys):
        color = scales.color.color_for(series.key) if scales.color else "#5E3FBE"
        legend.append(LegendEntry(label=_display_label(series.key), color=color))
        for segment in series.segments:
            top = value(segment.upper)
            marks.append(
                Mark(
                    key=f"stacked:{series.key}:{segment.year}",
                    shape="rect",
                    attrs={
                        "x": position(segment.year),
                        "y": top,
                        "width": position.bandwidth,
                        "height": value(segment.lower) - top,
                        "fill": color,
                    },
                    baseline={"y": floor, "height": 0.0},
                    tooltip=(
                        _display_label(series.key),
                        f"{segment.year}: {format_count(segment.count)}",
                    ),
                    datum={"key": series.key, "year": segment.year, "count": segment.count},
                )
            )

    return ChartView(
        kind=ChartKind.STACKED,
        title="Electric vehicle types by model year",
        dimensions=dimensions,
        marks=tuple(marks),
        axes=(
            band_axis(position, "bottom", dimensions.inner_height, "Years"),
            linear_axis(value, "left", 0.0, "Number of Electric Vehicle Types Sold"),
        ),
        legend_rows=wrap_legend(legend),
    )
