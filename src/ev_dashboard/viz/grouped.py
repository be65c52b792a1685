from __future__ import annotations

from ev_dashboard.config import ChartDimensions
from ev_dashboard.features.aggregates import group_keys
from ev_dashboard.layout.resolve import ResolvedScales
from ev_dashboard.model import ChartKind, YearGroupBucket
from ev_dashboard.viz.marks import (
    ChartView,
    LegendEntry,
    Mark,
    band_axis,
    format_count,
    linear_axis,
    wrap_legend,
)


def render_grouped_bar_chart(
    buckets: list[YearGroupBucket], scales: ResolvedScales, dimensions: ChartDimensions
) -> ChartView:
    """Horizontal bars: one band per model year, one sub-band per eligibility group."""
    position = scales.position
    value = scales.value
    group = scales.group
    origin = value(0)

    marks: list[Mark] = []
    for bucket in buckets:
        for item in bucket.groups:
            color = scales.color.color_for(item.group_key) if scales.color else "#f5a067"
            marks.append(
                Mark(
                    key=f"grouped:{bucket.year}:{item.group_key}",
                    shape="rect",
                    attrs={
                        "x": origin,
                        "y": position(bucket.year) + group(item.group_key),
                        "width": value(item.count) - origin,
                        "height": group.bandwidth,
                        "fill": color,
                    },
                    baseline={"width": 0.0},
                    tooltip=(item.group_key, format_count(item.count)),
                    datum={"year": bucket.year, "group": item.group_key, "count": item.count},
                )
            )

    legend = [
        LegendEntry(label=key, color=scales.color.color_for(key) if scales.color else "#f5a067")
        for key in group_keys(buckets)
    ]
    return ChartView(
        kind=ChartKind.GROUPED,
        title="Clean alternative fuel eligibility by model year",
        dimensions=dimensions,
        marks=tuple(marks),
        axes=(
            linear_axis(
                value,
                "bottom",
                dimensions.inner_height,
                "Number of Clean Fuel Used",
                length=dimensions.inner_width,
            ),
            band_axis(position, "left", 0.0, "Years"),
        ),
        legend_rows=wrap_legend(legend),
    )
