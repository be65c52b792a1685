from __future__ import annotations

import math

from ev_dashboard.config import ChartDimensions
from ev_dashboard.layout.resolve import ResolvedScales
from ev_dashboard.model import ChartKind, PieSlice, VehicleType
from ev_dashboard.viz.marks import ChartView, LegendEntry, Mark, format_count, wrap_legend

LABEL_FILLS = {
    VehicleType.BEV.value: "#000000",
    VehicleType.PHEV.value: "#f4f0fd",
}


def _display_label(category: str) -> str:
    try:
        return VehicleType(category).label
    except ValueError:
        return category


def render_pie_chart(
    slices: list[PieSlice], scales: ResolvedScales, dimensions: ChartDimensions
) -> ChartView:
    width, height = dimensions.inner_width, dimensions.inner_height
    radius = min(width, height) / 2
    cx, cy = width / 2, height / 2
    angle = scales.value

    marks: list[Mark] = []
    labels: list[Mark] = []
    running = 0.0
    for item in slices:
        start, end = angle(running), angle(running + item.value)
        running += item.value
        color = scales.color.color_for(item.category) if scales.color else "#5E3FBE"
        marks.append(
            Mark(
                key=f"pie:{item.category}",
                shape="wedge",
                attrs={
                    "cx": cx,
                    "cy": cy,
                    "r": radius,
                    "start_angle": start,
                    "end_angle": end,
                    "fill": color,
                },
                baseline={"start_angle": 0.0, "end_angle": 0.0},
                tooltip=(_display_label(item.category), f"{format_count(item.count)} vehicles"),
                datum={"category": item.category, "count": item.count, "value": item.value},
            )
        )
        middle = (start + end) / 2
        labels.append(
            Mark(
                key=f"pie-label:{item.category}",
                shape="text",
                attrs={
                    "x": cx + math.sin(middle) * radius / 2,
                    "y": cy - math.cos(middle) * radius / 2,
                    "text": f"{item.value:.1f}%",
                    "fill": LABEL_FILLS.get(item.category, "#000000"),
                    "font_size": 26,
                    "anchor": "middle",
                },
                hover=False,
            )
        )

    legend = [
        LegendEntry(label=_display_label(item.category), color=mark.attrs["fill"])
        for item, mark in zip(slices, marks)
    ]
    return ChartView(
        kind=ChartKind.PIE,
        title="Share of electric vehicle types",
        dimensions=dimensions,
        marks=tuple(marks + labels),
        legend_rows=wrap_legend(legend),
    )
