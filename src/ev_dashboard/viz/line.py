from __future__ import annotations

from ev_dashboard.config import ChartDimensions
from ev_dashboard.layout.resolve import ResolvedScales
from ev_dashboard.model import ChartKind, YearSeries
from ev_dashboard.viz.marks import (
    ChartView,
    LegendEntry,
    Mark,
    band_axis,
    format_count,
    linear_axis,
    wrap_legend,
)

DOT_RADIUS = 4.0


def render_line_chart(
    series_list: list[YearSeries], scales: ResolvedScales, dimensions: ChartDimensions
) -> ChartView:
    position = scales.position
    value = scales.value
    colors = scales.color

    paths: list[Mark] = []
    dots: list[Mark] = []
    for series in series_list:
        color = colors.color_for(series.series_key) if colors else "#5E3FBE"
        points = [[position.center(point.year), value(point.count)] for point in series.points]
        paths.append(
            Mark(
                key=f"line:{series.series_key}",
                shape="path",
                attrs={"points": points, "stroke": color, "stroke_width": 2, "progress": 1.0},
                baseline={"progress": 0.0},
                hover=False,
            )
        )
        for point, (x, y) in zip(series.points, points):
            dots.append(
                Mark(
                    key=f"dot:{series.series_key}:{point.year}",
                    shape="circle",
                    attrs={"cx": x, "cy": y, "r": DOT_RADIUS, "fill": color},
                    baseline={"r": 0.0},
                    tooltip=(series.series_key, f"{point.year}: {format_count(point.count)} cars"),
                    datum={"make": series.series_key, "year": point.year, "count": point.count},
                )
            )

    present = {series.series_key for series in series_list}
    assigned = colors.assigned() if colors else {}
    legend = [
        LegendEntry(label=make, color=color)
        for make, color in assigned.items()
        if make in present
    ]
    return ChartView(
        kind=ChartKind.LINE,
        title="Electric vehicles per manufacturer over model years",
        dimensions=dimensions,
        marks=tuple(paths + dots),
        axes=(
            band_axis(position, "bottom", dimensions.inner_height, "Years"),
            linear_axis(
                value,
                "left",
                0.0,
                "Number of Electric Vehicles Owned",
                gridlines=True,
                length=dimensions.inner_width,
            ),
        ),
        legend_rows=wrap_legend(legend),
    )
