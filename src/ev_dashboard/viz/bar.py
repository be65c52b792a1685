from __future__ import annotations

from ev_dashboard.config import ChartDimensions
from ev_dashboard.layout.colors import BAR_FILL
from ev_dashboard.layout.resolve import ResolvedScales
from ev_dashboard.layout.scales import ZoomExtent, ZoomTransform
from ev_dashboard.model import BarMode, CategoryCount, ChartKind
from ev_dashboard.viz.marks import ChartView, Mark, band_axis, format_count, linear_axis

AXIS_LABELS = {
    BarMode.MAKE: "Car Manufacturers",
    BarMode.MODEL: "Car Models",
}


def render_bar_chart(
    counts: list[CategoryCount],
    scales: ResolvedScales,
    dimensions: ChartDimensions,
    *,
    mode: BarMode = BarMode.MAKE,
    zoom: ZoomTransform | None = None,
) -> ChartView:
    position = scales.position
    value = scales.value
    if zoom is not None:
        position = zoom.rescale_band(position)
    height = dimensions.inner_height

    marks = []
    for item in counts:
        top = value(item.count)
        marks.append(
            Mark(
                key=f"bar:{item.category}",
                shape="rect",
                attrs={
                    "x": position(item.category),
                    "y": top,
                    "width": position.bandwidth,
                    "height": height - top,
                    "fill": BAR_FILL,
                },
                baseline={"y": height, "height": 0.0},
                tooltip=(item.category, format_count(item.count)),
                datum={"category": item.category, "count": item.count},
            )
        )

    return ChartView(
        kind=ChartKind.BAR,
        title="Electric vehicles by " + ("model" if mode is BarMode.MODEL else "manufacturer"),
        dimensions=dimensions,
        marks=tuple(marks),
        axes=(
            band_axis(position, "bottom", height, AXIS_LABELS[mode], truncate=True),
            linear_axis(value, "left", 0.0, "Number of Cars Sold"),
        ),
        zoom=ZoomExtent(),
    )
