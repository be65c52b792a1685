from __future__ import annotations

from ev_dashboard.config import ChartDimensions
from ev_dashboard.layout.colors import SCATTER_FILL
from ev_dashboard.layout.resolve import ResolvedScales
from ev_dashboard.model import ChartKind, ScatterPoint
from ev_dashboard.viz.marks import ChartView, Mark, band_axis, linear_axis

POINT_RADIUS = 6.0


def render_scatter_plot(
    points: list[ScatterPoint], scales: ResolvedScales, dimensions: ChartDimensions
) -> ChartView:
    position = scales.position
    value = scales.value

    marks = [
        Mark(
            key=f"scatter:{point.year}",
            shape="circle",
            attrs={
                "cx": position.center(point.year),
                "cy": value(point.average_range),
                "r": POINT_RADIUS,
                "fill": SCATTER_FILL,
            },
            baseline={"r": 0.0},
            tooltip=(str(point.year), f"{point.average_range:.1f} km average range"),
            datum={"year": point.year, "average_range": point.average_range},
        )
        # Years without a valid range are left out rather than drawn at zero.
        for point in points
        if point.is_defined
    ]
    return ChartView(
        kind=ChartKind.SCATTER,
        title="Average electric range by model year",
        dimensions=dimensions,
        marks=tuple(marks),
        axes=(
            band_axis(position, "bottom", dimensions.inner_height, "Years"),
            linear_axis(
                value,
                "left",
                0.0,
                "Electric Range (Kms)",
                gridlines=True,
                length=dimensions.inner_width,
            ),
        ),
    )
