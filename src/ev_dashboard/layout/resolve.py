from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ev_dashboard.config import ChartDimensions, MapConfig
from ev_dashboard.features.aggregates import group_keys
from ev_dashboard.io.geography import GeoFeature, filter_region
from ev_dashboard.layout.colors import ColorTable
from ev_dashboard.layout.projection import CylindricalStereographic
from ev_dashboard.layout.scales import (
    BandScale,
    LinearScale,
    SqrtScale,
    band_scale,
    point_scale,
    zero_based_domain,
)
from ev_dashboard.model import Aggregate, ChartKind

FULL_TURN = 2 * math.pi
BAR_PADDING = 0.15
STACKED_PADDING = 0.1
GROUPED_PADDING_INNER = 0.1
GROUPED_VALUE_START = 20.0
GROUPED_POSITION_START = 50.0


@dataclass(frozen=True)
class ResolvedScales:
    position: BandScale | CylindricalStereographic | None
    value: LinearScale | None
    color: ColorTable | None = None
    group: BandScale | None = None
    basemap: tuple[GeoFeature, ...] = ()


def _max(values: Sequence[float]) -> float:
    finite = [value for value in values if math.isfinite(value)]
    return max(finite) if finite else 0.0


def _vertical_value_scale(maximum: float, dimensions: ChartDimensions) -> LinearScale:
    return LinearScale(zero_based_domain(maximum), (dimensions.inner_height, 0.0)).nice()


def resolve_scales(
    kind: ChartKind | str,
    aggregate: Aggregate,
    dimensions: ChartDimensions,
    *,
    colors: ColorTable | None = None,
    geography: Sequence[GeoFeature] = (),
    region_name: str = "United States of America",
    map_config: MapConfig | None = None,
) -> ResolvedScales:
    """Resolve position/value/color mappings for one chart's aggregate."""
    kind = ChartKind(kind)
    width = dimensions.inner_width

    if kind is ChartKind.BAR:
        return ResolvedScales(
            position=band_scale([item.category for item in aggregate], (0.0, width), BAR_PADDING),
            value=_vertical_value_scale(_max([item.count for item in aggregate]), dimensions),
        )

    if kind is ChartKind.PIE:
        if colors is not None:
            for item in aggregate:
                colors.color_for(item.category)
        return ResolvedScales(
            position=None,
            value=LinearScale((0.0, 100.0), (0.0, FULL_TURN)),
            color=colors,
        )

    if kind is ChartKind.STACKED:
        if colors is not None:
            for key in group_keys(aggregate):
                colors.color_for(key)
        return ResolvedScales(
            position=band_scale(
                [bucket.year for bucket in aggregate], (0.0, width), STACKED_PADDING
            ),
            value=_vertical_value_scale(_max([bucket.total for bucket in aggregate]), dimensions),
            color=colors,
        )

    if kind is ChartKind.GROUPED:
        keys = group_keys(aggregate)
        if colors is not None:
            for key in keys:
                colors.color_for(key)
        position = band_scale(
            [bucket.year for bucket in aggregate],
            (GROUPED_POSITION_START, dimensions.inner_height),
            padding_inner=GROUPED_PADDING_INNER,
        )
        counts = [group.count for bucket in aggregate for group in bucket.groups]
        return ResolvedScales(
            position=position,
            value=LinearScale(zero_based_domain(_max(counts)), (GROUPED_VALUE_START, width)).nice(),
            color=colors,
            group=band_scale(keys, (0.0, position.bandwidth)),
        )

    if kind is ChartKind.LINE:
        if colors is not None:
            for series in aggregate:
                colors.color_for(series.series_key)
        years = sorted({point.year for series in aggregate for point in series.points})
        counts = [point.count for series in aggregate for point in series.points]
        return ResolvedScales(
            position=point_scale(years, (0.0, width)),
            value=_vertical_value_scale(_max(counts), dimensions),
            color=colors,
        )

    if kind is ChartKind.SCATTER:
        return ResolvedScales(
            position=point_scale([point.year for point in aggregate], (0.0, width)),
            value=_vertical_value_scale(
                _max([point.average_range for point in aggregate]), dimensions
            ),
        )

    map_config = map_config or MapConfig()
    projection = CylindricalStereographic().fit_size(
        dimensions.width,
        dimensions.height,
        [point for feature in geography for point in feature.points()],
    )
    return ResolvedScales(
        position=projection,
        value=SqrtScale(
            zero_based_domain(_max([cluster.count for cluster in aggregate])),
            (map_config.min_radius, map_config.max_radius),
        ),
        basemap=tuple(filter_region(list(geography), region_name)),
    )
