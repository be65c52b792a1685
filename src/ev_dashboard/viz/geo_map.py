from __future__ import annotations

from ev_dashboard.config import ChartDimensions
from ev_dashboard.layout.resolve import ResolvedScales
from ev_dashboard.layout.scales import ZoomExtent
from ev_dashboard.model import ChartKind, GeoCluster
from ev_dashboard.viz.marks import ChartView, Mark, format_count

REGION_FILL = "#d9d9d9"
REGION_STROKE = "#ffffff"
CLUSTER_FILL = "#5E3FBE"
CLUSTER_OPACITY = 0.5


def render_map(
    clusters: list[GeoCluster], scales: ResolvedScales, dimensions: ChartDimensions
) -> ChartView:
    projection = scales.position
    radius = scales.value

    regions: list[Mark] = []
    for feature in scales.basemap:
        for index, polygon in enumerate(feature.polygons):
            rings = [[list(projection(lon, lat)) for lon, lat in ring] for ring in polygon]
            regions.append(
                Mark(
                    key=f"region:{feature.name}:{index}",
                    shape="polygon",
                    attrs={
                        "rings": rings,
                        "fill": REGION_FILL,
                        "stroke": REGION_STROKE,
                    },
                    hover=False,
                )
            )

    points: list[Mark] = []
    for cluster in clusters:
        cx, cy = projection(cluster.longitude, cluster.latitude)
        if not projection.in_extent((cx, cy)):
            continue
        points.append(
            Mark(
                key=f"cluster:{cluster.latitude}:{cluster.longitude}",
                shape="circle",
                attrs={
                    "cx": cx,
                    "cy": cy,
                    "r": radius(cluster.count),
                    "fill": CLUSTER_FILL,
                    "opacity": CLUSTER_OPACITY,
                },
                baseline={"r": 0.0},
                tooltip=(
                    f"{cluster.latitude:.2f}, {cluster.longitude:.2f}",
                    f"{format_count(cluster.count)} vehicles",
                ),
                datum={
                    "latitude": cluster.latitude,
                    "longitude": cluster.longitude,
                    "count": cluster.count,
                },
            )
        )

    return ChartView(
        kind=ChartKind.MAP,
        title="Registered electric vehicle locations",
        dimensions=dimensions,
        marks=tuple(regions + points),
        zoom=ZoomExtent(),
    )
