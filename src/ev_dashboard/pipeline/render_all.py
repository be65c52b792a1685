from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable, Iterable

from ev_dashboard.features.aggregates import aggregate
from ev_dashboard.layout.resolve import resolve_scales
from ev_dashboard.layout.scales import ZoomTransform
from ev_dashboard.model import BarMode, ChartKind, FilterContext
from ev_dashboard.session import DashboardSession
from ev_dashboard.viz.bar import render_bar_chart
from ev_dashboard.viz.geo_map import render_map
from ev_dashboard.viz.grouped import render_grouped_bar_chart
from ev_dashboard.viz.line import render_line_chart
from ev_dashboard.viz.marks import ChartView
from ev_dashboard.viz.pie import render_pie_chart
from ev_dashboard.viz.scatter import render_scatter_plot
from ev_dashboard.viz.stacked import render_stacked_bar_chart
from ev_dashboard.viz.surface import DrawingSurface

LOGGER = logging.getLogger(__name__)

RENDERERS: dict[ChartKind, Callable[..., ChartView]] = {
    ChartKind.BAR: render_bar_chart,
    ChartKind.PIE: render_pie_chart,
    ChartKind.STACKED: render_stacked_bar_chart,
    ChartKind.LINE: render_line_chart,
    ChartKind.GROUPED: render_grouped_bar_chart,
    ChartKind.SCATTER: render_scatter_plot,
    ChartKind.MAP: render_map,
}


def render_chart(
    session: DashboardSession,
    context: FilterContext,
    kind: ChartKind,
    *,
    bar_zoom: ZoomTransform | None = None,
) -> ChartView:
    kind = ChartKind(kind)
    config = session.config
    mode = BarMode.for_context(context)
    data = aggregate(
        session.rows,
        context,
        kind,
        bar_mode=mode,
        coordinate_precision=config.map.coordinate_precision,
    )
    dimensions = session.dimensions_for(kind)
    scales = resolve_scales(
        kind,
        data,
        dimensions,
        colors=session.colors_for(kind),
        geography=session.geography,
        region_name=config.data.region_name,
        map_config=config.map,
    )
    if kind is ChartKind.BAR:
        return render_bar_chart(data, scales, dimensions, mode=mode, zoom=bar_zoom)
    return RENDERERS[kind](data, scales, dimensions)


def render_dashboard(
    session: DashboardSession,
    context: FilterContext,
    surfaces: Iterable[DrawingSurface] = (),
    *,
    bar_zoom: ZoomTransform | None = None,
) -> dict[ChartKind, ChartView]:
    """Run aggregate -> resolve -> render for every chart and push the views to ``surfaces``.

    Every call redraws all seven views from scratch.
    """
    started = perf_counter()
    surfaces = list(surfaces)
    views: dict[ChartKind, ChartView] = {}
    for kind in ChartKind:
        view = render_chart(session, context, kind, bar_zoom=bar_zoom)
        views[kind] = view
        for surface in surfaces:
            surface.clear(kind)
            surface.draw(kind, view)
    session.views = views
    LOGGER.info(
        "Rendered %d charts (search=%r) in %.1f ms",
        len(views),
        context.normalized_search,
        (perf_counter() - started) * 1000.0,
    )
    return views
