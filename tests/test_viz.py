from __future__ import annotations

import pandas as pd
import pytest

from ev_dashboard.config import ChartsConfig, MapConfig
from ev_dashboard.features.aggregates import aggregate
from ev_dashboard.io.geography import topology_features
from ev_dashboard.layout.colors import eligibility_colors, make_colors, vehicle_type_colors
from ev_dashboard.layout.resolve import resolve_scales
from ev_dashboard.layout.scales import ZoomTransform
from ev_dashboard.model import (
    BarMode,
    CategoryCount,
    ChartKind,
    GeoCluster,
    YearPoint,
    YearSeries,
)
from ev_dashboard.viz.bar import render_bar_chart
from ev_dashboard.viz.geo_map import render_map
from ev_dashboard.viz.grouped import render_grouped_bar_chart
from ev_dashboard.viz.line import render_line_chart
from ev_dashboard.viz.marks import TRANSITION_MS, truncate_label
from ev_dashboard.viz.pie import render_pie_chart
from ev_dashboard.viz.scatter import render_scatter_plot
from ev_dashboard.viz.stacked import render_stacked_bar_chart

CHARTS = ChartsConfig()


def test_truncate_label_keeps_short_labels() -> None:
    assert truncate_label("TESLA") == "TESLA"
    assert truncate_label("NISSAN") == "NISSAN"
    assert truncate_label("CHEVROLET") == "CHEVR..."


def test_bar_chart_marks_grow_from_baseline(sample_rows: pd.DataFrame) -> None:
    counts = aggregate(sample_rows, None, ChartKind.BAR)
    scales = resolve_scales(ChartKind.BAR, counts, CHARTS.bar)

    view = render_bar_chart(counts, scales, CHARTS.bar)

    assert view.transition_ms == TRANSITION_MS == 800
    assert len(view.marks) == 4
    first = view.marks[0]
    assert first.baseline == {"y": CHARTS.bar.inner_height, "height": 0.0}
    assert first.attrs["fill"] == "#5E3FBE"
    assert first.tooltip == ("TESLA", "2")
    assert first.attrs["y"] + first.attrs["height"] == pytest.approx(CHARTS.bar.inner_height)
    assert view.axes[0].label == "Car Manufacturers"
    assert view.zoom is not None and view.zoom.max_scale == 8.0


def test_bar_chart_model_mode_truncates_ticks() -> None:
    counts = [CategoryCount("MUSTANG MACH-E", 3), CategoryCount("ID.4", 1)]
    scales = resolve_scales(ChartKind.BAR, counts, CHARTS.bar)

    view = render_bar_chart(counts, scales, CHARTS.bar, mode=BarMode.MODEL)

    assert view.axes[0].label == "Car Models"
    assert [tick.label for tick in view.axes[0].ticks] == ["MUSTA...", "ID.4"]


def test_bar_zoom_widens_bands(sample_rows: pd.DataFrame) -> None:
    counts = aggregate(sample_rows, None, ChartKind.BAR)
    scales = resolve_scales(ChartKind.BAR, counts, CHARTS.bar)

    plain = render_bar_chart(counts, scales, CHARTS.bar)
    zoomed = render_bar_chart(counts, scales, CHARTS.bar, zoom=ZoomTransform(k=2.0))

    assert zoomed.marks[0].attrs["width"] == pytest.approx(plain.marks[0].attrs["width"] * 2)


def test_empty_bar_chart_has_axes_but_no_marks() -> None:
    scales = resolve_scales(ChartKind.BAR, [], CHARTS.bar)

    view = render_bar_chart([], scales, CHARTS.bar)

    assert view.marks == ()
    assert view.is_empty
    assert scales.value.domain == (0.0, 1.0)
    assert view.axes[1].ticks


def test_pie_chart_wedges_cover_full_turn(sample_rows: pd.DataFrame) -> None:
    slices = aggregate(sample_rows, None, ChartKind.PIE)
    scales = resolve_scales(ChartKind.PIE, slices, CHARTS.pie, colors=vehicle_type_colors())

    view = render_pie_chart(slices, scales, CHARTS.pie)

    wedges = [mark for mark in view.marks if mark.shape == "wedge"]
    labels = [mark for mark in view.marks if mark.shape == "text"]
    assert wedges[0].attrs["start_angle"] == 0.0
    assert wedges[-1].attrs["end_angle"] == pytest.approx(2 * 3.141592653589793)
    assert wedges[0].attrs["r"] == min(CHARTS.pie.inner_width, CHARTS.pie.inner_height) / 2
    assert wedges[0].baseline == {"start_angle": 0.0, "end_angle": 0.0}
    assert [label.attrs["text"] for label in labels] == ["60.0%", "40.0%"]
    assert wedges[0].attrs["fill"] == "#f5a067"
    assert view.legend_rows[0][0].label == "Battery Electric Vehicle (BEV)"


def test_stacked_chart_layers_meet(sample_rows: pd.DataFrame) -> None:
    buckets = aggregate(sample_rows, None, ChartKind.STACKED)
    scales = resolve_scales(
        ChartKind.STACKED, buckets, CHARTS.stacked, colors=vehicle_type_colors()
    )

    view = render_stacked_bar_chart(buckets, scales, CHARTS.stacked)

    by_key = {mark.key: mark for mark in view.marks}
    bev = by_key["stacked:BEV:2021"]
    phev = by_key["stacked:PHEV:2021"]
    assert phev.attrs["y"] + phev.attrs["height"] == pytest.approx(bev.attrs["y"])
    assert bev.baseline["height"] == 0.0
    assert phev.tooltip == ("Plug-in Hybrid Electric Vehicle (PHEV)", "2021: 1")
    assert [entry.label for entry in view.legend_rows[0]] == [
        "Battery Electric Vehicle (BEV)",
        "Plug-in Hybrid Electric Vehicle (PHEV)",
    ]


def test_grouped_chart_bars_are_horizontal(sample_rows: pd.DataFrame) -> None:
    buckets = aggregate(sample_rows, None, ChartKind.GROUPED)
    scales = resolve_scales(
        ChartKind.GROUPED, buckets, CHARTS.grouped, colors=eligibility_colors()
    )

    view = render_grouped_bar_chart(buckets, scales, CHARTS.grouped)

    assert len(view.marks) == 4
    mark = view.marks[0]
    assert mark.baseline == {"width": 0.0}
    assert mark.attrs["x"] == pytest.approx(scales.value(0))
    assert mark.attrs["height"] == pytest.approx(scales.group.bandwidth)
    assert view.axes[0].label == "Number of Clean Fuel Used"
    assert view.axes[1].label == "Years"


def test_line_legend_wraps_at_seven_entries() -> None:
    series = [
        YearSeries(f"MAKE{index}", (YearPoint(2020, index), YearPoint(2021, index + 1)))
        for index in range(9)
    ]
    scales = resolve_scales(ChartKind.LINE, series, CHARTS.line, colors=make_colors())

    view = render_line_chart(series, scales, CHARTS.line)

    assert [len(row) for row in view.legend_rows] == [7, 2]
    paths = [mark for mark in view.marks if mark.shape == "path"]
    dots = [mark for mark in view.marks if mark.shape == "circle"]
    assert len(paths) == 9 and len(dots) == 18
    assert paths[0].baseline == {"progress": 0.0}
    assert not paths[0].hover
    assert dots[1].tooltip == ("MAKE0", "2021: 1 cars")
    assert view.axes[1].gridlines


def test_line_colors_persist_across_renders() -> None:
    colors = make_colors()
    first = [YearSeries("TESLA", (YearPoint(2020, 1),)), YearSeries("KIA", (YearPoint(2020, 2),))]
    second = [YearSeries("KIA", (YearPoint(2020, 2),))]

    resolve_scales(ChartKind.LINE, first, CHARTS.line, colors=colors)
    kia = colors.color_for("KIA")
    view = render_line_chart(
        second, resolve_scales(ChartKind.LINE, second, CHARTS.line, colors=colors), CHARTS.line
    )

    assert view.marks[0].attrs["stroke"] == kia
    assert [entry.label for row in view.legend_rows for entry in row] == ["KIA"]


def test_scatter_plot_skips_undefined_years(sample_rows: pd.DataFrame) -> None:
    points = aggregate(sample_rows, None, ChartKind.SCATTER)
    scales = resolve_scales(ChartKind.SCATTER, points, CHARTS.scatter)

    view = render_scatter_plot(points, scales, CHARTS.scatter)

    assert [mark.datum["year"] for mark in view.marks] == [2020, 2021]
    assert all(mark.attrs["r"] == 6.0 for mark in view.marks)
    assert all(mark.attrs["fill"] == "#6200EE" for mark in view.marks)
    assert view.axes[1].label == "Electric Range (Kms)"


def test_map_draws_region_and_clusters_inside_extent(sample_topology: dict) -> None:
    geography = topology_features(sample_topology, "countries")
    clusters = [
        GeoCluster(latitude=47.61, longitude=-122.33, count=4),
        GeoCluster(latitude=47.04, longitude=-122.9, count=1),
        GeoCluster(latitude=-33.9, longitude=151.2, count=2),
    ]
    scales = resolve_scales(
        ChartKind.MAP, clusters, CHARTS.map, geography=geography, map_config=MapConfig()
    )

    view = render_map(clusters, scales, CHARTS.map)

    regions = [mark for mark in view.marks if mark.shape == "polygon"]
    circles = [mark for mark in view.marks if mark.shape == "circle"]
    assert [mark.key for mark in regions] == ["region:United States of America:0"]
    assert len(circles) == 2
    assert circles[0].attrs["r"] == pytest.approx(8.0)
    assert circles[1].attrs["r"] == pytest.approx(1.0 + 7.0 * 0.5)
    assert circles[0].attrs["opacity"] == 0.5
    assert circles[0].baseline == {"r": 0.0}
    assert view.zoom is not None


def test_chart_view_payload_is_plain_data(sample_rows: pd.DataFrame) -> None:
    counts = aggregate(sample_rows, None, ChartKind.BAR)
    view = render_bar_chart(counts, resolve_scales(ChartKind.BAR, counts, CHARTS.bar), CHARTS.bar)

    payload = view.to_payload()

    assert payload["kind"] == "bar"
    assert payload["margin"] == {"top": 10.0, "right": 10.0, "bottom": 80.0, "left": 75.0}
    assert payload["marks"][0]["tooltip"] == ("TESLA", "2")
    assert payload["zoom"] == {"min_scale": 1.0, "max_scale": 8.0}
