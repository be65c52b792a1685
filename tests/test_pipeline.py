from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from ev_dashboard.config import AppConfig, load_config
from ev_dashboard.io.geography import topology_features
from ev_dashboard.model import ChartKind, FilterContext
from ev_dashboard.pipeline.render_all import render_dashboard
from ev_dashboard.session import DashboardSession, load_session
from ev_dashboard.viz.surface import FigureSurface, PayloadSurface


def _session(rows: pd.DataFrame, topology: dict) -> DashboardSession:
    return DashboardSession(
        config=AppConfig(),
        rows=rows,
        geography=topology_features(topology, "countries"),
    )


def test_render_dashboard_draws_every_chart(
    sample_rows: pd.DataFrame, sample_topology: dict
) -> None:
    session = _session(sample_rows, sample_topology)
    surface = PayloadSurface()

    views = render_dashboard(session, FilterContext(), [surface])

    assert list(views) == list(ChartKind)
    assert session.views == views
    assert set(surface.charts) == {kind.value for kind in ChartKind}
    assert all(view.transition_ms == 800 for view in views.values())
    assert all(mark.baseline for view in views.values() for mark in view.marks if mark.hover)


def test_unmatched_search_renders_empty_views(
    sample_rows: pd.DataFrame, sample_topology: dict
) -> None:
    session = _session(sample_rows, sample_topology)

    views = render_dashboard(session, FilterContext(search_term="zzz"))

    assert all(view.is_empty for view in views.values())
    map_marks = views[ChartKind.MAP].marks
    assert [mark.shape for mark in map_marks] == ["polygon"]


def test_figure_surface_writes_one_file_per_chart(
    tmp_path: Path, sample_rows: pd.DataFrame, sample_topology: dict
) -> None:
    session = _session(sample_rows, sample_topology)
    surface = FigureSurface(tmp_path / "figures", "png")

    render_dashboard(session, FilterContext(), [surface])

    assert set(surface.written) == set(ChartKind)
    for path in surface.written.values():
        assert path.exists()
        assert path.stat().st_size > 0

    surface.clear(ChartKind.PIE)
    assert not (tmp_path / "figures" / "pie_chart.png").exists()


def test_figure_axes_take_ticks_and_labels_from_the_view(
    tmp_path: Path, sample_rows: pd.DataFrame, sample_topology: dict
) -> None:
    views = render_dashboard(_session(sample_rows, sample_topology), FilterContext())
    surface = FigureSurface(tmp_path / "figures", "png")
    bar = views[ChartKind.BAR]
    bottom = next(axis for axis in bar.axes if axis.orientation == "bottom")
    left = next(axis for axis in bar.axes if axis.orientation == "left")

    figure = surface.build_figure(bar)
    map_figure = surface.build_figure(views[ChartKind.MAP])
    try:
        axes = figure.axes[0]
        assert list(axes.get_xticks()) == pytest.approx([tick.position for tick in bottom.ticks])
        assert [label.get_text() for label in axes.get_xticklabels()] == [
            tick.label for tick in bottom.ticks
        ]
        assert list(axes.get_yticks()) == pytest.approx([tick.position for tick in left.ticks])
        assert axes.get_xlabel() == bottom.label
        assert axes.get_ylabel() == left.label
        assert axes.get_xlim() == (0.0, bar.dimensions.inner_width)
        assert axes.get_ylim() == (bar.dimensions.inner_height, 0.0)
        assert not map_figure.axes[0].axison
    finally:
        plt.close(figure)
        plt.close(map_figure)


def test_load_session_reads_rows_and_geography(config_path: Path) -> None:
    session = load_session(load_config(config_path))

    assert len(session.rows) == 5
    assert [feature.name for feature in session.geography] == [
        "United States of America",
        "Canada",
    ]
    assert session.makes == ["TESLA", "NISSAN", "TOYOTA", "KIA"]


def test_load_session_logs_and_reraises_failures(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config = AppConfig()
    config.data.rows_path = str(tmp_path / "missing.csv")

    with caplog.at_level(logging.ERROR, logger="ev_dashboard.session"):
        with pytest.raises(FileNotFoundError):
            load_session(config)

    assert "Failed to load dashboard data" in caplog.text
