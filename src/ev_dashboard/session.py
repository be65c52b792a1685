from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

import pandas as pd

from ev_dashboard.config import AppConfig, ChartDimensions
from ev_dashboard.features.aggregates import distinct_makes
from ev_dashboard.io.geography import GeoFeature, load_geography
from ev_dashboard.io.read import load_rows
from ev_dashboard.layout.colors import (
    ColorTable,
    eligibility_colors,
    make_colors,
    vehicle_type_colors,
)
from ev_dashboard.model import ChartKind
from ev_dashboard.viz.marks import ChartView

LOGGER = logging.getLogger(__name__)


def _default_color_tables() -> dict[ChartKind, ColorTable]:
    types = vehicle_type_colors()
    return {
        ChartKind.PIE: types,
        ChartKind.STACKED: types,
        ChartKind.GROUPED: eligibility_colors(),
        ChartKind.LINE: make_colors(),
    }


@dataclass
class DashboardSession:
    """Everything one dashboard instance owns: the loaded data, colors and latest views.

    Color tables live as long as the session, so a category keeps its color
    across re-renders.
    """

    config: AppConfig
    rows: pd.DataFrame
    geography: list[GeoFeature] = field(default_factory=list)
    color_tables: dict[ChartKind, ColorTable] = field(default_factory=_default_color_tables)
    views: dict[ChartKind, ChartView] = field(default_factory=dict)

    @cached_property
    def makes(self) -> list[str]:
        return distinct_makes(self.rows)

    def dimensions_for(self, kind: ChartKind) -> ChartDimensions:
        return getattr(self.config.charts, ChartKind(kind).value)

    def colors_for(self, kind: ChartKind) -> ColorTable | None:
        return self.color_tables.get(ChartKind(kind))


def load_session(config: AppConfig) -> DashboardSession:
    """Load rows and geography once; any failure is logged and re-raised."""
    rows_path = Path(config.data.rows_path)
    geography_path = Path(config.data.geography_path)
    try:
        rows = load_rows(csv_path=rows_path, config=config)
        geography = load_geography(geography_path, object_name=config.data.geography_object)
    except (OSError, ValueError):
        LOGGER.exception(
            "Failed to load dashboard data (rows=%s, geography=%s)", rows_path, geography_path
        )
        raise
    LOGGER.info("Session ready: %d rows, %d geography features", len(rows), len(geography))
    return DashboardSession(config=config, rows=rows, geography=geography)
