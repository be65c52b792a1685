from __future__ import annotations

import logging
from typing import Iterable

from ev_dashboard.layout.scales import ZoomExtent, ZoomTransform
from ev_dashboard.model import CHART_DROPDOWNS, ChartKind, DropdownId, FilterContext
from ev_dashboard.pipeline.render_all import render_dashboard
from ev_dashboard.session import DashboardSession
from ev_dashboard.viz.marks import ChartView
from ev_dashboard.viz.surface import DrawingSurface

LOGGER = logging.getLogger(__name__)

COMMIT_KEY = "Enter"


class SelectionController:
    """Owns the filter state and re-runs the render pipeline whenever it changes."""

    def __init__(
        self, session: DashboardSession, surfaces: Iterable[DrawingSurface] = ()
    ) -> None:
        self.session = session
        self.surfaces = list(surfaces)
        self.search_term = ""
        self.checkbox_states: dict[DropdownId, dict[str, bool]] = {
            dropdown: {make: True for make in session.makes} for dropdown in DropdownId
        }
        self.panel_open: dict[DropdownId, bool] = {dropdown: False for dropdown in DropdownId}
        self.bar_zoom: ZoomTransform | None = None

    def effective_checked(self, dropdown: DropdownId) -> frozenset[str]:
        """Checked makes for ``dropdown``; empty when every box or no box is checked."""
        states = self.checkbox_states[DropdownId(dropdown)]
        checked = frozenset(make for make, is_checked in states.items() if is_checked)
        if len(checked) == len(states):
            return frozenset()
        return checked

    @property
    def context(self) -> FilterContext:
        return FilterContext(
            search_term=self.search_term,
            checked_categories={
                dropdown: self.effective_checked(dropdown) for dropdown in DropdownId
            },
        )

    def refresh(self) -> dict[ChartKind, ChartView]:
        return render_dashboard(
            self.session, self.context, self.surfaces, bar_zoom=self.bar_zoom
        )

    def toggle_checkbox(
        self, dropdown: DropdownId | str, value: str, checked: bool
    ) -> dict[ChartKind, ChartView]:
        states = self.checkbox_states[DropdownId(dropdown)]
        if value not in states:
            raise ValueError(f"Unknown option {value!r} for dropdown {dropdown}")
        states[value] = bool(checked)
        LOGGER.debug("Checkbox %s/%s -> %s", DropdownId(dropdown).value, value, checked)
        return self.refresh()

    def set_checked(
        self, dropdown: DropdownId | str, values: Iterable[str]
    ) -> dict[ChartKind, ChartView]:
        states = self.checkbox_states[DropdownId(dropdown)]
        selected = set(values)
        unknown = sorted(selected - set(states))
        if unknown:
            raise ValueError(f"Unknown options for dropdown {dropdown}: {', '.join(unknown)}")
        for make in states:
            states[make] = make in selected
        return self.refresh()

    def handle_search_key(self, key: str, text: str) -> dict[ChartKind, ChartView] | None:
        """Commit ``text`` as the search term when ``key`` is Enter; ignore other keys."""
        if key != COMMIT_KEY:
            return None
        self.search_term = str(text or "").strip()
        # Bar bands change from makes to models, so a stale zoom would not line up.
        self.bar_zoom = None
        return self.refresh()

    def toggle_panel(self, dropdown: DropdownId | str) -> bool:
        dropdown = DropdownId(dropdown)
        self.panel_open[dropdown] = not self.panel_open[dropdown]
        return self.panel_open[dropdown]

    def zoom_bar(self, k: float, x: float = 0.0) -> dict[ChartKind, ChartView]:
        width = self.session.dimensions_for(ChartKind.BAR).inner_width
        self.bar_zoom = ZoomTransform.clamped(k, x, extent=ZoomExtent(), width=width)
        return self.refresh()

    def dropdown_for(self, kind: ChartKind) -> DropdownId | None:
        return CHART_DROPDOWNS.get(ChartKind(kind))
