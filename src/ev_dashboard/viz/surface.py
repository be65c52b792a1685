from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Protocol

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Patch, Polygon, Rectangle, Wedge

from ev_dashboard.model import ChartKind
from ev_dashboard.viz.common import save_figure
from ev_dashboard.viz.marks import Axis, ChartView, Mark

matplotlib.use("Agg")

LOGGER = logging.getLogger(__name__)

DPI = 100
AXIS_COLOR = "#333333"
GRID_COLOR = "#e0e0e0"
TICK_SIZE = 6.0


class DrawingSurface(Protocol):
    """Anything that can turn a chart view into pixels (or a payload for them)."""

    def clear(self, kind: ChartKind) -> None: ...

    def draw(self, kind: ChartKind, view: ChartView) -> None: ...


class PayloadSurface:
    """Collects JSON-ready chart payloads for the browser script."""

    def __init__(self) -> None:
        self.charts: dict[str, dict[str, Any]] = {}

    def clear(self, kind: ChartKind) -> None:
        self.charts.pop(ChartKind(kind).value, None)

    def draw(self, kind: ChartKind, view: ChartView) -> None:
        self.charts[ChartKind(kind).value] = view.to_payload()


def _points_to_font_size(pixels: float) -> float:
    return pixels * 72.0 / DPI


class FigureSurface:
    """Draws chart views with matplotlib, one image file per chart kind.

    The plot axes cover the chart's inner area with data limits in inner
    pixels, so mark coordinates and axis tick positions are used as given.
    """

    def __init__(self, figures_dir: Path, figure_format: str = "png") -> None:
        self.figures_dir = figures_dir
        self.figure_format = str(figure_format or "png").strip().lstrip(".") or "png"
        self.written: dict[ChartKind, Path] = {}

    def figure_path(self, kind: ChartKind) -> Path:
        return self.figures_dir / f"{ChartKind(kind).value}_chart.{self.figure_format}"

    def clear(self, kind: ChartKind) -> None:
        self.figure_path(kind).unlink(missing_ok=True)
        self.written.pop(ChartKind(kind), None)

    def draw(self, kind: ChartKind, view: ChartView) -> None:
        kind = ChartKind(kind)
        figure = self.build_figure(view)
        self.written[kind] = save_figure(figure, self.figure_path(kind))
        LOGGER.debug("Wrote %s figure with %d marks", kind.value, len(view.marks))

    def build_figure(self, view: ChartView) -> Figure:
        dimensions = view.dimensions
        margin = dimensions.margin
        figure = plt.figure(figsize=(dimensions.width / DPI, dimensions.height / DPI), dpi=DPI)
        axes = figure.add_axes(
            (
                margin.left / dimensions.width,
                margin.bottom / dimensions.height,
                dimensions.inner_width / dimensions.width,
                dimensions.inner_height / dimensions.height,
            )
        )
        axes.set_xlim(0, dimensions.inner_width)
        axes.set_ylim(dimensions.inner_height, 0)

        if view.axes:
            axes.spines[["top", "right"]].set_visible(False)
            axes.tick_params(length=TICK_SIZE, color=AXIS_COLOR)
            orientations = {axis.orientation for axis in view.axes}
            if "bottom" not in orientations:
                axes.spines["bottom"].set_visible(False)
                axes.set_xticks([])
            if "left" not in orientations:
                axes.spines["left"].set_visible(False)
                axes.set_yticks([])
            for axis in view.axes:
                self._draw_axis(axes, axis)
        else:
            axes.axis("off")

        for mark in view.marks:
            self._draw_mark(axes, mark)
        self._draw_legend(figure, view)
        return figure

    def _draw_mark(self, axes: Axes, mark: Mark) -> None:
        attrs = mark.attrs
        if mark.shape == "rect":
            if attrs.get("x") is None or attrs.get("y") is None:
                return
            axes.add_patch(
                Rectangle(
                    (attrs["x"], attrs["y"]),
                    attrs["width"],
                    attrs["height"],
                    facecolor=attrs["fill"],
                )
            )
        elif mark.shape == "circle":
            if attrs.get("cx") is None or attrs.get("cy") is None:
                return
            axes.add_patch(
                Circle(
                    (attrs["cx"], attrs["cy"]),
                    attrs["r"],
                    facecolor=attrs["fill"],
                    alpha=attrs.get("opacity", 1.0),
                )
            )
        elif mark.shape == "wedge":
            # Angles run clockwise from 12 o'clock; screen y points down.
            axes.add_patch(
                Wedge(
                    (attrs["cx"], attrs["cy"]),
                    attrs["r"],
                    math.degrees(attrs["start_angle"]) - 90.0,
                    math.degrees(attrs["end_angle"]) - 90.0,
                    facecolor=attrs["fill"],
                    edgecolor="white",
                )
            )
        elif mark.shape == "path":
            points = [point for point in attrs["points"] if point[0] is not None]
            if not points:
                return
            axes.plot(
                [x for x, _ in points],
                [y for _, y in points],
                color=attrs["stroke"],
                linewidth=attrs.get("stroke_width", 2),
            )
        elif mark.shape == "polygon":
            for ring in attrs["rings"]:
                if len(ring) < 3:
                    continue
                axes.add_patch(
                    Polygon(
                        ring,
                        closed=True,
                        facecolor=attrs["fill"],
                        edgecolor=attrs.get("stroke", "none"),
                        linewidth=0.5,
                    )
                )
        elif mark.shape == "text":
            axes.text(
                attrs["x"],
                attrs["y"],
                attrs["text"],
                color=attrs.get("fill", "#000000"),
                fontsize=_points_to_font_size(attrs.get("font_size", 12)),
                ha="center",
                va="center",
            )

    def _draw_axis(self, axes: Axes, axis: Axis) -> None:
        positions = [tick.position for tick in axis.ticks]
        labels = [tick.label for tick in axis.ticks]
        font = _points_to_font_size(11)
        if axis.orientation == "bottom":
            axes.spines["bottom"].set_position(("data", axis.offset))
            axes.set_xticks(positions, labels, fontsize=font)
            axes.set_xlabel(axis.label, fontsize=font)
            if axis.gridlines:
                axes.grid(axis="x", color=GRID_COLOR, linewidth=0.8)
        else:
            axes.spines["left"].set_position(("data", axis.offset))
            axes.set_yticks(positions, labels, fontsize=font)
            axes.set_ylabel(axis.label, fontsize=font)
            if axis.gridlines:
                axes.grid(axis="y", color=GRID_COLOR, linewidth=0.8)
        axes.set_axisbelow(True)

    def _draw_legend(self, figure: Figure, view: ChartView) -> None:
        handles = [
            Patch(facecolor=entry.color, label=entry.label)
            for row in view.legend_rows
            for entry in row
        ]
        if not handles:
            return
        figure.legend(
            handles=handles,
            loc="upper right",
            fontsize=_points_to_font_size(10),
            ncol=max(len(row) for row in view.legend_rows),
            frameon=False,
        )
