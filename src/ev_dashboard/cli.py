from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

import typer
import uvicorn

from ev_dashboard.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from ev_dashboard.controller import SelectionController
from ev_dashboard.features.aggregates import aggregate
from ev_dashboard.logging import configure_logging
from ev_dashboard.model import ChartKind, DropdownId, FilterContext
from ev_dashboard.paths import build_output_paths
from ev_dashboard.report.render import _json_safe, write_dashboard
from ev_dashboard.server import create_app
from ev_dashboard.session import load_session
from ev_dashboard.viz.surface import FigureSurface

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _chart_kind(kind: str) -> ChartKind:
    try:
        return ChartKind(kind.strip().lower())
    except ValueError:
        choices = ", ".join(item.value for item in ChartKind)
        raise typer.BadParameter(f"Unknown chart kind {kind!r}. Choose one of: {choices}") from None


def _apply_checked(
    controller: SelectionController, dropdown: DropdownId, makes: list[str] | None
) -> None:
    if not makes:
        return
    try:
        controller.set_checked(dropdown, makes)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def render(
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    search: str = typer.Option("", help="Search term applied to every chart (make substring)."),
    bar_make: list[str] | None = typer.Option(None, help="Checked make for the bar chart."),
    line_make: list[str] | None = typer.Option(None, help="Checked make for the line chart."),
    bar_zoom: float | None = typer.Option(
        None, help="Bar chart zoom factor; clamped to the 1-8 range."
    ),
) -> None:
    """Render dashboard.html and one figure per chart for the given filter state."""
    configure_logging()
    cfg = _load_app_config(config)
    paths = build_output_paths(out)
    session = load_session(cfg)

    controller = SelectionController(session)
    controller.handle_search_key("Enter", search)
    _apply_checked(controller, DropdownId.BAR_MAKES, bar_make)
    _apply_checked(controller, DropdownId.LINE_MAKES, line_make)
    if bar_zoom is not None:
        controller.zoom_bar(bar_zoom)
    if cfg.outputs.export_figures:
        controller.surfaces.append(FigureSurface(paths.figures, cfg.outputs.figures_format))
        controller.refresh()

    dashboard_path = write_dashboard(controller, paths.root)
    typer.echo(f"Dashboard written to: {dashboard_path}")


@app.command()
def summary(
    kind: str = typer.Option("bar", help="Chart kind whose aggregate is printed."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    search: str = typer.Option("", help="Search term (make substring)."),
) -> None:
    """Print one chart's aggregate as JSON."""
    configure_logging()
    chart_kind = _chart_kind(kind)
    cfg = _load_app_config(config)
    session = load_session(cfg)
    result = aggregate(
        session.rows,
        FilterContext(search_term=search),
        chart_kind,
        coordinate_precision=cfg.map.coordinate_precision,
    )
    typer.echo(json.dumps(_json_safe([asdict(item) for item in result]), indent=2))


@app.command()
def serve(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    host: str | None = typer.Option(None, help="Override server.host from the config."),
    port: int | None = typer.Option(None, help="Override server.port from the config."),
) -> None:
    """Serve the interactive dashboard."""
    configure_logging()
    cfg = _load_app_config(config)
    uvicorn.run(
        create_app(cfg),
        host=host or cfg.server.host,
        port=port or cfg.server.port,
        log_level="info",
    )


if __name__ == "__main__":
    app()
