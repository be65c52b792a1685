from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ev_dashboard.controller import SelectionController
from ev_dashboard.model import CHART_DROPDOWNS, ChartKind, DropdownId
from ev_dashboard.paths import build_output_paths

LOGGER = logging.getLogger(__name__)

DROPDOWN_LABELS = {
    DropdownId.BAR_MAKES: "Filter bar chart makes",
    DropdownId.LINE_MAKES: "Filter line chart makes",
}
CHART_ORDER = [
    ChartKind.BAR,
    ChartKind.PIE,
    ChartKind.STACKED,
    ChartKind.LINE,
    ChartKind.GROUPED,
    ChartKind.SCATTER,
    ChartKind.MAP,
]


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (int, str, bool)) or value is None:
        return value
    return str(value)


def _script_json(payload: dict[str, Any]) -> str:
    # Keep "</script>" inside string values from closing the embedding tag.
    return json.dumps(payload, ensure_ascii=False).replace("</", "<\\/")


def _dropdown_payload(controller: SelectionController, dropdown: DropdownId) -> dict[str, Any]:
    chart = next(kind for kind, owner in CHART_DROPDOWNS.items() if owner is dropdown)
    return {
        "id": dropdown.value,
        "chart": chart.value,
        "label": DROPDOWN_LABELS[dropdown],
        "open": controller.panel_open[dropdown],
        "options": [
            {"value": make, "checked": checked}
            for make, checked in controller.checkbox_states[dropdown].items()
        ],
    }


def build_dashboard_payload(controller: SelectionController) -> dict[str, Any]:
    """Everything the browser needs to draw the current dashboard state."""
    views = controller.session.views or controller.refresh()
    return _json_safe(
        {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "search_term": controller.search_term,
            "row_count": len(controller.session.rows),
            "charts": {
                kind.value: views[kind].to_payload() for kind in CHART_ORDER if kind in views
            },
            "dropdowns": [_dropdown_payload(controller, dropdown) for dropdown in DropdownId],
        }
    )


def render_dashboard_html(payload: dict[str, Any], *, api_base: str | None = None) -> str:
    env = _template_env()
    template = env.get_template("dashboard.html.j2")
    script = (Path(__file__).resolve().parent / "templates" / "dashboard.js").read_text(
        encoding="utf-8"
    )
    return template.render(
        generated_at=payload.get("generated_at", ""),
        search_term=payload.get("search_term", ""),
        dropdowns=payload.get("dropdowns", []),
        chart_ids=[kind.value for kind in CHART_ORDER],
        payload_json=_script_json(payload),
        api_base=api_base,
        dashboard_script=script,
    )


def write_dashboard(
    controller: SelectionController, out_dir: Path, *, api_base: str | None = None
) -> Path:
    paths = build_output_paths(out_dir)
    payload = build_dashboard_payload(controller)
    rendered = render_dashboard_html(payload, api_base=api_base)
    dashboard_path = paths.dashboard
    dashboard_path.write_text(rendered, encoding="utf-8")
    (paths.payloads / "dashboard.json").write_text(
        json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    LOGGER.info("Dashboard written to %s (%d bytes)", dashboard_path, dashboard_path.stat().st_size)
    return dashboard_path
