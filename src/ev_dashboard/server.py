from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ev_dashboard import __version__
from ev_dashboard.config import AppConfig
from ev_dashboard.controller import SelectionController
from ev_dashboard.model import DropdownId
from ev_dashboard.report.render import build_dashboard_payload, render_dashboard_html
from ev_dashboard.session import DashboardSession, load_session

LOGGER = logging.getLogger(__name__)


class SearchEvent(BaseModel):
    key: str = "Enter"
    term: str = ""


class CheckboxEvent(BaseModel):
    value: str
    checked: bool


def _dropdown(dropdown: str) -> DropdownId:
    try:
        return DropdownId(dropdown)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown dropdown: {dropdown}") from None


def create_app(
    config: AppConfig,
    *,
    session_loader: Callable[[AppConfig], DashboardSession] = load_session,
) -> FastAPI:
    """Build the dashboard service.

    The session is loaded once at start-up. Every handler is a coroutine, so
    events are handled one at a time on the event loop.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        session = session_loader(config)
        controller = SelectionController(session)
        controller.refresh()
        app.state.controller = controller
        LOGGER.info("Dashboard service ready with %d rows", len(session.rows))
        yield

    app = FastAPI(
        title="EV Population Dashboard",
        version=__version__,
        lifespan=lifespan,
    )

    def _controller(request: Request) -> SelectionController:
        return request.app.state.controller

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> str:
        payload = build_dashboard_payload(_controller(request))
        return render_dashboard_html(payload, api_base=str(request.base_url).rstrip("/"))

    @app.get("/api/health")
    async def health(request: Request) -> dict[str, Any]:
        controller = _controller(request)
        return {
            "status": "healthy",
            "version": __version__,
            "rows": len(controller.session.rows),
            "geography_features": len(controller.session.geography),
        }

    @app.get("/api/dashboard")
    async def dashboard(request: Request) -> dict[str, Any]:
        return build_dashboard_payload(_controller(request))

    @app.post("/api/search")
    async def search(event: SearchEvent, request: Request) -> dict[str, Any]:
        controller = _controller(request)
        controller.handle_search_key(event.key, event.term)
        return build_dashboard_payload(controller)

    @app.post("/api/dropdowns/{dropdown}/checkboxes")
    async def toggle_checkbox(
        dropdown: str, event: CheckboxEvent, request: Request
    ) -> dict[str, Any]:
        controller = _controller(request)
        try:
            controller.toggle_checkbox(_dropdown(dropdown), event.value, event.checked)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return build_dashboard_payload(controller)

    @app.post("/api/dropdowns/{dropdown}/panel")
    async def toggle_panel(dropdown: str, request: Request) -> dict[str, Any]:
        is_open = _controller(request).toggle_panel(_dropdown(dropdown))
        return {"dropdown": dropdown, "open": is_open}

    return app
