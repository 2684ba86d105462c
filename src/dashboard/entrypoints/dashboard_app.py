"""
Dashboard Entrypoint - server-rendered case dashboard.
Talks to the Case API over HTTP; keeps its own state and local cache.
"""
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

import config
from cases.domain.model import parse_case_id
from dashboard.adapters.cache import LocalCaseCache
from dashboard.adapters.case_api_client import CaseApiClient
from dashboard.detail import CaseDetailView
from dashboard.state import DashboardController
from shared.entrypoints.http import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def format_date(value: str) -> str:
    """ISO timestamp as dd.mm.yyyy; unparseable values are shown as is."""
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%d.%m.%Y")
    except ValueError:
        return value


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["de_date"] = format_date
templates.env.filters["urlencode_params"] = urlencode


def build_controller() -> DashboardController:
    dashboard_config = config.get_dashboard_config()
    api = CaseApiClient(dashboard_config["api_url"], timeout=dashboard_config["timeout"])
    cache = LocalCaseCache(dashboard_config["cache_path"])
    return DashboardController(api, cache, poll_interval=dashboard_config["poll_interval"])


def parse_selected(value: str) -> set:
    return {int(part) for part in value.split(",") if part.strip().isdigit()}


def create_app(controller: Optional[DashboardController] = None, start_polling: bool = True) -> FastAPI:
    app = FastAPI(
        title="Case Dashboard",
        description="Lists cases, shows details and confirms cases",
        version="1.0.0"
    )
    app.state.controller = controller

    @app.on_event("startup")
    async def startup_event():
        if app.state.controller is None:
            app.state.controller = build_controller()
        app.state.controller.mount(start_polling=start_polling)
        logger.info("✓ Dashboard mounted")

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.controller.unmount()
        logger.info("Dashboard unmounted")

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "case-dashboard",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request, q: str = ""):
        controller: DashboardController = app.state.controller
        controller.set_search_query(q)
        state = controller.snapshot()
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "state": state,
                "cases": controller.filtered_cases(),
                "poll_seconds": int(controller.poll_interval),
            },
        )

    def _detail_view(case_id: str, search: str, sort: str, dir: str, selected: str) -> CaseDetailView:
        id_num = parse_case_id(case_id)
        case = app.state.controller.find_case(id_num) if id_num is not None else None
        if case is None:
            raise HTTPException(status_code=404, detail=f"Case {case_id} not found")
        return CaseDetailView(
            case,
            contact_search=search,
            selected=parse_selected(selected),
            sort_field=sort,
            sort_direction=dir,
        )

    @app.get("/cases/{case_id}", response_class=HTMLResponse)
    def case_detail(
        request: Request,
        case_id: str,
        search: str = "",
        sort: str = "firma",
        dir: str = "asc",
        selected: str = "",
    ):
        view = _detail_view(case_id, search, sort, dir, selected)
        return templates.TemplateResponse(
            request,
            "detail.html",
            {"view": view, "case": view.case},
        )

    @app.post("/cases/{case_id}/confirm")
    def confirm_case(
        case_id: str,
        search: str = "",
        sort: str = "firma",
        dir: str = "asc",
        selected: str = "",
    ):
        view = _detail_view(case_id, search, sort, dir, selected)
        view.confirm()
        return RedirectResponse(
            url=f"/cases/{view.case.id}?{urlencode(view.query_params())}",
            status_code=303,
        )

    return app


app = create_app()


def main():
    uvicorn.run(
        "dashboard.entrypoints.dashboard_app:app",
        host=os.environ.get("DASHBOARD_BIND", "0.0.0.0"),
        port=int(os.environ.get("DASHBOARD_PORT", "3000")),
    )


if __name__ == "__main__":
    main()
