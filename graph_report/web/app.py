"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from graph_report import __version__
from graph_report.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="graph-report", version=__version__)
    app.include_router(router)
    return app
