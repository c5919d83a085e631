"""Web API for graph reports."""

from graph_report.web.app import create_app

__all__ = ["create_app"]
