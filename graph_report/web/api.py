"""Report API: tree text and npm-annotated JSON for posted documents."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from graph_report import __version__
from graph_report.documents import (
    DocumentError,
    load_graph,
    load_sizes,
    load_snapshot,
)
from graph_report.report import add_npm_packages_to_json, format_tree_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class InfoRequest(BaseModel):
    graph: dict[str, Any]
    snapshot: dict[str, Any] = Field(default_factory=dict)
    sizes: dict[str, int] | None = None


def _tree_text(req: InfoRequest) -> str:
    graph = load_graph(req.graph)
    snapshot = load_snapshot(req.snapshot)
    return format_tree_report(graph, snapshot, load_sizes(req.sizes))


def _json_document(req: InfoRequest) -> dict[str, Any]:
    load_graph(req.graph)
    snapshot = load_snapshot(req.snapshot)
    return add_npm_packages_to_json(copy.deepcopy(req.graph), snapshot)


@router.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@router.post("/info/tree")
async def info_tree(req: InfoRequest):
    try:
        text = await asyncio.to_thread(_tree_text, req)
    except DocumentError as e:
        logger.info("rejected tree request: %s", e)
        raise HTTPException(400, str(e))
    return {"text": text}


@router.post("/info/json")
async def info_json(req: InfoRequest):
    try:
        return await asyncio.to_thread(_json_document, req)
    except DocumentError as e:
        logger.info("rejected json request: %s", e)
        raise HTTPException(400, str(e))
