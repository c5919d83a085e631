"""Input and output documents: module graphs, npm snapshots and package sizes."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from graph_report.documents.errors import DocumentError
from graph_report.documents.graph import graph_to_json, load_graph
from graph_report.documents.snapshot import load_sizes, load_snapshot


def read_json_file(path: Path) -> Any:
    """Read and parse a JSON document from disk."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"Could not read {path}: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentError(f"{path} is not valid JSON: {e}") from e


__all__ = [
    "DocumentError",
    "graph_to_json",
    "load_graph",
    "load_sizes",
    "load_snapshot",
    "read_json_file",
]
