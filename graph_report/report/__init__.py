"""Report rendering: tree text and JSON output over a module graph."""

from __future__ import annotations

from graph_report.report.colors import PLAIN, Style
from graph_report.report.display import GraphDisplayContext, format_tree_report
from graph_report.report.json_output import add_npm_packages_to_json, npm_package_registry
from graph_report.report.package_info import NpmInfo
from graph_report.report.sizes import human_size
from graph_report.report.tree import TreeNode, render_tree

__all__ = [
    "PLAIN",
    "GraphDisplayContext",
    "NpmInfo",
    "Style",
    "TreeNode",
    "add_npm_packages_to_json",
    "format_tree_report",
    "human_size",
    "npm_package_registry",
    "render_tree",
]
