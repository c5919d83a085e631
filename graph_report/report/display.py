"""Text report: summary statistics followed by the dependency tree."""

from __future__ import annotations

import io
import logging
from functools import partial
from typing import Callable, Iterable, TextIO

from graph_report.models import (
    EsmModule,
    Module,
    ModuleErrorKind,
    ModuleGraph,
    ModuleGraphError,
    NpmModule,
    Resolution,
    ResolutionErr,
    ResolutionOk,
    module_cache_info,
    module_size,
)
from graph_report.npm import NpmPackageId, NpmResolutionSnapshot, PackageSizeOracle
from graph_report.report.colors import PLAIN, Style
from graph_report.report.package_info import NpmInfo
from graph_report.report.sizes import human_size, maybe_size_to_text
from graph_report.report.tree import TreeNode, render_tree

logger = logging.getLogger(__name__)

_ERROR_TAGS: dict[ModuleErrorKind, str] = {
    ModuleErrorKind.INVALID_TYPE_ASSERTION: "(invalid import assertion)",
    ModuleErrorKind.LOADING: "(loading error)",
    ModuleErrorKind.PARSE: "(parsing error)",
    ModuleErrorKind.UNSUPPORTED_IMPORT_ASSERTION_TYPE: "(unsupported import assertion)",
    ModuleErrorKind.UNSUPPORTED_MEDIA_TYPE: "(unsupported)",
    ModuleErrorKind.MISSING: "(missing)",
    ModuleErrorKind.MISSING_DYNAMIC: "(missing)",
    ModuleErrorKind.RESOLUTION: "(resolution error)",
}

# A deferred piece of tree construction: returns the node it builds (or
# None) and the work that produces the node's children, in order.
_Pending = Callable[[], "tuple[TreeNode | None, list[_Pending]]"]


class GraphDisplayContext:
    """Builds and prints the tree for one report.

    The ``seen`` set belongs to a single report: each module specifier or
    npm package id has its children expanded at most once, later
    occurrences render as a leaf marked with ``*``.
    """

    def __init__(self, graph: ModuleGraph, npm_info: NpmInfo, style: Style = PLAIN):
        self.graph = graph
        self.npm_info = npm_info
        self.style = style
        self.seen: set[str] = set()

    @classmethod
    def write(
        cls,
        graph: ModuleGraph,
        snapshot: NpmResolutionSnapshot,
        size_oracle: PackageSizeOracle,
        writer: TextIO,
        style: Style = PLAIN,
    ) -> None:
        npm_info = NpmInfo.build(graph, snapshot, size_oracle)
        cls(graph, npm_info, style).write_to(writer)

    def write_to(self, writer: TextIO) -> None:
        s = self.style
        if len(self.graph.roots) != 1:
            writer.write(f"{s.red('error:')} displaying graphs that have multiple roots is not supported.\n")
            return

        root_specifier = self.graph.resolve(self.graph.roots[0])
        try:
            root = self.graph.try_get(root_specifier)
        except ModuleGraphError as err:
            if err.kind == ModuleErrorKind.MISSING:
                writer.write(f"{s.red('error:')} module could not be found\n")
            else:
                writer.write(f"{s.red('error:')} {err}\n")
            return
        if root is None:
            writer.write(f"{s.red('error:')} an internal error occurred\n")
            return

        cache_info = module_cache_info(root)
        if cache_info is not None:
            if cache_info.local:
                writer.write(f"{s.bold('local:')} {cache_info.local}\n")
            if cache_info.emit:
                writer.write(f"{s.bold('emit:')} {cache_info.emit}\n")
            if cache_info.map:
                writer.write(f"{s.bold('map:')} {cache_info.map}\n")
        if isinstance(root, EsmModule):
            writer.write(f"{s.bold('type:')} {root.media_type}\n")

        writer.write(f"{s.bold('dependencies:')} {self.dependency_count()} unique\n")
        writer.write(f"{s.bold('size:')} {human_size(self.total_size())}\n")
        writer.write("\n")
        render_tree(self.build_module_info(root, False), writer, s)

    def total_size(self) -> int:
        modules_size = sum(module_size(m) or 0 for m in self.graph.modules_iter())
        return modules_size + sum(self.npm_info.package_sizes.values())

    def dependency_count(self) -> int:
        # npm modules that failed to resolve count as modules but not as
        # packages, so the result can be off by those.
        return (
            len(self.graph.modules) - 1  # the root module
            + len(self.npm_info.packages)
            - len(self.npm_info.resolved_ids)
        )

    def build_module_info(self, module: Module, type_dep: bool) -> TreeNode:
        return self._expand(partial(self._module_info, module, type_dep))

    def _expand(self, first: _Pending) -> TreeNode:
        # Depth first, children in order, so nodes are marked seen in the
        # same order they are printed.
        top: list[TreeNode] = []
        stack: list[tuple[_Pending, list[TreeNode]]] = [(first, top)]
        while stack:
            pending, siblings = stack.pop()
            node, children = pending()
            if node is None:
                continue
            siblings.append(node)
            for child in reversed(children):
                stack.append((child, node.children))
        if not top:
            raise ValueError("tree construction produced no root node")
        return top[0]

    def _module_info(self, module: Module, type_dep: bool) -> tuple[TreeNode, list[_Pending]]:
        s = self.style
        package = None
        if isinstance(module, NpmModule):
            package = self.npm_info.resolve_package(module.nv_reference.nv)
            if package is None:
                logger.debug("no resolved package for %s", module.specifier)

        key = package.id.as_serialized() if package is not None else module.specifier
        was_seen = key in self.seen
        self.seen.add(key)

        if was_seen:
            specifier = s.italic_gray(module.specifier) if type_dep else s.gray(module.specifier)
            return TreeNode(f"{specifier} {s.gray('*')}"), []

        header = s.italic(module.specifier) if type_dep else module.specifier
        if package is not None:
            size = self.npm_info.package_sizes.get(package.id)
        else:
            size = module_size(module)
        node = TreeNode(f"{header} {s.gray(maybe_size_to_text(size))}")

        children: list[_Pending] = []
        if package is not None:
            children.extend(self._npm_deps(package.dependencies.values()))
        elif isinstance(module, EsmModule):
            if module.maybe_types_dependency is not None:
                children.append(partial(self._resolved_info, module.maybe_types_dependency.dependency, True))
            for dep in module.dependencies.values():
                if dep.maybe_code is not None:
                    children.append(partial(self._resolved_info, dep.maybe_code, False))
                if dep.maybe_type is not None:
                    children.append(partial(self._resolved_info, dep.maybe_type, True))
        return node, children

    def _npm_deps(self, dep_ids: Iterable[NpmPackageId]) -> list[_Pending]:
        return [partial(self._npm_dep_info, dep_id) for dep_id in sorted(dep_ids)]

    def _npm_dep_info(self, dep_id: NpmPackageId) -> tuple[TreeNode, list[_Pending]]:
        s = self.style
        size = self.npm_info.package_sizes.get(dep_id)
        node = TreeNode(f"npm:{dep_id.as_serialized()} {s.gray(maybe_size_to_text(size))}")
        package = self.npm_info.packages.get(dep_id)
        if package is None or not package.dependencies:
            return node, []
        key = package.id.as_serialized()
        if key in self.seen:
            node.text = f"{node.text} {s.gray('*')}"
            return node, []
        self.seen.add(key)
        return node, self._npm_deps(package.dependencies.values())

    def _resolved_info(self, resolution: Resolution, type_dep: bool) -> tuple[TreeNode | None, list[_Pending]]:
        s = self.style
        if isinstance(resolution, ResolutionOk):
            resolved = self.graph.resolve(resolution.specifier)
            try:
                module = self.graph.try_get(resolved)
            except ModuleGraphError as err:
                return self._error_info(err, resolved), []
            if module is None:
                return TreeNode(f"{s.red(resolution.specifier)} {s.red_bold('(missing)')}"), []
            return self._module_info(module, type_dep)
        if isinstance(resolution, ResolutionErr):
            return TreeNode(f"{s.italic(resolution.error)} {s.red_bold('(resolve error)')}"), []
        return None, []

    def _error_info(self, err: ModuleGraphError, specifier: str) -> TreeNode:
        logger.debug("module %s failed to load: %s", specifier, err)
        self.seen.add(specifier)
        s = self.style
        return TreeNode(f"{s.red(specifier)} {s.red_bold(_ERROR_TAGS[err.kind])}")


def format_tree_report(
    graph: ModuleGraph,
    snapshot: NpmResolutionSnapshot,
    size_oracle: PackageSizeOracle,
    style: Style = PLAIN,
) -> str:
    """Render the text report into a string."""
    output = io.StringIO()
    GraphDisplayContext.write(graph, snapshot, size_oracle, output, style)
    return output.getvalue()
