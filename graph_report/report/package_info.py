"""Precomputed npm package information shared by the report modes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from graph_report.models import ModuleGraph, NpmModule
from graph_report.npm import (
    NpmPackageId,
    NpmPackageNv,
    NpmResolutionError,
    NpmResolutionPackage,
    NpmResolutionSnapshot,
    PackageSizeOracle,
)

logger = logging.getLogger(__name__)


@dataclass
class NpmInfo:
    """Every npm package reachable from the graph's npm modules.

    ``packages`` is closed over dependency edges: any id referenced by a
    package in it is itself a key, unless the snapshot is incomplete.
    """

    package_sizes: dict[NpmPackageId, int] = field(default_factory=dict)
    resolved_ids: dict[NpmPackageNv, NpmPackageId] = field(default_factory=dict)
    packages: dict[NpmPackageId, NpmResolutionPackage] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        graph: ModuleGraph,
        snapshot: NpmResolutionSnapshot,
        size_oracle: PackageSizeOracle,
    ) -> NpmInfo:
        info = cls()
        if not graph.npm_packages:
            return info  # nothing to scan

        for module in graph.modules_iter():
            if not isinstance(module, NpmModule):
                continue
            nv = module.nv_reference.nv
            try:
                package = snapshot.resolve_package_from_module(nv)
            except NpmResolutionError as e:
                logger.debug("skipping unresolved npm package %s: %s", nv, e)
                continue
            info.resolved_ids[nv] = package.id
            if package.id not in info.packages:
                info._fill_package_info(package, snapshot, size_oracle)

        return info

    def _fill_package_info(
        self,
        package: NpmResolutionPackage,
        snapshot: NpmResolutionSnapshot,
        size_oracle: PackageSizeOracle,
    ) -> None:
        pending = [package]
        while pending:
            current = pending.pop()
            if current.id in self.packages:
                continue
            self.packages[current.id] = current
            size = size_oracle.package_size(current.id)
            if size is not None:
                self.package_sizes[current.id] = size
            for dep_id in current.dependencies.values():
                if dep_id in self.packages:
                    continue
                dep = snapshot.package_by_id(dep_id)
                if dep is None:
                    # should not happen for a complete snapshot
                    logger.debug("npm package %s is missing from the snapshot", dep_id)
                    continue
                pending.append(dep)

    def resolve_package(self, nv: NpmPackageNv) -> NpmResolutionPackage | None:
        package_id = self.resolved_ids.get(nv)
        if package_id is None:
            return None
        return self.packages.get(package_id)
