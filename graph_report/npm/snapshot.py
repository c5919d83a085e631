"""Read-only view over an already computed npm resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Protocol

from graph_report.npm.package import (
    NpmPackageId,
    NpmPackageNv,
    NpmPackageReq,
    NpmResolutionPackage,
)

logger = logging.getLogger(__name__)


class NpmResolutionError(LookupError):
    """A package identity or requirement is not part of the snapshot."""


@dataclass
class NpmResolutionSnapshot:
    """Result of resolving every npm requirement to a concrete package.

    ``root_packages`` maps the top level package identities to their ids,
    ``package_reqs`` maps requirements to the identity they resolved to and
    ``packages`` holds every package variant for every platform.
    """

    root_packages: dict[NpmPackageNv, NpmPackageId] = field(default_factory=dict)
    package_reqs: dict[NpmPackageReq, NpmPackageNv] = field(default_factory=dict)
    packages: dict[NpmPackageId, NpmResolutionPackage] = field(default_factory=dict)

    def resolve_package_from_module(self, nv: NpmPackageNv) -> NpmResolutionPackage:
        package_id = self.root_packages.get(nv)
        if package_id is None:
            raise NpmResolutionError(f"Could not find npm package '{nv}' in the snapshot")
        package = self.packages.get(package_id)
        if package is None:
            raise NpmResolutionError(
                f"Could not find npm package id '{package_id.as_serialized()}' in the snapshot"
            )
        return package

    def resolve_from_requirement(self, req: NpmPackageReq) -> NpmResolutionPackage:
        nv = self.package_reqs.get(req)
        if nv is None:
            raise NpmResolutionError(f"Could not find npm requirement '{req}' in the snapshot")
        return self.resolve_package_from_module(nv)

    def package_by_id(self, package_id: NpmPackageId) -> NpmResolutionPackage | None:
        return self.packages.get(package_id)

    def all_packages_for_every_system(self) -> Iterator[NpmResolutionPackage]:
        return iter(self.packages.values())


class PackageSizeOracle(Protocol):
    def package_size(self, package_id: NpmPackageId) -> int | None:
        """Bytes used by the package on disk, or None when unknown."""


class MappingSizeOracle:
    """Size oracle backed by a mapping of serialized package id to bytes."""

    def __init__(self, sizes: Mapping[str, int] | None = None):
        self._sizes = dict(sizes or {})

    def package_size(self, package_id: NpmPackageId) -> int | None:
        size = self._sizes.get(package_id.as_serialized())
        if size is None:
            logger.debug("no size recorded for %s", package_id.as_serialized())
        return size

    def __len__(self) -> int:
        return len(self._sizes)
