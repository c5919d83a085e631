"""npm package model and resolution snapshot."""

from __future__ import annotations

from graph_report.npm.package import (
    NPM_SCHEME,
    NpmPackageId,
    NpmPackageNv,
    NpmPackageNvReference,
    NpmPackageReq,
    NpmPackageReqReference,
    NpmResolutionPackage,
    NpmSystemInfo,
    PackageReferenceParseError,
    Version,
)
from graph_report.npm.snapshot import (
    MappingSizeOracle,
    NpmResolutionError,
    NpmResolutionSnapshot,
    PackageSizeOracle,
)

__all__ = [
    "NPM_SCHEME",
    "MappingSizeOracle",
    "NpmPackageId",
    "NpmPackageNv",
    "NpmPackageNvReference",
    "NpmPackageReq",
    "NpmPackageReqReference",
    "NpmResolutionError",
    "NpmResolutionPackage",
    "NpmResolutionSnapshot",
    "NpmSystemInfo",
    "PackageReferenceParseError",
    "PackageSizeOracle",
    "Version",
]
