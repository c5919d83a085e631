"""Serialized npm resolution snapshot and package size documents."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, RootModel, ValidationError

from graph_report.documents.errors import DocumentError
from graph_report.npm import (
    MappingSizeOracle,
    NpmPackageId,
    NpmPackageNv,
    NpmPackageReq,
    NpmResolutionPackage,
    NpmResolutionSnapshot,
    NpmSystemInfo,
    PackageReferenceParseError,
)


class PackageDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dependencies: dict[str, str] = Field(default_factory=dict)
    os: list[str] = Field(default_factory=list)
    cpu: list[str] = Field(default_factory=list)


class SnapshotDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    root_packages: dict[str, str] = Field(default_factory=dict, alias="rootPackages")
    package_reqs: dict[str, str] = Field(default_factory=dict, alias="packageReqs")
    packages: dict[str, PackageDocument] = Field(default_factory=dict)


class SizesDocument(RootModel[dict[str, NonNegativeInt]]):
    pass


def load_snapshot(data: Any) -> NpmResolutionSnapshot:
    """Build an ``NpmResolutionSnapshot`` from a parsed snapshot document."""
    try:
        doc = SnapshotDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentError(f"Invalid npm snapshot document: {e}") from e

    try:
        snapshot = NpmResolutionSnapshot()
        for serialized_id, package_doc in doc.packages.items():
            package_id = NpmPackageId.from_serialized(serialized_id)
            snapshot.packages[package_id] = NpmResolutionPackage(
                id=package_id,
                dependencies={
                    name: NpmPackageId.from_serialized(dep_id)
                    for name, dep_id in package_doc.dependencies.items()
                },
                system=NpmSystemInfo(os=tuple(package_doc.os), cpu=tuple(package_doc.cpu)),
            )
        for nv_text, serialized_id in doc.root_packages.items():
            snapshot.root_packages[NpmPackageNv.from_str(nv_text)] = NpmPackageId.from_serialized(serialized_id)
        for req_text, nv_text in doc.package_reqs.items():
            snapshot.package_reqs[NpmPackageReq.from_str(req_text)] = NpmPackageNv.from_str(nv_text)
    except PackageReferenceParseError as e:
        raise DocumentError(f"Invalid npm snapshot document: {e}") from e
    return snapshot


def load_sizes(data: Any) -> MappingSizeOracle:
    """Build a size oracle from a ``{serialized id: bytes}`` document."""
    if data is None:
        return MappingSizeOracle()
    try:
        doc = SizesDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentError(f"Invalid package sizes document: {e}") from e
    return MappingSizeOracle(doc.root)
