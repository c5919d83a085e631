"""JSON report: annotate a serialized module graph with npm package data."""

from __future__ import annotations

import logging
from typing import Any

from graph_report.npm import (
    NpmPackageNvReference,
    NpmPackageReqReference,
    NpmResolutionError,
    NpmResolutionPackage,
    NpmResolutionSnapshot,
    PackageReferenceParseError,
)

logger = logging.getLogger(__name__)

# Module kinds that are placeholders for packages rather than real graph nodes.
_PACKAGE_REFERENCE_KINDS = ("npm", "external")


def add_npm_packages_to_json(document: dict[str, Any], snapshot: NpmResolutionSnapshot) -> dict[str, Any]:
    """Attach resolved npm package ids to ``document`` and append ``npmPackages``.

    The document is modified in place and returned. References that do not
    resolve are left as they are.
    """
    modules = document.get("modules")
    if isinstance(modules, list):
        if len(modules) == 1 and _kind(modules[0]) == "npm":
            # an npm specifier was requested directly; show what it resolved to
            module = modules[0]
            package = _resolve_nv_reference(module.get("specifier"), snapshot)
            if package is not None:
                module["npmPackage"] = package.id.as_serialized()
        else:
            # several npm specifiers may resolve to one package, so list
            # packages only as dependencies
            modules[:] = [m for m in modules if _kind(m) not in _PACKAGE_REFERENCE_KINDS]

        for module in modules:
            dependencies = module.get("dependencies") if isinstance(module, dict) else None
            if not isinstance(dependencies, list):
                continue
            for dep in dependencies:
                if not isinstance(dep, dict):
                    continue
                package = _resolve_req_reference(dep.get("specifier"), snapshot)
                if package is not None:
                    dep["npmPackage"] = package.id.as_serialized()

    document["npmPackages"] = npm_package_registry(snapshot)
    return document


def npm_package_registry(snapshot: NpmResolutionSnapshot) -> dict[str, dict[str, Any]]:
    """Every package variant in the snapshot keyed by serialized id, sorted by id."""
    registry: dict[str, dict[str, Any]] = {}
    for package in sorted(snapshot.all_packages_for_every_system(), key=lambda p: p.id):
        registry[package.id.as_serialized()] = {
            "name": package.id.nv.name,
            "version": str(package.id.nv.version),
            "dependencies": [dep_id.as_serialized() for dep_id in sorted(package.dependencies.values())],
        }
    return registry


def _kind(module: Any) -> str | None:
    if isinstance(module, dict):
        kind = module.get("kind")
        if isinstance(kind, str):
            return kind
    return None


def _resolve_nv_reference(specifier: Any, snapshot: NpmResolutionSnapshot) -> NpmResolutionPackage | None:
    if not isinstance(specifier, str):
        return None
    try:
        reference = NpmPackageNvReference.from_str(specifier)
        return snapshot.resolve_package_from_module(reference.nv)
    except (PackageReferenceParseError, NpmResolutionError) as e:
        logger.debug("leaving %s unannotated: %s", specifier, e)
        return None


def _resolve_req_reference(specifier: Any, snapshot: NpmResolutionSnapshot) -> NpmResolutionPackage | None:
    if not isinstance(specifier, str) or not specifier.startswith("npm:"):
        return None
    try:
        reference = NpmPackageReqReference.from_str(specifier)
        return snapshot.resolve_from_requirement(reference.req)
    except (PackageReferenceParseError, NpmResolutionError) as e:
        logger.debug("leaving %s unannotated: %s", specifier, e)
        return None
