"""Serialized module graph documents and conversion to the graph model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from graph_report.documents.errors import DocumentError
from graph_report.models import (
    CacheInfo,
    Dependency,
    EsmModule,
    ExternalModule,
    JsonModule,
    MediaType,
    Module,
    ModuleErrorKind,
    ModuleGraph,
    ModuleGraphError,
    ModuleKind,
    NodeModule,
    NpmModule,
    Position,
    Range,
    Resolution,
    ResolutionErr,
    ResolutionOk,
    TypesDependency,
)
from graph_report.npm import NpmPackageNvReference, PackageReferenceParseError


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PositionDocument(_Document):
    line: int = 0
    character: int = 0


class SpanDocument(_Document):
    start: PositionDocument = Field(default_factory=PositionDocument)
    end: PositionDocument = Field(default_factory=PositionDocument)


class ResolutionDocument(_Document):
    specifier: str | None = None
    error: str | None = None
    span: SpanDocument | None = None


class DependencyDocument(_Document):
    specifier: str
    code: ResolutionDocument | None = None
    type: ResolutionDocument | None = None
    is_dynamic: bool | None = Field(None, alias="isDynamic")
    assertion_type: str | None = Field(None, alias="assertionType")


class TypesDependencyDocument(_Document):
    specifier: str
    dependency: ResolutionDocument


class ModuleDocument(_Document):
    specifier: str
    kind: ModuleKind | None = None
    error: str | None = None
    error_kind: ModuleErrorKind | None = Field(None, alias="errorKind")
    size: int | None = None
    media_type: MediaType | None = Field(None, alias="mediaType")
    local: str | None = None
    emit: str | None = None
    map: str | None = None
    module_name: str | None = Field(None, alias="moduleName")
    dependencies: list[DependencyDocument] | None = None
    types_dependency: TypesDependencyDocument | None = Field(None, alias="typesDependency")


class GraphDocument(_Document):
    roots: list[str] = Field(default_factory=list)
    modules: list[ModuleDocument] = Field(default_factory=list)
    redirects: dict[str, str] = Field(default_factory=dict)


# ── document -> model ─────────────────────────────────────────

def load_graph(data: Any) -> ModuleGraph:
    """Build a ``ModuleGraph`` from a parsed graph document."""
    try:
        doc = GraphDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentError(f"Invalid module graph document: {e}") from e

    graph = ModuleGraph(roots=list(doc.roots), redirects=dict(doc.redirects))
    for module_doc in doc.modules:
        if module_doc.error is not None:
            kind = module_doc.error_kind or ModuleErrorKind.LOADING
            graph.errors[module_doc.specifier] = ModuleGraphError(
                module_doc.specifier, kind, module_doc.error,
            )
            continue
        graph.modules[module_doc.specifier] = _to_module(module_doc)
    return graph


def _to_module(doc: ModuleDocument) -> Module:
    specifier = doc.specifier
    if doc.kind is None:
        raise DocumentError(f"Module {specifier!r} has neither a kind nor an error")

    if doc.kind == ModuleKind.ESM:
        return EsmModule(
            specifier=specifier,
            media_type=doc.media_type or MediaType.JAVASCRIPT,
            size=doc.size or 0,
            dependencies={
                dep.specifier: _to_dependency(dep, specifier)
                for dep in doc.dependencies or []
            },
            maybe_types_dependency=(
                TypesDependency(
                    specifier=doc.types_dependency.specifier,
                    dependency=_to_resolution(doc.types_dependency.dependency, specifier),
                )
                if doc.types_dependency else None
            ),
            maybe_cache_info=_to_cache_info(doc),
        )
    if doc.kind == ModuleKind.JSON:
        return JsonModule(
            specifier=specifier,
            media_type=doc.media_type or MediaType.JSON,
            size=doc.size or 0,
            maybe_cache_info=_to_cache_info(doc),
        )
    if doc.kind == ModuleKind.NPM:
        try:
            reference = NpmPackageNvReference.from_str(specifier)
        except PackageReferenceParseError as e:
            raise DocumentError(f"Invalid npm module {specifier!r}: {e}") from e
        return NpmModule(specifier=specifier, nv_reference=reference)
    if doc.kind == ModuleKind.NODE:
        return NodeModule(
            specifier=specifier,
            module_name=doc.module_name or specifier.removeprefix("node:"),
        )
    return ExternalModule(specifier=specifier)


def _to_cache_info(doc: ModuleDocument) -> CacheInfo | None:
    if doc.local is None and doc.emit is None and doc.map is None:
        return None
    return CacheInfo(local=doc.local, emit=doc.emit, map=doc.map)


def _to_dependency(doc: DependencyDocument, referrer: str) -> Dependency:
    return Dependency(
        specifier=doc.specifier,
        maybe_code=_to_resolution(doc.code, referrer),
        maybe_type=_to_resolution(doc.type, referrer),
        is_dynamic=bool(doc.is_dynamic),
        assertion_type=doc.assertion_type,
    )


def _to_resolution(doc: ResolutionDocument | None, referrer: str) -> Resolution:
    if doc is None:
        return None
    range_ = None
    if doc.span is not None:
        range_ = Range(
            specifier=referrer,
            start=Position(doc.span.start.line, doc.span.start.character),
            end=Position(doc.span.end.line, doc.span.end.character),
        )
    if doc.error is not None:
        return ResolutionErr(error=doc.error, range=range_)
    if doc.specifier is not None:
        return ResolutionOk(specifier=doc.specifier, range=range_)
    return None


# ── model -> document ─────────────────────────────────────────

def graph_to_json(graph: ModuleGraph) -> dict[str, Any]:
    """Serialize a graph to its document form, modules sorted by specifier."""
    docs: list[ModuleDocument] = [_from_module(m) for m in graph.modules_iter()]
    docs.extend(
        ModuleDocument(specifier=specifier, error=err.message, error_kind=err.kind)
        for specifier, err in graph.errors.items()
    )
    docs.sort(key=lambda d: d.specifier)
    doc = GraphDocument(roots=list(graph.roots), modules=docs, redirects=dict(graph.redirects))
    return doc.model_dump(mode="json", by_alias=True, exclude_none=True)


def _from_module(module: Module) -> ModuleDocument:
    doc = ModuleDocument(specifier=module.specifier, kind=module.kind)
    if isinstance(module, (EsmModule, JsonModule)):
        doc.size = module.size
        doc.media_type = module.media_type
        if module.maybe_cache_info is not None:
            doc.local = module.maybe_cache_info.local
            doc.emit = module.maybe_cache_info.emit
            doc.map = module.maybe_cache_info.map
    if isinstance(module, EsmModule):
        doc.dependencies = [_from_dependency(dep) for dep in module.dependencies.values()]
        if module.maybe_types_dependency is not None:
            doc.types_dependency = TypesDependencyDocument(
                specifier=module.maybe_types_dependency.specifier,
                dependency=_from_resolution(module.maybe_types_dependency.dependency) or ResolutionDocument(),
            )
    if isinstance(module, NodeModule):
        doc.module_name = module.module_name
    return doc


def _from_dependency(dep: Dependency) -> DependencyDocument:
    return DependencyDocument(
        specifier=dep.specifier,
        code=_from_resolution(dep.maybe_code),
        type=_from_resolution(dep.maybe_type),
        is_dynamic=dep.is_dynamic or None,
        assertion_type=dep.assertion_type,
    )


def _from_resolution(resolution: Resolution) -> ResolutionDocument | None:
    if resolution is None:
        return None
    span = None
    if resolution.range is not None:
        r = resolution.range
        span = SpanDocument(
            start=PositionDocument(line=r.start.line, character=r.start.character),
            end=PositionDocument(line=r.end.line, character=r.end.character),
        )
    if isinstance(resolution, ResolutionErr):
        return ResolutionDocument(error=resolution.error, span=span)
    return ResolutionDocument(specifier=resolution.specifier, span=span)
