"""Data models for the module graph that the report walks."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Iterator, Union

from graph_report.npm.package import NpmPackageNv, NpmPackageNvReference


class MediaType(enum.Enum):
    JAVASCRIPT = "JavaScript"
    JSX = "Jsx"
    MJS = "Mjs"
    CJS = "Cjs"
    TYPESCRIPT = "TypeScript"
    MTS = "Mts"
    CTS = "Cts"
    DTS = "Dts"
    DMTS = "Dmts"
    DCTS = "Dcts"
    TSX = "Tsx"
    JSON = "Json"
    WASM = "Wasm"
    TS_BUILD_INFO = "TsBuildInfo"
    SOURCE_MAP = "SourceMap"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value


class ModuleKind(enum.Enum):
    ESM = "esm"
    JSON = "json"
    NPM = "npm"
    NODE = "node"
    EXTERNAL = "external"


class ModuleErrorKind(enum.Enum):
    MISSING = "missing"
    MISSING_DYNAMIC = "missing_dynamic"
    LOADING = "loading"
    PARSE = "parse"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    INVALID_TYPE_ASSERTION = "invalid_type_assertion"
    UNSUPPORTED_IMPORT_ASSERTION_TYPE = "unsupported_import_assertion_type"
    RESOLUTION = "resolution"


class ModuleGraphError(Exception):
    """A module that was referenced by the graph but failed to load."""

    def __init__(self, specifier: str, kind: ModuleErrorKind, message: str = ""):
        self.specifier = specifier
        self.kind = kind
        self.message = message or kind.value.replace("_", " ")
        super().__init__(self.message)


@dataclass
class CacheInfo:
    local: str | None = None
    emit: str | None = None
    map: str | None = None


@dataclass
class Position:
    line: int = 0
    character: int = 0


@dataclass
class Range:
    specifier: str
    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)


@dataclass
class ResolutionOk:
    specifier: str
    range: Range | None = None


@dataclass
class ResolutionErr:
    error: str
    range: Range | None = None


# None means the channel is not used by the dependency.
Resolution = Union[ResolutionOk, ResolutionErr, None]


@dataclass
class Dependency:
    specifier: str
    maybe_code: Resolution = None
    maybe_type: Resolution = None
    is_dynamic: bool = False
    assertion_type: str | None = None


@dataclass
class TypesDependency:
    specifier: str
    dependency: Resolution = None


@dataclass
class EsmModule:
    specifier: str
    media_type: MediaType = MediaType.JAVASCRIPT
    size: int = 0
    dependencies: dict[str, Dependency] = field(default_factory=dict)
    maybe_types_dependency: TypesDependency | None = None
    maybe_cache_info: CacheInfo | None = None
    kind = ModuleKind.ESM


@dataclass
class JsonModule:
    specifier: str
    media_type: MediaType = MediaType.JSON
    size: int = 0
    maybe_cache_info: CacheInfo | None = None
    kind = ModuleKind.JSON


@dataclass
class NpmModule:
    specifier: str
    nv_reference: NpmPackageNvReference
    kind = ModuleKind.NPM


@dataclass
class NodeModule:
    specifier: str
    module_name: str = ""
    kind = ModuleKind.NODE


@dataclass
class ExternalModule:
    specifier: str
    kind = ModuleKind.EXTERNAL


Module = Union[EsmModule, JsonModule, NpmModule, NodeModule, ExternalModule]


_SOURCE_MODULES = (EsmModule, JsonModule)
_REFERENCE_MODULES = (NpmModule, NodeModule, ExternalModule)


def _unknown_module(module: object) -> TypeError:
    return TypeError(f"Unknown module type: {type(module).__name__}")


def module_size(module: Module) -> int | None:
    """Byte size of a source module; package and external modules have none."""
    if isinstance(module, _SOURCE_MODULES):
        return module.size
    if isinstance(module, _REFERENCE_MODULES):
        return None
    raise _unknown_module(module)


def module_cache_info(module: Module) -> CacheInfo | None:
    if isinstance(module, _SOURCE_MODULES):
        return module.maybe_cache_info
    if isinstance(module, _REFERENCE_MODULES):
        return None
    raise _unknown_module(module)


@dataclass
class ModuleGraph:
    """A fully built module graph.

    ``modules`` holds successfully loaded modules, ``errors`` the modules that
    failed to load, and ``redirects`` maps a requested specifier to the one
    that was finally loaded.
    """

    roots: list[str] = field(default_factory=list)
    modules: dict[str, Module] = field(default_factory=dict)
    errors: dict[str, ModuleGraphError] = field(default_factory=dict)
    redirects: dict[str, str] = field(default_factory=dict)

    def resolve(self, specifier: str) -> str:
        """Follow redirects until a specifier that is not redirected."""
        seen: set[str] = set()
        current = specifier
        while current in self.redirects and current not in seen:
            seen.add(current)
            current = self.redirects[current]
        return current

    def try_get(self, specifier: str) -> Module | None:
        """Return the module at ``specifier``.

        Raises the recorded ``ModuleGraphError`` when the module failed to
        load and returns None when the graph knows nothing about it.
        """
        error = self.errors.get(specifier)
        if error is not None:
            raise error
        return self.modules.get(specifier)

    def modules_iter(self) -> Iterator[Module]:
        return iter(self.modules.values())

    @property
    def npm_packages(self) -> list[NpmPackageNv]:
        seen: set[NpmPackageNv] = set()
        result: list[NpmPackageNv] = []
        for module in self.modules.values():
            if isinstance(module, NpmModule):
                nv = module.nv_reference.nv
                if nv not in seen:
                    seen.add(nv)
                    result.append(nv)
        return result


@dataclass
class ReportConfig:
    """Options for rendering a report."""
    use_color: bool = False
    json_indent: int = 2

    @classmethod
    def from_env(cls, is_tty: bool = False) -> "ReportConfig":
        return cls(use_color=is_tty and not os.getenv("NO_COLOR"))
