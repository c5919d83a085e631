"""npm package identities, package ids and npm: specifier references."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field

# numeric pre-release identifiers may not have leading zeros
_PRE_IDENT = r"(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"

_VERSION_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<pre>{_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

NPM_SCHEME = "npm:"


class PackageReferenceParseError(ValueError):
    """Raised when an npm specifier, package id or version cannot be parsed."""


@functools.total_ordering
@dataclass(frozen=True)
class Version:
    """A semver version, ordered by semver precedence."""
    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Version:
        m = _VERSION_RE.match(text.strip())
        if not m:
            raise PackageReferenceParseError(f"Invalid version: {text!r}")
        pre = m.group("pre")
        build = m.group("build")
        return cls(
            major=int(m.group("major")),
            minor=int(m.group("minor")),
            patch=int(m.group("patch")),
            pre=tuple(pre.split(".")) if pre else (),
            build=tuple(build.split(".")) if build else (),
        )

    def _key(self) -> tuple:
        if self.pre:
            pre_key = (0, tuple(
                (0, int(part), "") if part.isdigit() else (1, 0, part)
                for part in self.pre
            ))
        else:
            # a release sorts after all of its pre-releases
            pre_key = (1, ())
        return (self.major, self.minor, self.patch, pre_key, self.build)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def _split_name(text: str) -> tuple[str, str]:
    """Split ``name@rest`` on the version separator, honouring @scope/ names."""
    start = 1 if text.startswith("@") else 0
    idx = text.find("@", start)
    if idx == -1:
        return text, ""
    return text[:idx], text[idx + 1:]


@dataclass(frozen=True, order=True)
class NpmPackageNv:
    """A package name and exact version."""
    name: str
    version: Version

    @classmethod
    def from_str(cls, text: str) -> NpmPackageNv:
        name, version = _split_name(text.strip())
        if not name or not version:
            raise PackageReferenceParseError(f"Invalid package name and version: {text!r}")
        return cls(name=name, version=Version.parse(version))

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True)
class NpmPackageReq:
    """A package name with an unresolved version requirement."""
    name: str
    version_req: str | None = None

    @classmethod
    def from_str(cls, text: str) -> NpmPackageReq:
        name, req = _split_name(text.strip())
        if not name:
            raise PackageReferenceParseError(f"Invalid package requirement: {text!r}")
        return cls(name=name, version_req=req.strip() or None)

    def __str__(self) -> str:
        if self.version_req is None:
            return self.name
        return f"{self.name}@{self.version_req}"


@dataclass(frozen=True, order=True)
class NpmPackageId:
    """A resolved package, qualified by the peer dependencies it was resolved with."""
    nv: NpmPackageNv
    peer_dependencies: tuple[NpmPackageId, ...] = ()

    def as_serialized(self) -> str:
        return self._serialize(0)

    def _serialize(self, level: int) -> str:
        name = self.nv.name if level == 0 else self.nv.name.replace("/", "+")
        result = f"{name}@{self.nv.version}"
        for peer in self.peer_dependencies:
            result += "_" * (level + 1) + peer._serialize(level + 1)
        return result

    @classmethod
    def from_serialized(cls, text: str) -> NpmPackageId:
        parser = _IdParser(text)
        package_id = parser.parse(0)
        if parser.pos != len(text):
            raise PackageReferenceParseError(f"Invalid package id: {text!r}")
        return package_id

    def __str__(self) -> str:
        return self.as_serialized()


class _IdParser:
    """Recursive descent over ``name@version_peer@version__nested@version``."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _fail(self) -> PackageReferenceParseError:
        return PackageReferenceParseError(f"Invalid package id: {self.text!r}")

    def parse(self, level: int) -> NpmPackageId:
        text = self.text
        start = self.pos
        name_end = text.find("@", start + 1 if text.startswith("@", start) else start)
        if name_end <= start:
            raise self._fail()
        name = text[start:name_end]
        if level > 0:
            name = name.replace("+", "/")

        version_end = name_end + 1
        while version_end < len(text) and text[version_end] != "_":
            version_end += 1
        try:
            version = Version.parse(text[name_end + 1:version_end])
        except PackageReferenceParseError:
            raise self._fail() from None
        self.pos = version_end

        peers: list[NpmPackageId] = []
        while self.pos < len(text):
            count = 0
            while self.pos + count < len(text) and text[self.pos + count] == "_":
                count += 1
            if count < level + 1:
                break
            if count > level + 1:
                raise self._fail()
            self.pos += count
            peers.append(self.parse(level + 1))

        return NpmPackageId(NpmPackageNv(name, version), tuple(peers))


def _parse_npm_specifier(specifier: str) -> tuple[str, str | None, str | None]:
    """Split ``npm:[/]<name>[@<version>][/<sub_path>]`` into its parts."""
    if not specifier.startswith(NPM_SCHEME):
        raise PackageReferenceParseError(f"Not an npm specifier: {specifier!r}")
    text = specifier[len(NPM_SCHEME):]
    if text.startswith("/"):
        text = text[1:]

    if text.startswith("@"):
        slash = text.find("/")
        if slash == -1:
            raise PackageReferenceParseError(f"Invalid scoped package name: {specifier!r}")
        name_start = slash + 1
    else:
        name_start = 0
    end = len(text)
    for sep in ("@", "/"):
        idx = text.find(sep, name_start)
        if idx != -1:
            end = min(end, idx)
    name = text[:end]
    if not name or name.endswith("/"):
        raise PackageReferenceParseError(f"Invalid package name: {specifier!r}")

    rest = text[end:]
    version = None
    if rest.startswith("@"):
        slash = rest.find("/")
        version = rest[1:] if slash == -1 else rest[1:slash]
        rest = "" if slash == -1 else rest[slash:]
        if not version:
            raise PackageReferenceParseError(f"Empty version in {specifier!r}")
    sub_path = rest[1:] if rest.startswith("/") and len(rest) > 1 else None
    return name, version, sub_path


@dataclass(frozen=True)
class NpmPackageNvReference:
    """An ``npm:`` specifier pinned to an exact version."""
    nv: NpmPackageNv
    sub_path: str | None = None

    @classmethod
    def from_str(cls, specifier: str) -> NpmPackageNvReference:
        name, version, sub_path = _parse_npm_specifier(specifier)
        if version is None:
            raise PackageReferenceParseError(f"Missing version in {specifier!r}")
        return cls(NpmPackageNv(name, Version.parse(version)), sub_path)

    def __str__(self) -> str:
        text = f"{NPM_SCHEME}{self.nv}"
        return f"{text}/{self.sub_path}" if self.sub_path else text


@dataclass(frozen=True)
class NpmPackageReqReference:
    """An ``npm:`` specifier carrying a version requirement."""
    req: NpmPackageReq
    sub_path: str | None = None

    @classmethod
    def from_str(cls, specifier: str) -> NpmPackageReqReference:
        name, version, sub_path = _parse_npm_specifier(specifier)
        return cls(NpmPackageReq(name, version), sub_path)

    def __str__(self) -> str:
        text = f"{NPM_SCHEME}{self.req}"
        return f"{text}/{self.sub_path}" if self.sub_path else text


@dataclass(frozen=True)
class NpmSystemInfo:
    """Platforms a package variant is installable on (empty means any)."""
    os: tuple[str, ...] = ()
    cpu: tuple[str, ...] = ()


@dataclass
class NpmResolutionPackage:
    """A resolved package and the ids its dependencies resolved to."""
    id: NpmPackageId
    dependencies: dict[str, NpmPackageId] = field(default_factory=dict)
    system: NpmSystemInfo = field(default_factory=NpmSystemInfo)
