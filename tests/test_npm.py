"""Tests for npm versions, package ids, specifier references and the snapshot."""

import pytest

from graph_report.npm import (
    MappingSizeOracle,
    NpmPackageId,
    NpmPackageNv,
    NpmPackageNvReference,
    NpmPackageReq,
    NpmPackageReqReference,
    NpmResolutionError,
    NpmResolutionPackage,
    NpmResolutionSnapshot,
    NpmSystemInfo,
    PackageReferenceParseError,
    Version,
)


def _id(text):
    return NpmPackageId.from_serialized(text)


def _package(id_text, system=None, **deps):
    return NpmResolutionPackage(
        id=_id(id_text),
        dependencies={name.replace("_", "-"): _id(dep) for name, dep in deps.items()},
        system=system or NpmSystemInfo(),
    )


# ── Versions ──────────────────────────────────────────────────

class TestVersion:
    def test_parse_and_str(self):
        version = Version.parse("1.2.3-beta.1+build.5")
        assert (version.major, version.minor, version.patch) == (1, 2, 3)
        assert version.pre == ("beta", "1")
        assert str(version) == "1.2.3-beta.1+build.5"

    def test_invalid(self):
        with pytest.raises(PackageReferenceParseError):
            Version.parse("^1.0.0")
        with pytest.raises(PackageReferenceParseError):
            Version.parse("1.0")

    def test_numeric_ordering(self):
        assert Version.parse("1.2.0") < Version.parse("1.10.0")
        assert Version.parse("2.0.0") > Version.parse("1.99.99")

    def test_prerelease_ordering(self):
        ordered = ["1.0.0-alpha", "1.0.0-alpha.1", "1.0.0-alpha.beta", "1.0.0-beta.2", "1.0.0-beta.11", "1.0.0"]
        versions = [Version.parse(v) for v in ordered]
        assert sorted(reversed(versions)) == versions

    @pytest.mark.parametrize("text", ["1.0.0-01", "1.0.0-rc.007", "1.0.0-"])
    def test_leading_zero_prerelease_rejected(self, text):
        with pytest.raises(PackageReferenceParseError):
            Version.parse(text)

    def test_alphanumeric_prerelease_with_leading_zero(self):
        version = Version.parse("1.0.0-0a.0")
        assert version.pre == ("0a", "0")

    def test_ordering_is_total(self):
        texts = ["1.0.0-1", "1.0.0-0a", "1.0.0-a", "1.0.0-rc.1", "1.0.0", "1.0.0+build"]
        versions = [Version.parse(t) for t in texts]
        for a in versions:
            for b in versions:
                assert [a < b, a == b, a > b].count(True) == 1


# ── Package ids ───────────────────────────────────────────────

class TestPackageId:
    def test_simple(self):
        package_id = _id("chalk@5.0.1")
        assert package_id.nv == NpmPackageNv("chalk", Version.parse("5.0.1"))
        assert package_id.peer_dependencies == ()
        assert package_id.as_serialized() == "chalk@5.0.1"

    def test_scoped_name(self):
        package_id = _id("@types/node@18.0.0")
        assert package_id.nv.name == "@types/node"

    def test_peer_dependencies(self):
        text = "a@1.0.0_b@2.0.0__@scope+c@3.0.0_d@4.0.0"
        package_id = _id(text)
        assert [p.nv.name for p in package_id.peer_dependencies] == ["b", "d"]
        nested = package_id.peer_dependencies[0].peer_dependencies[0]
        assert nested.nv.name == "@scope/c"
        assert package_id.as_serialized() == text

    @pytest.mark.parametrize("text", ["", "chalk", "chalk@", "chalk@x.y.z", "a@1.0.0__b@1.0.0"])
    def test_invalid(self, text):
        with pytest.raises(PackageReferenceParseError):
            _id(text)

    def test_ordering(self):
        ids = [_id("b@1.0.0"), _id("a@2.0.0"), _id("a@1.0.0_c@1.0.0"), _id("a@1.0.0")]
        assert [i.as_serialized() for i in sorted(ids)] == [
            "a@1.0.0", "a@1.0.0_c@1.0.0", "a@2.0.0", "b@1.0.0",
        ]


# ── Specifier references ──────────────────────────────────────

class TestReferences:
    def test_nv_reference(self):
        ref = NpmPackageNvReference.from_str("npm:chalk@5.0.1")
        assert str(ref.nv) == "chalk@5.0.1"
        assert ref.sub_path is None

    def test_nv_reference_scoped_with_sub_path(self):
        ref = NpmPackageNvReference.from_str("npm:@std/path@1.2.3/posix/join.js")
        assert ref.nv.name == "@std/path"
        assert str(ref.nv.version) == "1.2.3"
        assert ref.sub_path == "posix/join.js"
        assert str(ref) == "npm:@std/path@1.2.3/posix/join.js"

    def test_nv_reference_requires_exact_version(self):
        with pytest.raises(PackageReferenceParseError):
            NpmPackageNvReference.from_str("npm:chalk@^5")
        with pytest.raises(PackageReferenceParseError):
            NpmPackageNvReference.from_str("npm:chalk")

    def test_req_reference(self):
        ref = NpmPackageReqReference.from_str("npm:chalk@^5.0")
        assert ref.req == NpmPackageReq("chalk", "^5.0")

    def test_req_reference_without_version(self):
        ref = NpmPackageReqReference.from_str("npm:/preact/hooks")
        assert ref.req == NpmPackageReq("preact", None)
        assert ref.sub_path == "hooks"
        assert str(ref.req) == "preact"

    @pytest.mark.parametrize("text", ["https://deno.land/x/mod.ts", "npm:", "npm:@scope", "npm:chalk@"])
    def test_invalid_reference(self, text):
        with pytest.raises(PackageReferenceParseError):
            NpmPackageReqReference.from_str(text)

    def test_package_req_from_str(self):
        assert NpmPackageReq.from_str("@types/node@18") == NpmPackageReq("@types/node", "18")
        assert NpmPackageReq.from_str("chalk") == NpmPackageReq("chalk", None)


# ── Snapshot ──────────────────────────────────────────────────

class TestSnapshot:
    def _snapshot(self):
        chalk = _package("chalk@5.0.1", ansi_styles="ansi-styles@6.0.0")
        ansi = _package("ansi-styles@6.0.0")
        fsevents = _package("fsevents@2.3.2", system=NpmSystemInfo(os=("darwin",)))
        return NpmResolutionSnapshot(
            root_packages={chalk.id.nv: chalk.id},
            package_reqs={NpmPackageReq("chalk", "5"): chalk.id.nv},
            packages={p.id: p for p in (chalk, ansi, fsevents)},
        )

    def test_resolve_package_from_module(self):
        snapshot = self._snapshot()
        package = snapshot.resolve_package_from_module(NpmPackageNv.from_str("chalk@5.0.1"))
        assert package.dependencies == {"ansi-styles": _id("ansi-styles@6.0.0")}

    def test_resolve_non_root_fails(self):
        snapshot = self._snapshot()
        with pytest.raises(NpmResolutionError):
            snapshot.resolve_package_from_module(NpmPackageNv.from_str("ansi-styles@6.0.0"))

    def test_resolve_from_requirement(self):
        snapshot = self._snapshot()
        package = snapshot.resolve_from_requirement(NpmPackageReq("chalk", "5"))
        assert package.id == _id("chalk@5.0.1")
        with pytest.raises(NpmResolutionError):
            snapshot.resolve_from_requirement(NpmPackageReq("chalk", "4"))

    def test_package_by_id(self):
        snapshot = self._snapshot()
        assert snapshot.package_by_id(_id("ansi-styles@6.0.0")) is not None
        assert snapshot.package_by_id(_id("left-pad@1.0.0")) is None

    def test_every_system(self):
        snapshot = self._snapshot()
        names = [p.id.nv.name for p in snapshot.all_packages_for_every_system()]
        assert names == ["chalk", "ansi-styles", "fsevents"]


class TestSizeOracle:
    def test_known_and_unknown(self):
        oracle = MappingSizeOracle({"chalk@5.0.1": 2048})
        assert oracle.package_size(_id("chalk@5.0.1")) == 2048
        assert oracle.package_size(_id("ansi-styles@6.0.0")) is None
        assert len(oracle) == 1
