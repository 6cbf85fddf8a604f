"""Unit tests for lockkeeper.core.parser module.

These tests run complete extractions over in-memory projects. yarn.lock
parsing is always served by an injected fake; no helper process runs.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from lockkeeper.core.parser import NpmAndYarnParser
from lockkeeper.models import DependencyFile, GitSource, PrivateRegistrySource
from lockkeeper.exceptions import (
    DependencyFileNotEvaluatable,
    DependencyFileNotParseable,
    HelperSubprocessFailed,
    MissingRequiredFile,
)


def _json_file(name: str, content: Dict[str, Any]) -> DependencyFile:
    return DependencyFile(name=name, content=json.dumps(content))


def _yarn_lock() -> DependencyFile:
    return DependencyFile(name="yarn.lock", content="# yarn lockfile v1\n")


@pytest.fixture
def package_lock_project() -> List[DependencyFile]:
    """A manifest plus package-lock.json with one transitive dependency."""
    return [
        _json_file(
            "package.json",
            {
                "name": "app",
                "dependencies": {"express": "^4.17.0", "my-lib": "file:../my-lib"},
                "devDependencies": {"jest": "^29.0.0"},
            },
        ),
        _json_file(
            "package-lock.json",
            {
                "lockfileVersion": 1,
                "dependencies": {
                    "express": {
                        "version": "4.18.2",
                        "resolved": "https://registry.npmjs.org/express/-/express-4.18.2.tgz",
                    },
                    "jest": {
                        "version": "29.7.0",
                        "resolved": "https://npm.internal.example/js/jest/-/jest-29.7.0.tgz",
                    },
                    "accepts": {
                        "version": "1.3.8",
                        "resolved": "https://registry.npmjs.org/accepts/-/accepts-1.3.8.tgz",
                    },
                    "my-lib": {"version": "file:../my-lib"},
                },
            },
        ),
    ]


@pytest.mark.unit
class TestRequiredFiles:
    """Tests for required file checks."""

    def test_no_files(self) -> None:
        with pytest.raises(MissingRequiredFile):
            NpmAndYarnParser([]).parse()

    def test_only_lockfile(self) -> None:
        with pytest.raises(MissingRequiredFile):
            NpmAndYarnParser([_json_file("package-lock.json", {})]).parse()

    def test_only_path_dependency_manifest(self) -> None:
        files = [
            DependencyFile(name="lib/package.json", content="{}", type="path_dependency")
        ]

        with pytest.raises(MissingRequiredFile):
            NpmAndYarnParser(files).parse()


@pytest.mark.unit
class TestPackageLockProject:
    """Tests for extraction with package-lock.json."""

    def test_records(self, package_lock_project: List[DependencyFile]) -> None:
        records = NpmAndYarnParser(package_lock_project).parse()

        assert [(r.name, r.resolved_version) for r in records] == [
            ("express", "4.18.2"),
            ("jest", "29.7.0"),
            ("accepts", "1.3.8"),
        ]

    def test_manifest_records_carry_requirements(
        self, package_lock_project: List[DependencyFile]
    ) -> None:
        express, jest, accepts = NpmAndYarnParser(package_lock_project).parse()

        assert express.requirements[0].raw_requirement == "^4.17.0"
        assert express.requirements[0].source is None
        assert jest.requirements[0].groups == ["devDependencies"]
        assert jest.requirements[0].source == PrivateRegistrySource(
            url="https://npm.internal.example/js"
        )
        assert accepts.requirements == []

    def test_extra_central_registry(
        self, package_lock_project: List[DependencyFile]
    ) -> None:
        records = NpmAndYarnParser(
            package_lock_project,
            central_registries=("https://npm.internal.example",),
        ).parse()

        assert records[1].requirements[0].source is None

    def test_idempotent(self, package_lock_project: List[DependencyFile]) -> None:
        parser = NpmAndYarnParser(package_lock_project)

        assert parser.parse() == parser.parse()

    def test_malformed_lockfile(self) -> None:
        files = [
            _json_file("package.json", {"dependencies": {"a": "^1.0.0"}}),
            DependencyFile(name="package-lock.json", content="{oops"),
        ]

        with pytest.raises(DependencyFileNotParseable) as exc_info:
            NpmAndYarnParser(files).parse()

        assert exc_info.value.file_name == "package-lock.json"

    def test_git_dependency_in_package_lock(self) -> None:
        files = [
            _json_file("package.json", {"dependencies": {"pkg": "user/repo"}}),
            _json_file(
                "package-lock.json",
                {
                    "dependencies": {
                        "pkg": {"version": "git+https://github.com/user/repo.git#abc123"}
                    }
                },
            ),
        ]

        records = NpmAndYarnParser(files).parse()

        assert len(records) == 1
        assert records[0].resolved_version == "abc123"
        assert records[0].requirements[0].source == GitSource(
            url="https://github.com/user/repo", ref="master"
        )

    def test_flat_manifest_leaves_lockfile_records(self) -> None:
        files = [
            _json_file("package.json", {"flat": True, "dependencies": {"a": "^1.0.0"}}),
            _json_file("package-lock.json", {"dependencies": {"a": {"version": "1.0.0"}}}),
        ]

        records = NpmAndYarnParser(files).parse()

        assert [(r.name, r.requirements) for r in records] == [("a", [])]


@pytest.mark.unit
class TestMultipleManifests:
    """Tests for projects with several manifests."""

    def test_shared_dependency_merged(self) -> None:
        files = [
            _json_file("package.json", {"dependencies": {"a": "^1.0.0"}}),
            _json_file("packages/web/package.json", {"devDependencies": {"a": "^1.0.0"}}),
            _json_file("package-lock.json", {"dependencies": {"a": {"version": "1.2.0"}}}),
        ]

        records = NpmAndYarnParser(files).parse()

        assert len(records) == 1
        assert [
            (req.origin_file, req.groups) for req in records[0].requirements
        ] == [
            ("package.json", ["dependencies"]),
            ("packages/web/package.json", ["devDependencies"]),
        ]

    def test_path_dependency_manifest_ignored(self) -> None:
        files = [
            _json_file("package.json", {"dependencies": {"a": "^1.0.0"}}),
            DependencyFile(
                name="lib/package.json",
                content=json.dumps({"dependencies": {"b": "^1.0.0"}}),
                type="path_dependency",
            ),
        ]

        records = NpmAndYarnParser(files).parse()

        assert [r.name for r in records] == ["a"]


@pytest.mark.unit
class TestYarnProject:
    """Tests for extraction with yarn.lock."""

    def test_yarn_records(self) -> None:
        yarn_parser = MagicMock(
            return_value=[
                {
                    "name": "left-pad",
                    "version": "1.3.0",
                    "resolved": "https://registry.yarnpkg.com/left-pad/-/left-pad-1.3.0.tgz",
                },
                {"name": "pkg", "version": "1.2.3#abcdef"},
                {"name": "transitive", "version": "0.1.0"},
            ]
        )
        files = [
            _json_file(
                "package.json",
                {"dependencies": {"left-pad": "^1.3.0", "pkg": "user/repo#v1.2.3"}},
            ),
            _yarn_lock(),
        ]

        records = NpmAndYarnParser(files, yarn_lock_parser=yarn_parser).parse()

        assert [(r.name, r.resolved_version) for r in records] == [
            ("left-pad", "1.3.0"),
            ("pkg", "abcdef"),
            ("transitive", "0.1.0"),
        ]
        assert records[1].requirements[0].source == GitSource(
            url="https://github.com/user/repo", ref="v1.2.3"
        )

    def test_helper_runs_once_per_parse(self) -> None:
        yarn_parser = MagicMock(
            return_value=[
                {"name": "a", "version": "1.0.0"},
                {"name": "b", "version": "1.0.0"},
            ]
        )
        files = [
            _json_file("package.json", {"dependencies": {"a": "^1.0.0", "b": "^1.0.0"}}),
            _yarn_lock(),
        ]
        parser = NpmAndYarnParser(files, yarn_lock_parser=yarn_parser)

        parser.parse()
        assert yarn_parser.call_count == 1

        parser.parse()
        assert yarn_parser.call_count == 2

    def test_package_lock_wins_over_yarn_lock(self) -> None:
        yarn_parser = MagicMock(return_value=[{"name": "a", "version": "2.0.0"}])
        files = [
            _json_file("package.json", {"dependencies": {"a": "^1.0.0"}}),
            _json_file("package-lock.json", {"dependencies": {"a": {"version": "1.0.0"}}}),
            _yarn_lock(),
        ]

        records = NpmAndYarnParser(files, yarn_lock_parser=yarn_parser).parse()

        assert [(r.name, r.resolved_version, bool(r.requirements)) for r in records] == [
            ("a", "1.0.0", True),
            ("a", "2.0.0", False),
        ]

    def test_helper_receives_path_dependency_manifests(self) -> None:
        """Test yarn sees local package manifests that extraction skips."""
        staged: List[str] = []

        def yarn_parser(manifests, lockfile):
            staged.extend(m.name for m in manifests)
            return [{"name": "a", "version": "1.0.0"}]

        files = [
            _json_file("package.json", {"dependencies": {"a": "^1.0.0", "b": "file:deps/b"}}),
            DependencyFile(
                name="deps/b/package.json",
                content=json.dumps({"dependencies": {"c": "^1.0.0"}}),
                type="path_dependency",
            ),
            _yarn_lock(),
        ]

        records = NpmAndYarnParser(files, yarn_lock_parser=yarn_parser).parse()

        assert staged == ["package.json", "deps/b/package.json"]
        assert [r.name for r in records] == ["a"]

    def test_private_workspaces(self) -> None:
        yarn_parser = MagicMock(
            side_effect=HelperSubprocessFailed("workspacesRequirePrivateProjects")
        )
        files = [_json_file("package.json", {"dependencies": {"a": "^1.0.0"}}), _yarn_lock()]

        with pytest.raises(DependencyFileNotEvaluatable):
            NpmAndYarnParser(files, yarn_lock_parser=yarn_parser).parse()

    def test_unknown_helper_failure_propagates(self) -> None:
        yarn_parser = MagicMock(side_effect=HelperSubprocessFailed("boom"))
        files = [_json_file("package.json", {}), _yarn_lock()]

        with pytest.raises(HelperSubprocessFailed, match="boom"):
            NpmAndYarnParser(files, yarn_lock_parser=yarn_parser).parse()


@pytest.mark.unit
class TestResolvedVersionInvariant:
    """Tests that reported versions are always plain versions or git pins."""

    def test_no_urls_or_paths(self) -> None:
        yarn_parser = MagicMock(
            return_value=[
                {"name": "tarball", "version": "https://example.com/t.tgz"},
                {"name": "local", "version": "file:../local"},
                {"name": "aliased", "version": "1.0.0#fragment"},
                {"name": "plain", "version": "1.0.0"},
            ]
        )
        files = [
            _json_file(
                "package.json",
                {
                    "dependencies": {
                        "tarball": "^1.0.0",
                        "local": "^1.0.0",
                        "aliased": "^1.0.0",
                        "plain": "^1.0.0",
                    }
                },
            ),
            _yarn_lock(),
        ]

        records = NpmAndYarnParser(files, yarn_lock_parser=yarn_parser).parse()

        assert [r.name for r in records] == ["plain"]
        for record in records:
            assert "://" not in record.resolved_version
            assert not record.resolved_version.startswith("file:")
