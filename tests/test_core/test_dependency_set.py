"""Unit tests for lockkeeper.core.dependency_set module."""

from __future__ import annotations

import pytest

from lockkeeper.core.dependency_set import DependencySet
from lockkeeper.models import DependencyRecord, RequirementEntry


def _entry(file: str = "package.json", group: str = "dependencies") -> RequirementEntry:
    return RequirementEntry(raw_requirement="^1.0.0", origin_file=file, groups=[group])


@pytest.mark.unit
class TestDependencySet:
    """Tests for DependencySet accumulation."""

    def test_empty(self) -> None:
        deps = DependencySet()

        assert len(deps) == 0
        assert deps.records == []

    def test_preserves_insertion_order(self) -> None:
        deps = DependencySet(
            [
                DependencyRecord(name="b", resolved_version="1.0.0"),
                DependencyRecord(name="a", resolved_version="1.0.0"),
                DependencyRecord(name="c", resolved_version="1.0.0"),
            ]
        )

        assert [r.name for r in deps] == ["b", "a", "c"]

    def test_same_key_added_once(self) -> None:
        deps = DependencySet()
        deps.add(DependencyRecord(name="a", resolved_version="1.0.0"))
        deps.add(DependencyRecord(name="a", resolved_version="1.0.0"))

        assert len(deps) == 1

    def test_different_versions_are_distinct(self) -> None:
        deps = DependencySet()
        deps.add(DependencyRecord(name="a", resolved_version="1.0.0"))
        deps.add(DependencyRecord(name="a", resolved_version="2.0.0"))

        assert [r.resolved_version for r in deps] == ["1.0.0", "2.0.0"]

    def test_merges_requirements_in_place(self) -> None:
        deps = DependencySet()
        deps.add(DependencyRecord(name="a", resolved_version="1.0.0", requirements=[_entry()]))
        deps.add(DependencyRecord(name="b", resolved_version="1.0.0"))
        deps.add(
            DependencyRecord(
                name="a",
                resolved_version="1.0.0",
                requirements=[_entry(file="packages/x/package.json")],
            )
        )

        assert [r.name for r in deps] == ["a", "b"]
        merged = deps.get("a", "1.0.0")
        assert [req.origin_file for req in merged.requirements] == [
            "package.json",
            "packages/x/package.json",
        ]

    def test_identical_requirements_not_duplicated(self) -> None:
        deps = DependencySet()
        deps.add(DependencyRecord(name="a", resolved_version="1.0.0", requirements=[_entry()]))
        deps.add(DependencyRecord(name="a", resolved_version="1.0.0", requirements=[_entry()]))

        assert len(deps.get("a", "1.0.0").requirements) == 1

    def test_lockfile_record_does_not_replace_manifest_record(self) -> None:
        deps = DependencySet()
        deps.add(DependencyRecord(name="a", resolved_version="1.0.0", requirements=[_entry()]))
        deps.add(DependencyRecord(name="a", resolved_version="1.0.0"))

        assert deps.get("a", "1.0.0").requirements == [_entry()]

    def test_does_not_mutate_added_record(self) -> None:
        first = DependencyRecord(name="a", resolved_version="1.0.0", requirements=[_entry()])
        deps = DependencySet([first])

        deps.add(
            DependencyRecord(
                name="a",
                resolved_version="1.0.0",
                requirements=[_entry(group="devDependencies")],
            )
        )

        assert len(first.requirements) == 1

    def test_iadd(self) -> None:
        deps = DependencySet([DependencyRecord(name="a")])
        other = DependencySet([DependencyRecord(name="b"), DependencyRecord(name="a")])

        deps += other

        assert [r.name for r in deps] == ["a", "b"]

    def test_contains(self) -> None:
        deps = DependencySet([DependencyRecord(name="a", resolved_version="1.0.0")])

        assert DependencyRecord(name="a", resolved_version="1.0.0") in deps
        assert DependencyRecord(name="a", resolved_version="2.0.0") not in deps
        assert "a" not in deps
