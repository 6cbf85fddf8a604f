"""
Dependency record data model for lockkeeper.

This module defines the canonical output of an extraction run: one
:class:`DependencyRecord` per ``(name, resolved_version)`` pair, each
carrying the manifest requirements that declared it and, where relevant,
where it is fetched from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from lockkeeper.constants import ECOSYSTEM


@dataclass(frozen=True)
class GitSource:
    """
    Provenance of a dependency fetched from a git repository.

    Attributes:
        url: Repository URL (``https://github.com/{username}/{repo}``).
        ref: Branch, tag or commit to check out.
        branch: Always ``None``; kept for consumers that expect the key.
    """

    url: str
    ref: str
    branch: Optional[str] = None

    @property
    def type(self) -> str:
        return "git"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "url": self.url,
            "branch": self.branch,
            "ref": self.ref,
        }


@dataclass(frozen=True)
class PrivateRegistrySource:
    """
    Provenance of a dependency fetched from a non-central registry.

    Attributes:
        url: Registry base URL, never the tarball URL.
    """

    url: str

    @property
    def type(self) -> str:
        return "private_registry"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "url": self.url}


SourceDescriptor = Union[GitSource, PrivateRegistrySource]


@dataclass
class RequirementEntry:
    """
    One declaration of a dependency in one manifest.

    Attributes:
        raw_requirement: Effective requirement string (semver range, the
            ``#semver:`` pin of a git dependency, or the git requirement).
        origin_file: Name of the manifest that declared it.
        groups: Dependency buckets it was declared under.
        source: Provenance, or ``None`` for the central registry.
    """

    raw_requirement: str
    origin_file: str
    groups: List[str] = field(default_factory=list)
    source: Optional[SourceDescriptor] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requirement": self.raw_requirement,
            "file": self.origin_file,
            "groups": list(self.groups),
            "source": self.source.to_dict() if self.source else None,
        }


@dataclass
class DependencyRecord:
    """
    A dependency reconciled from manifests and lockfiles.

    Attributes:
        name: Package name as declared (``@scope/name`` included).
        resolved_version: Version pinned by a lockfile, or ``None`` when
            no lockfile is available.
        requirements: Manifest declarations; empty for dependencies known
            only from a lockfile.
        ecosystem: Package manager family, always ``"npm_and_yarn"``.
    """

    name: str
    resolved_version: Optional[str] = None
    requirements: List[RequirementEntry] = field(default_factory=list)
    ecosystem: str = ECOSYSTEM

    @property
    def key(self) -> Tuple[str, Optional[str]]:
        """Identity of the record within a dependency set."""
        return (self.name, self.resolved_version)

    @property
    def is_top_level(self) -> bool:
        """True when at least one manifest declares the dependency."""
        return bool(self.requirements)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.resolved_version,
            "package_manager": self.ecosystem,
            "requirements": [req.to_dict() for req in self.requirements],
        }

    def __repr__(self) -> str:
        return (
            "DependencyRecord("
            f"name={self.name!r}, "
            f"resolved_version={self.resolved_version!r}, "
            f"requirements={len(self.requirements)}"
            ")"
        )
