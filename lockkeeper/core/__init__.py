"""
Core functionality exports for lockkeeper.

Importing from here keeps user-facing imports clean and stable:

    from lockkeeper.core import NpmAndYarnParser
"""

from __future__ import annotations

from lockkeeper.core.parser import NpmAndYarnParser
from lockkeeper.core.dependency_set import DependencySet
from lockkeeper.core.manifest import ManifestExtractor
from lockkeeper.core.source_resolver import SourceResolver
from lockkeeper.core.version_resolver import VersionResolver
from lockkeeper.core.git_reference import GitReference, GitReferenceParser
from lockkeeper.core.classifier import RequirementClassifier, RequirementKind
from lockkeeper.core.yarn_helper import HelperYarnLockParser, YarnLockParser
from lockkeeper.core.lockfile import (
    Lockfile,
    LockfileEntry,
    LockfileIndex,
    PackageLockfile,
    YarnLockfile,
)

__all__ = [
    "NpmAndYarnParser",
    "DependencySet",
    "ManifestExtractor",
    "VersionResolver",
    "SourceResolver",
    "GitReference",
    "GitReferenceParser",
    "RequirementClassifier",
    "RequirementKind",
    "Lockfile",
    "LockfileEntry",
    "LockfileIndex",
    "PackageLockfile",
    "YarnLockfile",
    "HelperYarnLockParser",
    "YarnLockParser",
]
