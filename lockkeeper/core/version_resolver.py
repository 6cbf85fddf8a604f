"""Resolved-version lookup for declared dependencies."""

from __future__ import annotations

from typing import Optional

from lockkeeper.core.lockfile import LockfileIndex
from lockkeeper.core.classifier import RequirementClassifier
from lockkeeper.constants import LOCAL_PATH_PREFIX, SCHEME_SEPARATOR


def is_plain_version(version: str) -> bool:
    """True unless ``version`` is a URL, a local path or carries a fragment."""
    return (
        SCHEME_SEPARATOR not in version
        and LOCAL_PATH_PREFIX not in version
        and "#" not in version
    )


class VersionResolver:
    """Decides the version a lockfile pins for a declared dependency.

    Nothing is computed from a semver range alone: without a lockfile every
    dependency is unresolved.

    Args:
        lockfiles: Index over the project's lockfiles.
        classifier: Requirement classifier.
    """

    def __init__(
        self,
        lockfiles: LockfileIndex,
        classifier: Optional[RequirementClassifier] = None,
    ) -> None:
        self.lockfiles = lockfiles
        self.classifier = classifier or RequirementClassifier()

    def resolve(self, name: str, requirement: str) -> Optional[str]:
        """Return the resolved version of ``name``, or ``None``.

        For git requirements the lockfile usually stores
        ``<version>#<commit>``; the commit is what gets reported.
        """
        if not self.lockfiles.present:
            return None

        entry = self.lockfiles.lookup(name)
        if entry is None or entry.version is None:
            return None

        if self.classifier.is_git(requirement):
            return entry.version.split("#")[-1]

        if not is_plain_version(entry.version):
            return None
        return entry.version
