"""Requirement classification.

Every manifest requirement falls into exactly one :class:`RequirementKind`.
Local paths and non-git URLs cannot be tracked against a registry, so the
extractor leaves them out of its output.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from lockkeeper.core.git_reference import GitReference, GitReferenceParser
from lockkeeper.constants import (
    LOCAL_PATH_PREFIX,
    SCHEME_SEPARATOR,
    WILDCARD_REQUIREMENT,
)


class RequirementKind(str, Enum):
    """Shape of a manifest requirement."""

    LOCAL_PATH = "local_path"
    URL_NON_GIT = "url_non_git"
    GIT = "git"
    SEMVER = "semver"

    @property
    def trackable(self) -> bool:
        return self not in (RequirementKind.LOCAL_PATH, RequirementKind.URL_NON_GIT)


class RequirementClassifier:
    """Categorizes raw requirement strings.

    Args:
        git_parser: Parser used to recognize git requirements.
    """

    def __init__(self, git_parser: Optional[GitReferenceParser] = None) -> None:
        self.git_parser = git_parser or GitReferenceParser()

    @staticmethod
    def normalize(requirement: str) -> str:
        """Return ``"*"`` for an empty requirement, the input otherwise."""
        return requirement if requirement != "" else WILDCARD_REQUIREMENT

    def classify(self, requirement: str) -> RequirementKind:
        """Classify ``requirement`` after normalization."""
        requirement = self.normalize(requirement)

        if requirement.startswith(LOCAL_PATH_PREFIX):
            return RequirementKind.LOCAL_PATH
        if self.git_parser.matches(requirement):
            return RequirementKind.GIT
        if SCHEME_SEPARATOR in requirement:
            return RequirementKind.URL_NON_GIT
        return RequirementKind.SEMVER

    def is_git(self, requirement: str) -> bool:
        return self.classify(requirement) is RequirementKind.GIT

    def is_trackable(self, requirement: str) -> bool:
        return self.classify(requirement).trackable

    def git_reference(self, requirement: str) -> Optional[GitReference]:
        """Git captures for a GIT requirement, ``None`` for anything else."""
        if not self.is_git(requirement):
            return None
        return self.git_parser.parse(self.normalize(requirement))
