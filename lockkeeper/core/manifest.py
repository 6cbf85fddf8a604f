"""Extraction of declared dependencies from ``package.json`` manifests.

For every manifest and every dependency bucket, each ``name: requirement``
pair becomes a :class:`DependencyRecord` with one requirement entry,
unless it is something lockkeeper cannot track:

- local paths (``file:../lib``) and non-git URLs (tarballs);
- pairs a lockfile cannot account for, when a lockfile exists;
- everything in a manifest using ``"flat": true`` resolution.

These are left out quietly; they are expected, not errors.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple

from lockkeeper.models import DependencyFile, DependencyRecord, RequirementEntry
from lockkeeper.utils import get_logger
from lockkeeper.constants import DEPENDENCY_TYPES
from lockkeeper.exceptions import DependencyFileNotParseable
from lockkeeper.core.lockfile import LockfileIndex
from lockkeeper.core.dependency_set import DependencySet
from lockkeeper.core.classifier import RequirementClassifier
from lockkeeper.core.source_resolver import SourceResolver
from lockkeeper.core.version_resolver import VersionResolver

logger = get_logger("core.manifest")


def load_manifest(file: DependencyFile) -> Dict[str, Any]:
    """Decode a manifest, raising :exc:`DependencyFileNotParseable`."""
    try:
        parsed = json.loads(file.content)
    except ValueError as exc:
        raise DependencyFileNotParseable(file.name, str(exc)) from exc

    if not isinstance(parsed, dict):
        raise DependencyFileNotParseable(file.name, "expected a JSON object")
    return parsed


class ManifestExtractor:
    """Walks manifests and produces requirement-bearing records.

    Args:
        manifests: Manifest documents, in extraction order.
        lockfiles: Index over the project's lockfiles.
        version_resolver: Resolver for lockfile versions.
        source_resolver: Resolver for provenance.
        classifier: Requirement classifier.
    """

    def __init__(
        self,
        manifests: Sequence[DependencyFile],
        lockfiles: LockfileIndex,
        *,
        version_resolver: Optional[VersionResolver] = None,
        source_resolver: Optional[SourceResolver] = None,
        classifier: Optional[RequirementClassifier] = None,
    ) -> None:
        self.manifests = list(manifests)
        self.lockfiles = lockfiles
        self.classifier = classifier or RequirementClassifier()
        self.version_resolver = version_resolver or VersionResolver(
            lockfiles, self.classifier
        )
        self.source_resolver = source_resolver or SourceResolver(
            lockfiles, self.classifier
        )

    def extract(self) -> DependencySet:
        """Return the records declared across all manifests."""
        dependency_set = DependencySet()

        for file in self.manifests:
            manifest = load_manifest(file)

            # Flat resolution is not supported downstream
            if manifest.get("flat"):
                logger.info("Skipping %s: flat dependency resolution", file.name)
                continue

            for group, name, requirement in self._declarations(file, manifest):
                record = self.build_record(file, group, name, requirement)
                if record is not None:
                    dependency_set.add(record)

        return dependency_set

    def build_record(
        self,
        file: DependencyFile,
        group: str,
        name: str,
        requirement: str,
    ) -> Optional[DependencyRecord]:
        """Build the record for one declaration, or ``None`` to drop it."""
        requirement = self.classifier.normalize(requirement)
        kind = self.classifier.classify(requirement)

        if not kind.trackable:
            logger.debug("Ignoring %s (%s): %s requirement", name, requirement, kind.value)
            return None

        version = self.version_resolver.resolve(name, requirement)
        if self.lockfiles.present and version is None:
            logger.debug("Ignoring %s (%s): not resolvable from lockfile", name, requirement)
            return None

        return DependencyRecord(
            name=name,
            resolved_version=version,
            requirements=[
                RequirementEntry(
                    raw_requirement=self._effective_requirement(requirement),
                    origin_file=file.name,
                    groups=[group],
                    source=self.source_resolver.resolve(name, requirement),
                )
            ],
        )

    def _effective_requirement(self, requirement: str) -> str:
        """The ``#semver:`` pin of a git requirement, else the requirement."""
        reference = self.classifier.git_reference(requirement)
        if reference is not None and reference.semver:
            return reference.semver
        return requirement

    @staticmethod
    def _declarations(
        file: DependencyFile,
        manifest: Dict[str, Any],
    ) -> Iterator[Tuple[str, str, str]]:
        for group in DEPENDENCY_TYPES:
            declared = manifest.get(group) or {}
            if not isinstance(declared, dict):
                logger.debug("Ignoring %s in %s: not a mapping", group, file.name)
                continue

            for name, requirement in declared.items():
                if not name or not isinstance(requirement, str):
                    logger.debug("Ignoring malformed %s entry %r in %s", group, name, file.name)
                    continue
                yield group, name, requirement
