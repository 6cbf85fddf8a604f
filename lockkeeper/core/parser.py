"""Dependency extraction for npm and yarn projects.

:class:`NpmAndYarnParser` runs one extraction over a project's dependency
files and returns the reconciled dependency records:

1. **Manifest pass**: every declared dependency that can be tracked,
   with the version its lockfile pins (see :mod:`lockkeeper.core.manifest`).
2. **Lockfile-only pass**: every package pinned by ``yarn.lock`` and then
   ``package-lock.json``, as a record without requirements. This surfaces
   transitive dependencies that no manifest declares.

Both passes feed one :class:`DependencySet`, so a package found by both
appears once, at its manifest position.

Typical usage::

    from lockkeeper.core import NpmAndYarnParser
    from lockkeeper.utils import collect_dependency_files

    files = collect_dependency_files("path/to/project")
    for record in NpmAndYarnParser(files).parse():
        print(record.name, record.resolved_version)

Every call to :meth:`NpmAndYarnParser.parse` starts from scratch; the only
state shared within a call is the parsed yarn.lock, so the helper runs at
most once per call.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from lockkeeper.models import DependencyFile, DependencyRecord
from lockkeeper.utils import get_logger
from lockkeeper.exceptions import MissingRequiredFile
from lockkeeper.constants import CENTRAL_REGISTRIES, MANIFEST_FILENAME
from lockkeeper.core.yarn_helper import YarnLockParser
from lockkeeper.core.manifest import ManifestExtractor
from lockkeeper.core.dependency_set import DependencySet
from lockkeeper.core.classifier import RequirementClassifier
from lockkeeper.core.lockfile import Lockfile, LockfileIndex
from lockkeeper.core.source_resolver import SourceResolver
from lockkeeper.core.version_resolver import VersionResolver, is_plain_version


class NpmAndYarnParser:
    """Reconciles manifests and lockfiles into dependency records.

    Args:
        dependency_files: Manifests and lockfiles of one project.
        yarn_lock_parser: Capability used to parse ``yarn.lock``. Defaults
            to running the yarn helper.
        central_registries: Registry URL prefixes that need no provenance
            annotation.
    """

    def __init__(
        self,
        dependency_files: Sequence[DependencyFile],
        *,
        yarn_lock_parser: Optional[YarnLockParser] = None,
        central_registries: Sequence[str] = CENTRAL_REGISTRIES,
    ) -> None:
        self.logger = get_logger("core.parser")
        self.dependency_files = list(dependency_files)
        self.yarn_lock_parser = yarn_lock_parser
        self.central_registries = tuple(central_registries)

    @property
    def manifests(self) -> List[DependencyFile]:
        return [f for f in self.dependency_files if f.is_manifest]

    def parse(self) -> List[DependencyRecord]:
        """Run one extraction and return the records in output order.

        Raises:
            MissingRequiredFile: No manifest was supplied.
            DependencyFileNotParseable: A manifest or package-lock.json is
                not valid JSON.
            DependencyFileNotEvaluatable: The yarn helper reported that
                workspaces depend on private packages.
            HelperSubprocessFailed: Any other yarn helper failure.
        """
        self.check_required_files()

        lockfiles = LockfileIndex.from_files(
            self.dependency_files,
            yarn_lock_parser=self.yarn_lock_parser,
        )
        classifier = RequirementClassifier()
        extractor = ManifestExtractor(
            self.manifests,
            lockfiles,
            classifier=classifier,
            version_resolver=VersionResolver(lockfiles, classifier),
            source_resolver=SourceResolver(
                lockfiles, classifier, central_registries=self.central_registries
            ),
        )

        dependency_set = DependencySet()
        dependency_set += extractor.extract()
        for lockfile in lockfiles.lockfiles:
            dependency_set += self.lockfile_dependencies(lockfile)

        self.logger.debug(
            "Extracted %d dependency record(s) from %d file(s)",
            len(dependency_set),
            len(self.dependency_files),
        )
        return dependency_set.records

    def check_required_files(self) -> None:
        if not self.manifests:
            raise MissingRequiredFile(MANIFEST_FILENAME)

    def lockfile_dependencies(self, lockfile: Lockfile) -> DependencySet:
        """Minimal records for every package pinned by ``lockfile``.

        Entries without a version, or whose version is a URL, path or
        fragment, are left out.
        """
        dependency_set = DependencySet()
        for entry in lockfile.entries():
            if entry.version is None or not is_plain_version(entry.version):
                continue
            # Only one version per name is surfaced
            dependency_set.add(
                DependencyRecord(name=entry.name, resolved_version=entry.version)
            )
        return dependency_set
