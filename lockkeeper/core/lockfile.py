"""Lockfile lookup.

npm and yarn record resolved versions in structurally different files:

- ``package-lock.json`` is JSON with a nested ``dependencies`` mapping
  keyed by package name (``{name: {version, resolved, ...}}``). Lockfile
  version 3 drops that mapping in favour of ``packages``, keyed by install
  path (``node_modules/<name>``).
- ``yarn.lock`` has its own text format. The yarn helper turns it into a
  flat list of ``{name, version, resolved}`` entries, one per distinct
  name and version.

Both are wrapped in a :class:`Lockfile` variant offering the same
``lookup(name)`` contract, and :class:`LockfileIndex` combines whichever
are present. Only one version per name is ever reported; a lockfile that
pins several versions of a package for different consumers is
approximated by its first entry.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from lockkeeper.models import DependencyFile
from lockkeeper.utils import get_logger
from lockkeeper.core.yarn_helper import HelperYarnLockParser, YarnLockParser
from lockkeeper.exceptions import (
    DependencyFileNotEvaluatable,
    DependencyFileNotParseable,
    HelperSubprocessFailed,
)
from lockkeeper.constants import (
    MANIFEST_FILENAME,
    PACKAGE_LOCK_FILENAME,
    WORKSPACES_REQUIRE_PRIVATE_PROJECTS,
    YARN_LOCK_FILENAME,
)

logger = get_logger("core.lockfile")

_NODE_MODULES_PREFIX = "node_modules/"


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


@dataclass(frozen=True)
class LockfileEntry:
    """
    A resolved package as recorded in a lockfile.

    Attributes:
        name: Package name.
        version: Recorded version string. For git-sourced packages this
            may carry a ``#<commit>`` suffix or be a full URL.
        resolved: URL the package was fetched from.
    """

    name: str
    version: Optional[str] = None
    resolved: Optional[str] = None

    @classmethod
    def from_mapping(cls, name: str, details: Mapping[str, Any]) -> "LockfileEntry":
        return cls(
            name=name,
            version=_optional_str(details.get("version")),
            resolved=_optional_str(details.get("resolved")),
        )


class Lockfile(ABC):
    """A lockfile variant exposing name-keyed lookup.

    Args:
        file: The lockfile document.
    """

    def __init__(self, file: DependencyFile) -> None:
        self.file = file
        self._by_name: Optional[Dict[str, LockfileEntry]] = None

    @abstractmethod
    def _load_entries(self) -> List[LockfileEntry]:
        """Decode the lockfile into entries, in file order."""

    def entries(self) -> List[LockfileEntry]:
        """All entries, first entry per name, in file order."""
        return list(self._index().values())

    def lookup(self, name: str) -> Optional[LockfileEntry]:
        """Entry recorded for ``name``, or ``None``."""
        return self._index().get(name)

    def _index(self) -> Dict[str, LockfileEntry]:
        if self._by_name is None:
            by_name: Dict[str, LockfileEntry] = {}
            for entry in self._load_entries():
                by_name.setdefault(entry.name, entry)
            self._by_name = by_name
            logger.debug("Indexed %d package(s) from %s", len(by_name), self.file.name)
        return self._by_name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(file={self.file.name!r})"


class PackageLockfile(Lockfile):
    """``package-lock.json``: a nested mapping decoded directly from JSON."""

    def _load_entries(self) -> List[LockfileEntry]:
        try:
            parsed = json.loads(self.file.content)
        except ValueError as exc:
            raise DependencyFileNotParseable(self.file.name, str(exc)) from exc

        if not isinstance(parsed, dict):
            raise DependencyFileNotParseable(self.file.name, "expected a JSON object")

        dependencies = parsed.get("dependencies")
        if isinstance(dependencies, dict):
            return [
                LockfileEntry.from_mapping(name, details)
                for name, details in dependencies.items()
                if isinstance(details, dict)
            ]

        packages = parsed.get("packages")
        if isinstance(packages, dict):
            return list(self._top_level_packages(packages))

        return []

    @staticmethod
    def _top_level_packages(packages: Mapping[str, Any]) -> Iterable[LockfileEntry]:
        """Entries installed directly under the root ``node_modules``."""
        for path, details in packages.items():
            if not path.startswith(_NODE_MODULES_PREFIX) or not isinstance(details, dict):
                continue
            name = path[len(_NODE_MODULES_PREFIX) :]
            if f"/{_NODE_MODULES_PREFIX}" in f"/{name}":
                continue
            yield LockfileEntry.from_mapping(name, details)


class YarnLockfile(Lockfile):
    """``yarn.lock``: a flat entry list produced by a yarn.lock parser.

    The parser runs at most once per instance.

    Args:
        file: The ``yarn.lock`` document.
        manifests: Every package.json staged alongside the lockfile,
            path dependencies included.
        parser: Capability that parses the lockfile.
    """

    def __init__(
        self,
        file: DependencyFile,
        manifests: Sequence[DependencyFile],
        parser: YarnLockParser,
    ) -> None:
        super().__init__(file)
        self.manifests = list(manifests)
        self.parser = parser

    def _load_entries(self) -> List[LockfileEntry]:
        try:
            parsed = self.parser(self.manifests, self.file)
        except HelperSubprocessFailed as exc:
            if exc.message != WORKSPACES_REQUIRE_PRIVATE_PROJECTS:
                raise
            raise DependencyFileNotEvaluatable(exc.message) from exc

        if not isinstance(parsed, list):
            raise DependencyFileNotParseable(
                self.file.name, "yarn.lock parser did not return a list"
            )

        return [
            LockfileEntry.from_mapping(details["name"], details)
            for details in parsed
            if isinstance(details, dict) and _optional_str(details.get("name"))
        ]


class LockfileIndex:
    """Name-keyed lookup over every lockfile of a project.

    ``package-lock.json`` takes priority over ``yarn.lock`` when both
    record a package.

    Args:
        package_lock: Wrapped ``package-lock.json``, if any.
        yarn_lock: Wrapped ``yarn.lock``, if any.
    """

    def __init__(
        self,
        package_lock: Optional[PackageLockfile] = None,
        yarn_lock: Optional[YarnLockfile] = None,
    ) -> None:
        self.package_lock = package_lock
        self.yarn_lock = yarn_lock

    @classmethod
    def from_files(
        cls,
        files: Sequence[DependencyFile],
        *,
        yarn_lock_parser: Optional[YarnLockParser] = None,
    ) -> "LockfileIndex":
        """Build an index from the lockfiles found in ``files``."""
        by_name = {f.name: f for f in files}
        # Includes path dependency manifests
        manifests = [f for f in files if f.name.endswith(MANIFEST_FILENAME)]

        package_lock_file = by_name.get(PACKAGE_LOCK_FILENAME)
        yarn_lock_file = by_name.get(YARN_LOCK_FILENAME)

        return cls(
            package_lock=(
                PackageLockfile(package_lock_file) if package_lock_file else None
            ),
            yarn_lock=(
                YarnLockfile(
                    yarn_lock_file,
                    manifests,
                    yarn_lock_parser or HelperYarnLockParser(),
                )
                if yarn_lock_file
                else None
            ),
        )

    @property
    def present(self) -> bool:
        """True if at least one lockfile exists."""
        return self.package_lock is not None or self.yarn_lock is not None

    @property
    def lockfiles(self) -> List[Lockfile]:
        """Present lockfiles, yarn.lock first."""
        return [lf for lf in (self.yarn_lock, self.package_lock) if lf is not None]

    def lookup(self, name: str) -> Optional[LockfileEntry]:
        """Entry for ``name`` from the highest-priority lockfile recording it."""
        for lockfile in (self.package_lock, self.yarn_lock):
            if lockfile is None:
                continue
            entry = lockfile.lookup(name)
            if entry is not None:
                return entry
        return None

    def __repr__(self) -> str:
        return f"LockfileIndex(lockfiles={self.lockfiles!r})"
