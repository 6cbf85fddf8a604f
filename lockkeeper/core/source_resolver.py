"""Provenance of declared dependencies.

A dependency either comes from the central npm registry (no annotation), a
git repository, or a private registry. For private registries the
descriptor carries the registry base URL so that later stages can query
the same registry; the tarball URL itself is never exposed.
"""

from __future__ import annotations

from typing import Optional, Sequence

from lockkeeper.core.lockfile import LockfileIndex
from lockkeeper.core.classifier import RequirementClassifier
from lockkeeper.utils import get_logger
from lockkeeper.constants import CENTRAL_REGISTRIES, SCOPED_TARBALL_MARKER
from lockkeeper.models import GitSource, PrivateRegistrySource, SourceDescriptor

logger = get_logger("core.source_resolver")


def registry_base_url(name: str, resolved_url: str) -> str:
    """Derive a registry base URL from a resolved tarball URL.

    Tried in order:

    1. Everything before ``/~/`` (scoped tarball layout).
    2. Everything before ``/<name>/-/`` (standard tarball layout), which
       keeps any path prefix the registry is mounted under. Scoped names
       may appear with an encoded slash (``@scope%2fpkg``).
    3. Scheme and host only.

    Example::

        >>> registry_base_url("foo", "https://reg.example/npm/foo/-/foo-1.0.0.tgz")
        'https://reg.example/npm'
    """
    if SCOPED_TARBALL_MARKER in resolved_url:
        return resolved_url.split(SCOPED_TARBALL_MARKER)[0]

    lowered = resolved_url.lower()
    for spelling in (name, name.replace("/", "%2f")):
        marker = f"/{spelling.lower()}/-/"
        index = lowered.find(marker)
        if index > 0:
            base = resolved_url[:index]
            # Only accept a marker found after the host
            if base.count("/") >= 2:
                return base

    return "/".join(resolved_url.split("/")[0:3])


class SourceResolver:
    """Decides provenance metadata for declared dependencies.

    Args:
        lockfiles: Index over the project's lockfiles.
        classifier: Requirement classifier.
        central_registries: URL prefixes that need no annotation.
    """

    def __init__(
        self,
        lockfiles: LockfileIndex,
        classifier: Optional[RequirementClassifier] = None,
        central_registries: Sequence[str] = CENTRAL_REGISTRIES,
    ) -> None:
        self.lockfiles = lockfiles
        self.classifier = classifier or RequirementClassifier()
        self.central_registries = tuple(central_registries)

    def resolve(self, name: str, requirement: str) -> Optional[SourceDescriptor]:
        """Return where ``name`` is fetched from, or ``None`` for the default."""
        reference = self.classifier.git_reference(requirement)
        if reference is not None:
            # A #semver: pin keeps the default ref; the range is surfaced
            # as the requirement instead.
            return GitSource(url=reference.url, ref=reference.effective_ref)

        entry = self.lockfiles.lookup(name)
        resolved_url = entry.resolved if entry else None
        if not resolved_url:
            return None

        if any(resolved_url.startswith(url) for url in self.central_registries):
            return None

        url = registry_base_url(name, resolved_url)
        logger.debug("%s resolved from private registry %s", name, url)
        return PrivateRegistrySource(url=url)
