"""
lockkeeper: npm and yarn dependency reconciliation

lockkeeper reads a JavaScript project's ``package.json`` manifests together
with its ``package-lock.json`` and/or ``yarn.lock`` and produces one
canonical list of dependency records: declared requirement, dependency
group, resolved version and provenance (git repository or private
registry). The records are meant for update-planning tools.

Example:
    >>> from lockkeeper import DependencyFile, NpmAndYarnParser
    >>> files = [DependencyFile("package.json", '{"dependencies": {"a": "^1.0.0"}}')]
    >>> NpmAndYarnParser(files).parse()
    [DependencyRecord(name='a', resolved_version=None, requirements=1)]
"""

from __future__ import annotations

from lockkeeper.__version__ import __version__
from lockkeeper.core import NpmAndYarnParser
from lockkeeper.models import DependencyFile, DependencyRecord, RequirementEntry

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "lockkeeper Contributors"
__license__ = "Apache-2.0"
__description__ = "Reconcile npm/yarn manifests with their lockfiles."

__all__ = [
    "__version__",
    "NpmAndYarnParser",
    "DependencyFile",
    "DependencyRecord",
    "RequirementEntry",
]
