"""
Unified data model exports for lockkeeper.

Example:
    >>> from lockkeeper.models import DependencyFile, DependencyRecord
"""

from __future__ import annotations

from lockkeeper.models.dependency_file import DependencyFile
from lockkeeper.models.dependency import (
    DependencyRecord,
    GitSource,
    PrivateRegistrySource,
    RequirementEntry,
    SourceDescriptor,
)

__all__ = [
    "DependencyFile",
    "DependencyRecord",
    "RequirementEntry",
    "GitSource",
    "PrivateRegistrySource",
    "SourceDescriptor",
]
