"""
Dependency file data model for lockkeeper.

A :class:`DependencyFile` is the in-memory form of one manifest or
lockfile handed to the extractor. Reading files from disk is done by the
caller (see :func:`lockkeeper.utils.filesystem.collect_dependency_files`).
"""

from __future__ import annotations

from dataclasses import dataclass

from lockkeeper.constants import (
    MANIFEST_FILENAME,
    PATH_DEPENDENCY_TYPE,
)


@dataclass(frozen=True)
class DependencyFile:
    """
    A named dependency document and its raw text.

    Attributes:
        name: Path-like name relative to the project root
            (e.g. ``"packages/web/package.json"``).
        content: Raw text content.
        type: ``"file"`` for ordinary files, ``"path_dependency"`` for
            manifests of local path dependencies that must be ignored.
    """

    name: str
    content: str
    type: str = "file"

    @property
    def is_manifest(self) -> bool:
        """True for extractable ``package.json`` manifests."""
        return (
            self.name.endswith(MANIFEST_FILENAME)
            and self.type != PATH_DEPENDENCY_TYPE
        )

    def __repr__(self) -> str:
        return f"DependencyFile(name={self.name!r}, type={self.type!r})"
