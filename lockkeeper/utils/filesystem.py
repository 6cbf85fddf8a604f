"""
Filesystem utilities for lockkeeper.

This module provides safe helpers for reading dependency files from a
project directory and for staging files in a short-lived scratch
workspace. All filesystem errors are normalized to ``FileOperationError``.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from contextlib import contextmanager
from typing import Iterator, List, Optional, Union

from lockkeeper.utils.logger import get_logger
from lockkeeper.models import DependencyFile
from lockkeeper.exceptions import FileOperationError
from lockkeeper.constants import (
    IGNORED_DIRECTORIES,
    MANIFEST_FILENAME,
    MAX_FILE_SIZE,
    PACKAGE_LOCK_FILENAME,
    YARN_LOCK_FILENAME,
)


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Validate and resolve an existing file path."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except Exception as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def validate_path(
    path: PathLike,
    *,
    base_dir: Optional[PathLike] = None,
) -> Path:
    """Resolve and validate a filesystem path.

    If ``base_dir`` is provided, the resolved path must be within it.
    """
    resolved = Path(path).expanduser().resolve(strict=False)

    if base_dir:
        base = Path(base_dir).resolve(strict=False)
        try:
            resolved.relative_to(base)
        except ValueError:
            raise FileOperationError(
                f"Path outside allowed base directory: {resolved}",
                file_path=str(path),
                operation="validate",
            )

    return resolved


# ---------------------------------------------------------------------------
# Scratch workspace
# ---------------------------------------------------------------------------


@contextmanager
def scoped_workspace(prefix: str = "lockkeeper-") -> Iterator[Path]:
    """Yield a fresh temporary directory, removed on every exit path.

    Example::

        with scoped_workspace() as root:
            write_workspace_file(root, "yarn.lock", content)
    """
    root = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug("Created workspace %s", root)
    try:
        yield root
    finally:
        shutil.rmtree(root, ignore_errors=True)
        logger.debug("Removed workspace %s", root)


def write_workspace_file(root: Path, name: str, content: str) -> Path:
    """Write ``content`` to ``root / name``, creating parent directories.

    Raises:
        FileOperationError: ``name`` escapes the workspace or the write
            fails.
    """
    target = validate_path(root / name, base_dir=root)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FileOperationError(
            f"Failed to write workspace file: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc

    return target


# ---------------------------------------------------------------------------
# Dependency file discovery
# ---------------------------------------------------------------------------


def _is_ignored(path: Path, root: Path) -> bool:
    return any(part in IGNORED_DIRECTORIES for part in path.relative_to(root).parts)


def collect_dependency_files(directory: PathLike = ".") -> List[DependencyFile]:
    """Load the manifests and root lockfiles of a project.

    Every ``package.json`` below ``directory`` (outside ``node_modules``)
    is loaded, followed by ``package-lock.json`` and ``yarn.lock`` from the
    project root when present. Names are POSIX paths relative to the root.

    Args:
        directory: Project root.

    Returns:
        Dependency files, root manifest first.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        raise FileOperationError(
            f"Not a directory: {root}",
            file_path=str(root),
            operation="collect",
        )

    manifests = sorted(
        (p for p in root.rglob(MANIFEST_FILENAME) if not _is_ignored(p, root)),
        key=lambda p: (len(p.relative_to(root).parts), p.as_posix()),
    )

    files: List[DependencyFile] = []
    for path in manifests:
        name = path.relative_to(root).as_posix()
        files.append(DependencyFile(name=name, content=safe_read_file(path)))

    for lockfile_name in (PACKAGE_LOCK_FILENAME, YARN_LOCK_FILENAME):
        path = root / lockfile_name
        if path.is_file():
            files.append(
                DependencyFile(name=lockfile_name, content=safe_read_file(path))
            )

    logger.debug("Collected %d dependency file(s) from %s", len(files), root)
    return files
