"""
Utility helpers for lockkeeper.

This package provides reusable utilities used across lockkeeper, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers and scratch workspaces
- Helper subprocess execution

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from lockkeeper.utils.logger import (
    get_logger,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from lockkeeper.utils.filesystem import (
    collect_dependency_files,
    safe_read_file,
    scoped_workspace,
    validate_path,
    write_workspace_file,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from lockkeeper.utils.console import (
    print_error,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Helper subprocess
# ---------------------------------------------------------------------------

from lockkeeper.utils.helper_process import run_helper_subprocess

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_warning",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    # Filesystem
    "safe_read_file",
    "validate_path",
    "scoped_workspace",
    "write_workspace_file",
    "collect_dependency_files",
    # Helper subprocess
    "run_helper_subprocess",
]
