"""
Terminal output for the lockkeeper CLI, rendered with Rich.

Only commands print through this module. Library code reports through
:mod:`lockkeeper.utils.logger` instead.
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

LOCKKEEPER_THEME = Theme(
    {
        "error": "bold red",
        "warning": "bold yellow",
        "package": "bold",
        "muted": "dim",
    }
)


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


@lru_cache(maxsize=None)
def _get_console() -> Console:
    """Shared console, built on first use from the current environment."""
    use_color = _should_use_color()
    return Console(theme=LOCKKEEPER_THEME, no_color=not use_color, highlight=use_color)


def reconfigure_console() -> None:
    """Drop the shared console so the next print sees a changed NO_COLOR."""
    _get_console.cache_clear()


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _get_console().print(f"{prefix} {message}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_console().print(f"{prefix} {message}", style="warning")


def print_table(
    rows: Iterable[Sequence[Any]],
    *,
    headers: Sequence[str],
    title: Optional[str] = None,
    caption: Optional[str] = None,
    column_styles: Optional[Mapping[str, str]] = None,
    muted: Optional[Callable[[Sequence[Any]], bool]] = None,
) -> None:
    """Render rows as a table.

    Args:
        rows: Cell values, one sequence per row, in ``headers`` order.
        headers: Column headers.
        title: Optional title above the table.
        caption: Optional caption below the table.
        column_styles: Theme style per header name. Styled columns never wrap.
        muted: Predicate selecting rows drawn in the ``muted`` style.
    """
    column_styles = column_styles or {}
    table = Table(title=title, caption=caption, header_style="bold")

    for header in headers:
        style = column_styles.get(header)
        table.add_column(header, style=style, no_wrap=style is not None, overflow="fold")

    for row in rows:
        cells = ["" if value is None else str(value) for value in row]
        table.add_row(*cells, style="muted" if muted and muted(row) else None)

    _get_console().print(table)
