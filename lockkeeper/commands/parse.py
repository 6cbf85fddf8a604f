"""Parse command implementation for lockkeeper.

Reads the ``package.json`` manifests and root lockfiles of a project and
prints the reconciled dependency records.

Typical usage::

    # Table of every dependency
    $ lockkeeper parse path/to/project

    # Machine-readable JSON output
    $ lockkeeper parse --format json > dependencies.json
"""

from __future__ import annotations

import sys
import json
import click
from pathlib import Path
from typing import List, Tuple

from lockkeeper.config import LockKeeperConfig
from lockkeeper.core import HelperYarnLockParser, NpmAndYarnParser
from lockkeeper.exceptions import LockKeeperError
from lockkeeper.models import DependencyRecord
from lockkeeper.context import pass_context, LockKeeperContext
from lockkeeper.utils import (
    collect_dependency_files,
    get_logger,
    print_error,
    print_table,
    print_warning,
)

logger = get_logger("commands.parse")

_HEADERS = ("Package", "Version", "Requirement", "Groups", "Source")
_TRANSITIVE = "transitive"


@click.command()
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def parse(ctx: LockKeeperContext, directory: Path, format: str) -> None:
    """Reconcile manifests and lockfiles in DIRECTORY.

    Exits 0 on success and 1 if the dependency files cannot be evaluated.
    """
    config = ctx.config or LockKeeperConfig()

    try:
        files = collect_dependency_files(directory)
        logger.info("Found %d dependency file(s) in %s", len(files), directory)

        parser = NpmAndYarnParser(
            files,
            yarn_lock_parser=HelperYarnLockParser(config.yarn_helper_command),
            central_registries=config.central_registries,
        )
        records = parser.parse()
    except LockKeeperError as e:
        print_error(f"{e}")
        logger.debug("Parse failed", exc_info=True)
        sys.exit(1)

    if format.lower() == "json":
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    _display_table(records)


def _display_table(records: List[DependencyRecord]) -> None:
    if not records:
        print_warning("No dependencies found")
        return

    print_table(
        [_row(record) for record in records],
        headers=_HEADERS,
        title="Dependencies",
        caption=f"{len(records)} dependency record(s)",
        column_styles={"Package": "package"},
        muted=lambda row: row[3] == _TRANSITIVE,
    )


def _row(record: DependencyRecord) -> Tuple[str, ...]:
    requirements = record.requirements
    sources = {req.source.url for req in requirements if req.source}
    groups = sorted({group for req in requirements for group in req.groups})

    return (
        record.name,
        record.resolved_version or "-",
        ", ".join(req.raw_requirement for req in requirements) or "-",
        ", ".join(groups) or _TRANSITIVE,
        ", ".join(sorted(sources)) or "-",
    )
