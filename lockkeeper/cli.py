"""
Command-line interface for lockkeeper.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from lockkeeper.config import load_config
from lockkeeper.__version__ import __version__
from lockkeeper.context import LockKeeperContext
from lockkeeper.exceptions import ConfigError, LockKeeperError
from lockkeeper.utils.logger import get_logger, setup_logging
from lockkeeper.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="LOCKKEEPER_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="LOCKKEEPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="lockkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """lockkeeper: reconcile package.json manifests with their lockfiles.

    \b
    Available commands:
      lockkeeper parse             List reconciled dependencies

    \b
    Examples:
      lockkeeper parse
      lockkeeper parse path/to/project --format json
      lockkeeper -v parse
    """
    _configure_logging(verbose)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    lockkeeper_ctx = LockKeeperContext()
    lockkeeper_ctx.config_path = config or loaded_config.source_path
    lockkeeper_ctx.color = color
    lockkeeper_ctx.verbose = verbose
    lockkeeper_ctx.config = loaded_config
    ctx.obj = lockkeeper_ctx

    logger.debug("lockkeeper v%s", __version__)
    logger.debug("Config path: %s", lockkeeper_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


from lockkeeper.commands.parse import parse  # noqa: E402

cli.add_command(parse)


def main() -> int:
    """Main entry point for the lockkeeper CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except LockKeeperError as exc:
        print_error(str(exc))
        logger.debug(
            "LockKeeperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
