"""
Executable module for lockkeeper.

Running:
    python -m lockkeeper

is equivalent to:
    lockkeeper
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entrypoint when executing `python -m lockkeeper`.

    Returns:
        Exit code returned by the CLI.
    """
    # Import lazily so CLI dependencies are only loaded here
    from lockkeeper.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
