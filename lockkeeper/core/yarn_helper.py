"""yarn.lock parsing through the yarn helper program.

``yarn.lock`` is not JSON or YAML, and the only faithful reader is yarn
itself. :class:`HelperYarnLockParser` stages the project's manifests and
lockfile in a scratch workspace and asks the helper to parse them.

Anything callable with the same signature can stand in for it; tests pass
a plain function returning canned entries.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional, Sequence

from lockkeeper.models import DependencyFile
from lockkeeper.utils import (
    get_logger,
    run_helper_subprocess,
    scoped_workspace,
    write_workspace_file,
)
from lockkeeper.constants import (
    DEFAULT_YARN_HELPER_COMMAND,
    TEMPLATE_PLACEHOLDER_REPLACEMENT,
    YARN_HELPER_PARSE_FUNCTION,
    YARN_LOCK_FILENAME,
)

logger = get_logger("core.yarn_helper")

#: Capability that turns manifests plus a yarn.lock into flat entries
#: (``{"name", "version", "resolved", ...}`` mappings).
YarnLockParser = Callable[[Sequence[DependencyFile], DependencyFile], List[Dict[str, Any]]]

_TEMPLATE_PLACEHOLDER_RE = re.compile(r"\{\{.*\}\}")


def sanitize_manifest_content(content: str) -> str:
    """Make a real-world ``package.json`` acceptable to the helper.

    ``{{ name }}`` templating placeholders become a neutral literal and
    backslash-escaped spaces are unescaped.
    """
    content = _TEMPLATE_PLACEHOLDER_RE.sub(TEMPLATE_PLACEHOLDER_REPLACEMENT, content)
    return content.replace("\\ ", " ")


class HelperYarnLockParser:
    """Parses yarn.lock files by running the yarn helper.

    Args:
        command: Command line that starts the helper.
    """

    def __init__(self, command: Optional[str] = None) -> None:
        self.command = command or DEFAULT_YARN_HELPER_COMMAND

    def __call__(
        self,
        manifests: Sequence[DependencyFile],
        lockfile: DependencyFile,
    ) -> List[Dict[str, Any]]:
        with scoped_workspace() as root:
            for manifest in manifests:
                write_workspace_file(
                    root, manifest.name, sanitize_manifest_content(manifest.content)
                )
            write_workspace_file(root, YARN_LOCK_FILENAME, lockfile.content)

            logger.info("Parsing %s with %s", lockfile.name, self.command)
            return run_helper_subprocess(
                self.command,
                YARN_HELPER_PARSE_FUNCTION,
                [str(root)],
            )

    def __repr__(self) -> str:
        return f"HelperYarnLockParser(command={self.command!r})"
