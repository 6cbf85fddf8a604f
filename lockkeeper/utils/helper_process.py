"""
Helper subprocess execution for lockkeeper.

Some lockfile formats can only be read faithfully by their own package
manager. lockkeeper delegates those to a small helper program that speaks
a JSON protocol:

- request (stdin):  ``{"function": "<name>", "args": [...]}``
- success (stdout): ``{"result": <any JSON value>}``
- failure (stdout): ``{"error": "<message>"}``

Calls block until the helper exits. They are neither retried nor
cancelled.
"""

from __future__ import annotations

import json
import shlex
import subprocess
from typing import Any, Dict, Mapping, Optional, Sequence

from lockkeeper.utils.logger import get_logger
from lockkeeper.exceptions import HelperSubprocessFailed

logger = get_logger("helper_process")


def run_helper_subprocess(
    command: str,
    function: str,
    args: Sequence[Any],
    *,
    env: Optional[Mapping[str, str]] = None,
) -> Any:
    """Run a helper function and return its decoded result.

    Args:
        command: Shell-style command line that starts the helper.
        function: Helper function to invoke.
        args: JSON-serializable positional arguments.
        env: Optional environment for the helper process.

    Returns:
        The ``result`` value reported by the helper.

    Raises:
        HelperSubprocessFailed: The helper could not be started, reported
            an error, exited non-zero, or printed something that is not a
            JSON response. ``message`` carries the helper's own error text
            when there is one.
    """
    error_context: Dict[str, Any] = {
        "command": command,
        "function": function,
        "args": list(args),
    }
    payload = json.dumps({"function": function, "args": list(args)})

    logger.debug("Running helper %s (%s)", command, function)
    try:
        completed = subprocess.run(
            shlex.split(command),
            input=payload,
            capture_output=True,
            text=True,
            env=dict(env) if env is not None else None,
            check=False,
        )
    except OSError as exc:
        raise HelperSubprocessFailed(
            f"Failed to start helper: {exc}",
            error_context=error_context,
        ) from exc

    try:
        response = json.loads(completed.stdout)
    except json.JSONDecodeError as exc:
        output = completed.stdout.strip() or completed.stderr.strip()
        raise HelperSubprocessFailed(
            output or f"Helper exited with status {completed.returncode}",
            error_context=error_context,
        ) from exc

    if isinstance(response, dict) and "error" in response:
        raise HelperSubprocessFailed(
            str(response["error"]),
            error_context=error_context,
        )

    if completed.returncode != 0 or not isinstance(response, dict):
        raise HelperSubprocessFailed(
            completed.stderr.strip()
            or f"Helper exited with status {completed.returncode}",
            error_context=error_context,
        )

    return response.get("result")
