"""Tests for lockkeeper.utils.helper_process.

These tests start real child processes. Each fake helper is a short
Python script run by the current interpreter.
"""

from __future__ import annotations

import shlex
import sys

import pytest

from lockkeeper.exceptions import HelperSubprocessFailed
from lockkeeper.utils.helper_process import run_helper_subprocess


def _helper(script: str) -> str:
    """Command line running ``script`` with the current interpreter."""
    return shlex.join([sys.executable, "-c", script])


ECHO_HELPER = """
import json, sys
request = json.load(sys.stdin)
print(json.dumps({"result": {"function": request["function"], "args": request["args"]}}))
"""

ERROR_HELPER = """
import json, sys
json.load(sys.stdin)
print(json.dumps({"error": "workspacesRequirePrivateProjects"}))
"""

GARBAGE_HELPER = """
import sys
sys.stdin.read()
print("Segmentation fault")
"""

CRASHING_HELPER = """
import sys
sys.stdin.read()
sys.stderr.write("fatal: something broke\\n")
sys.exit(3)
"""


@pytest.mark.integration
class TestRunHelperSubprocess:
    """Tests for run_helper_subprocess."""

    def test_returns_result(self) -> None:
        result = run_helper_subprocess(_helper(ECHO_HELPER), "parse", ["/tmp/x"])

        assert result == {"function": "parse", "args": ["/tmp/x"]}

    def test_error_payload_kept_verbatim(self) -> None:
        with pytest.raises(HelperSubprocessFailed) as exc_info:
            run_helper_subprocess(_helper(ERROR_HELPER), "parse", [])

        assert exc_info.value.message == "workspacesRequirePrivateProjects"
        assert exc_info.value.error_context["function"] == "parse"

    def test_non_json_output(self) -> None:
        with pytest.raises(HelperSubprocessFailed) as exc_info:
            run_helper_subprocess(_helper(GARBAGE_HELPER), "parse", [])

        assert exc_info.value.message == "Segmentation fault"

    def test_non_zero_exit_reports_stderr(self) -> None:
        with pytest.raises(HelperSubprocessFailed) as exc_info:
            run_helper_subprocess(_helper(CRASHING_HELPER), "parse", [])

        assert exc_info.value.message == "fatal: something broke"

    def test_missing_command(self) -> None:
        with pytest.raises(HelperSubprocessFailed, match="Failed to start helper"):
            run_helper_subprocess("lockkeeper-no-such-helper-binary", "parse", [])
