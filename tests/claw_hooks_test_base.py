"""Shared helpers for claw-hooks CLI tests."""

import io
import json
from typing import Any
from unittest import mock

from scripts import claw_hooks
from scripts.claw_hooks_impl import logger as log_file

from . import TempDirTestCase


class ClawHooksTestCase(TempDirTestCase):
    """Base test case with helpers for running the hook end to end."""

    def tearDown(self) -> None:
        # Release any debug log file before the temp dir is removed.
        log_file.shutdown()
        super().tearDown()

    def _run_cli(
        self, argv: list[str], stdin: str = ""
    ) -> tuple[int, str, str]:
        """Run the CLI and return (exit code, stdout, stderr)."""
        with mock.patch("sys.stdin", io.StringIO(stdin)):
            with mock.patch("sys.stdout", new_callable=io.StringIO) as mock_stdout:
                with mock.patch("sys.stderr", new_callable=io.StringIO) as mock_stderr:
                    code = claw_hooks.main(argv)
        return code, mock_stdout.getvalue(), mock_stderr.getvalue()

    def _run_hook(
        self,
        payload: dict[str, Any] | str,
        *,
        fmt: str = "claude",
        extra_args: list[str] | None = None,
    ) -> tuple[int, dict | None]:
        """Run `hook` with a payload and return (exit code, parsed output)."""
        stdin = payload if isinstance(payload, str) else json.dumps(payload)
        argv = [*(extra_args or []), "hook", "--format", fmt]
        code, stdout, _ = self._run_cli(argv, stdin)
        if stdout.strip():
            self.assertEqual(len(stdout.strip().splitlines()), 1)
            return code, json.loads(stdout)
        return code, None

    def _run_bash(self, command: str, **kwargs: Any) -> tuple[int, dict | None]:
        payload = {
            "hook_event_name": "PreToolUse",
            "tool_name": "Bash",
            "tool_input": {"command": command},
        }
        return self._run_hook(payload, **kwargs)

    def _assert_blocked(self, command: str, message_contains: str, **kwargs: Any) -> None:
        """Assert that a command is blocked with a message containing the given text."""
        code, output = self._run_bash(command, **kwargs)
        self.assertEqual(code, 2, f"Expected {command!r} to be blocked")
        assert output is not None
        self.assertEqual(output.get("decision"), "block")
        self.assertIn(message_contains, output.get("message", ""))

    def _assert_allowed(self, command: str, **kwargs: Any) -> None:
        """Assert that a command is approved."""
        code, output = self._run_bash(command, **kwargs)
        self.assertEqual(code, 0, f"Expected {command!r} to be allowed, got {output}")
        self.assertEqual(output, {"decision": "approve"})
