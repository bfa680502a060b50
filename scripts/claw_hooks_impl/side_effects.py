"""Formatter and notification commands run after writes and on stop.

Commands are split with shlex and run without a shell, one at a time.
Failures are logged and never change the hook decision.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import PurePath
from types import MappingProxyType
from typing import Mapping

from .config import DEFAULT_HOOK_TIMEOUT, FILE_PLACEHOLDER
from .model import HookEvent, PostWrite, Stop
from .shell import ParsedCommand

logger = logging.getLogger(__name__)

_UNSAFE_PATH_CHARS = frozenset("`$|&;\n\r\0")


class ExternalCommandError(Exception):
    """Raised when a hook command cannot be run or exits non-zero."""


def run_command(argv: list[str], *, timeout: float) -> subprocess.CompletedProcess:
    """Run ``argv`` to completion, raising ExternalCommandError on failure."""
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise ExternalCommandError(f"{argv[0]}: timed out after {timeout}s") from e
    except OSError as e:
        raise ExternalCommandError(f"{argv[0]}: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        message = f"{argv[0]}: exited with status {result.returncode}"
        if detail:
            message = f"{message}: {detail.splitlines()[-1]}"
        raise ExternalCommandError(message)
    return result


def unsafe_path_reason(file_path: str) -> str | None:
    """Return why ``file_path`` must not reach a command line, or None."""
    if not file_path:
        return "empty path"
    if file_path.startswith("-"):
        return "path starts with '-'"
    if ".." in PurePath(file_path).parts:
        return "path contains '..'"
    bad = sorted(_UNSAFE_PATH_CHARS.intersection(file_path))
    if bad:
        return f"path contains forbidden characters {bad!r}"
    return None


def expand_template(template: str, file_path: str | None = None) -> list[str]:
    """Split a command template and substitute ``{file}`` in every token."""
    argv = shlex.split(template)
    if file_path is None:
        return argv
    return [token.replace(FILE_PLACEHOLDER, file_path) for token in argv]


def _run_all(commands: list[list[str]], timeout: float) -> list[str]:
    failures: list[str] = []
    for argv in commands:
        if not argv:
            continue
        logger.debug("running %s", shlex.join(argv))
        try:
            run_command(argv, timeout=timeout)
        except ExternalCommandError as e:
            logger.warning("hook command failed: %s", e)
            failures.append(str(e))
    return failures


@dataclass(frozen=True)
class ExtensionFilter:
    """Runs the commands configured for a written file's extension."""

    hooks: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    timeout: float = DEFAULT_HOOK_TIMEOUT

    def commands_for(self, file_path: str) -> tuple[str, ...]:
        suffix = PurePath(file_path).suffix.lower()
        if not suffix:
            return ()
        return self.hooks.get(suffix, ())

    def on_file_event(self, file_path: str) -> list[str]:
        """Run the hooks for ``file_path`` and return the failures."""
        templates = self.commands_for(file_path)
        if not templates:
            return []

        reason = unsafe_path_reason(file_path)
        if reason is not None:
            logger.warning("refusing to run extension hooks for %r: %s", file_path, reason)
            return [reason]

        commands = [expand_template(template, file_path) for template in templates]
        return _run_all(commands, self.timeout)

    def evaluate(self, event: HookEvent, parsed: ParsedCommand | None = None) -> None:
        if isinstance(event, PostWrite):
            self.on_file_event(event.file_path)
        return None


@dataclass(frozen=True)
class StopFilter:
    """Runs the configured stop commands when the agent loop ends."""

    commands: tuple[str, ...] = ()
    timeout: float = DEFAULT_HOOK_TIMEOUT

    def on_stop(self) -> list[str]:
        return _run_all([expand_template(c) for c in self.commands], self.timeout)

    def evaluate(self, event: HookEvent, parsed: ParsedCommand | None = None) -> None:
        if isinstance(event, Stop):
            self.on_stop()
        return None
