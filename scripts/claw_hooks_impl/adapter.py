"""Translate agent-specific hook payloads into hook events."""

import json
from typing import Any, Callable

from .model import HookEvent, PostWrite, PreBash, Stop, Unsupported

FORMATS = ("claude", "cursor", "windsurf")

WRITE_TOOLS = frozenset({"Write", "Edit", "MultiEdit"})


class FormatError(ValueError):
    """Raised when hook input is not valid JSON."""


def _string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def adapt_claude(data: dict) -> HookEvent:
    event = data.get("hook_event_name")
    if event == "Stop":
        return Stop()

    tool_name = data.get("tool_name")
    tool_input = data.get("tool_input")
    if not isinstance(tool_input, dict):
        return Unsupported(f"claude {event}: missing tool_input")

    if event == "PreToolUse" and tool_name == "Bash":
        command = _string(tool_input.get("command"))
        if command is not None:
            return PreBash(command)
    elif event == "PostToolUse" and tool_name in WRITE_TOOLS:
        file_path = _string(tool_input.get("file_path"))
        if file_path is not None:
            return PostWrite(file_path)
    return Unsupported(f"claude {event} {tool_name}")


def adapt_cursor(data: dict) -> HookEvent:
    # Cursor sends one flat object per hook type; the keys tell them apart.
    command = _string(data.get("command"))
    if command is not None:
        return PreBash(command)
    file_path = _string(data.get("file_path")) or _string(data.get("filePath"))
    if file_path is not None:
        return PostWrite(file_path)
    if "status" in data:
        return Stop()
    return Unsupported("cursor: unrecognized payload")


def adapt_windsurf(data: dict) -> HookEvent:
    action = data.get("agent_action_name")
    if action == "post_cascade_response":
        return Stop()

    tool_info = data.get("tool_info")
    if not isinstance(tool_info, dict):
        return Unsupported(f"windsurf {action}: missing tool_info")

    if action == "pre_run_command":
        command = _string(tool_info.get("command_line"))
        if command is not None:
            return PreBash(command)
    elif action == "post_write_code":
        file_path = _string(tool_info.get("file_path"))
        if file_path is not None:
            return PostWrite(file_path)
    return Unsupported(f"windsurf {action}")


_ADAPTERS: dict[str, Callable[[dict], HookEvent]] = {
    "claude": adapt_claude,
    "cursor": adapt_cursor,
    "windsurf": adapt_windsurf,
}


def adapt(fmt: str, raw_json: str) -> HookEvent:
    """Parse ``raw_json`` sent by the ``fmt`` agent into a HookEvent.

    Raises FormatError only when the input is not JSON at all. Shapes that
    are not recognized become ``Unsupported`` so the agent is never blocked
    by an event it did not expect to be judged.
    """
    if fmt not in _ADAPTERS:
        raise FormatError(f"unknown format: {fmt!r}")
    try:
        data = json.loads(raw_json)
    except json.JSONDecodeError as e:
        raise FormatError(f"invalid JSON input: {e}") from e

    if not isinstance(data, dict):
        return Unsupported(f"{fmt}: input is not a JSON object")
    return _ADAPTERS[fmt](data)
