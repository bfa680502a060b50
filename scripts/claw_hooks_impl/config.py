"""Config loading, parsing, and validation for the filter policy."""

import re
import shlex
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_RM_MESSAGE = (
    "🚫 rm/rmdir command blocked for safety. "
    "Configure rm_block_message in config.toml to customize this message."
)
DEFAULT_KILL_MESSAGE = (
    "🚫 kill/pkill/killall command blocked for safety. "
    "Use safe-kill: safe-kill <PID>, safe-kill -N <name>, or safe-kill -p <port>."
)
DEFAULT_DD_MESSAGE = "🚫 dd command blocked for safety."
DEFAULT_HOOK_TIMEOUT = 60.0

FILE_PLACEHOLDER = "{file}"


class ConfigError(Exception):
    """Raised when config file is invalid."""


def default_config_dir() -> Path:
    return Path.home() / ".config" / "claw-hooks"


def default_config_path() -> Path:
    return default_config_dir() / "config.toml"


def _default_log_path() -> Path:
    return default_config_dir() / "logs"


@dataclass(frozen=True)
class CustomFilterRule:
    """A single custom blocking rule.

    With ``args`` unset the rule is regex-only. With ``args`` set the pattern
    must name the command and one of its arguments must be listed.
    """

    command_pattern: re.Pattern[str]
    args: tuple[str, ...] | None
    message: str


@dataclass(frozen=True)
class FilterConfig:
    """Loaded policy. Immutable for the lifetime of the process."""

    rm_block: bool = True
    rm_block_message: str = DEFAULT_RM_MESSAGE
    kill_block: bool = True
    kill_block_message: str = DEFAULT_KILL_MESSAGE
    dd_block: bool = True
    dd_block_message: str = DEFAULT_DD_MESSAGE
    debug: bool = False
    log_path: Path = field(default_factory=_default_log_path)
    hook_timeout: float = DEFAULT_HOOK_TIMEOUT
    custom_filters: tuple[CustomFilterRule, ...] = ()
    extension_hooks: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    stop_hooks: tuple[str, ...] = ()
    source: Path | None = None


@dataclass
class ValidationResult:
    """Result of config file validation."""

    errors: list[str]
    config: FilterConfig | None  # None if errors exist


def _check_template(template: Any, where: str, errors: list[str]) -> bool:
    if not isinstance(template, str):
        errors.append(f"{where}: must be a string")
        return False
    if not template.strip():
        errors.append(f"{where}: command cannot be empty")
        return False
    try:
        shlex.split(template)
    except ValueError as e:
        errors.append(f"{where}: cannot split command: {e}")
        return False
    return True


def _validate_custom_filter(
    data: Any, index: int, errors: list[str]
) -> CustomFilterRule | None:
    where = f"custom_filters[{index}]"
    if not isinstance(data, dict):
        errors.append(f"{where}: must be a table")
        return None

    start = len(errors)
    for field_name in ("command", "message"):
        if field_name not in data:
            errors.append(f"{where}: missing required field '{field_name}'")
    if len(errors) > start:
        return None

    command = data["command"]
    message = data["message"]
    args = data.get("args", [])

    pattern: re.Pattern[str] | None = None
    if not isinstance(command, str):
        errors.append(f"{where}.command: must be a string")
    elif not command:
        errors.append(f"{where}.command: cannot be empty")
    else:
        try:
            pattern = re.compile(command)
        except re.error as e:
            errors.append(f"{where}.command: invalid regex pattern '{command}': {e}")

    if not isinstance(message, str):
        errors.append(f"{where}.message: must be a string")
    elif not message:
        errors.append(f"{where}.message: cannot be empty")

    if not isinstance(args, list):
        errors.append(f"{where}.args: must be an array")
    else:
        for i, arg in enumerate(args):
            if not isinstance(arg, str):
                errors.append(f"{where}.args[{i}]: must be a string")
            elif not arg:
                errors.append(f"{where}.args[{i}]: must not be empty")

    if len(errors) > start or pattern is None:
        return None
    return CustomFilterRule(
        command_pattern=pattern,
        # An empty list means regex-only mode.
        args=tuple(dict.fromkeys(args)) or None,
        message=message,
    )


def _validate_extension_hooks(
    data: Any, errors: list[str]
) -> dict[str, tuple[str, ...]]:
    if not isinstance(data, dict):
        errors.append("extension_hooks: must be a table")
        return {}

    hooks: dict[str, tuple[str, ...]] = {}
    for ext, commands in data.items():
        where = f"extension_hooks['{ext}']"
        if not ext.startswith(".") or len(ext) < 2:
            errors.append(f"extension_hooks: key '{ext}' must start with '.'")
            continue
        if ext.lower() in hooks:
            errors.append(f"extension_hooks: duplicate key '{ext}'")
            continue
        if not isinstance(commands, list):
            errors.append(f"{where}: must be an array")
            continue
        if not commands:
            errors.append(f"{where}: commands cannot be empty")
            continue

        valid = True
        for j, cmd in enumerate(commands):
            if not _check_template(cmd, f"{where}: command[{j}]", errors):
                valid = False
            elif FILE_PLACEHOLDER not in cmd:
                errors.append(
                    f"{where}: command[{j}] must contain {FILE_PLACEHOLDER} placeholder"
                )
                valid = False
        if valid:
            hooks[ext.lower()] = tuple(commands)
    return hooks


def _validate_stop_hooks(data: Any, errors: list[str]) -> tuple[str, ...]:
    if not isinstance(data, list):
        errors.append("stop_hooks: must be an array of tables")
        return ()

    commands: list[str] = []
    for i, hook in enumerate(data):
        where = f"stop_hooks[{i}]"
        if not isinstance(hook, dict):
            errors.append(f"{where}: must be a table")
        elif "command" not in hook:
            errors.append(f"{where}: missing required field 'command'")
        elif _check_template(hook["command"], f"{where}.command", errors):
            commands.append(hook["command"])
    return tuple(commands)


def _validate_config(data: dict, source: Path | None = None) -> FilterConfig:
    """Validate a parsed TOML document and return a FilterConfig.

    Every problem is collected before raising, so one run reports them all.
    """
    errors: list[str] = []
    values: dict[str, Any] = {}

    for key in ("rm_block", "kill_block", "dd_block", "debug"):
        if key in data:
            if isinstance(data[key], bool):
                values[key] = data[key]
            else:
                errors.append(f"'{key}' must be a boolean")

    for key in ("rm_block_message", "kill_block_message", "dd_block_message"):
        if key in data:
            if not isinstance(data[key], str):
                errors.append(f"'{key}' must be a string")
            elif not data[key]:
                errors.append(f"'{key}' cannot be empty")
            else:
                values[key] = data[key]

    config_dir = source.parent if source is not None else default_config_dir()
    if "log_path" in data:
        raw = data["log_path"]
        if not isinstance(raw, str) or not raw:
            errors.append("'log_path' must be a non-empty string")
        elif "\0" in raw:
            errors.append("'log_path' contains null character")
        else:
            values["log_path"] = config_dir / Path(raw).expanduser()
    else:
        values["log_path"] = config_dir / "logs"

    if "hook_timeout" in data:
        timeout = data["hook_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            errors.append("'hook_timeout' must be a number")
        elif timeout <= 0:
            errors.append("'hook_timeout' must be positive")
        else:
            values["hook_timeout"] = float(timeout)

    filters_data = data.get("custom_filters", [])
    if not isinstance(filters_data, list):
        errors.append("custom_filters: must be an array of tables")
        filters_data = []
    rules = [_validate_custom_filter(d, i, errors) for i, d in enumerate(filters_data)]

    hooks = _validate_extension_hooks(data.get("extension_hooks", {}), errors)
    stop_hooks = _validate_stop_hooks(data.get("stop_hooks", []), errors)

    if errors:
        raise ConfigError("; ".join(errors))

    return FilterConfig(
        **values,
        custom_filters=tuple(rule for rule in rules if rule is not None),
        extension_hooks=MappingProxyType(hooks),
        stop_hooks=stop_hooks,
        source=source,
    )


def _read_toml(path: Path) -> dict:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read file: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"file is not valid UTF-8: {e}") from e

    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML: {e}") from e


def load_config(path: str | Path | None = None) -> FilterConfig:
    """Load the policy from ``path``, or from the default location.

    A missing default file means built-in defaults. A missing explicit path
    is an error, as is anything that fails validation.
    """
    if path is None:
        config_path = default_config_path()
        if not config_path.exists():
            return FilterConfig()
    else:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise ConfigError(f"config file not found: {config_path}")

    try:
        return _validate_config(_read_toml(config_path), config_path)
    except ConfigError as e:
        raise ConfigError(f"invalid configuration in {config_path}: {e}") from e


def validate_config_file(path: str | Path | None = None) -> ValidationResult:
    """Validate a config file and return result with errors and config."""
    if path is None:
        config_path = default_config_path()
        if not config_path.exists():
            return ValidationResult(errors=[], config=FilterConfig())
    else:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            return ValidationResult(errors=[f"file not found: {path}"], config=None)

    try:
        config = _validate_config(_read_toml(config_path), config_path)
    except ConfigError as e:
        return ValidationResult(errors=[str(e)], config=None)
    return ValidationResult(errors=[], config=config)


_DEFAULT_CONFIG_CONTENT = """\
# claw-hooks configuration file

# Enable blocking of rm/rmdir/del/erase commands (default: true)
rm_block = true
# Custom message for rm blocking (recommended: point at a safer alternative)
rm_block_message = "🚫 Use safe-rm instead: safe-rm <file> (validates Git status and path containment). Only clean/ignored files in project allowed."

# Enable blocking of kill/pkill/killall/taskkill commands (default: true)
kill_block = true
# Custom message for kill blocking
kill_block_message = "🚫 Use safe-kill instead: safe-kill <PID>, safe-kill -N <name> (pkill-style), or safe-kill -p <port>. Use -s <signal> for signal."

# Enable blocking of dd command (default: true)
dd_block = true
# Custom message for dd blocking
dd_block_message = "🚫 dd command blocked for safety."

# Enable debug logging to file (default: false)
debug = false

# Path to log directory (default: logs/ next to this file)
# log_path = "~/.config/claw-hooks/logs"

# Seconds to wait for each extension or stop hook command (default: 60)
# hook_timeout = 60

# Custom command filters
# Regex mode: `command` is a regular expression matched against the command line
# [[custom_filters]]
# command = "python"
# message = "⚠️ Use `uv` instead of `python`"

# [[custom_filters]]
# command = "yarn"
# message = "⚠️ Use `pnpm` instead of `yarn`"

# Args mode: `command` names the program, `args` lists blocked arguments
# [[custom_filters]]
# command = "npm"
# args = ["install", "i", "add"]
# message = "⚠️ Use `pnpm` instead of `npm`"

# Extension-based hooks
# Run external tools when files with these extensions are written.
# Every command must contain the {file} placeholder.
# [extension_hooks]
# ".rs" = ["rustfmt {file}"]
# ".go" = ["gofmt -w {file}", "golangci-lint run {file}"]
# ".py" = ["ruff format {file}", "ruff check --fix {file}"]
# ".ts" = ["biome format --write {file}", "biome lint --write {file}"]

# Stop hooks
# Run commands when the agent loop ends (notifications, sounds, cleanup)
# [[stop_hooks]]
# command = "afplay /System/Library/Sounds/Glass.aiff"  # macOS notification sound

# [[stop_hooks]]
# command = "notify-send 'Agent completed'"  # Linux notification
"""


def default_config_content() -> str:
    """Return the commented default config written by ``init``."""
    return _DEFAULT_CONFIG_CONTENT


def write_default_config(path: str | Path | None = None, *, force: bool = False) -> Path:
    """Write the default config file, creating parent directories."""
    config_path = Path(path).expanduser() if path is not None else default_config_path()
    if config_path.exists() and not force:
        raise ConfigError(
            f"config file already exists: {config_path} (use --force to overwrite)"
        )

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(default_config_content(), encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot write config file {config_path}: {e}") from e
    return config_path
