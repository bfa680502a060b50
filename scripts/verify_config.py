#!/usr/bin/env python3
"""Verify the claw-hooks config file and print a report."""

import sys
from pathlib import Path

try:
    from scripts.claw_hooks_impl.config import (
        FilterConfig,
        ValidationResult,
        default_config_path,
        validate_config_file,
    )
except ImportError:  # When executed as a script from the scripts/ directory.
    from claw_hooks_impl.config import (  # type: ignore[no-redef]
        FilterConfig,
        ValidationResult,
        default_config_path,
        validate_config_file,
    )

_HEADER = "Claw Hooks Config"
_SEPARATOR = "═" * len(_HEADER)


def _print_header() -> None:
    print(_HEADER)
    print(_SEPARATOR)


def _on_off(enabled: bool) -> str:
    return "on" if enabled else "off"


def _print_valid_config(path: Path, config: FilterConfig) -> None:
    print(f"\n✓ Config: {path}")
    print(
        f"  Built-in filters: rm={_on_off(config.rm_block)} "
        f"kill={_on_off(config.kill_block)} dd={_on_off(config.dd_block)}"
    )
    if config.custom_filters:
        print("  Custom filters:")
        for i, rule in enumerate(config.custom_filters, 1):
            line = f"    {i}. {rule.command_pattern.pattern}"
            if rule.args is not None:
                line += f" [{', '.join(rule.args)}]"
            print(line)
    else:
        print("  Custom filters: (none)")
    if config.extension_hooks:
        print("  Extension hooks:")
        for ext, commands in sorted(config.extension_hooks.items()):
            print(f"    {ext}: {len(commands)} command(s)")
    else:
        print("  Extension hooks: (none)")
    print(f"  Stop hooks: {len(config.stop_hooks) or '(none)'}")
    print(f"  Debug log: {config.log_path if config.debug else 'off'}")


def _print_invalid_config(path: Path, errors: list[str]) -> None:
    print(f"\n✗ Config: {path}", file=sys.stderr)
    print("  Errors:", file=sys.stderr)
    error_num = 1
    for error in errors:
        for part in error.split("; "):
            print(f"    {error_num}. {part}", file=sys.stderr)
            error_num += 1


def main(path: str | Path | None = None) -> int:
    """Verify the config file and print results."""
    _print_header()

    config_path = Path(path).expanduser() if path is not None else default_config_path()
    result: ValidationResult = validate_config_file(path)

    if result.errors:
        _print_invalid_config(config_path, result.errors)
        print("\nConfig validation failed.", file=sys.stderr)
        return 1

    if result.config is None or result.config.source is None:
        print(f"\nNo config file found at {config_path}. Using built-in defaults.")
        return 0

    _print_valid_config(config_path, result.config)
    print("\nConfig valid.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))
