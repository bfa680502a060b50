#!/usr/bin/env python3
"""claw-hooks command line.

Subcommands:
  hook (alias run)  read one agent event on stdin, print a decision
  init              write the commented default config
  check             validate the config and print a report
  version           print the version

Exit codes: 0 approve or success, 2 block, 1 any error.
"""

import argparse
import logging
import sys
from typing import NoReturn, Sequence

try:
    from scripts import verify_config
    from scripts.claw_hooks_impl import __version__
    from scripts.claw_hooks_impl import logger as log_file
    from scripts.claw_hooks_impl.adapter import FORMATS, FormatError
    from scripts.claw_hooks_impl.config import (
        ConfigError,
        load_config,
        write_default_config,
    )
    from scripts.claw_hooks_impl.hook import run_hook
    from scripts.claw_hooks_impl.model import EXIT_ERROR
except ImportError:  # When executed as a script from the scripts/ directory.
    import verify_config  # type: ignore[no-redef]
    from claw_hooks_impl import __version__  # type: ignore[no-redef]
    from claw_hooks_impl import logger as log_file  # type: ignore[no-redef]
    from claw_hooks_impl.adapter import FORMATS, FormatError  # type: ignore[no-redef]
    from claw_hooks_impl.config import (  # type: ignore[no-redef]
        ConfigError,
        load_config,
        write_default_config,
    )
    from claw_hooks_impl.hook import run_hook  # type: ignore[no-redef]
    from claw_hooks_impl.model import EXIT_ERROR  # type: ignore[no-redef]

logger = logging.getLogger(__name__)

_GLOBAL_DEFAULTS = {"config": None, "debug": False, "quiet": False}


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit 1 so they are never read as a block (exit 2)."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_ERROR, f"{self.prog}: error: {message}\n")


def _global_options() -> argparse.ArgumentParser:
    # Accepted both before and after the subcommand.
    common = _ArgumentParser(add_help=False)
    common.add_argument(
        "-c",
        "--config",
        default=argparse.SUPPRESS,
        help="config file (default: ~/.config/claw-hooks/config.toml)",
    )
    common.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS,
        help="write a debug log regardless of the config",
    )
    common.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS,
        help="suppress informational output",
    )
    return common


def _cmd_hook(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    if config.debug or args.debug:
        try:
            log_file.init(config)
        except OSError as e:
            # The decision must still be made without the log file.
            print(f"claw-hooks: warning: debug log disabled: {e}", file=sys.stderr)
    return run_hook(config, args.format)


def _cmd_init(args: argparse.Namespace) -> int:
    path = write_default_config(args.path or args.config, force=args.force)
    if not args.quiet:
        print(f"Created config file: {path}")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    return verify_config.main(args.config)


def _cmd_version(args: argparse.Namespace) -> int:
    print(f"claw-hooks {__version__}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = _global_options()
    parser = _ArgumentParser(
        prog="claw-hooks",
        description="Allow/block decisions and side-effect hooks for coding agents.",
        parents=[common],
    )
    subparsers = parser.add_subparsers(
        dest="command", required=True, parser_class=_ArgumentParser
    )

    hook_parser = subparsers.add_parser(
        "hook",
        aliases=["run"],
        parents=[common],
        help="process one hook event from stdin",
    )
    hook_parser.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default="claude",
        help="input format of the calling agent (default: claude)",
    )
    hook_parser.set_defaults(handler=_cmd_hook)

    init_parser = subparsers.add_parser(
        "init", parents=[common], help="write the default config file"
    )
    init_parser.add_argument("-p", "--path", help="where to write the config file")
    init_parser.add_argument(
        "--force", action="store_true", help="overwrite an existing file"
    )
    init_parser.set_defaults(handler=_cmd_init)

    check_parser = subparsers.add_parser(
        "check", parents=[common], help="validate the config file"
    )
    check_parser.set_defaults(handler=_cmd_check)

    version_parser = subparsers.add_parser(
        "version", parents=[common], help="print the version"
    )
    version_parser.set_defaults(handler=_cmd_version)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    for name, default in _GLOBAL_DEFAULTS.items():
        if not hasattr(args, name):
            setattr(args, name, default)
    try:
        return args.handler(args)
    except ConfigError as e:
        print(f"claw-hooks: config error: {e}", file=sys.stderr)
    except FormatError as e:
        print(f"claw-hooks: {e}", file=sys.stderr)
    except UnicodeDecodeError as e:
        print(f"claw-hooks: input is not valid UTF-8: {e}", file=sys.stderr)
    except OSError as e:
        print(f"claw-hooks: {e}", file=sys.stderr)
    logger.debug("exiting with error status")
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
