"""Hook runner: one event in on stdin, one decision out on stdout.

Exit behavior:
  - Exit 0 with {"decision":"approve"} = allow
  - Exit 2 with {"decision":"block","message":...} = block
Errors (invalid JSON, unreadable stdin) propagate to the caller, which
reports them and exits 1 without writing a decision.
"""

import logging
import sys
from typing import TextIO

from .adapter import adapt
from .chain import FilterChain
from .config import FilterConfig
from .logger import redact_secrets
from .model import Block, exit_code, to_output

logger = logging.getLogger(__name__)

_MAX_LOGGED_INPUT = 2000


def _excerpt(text: str) -> str:
    text = redact_secrets(text)
    if len(text) > _MAX_LOGGED_INPUT:
        text = text[:_MAX_LOGGED_INPUT] + "…"
    return text


def run_hook(
    config: FilterConfig,
    fmt: str,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Process a single hook event and return the process exit code."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    raw = stdin.read()
    logger.debug("%s input: %s", fmt, _excerpt(raw))

    event = adapt(fmt, raw)
    logger.debug("event: %s", _excerpt(repr(event)))

    decision = FilterChain.from_config(config).evaluate(event)
    if isinstance(decision, Block):
        logger.info("block: %s", _excerpt(raw))
    else:
        logger.debug("approve")

    print(to_output(decision), file=stdout)
    stdout.flush()
    return exit_code(decision)
