"""Hook events and decisions."""

import json
from dataclasses import dataclass, field

EXIT_APPROVE = 0
EXIT_ERROR = 1
EXIT_BLOCK = 2


@dataclass(frozen=True)
class PreBash:
    """A shell command is about to run."""

    command: str


@dataclass(frozen=True)
class PostWrite:
    """A file was written or edited."""

    file_path: str


@dataclass(frozen=True)
class Stop:
    """The agent loop finished."""


@dataclass(frozen=True)
class Unsupported:
    """Any event the hook does not act on."""

    reason: str = field(default="", compare=False)


HookEvent = PreBash | PostWrite | Stop | Unsupported


@dataclass(frozen=True)
class Approve:
    pass


@dataclass(frozen=True)
class Block:
    message: str


Decision = Approve | Block


def exit_code(decision: Decision) -> int:
    return EXIT_BLOCK if isinstance(decision, Block) else EXIT_APPROVE


def to_output(decision: Decision) -> str:
    """Render a decision as the single JSON line written to stdout."""
    if isinstance(decision, Block):
        payload = {"decision": "block", "message": decision.message}
    else:
        payload = {"decision": "approve"}
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
