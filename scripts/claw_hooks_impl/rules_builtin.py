"""Built-in blocking filters for destructive commands."""

from dataclasses import dataclass

from .config import FilterConfig
from .model import Block, HookEvent
from .shell import ParsedCommand

RM_COMMANDS = frozenset({"rm", "rmdir", "del", "erase"})
KILL_COMMANDS = frozenset({"kill", "pkill", "killall", "taskkill"})
DD_COMMANDS = frozenset({"dd"})


@dataclass(frozen=True)
class BuiltinFilter:
    """Blocks when any invocation, however deeply wrapped, is in ``commands``."""

    name: str
    commands: frozenset[str]
    enabled: bool
    message: str

    @property
    def active(self) -> bool:
        return self.enabled

    def evaluate(self, event: HookEvent, parsed: ParsedCommand) -> Block | None:
        if not self.enabled:
            return None
        for invocation in parsed:
            if invocation.command in self.commands:
                return Block(self.message)
        return None


def rm_filter(config: FilterConfig) -> BuiltinFilter:
    return BuiltinFilter("rm", RM_COMMANDS, config.rm_block, config.rm_block_message)


def kill_filter(config: FilterConfig) -> BuiltinFilter:
    return BuiltinFilter(
        "kill", KILL_COMMANDS, config.kill_block, config.kill_block_message
    )


def dd_filter(config: FilterConfig) -> BuiltinFilter:
    return BuiltinFilter("dd", DD_COMMANDS, config.dd_block, config.dd_block_message)
