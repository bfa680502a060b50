"""Custom rule matching logic."""

from dataclasses import dataclass

from .config import CustomFilterRule
from .model import Block, HookEvent
from .shell import ParsedCommand, unquoted_text


@dataclass(frozen=True)
class CustomFilter:
    """Blocks commands matching one configured rule."""

    rule: CustomFilterRule

    @property
    def name(self) -> str:
        return f"custom:{self.rule.command_pattern.pattern}"

    @property
    def active(self) -> bool:
        return True

    def matches(self, parsed: ParsedCommand) -> bool:
        pattern = self.rule.command_pattern
        if self.rule.args is None:
            # Quoted text is data, never a command.
            if pattern.search(unquoted_text(parsed.raw)):
                return True
            return any(pattern.match(invocation.line) for invocation in parsed)

        blocked = set(self.rule.args)
        for invocation in parsed:
            if not pattern.fullmatch(invocation.command):
                continue
            if blocked.intersection(invocation.args):
                return True
        return False

    def evaluate(self, event: HookEvent, parsed: ParsedCommand) -> Block | None:
        if self.matches(parsed):
            return Block(self.rule.message)
        return None
