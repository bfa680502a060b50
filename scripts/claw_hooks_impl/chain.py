"""Filter chain: picks filters by event kind and produces one decision."""

import logging
from dataclasses import dataclass

from .config import FilterConfig
from .model import Approve, Block, Decision, HookEvent, PostWrite, PreBash, Stop
from .rules_builtin import BuiltinFilter, dd_filter, kill_filter, rm_filter
from .rules_custom import CustomFilter
from .shell import MAX_DEPTH, parse
from .side_effects import ExtensionFilter, StopFilter

logger = logging.getLogger(__name__)

RECURSION_LIMIT_MESSAGE = "Command analysis recursion limit reached."

BlockingFilter = BuiltinFilter | CustomFilter


@dataclass(frozen=True)
class FilterChain:
    blocking: tuple[BlockingFilter, ...]
    extension: ExtensionFilter
    stop: StopFilter
    max_depth: int = MAX_DEPTH

    @classmethod
    def from_config(cls, config: FilterConfig) -> "FilterChain":
        blocking: list[BlockingFilter] = [
            rm_filter(config),
            kill_filter(config),
            dd_filter(config),
        ]
        blocking.extend(CustomFilter(rule) for rule in config.custom_filters)
        return cls(
            blocking=tuple(blocking),
            extension=ExtensionFilter(config.extension_hooks, config.hook_timeout),
            stop=StopFilter(config.stop_hooks, config.hook_timeout),
        )

    def evaluate(self, event: HookEvent) -> Decision:
        if isinstance(event, PreBash):
            return self._evaluate_bash(event)
        if isinstance(event, PostWrite):
            self.extension.evaluate(event)
        elif isinstance(event, Stop):
            self.stop.evaluate(event)
        else:
            logger.debug("ignoring unsupported event: %s", event.reason)
        return Approve()

    def _evaluate_bash(self, event: PreBash) -> Decision:
        parsed = parse(event.command, max_depth=self.max_depth)
        logger.debug("parsed commands: %s", parsed.commands())

        for f in self.blocking:
            decision = f.evaluate(event, parsed)
            if decision is not None:
                logger.info("blocked by %s filter", f.name)
                return decision

        # Anything nested past the depth cap was never inspected.
        if parsed.depth_exceeded and any(f.active for f in self.blocking):
            logger.info("blocked: nesting deeper than %d", self.max_depth)
            return Block(RECURSION_LIMIT_MESSAGE)
        return Approve()
