"""Tests for filter chain dispatch and ordering."""

import re
import shlex
from types import MappingProxyType
from unittest import TestCase, mock

from scripts.claw_hooks_impl import side_effects
from scripts.claw_hooks_impl.chain import RECURSION_LIMIT_MESSAGE, FilterChain
from scripts.claw_hooks_impl.config import (
    DEFAULT_KILL_MESSAGE,
    DEFAULT_RM_MESSAGE,
    CustomFilterRule,
    FilterConfig,
)
from scripts.claw_hooks_impl.model import (
    Approve,
    Block,
    PostWrite,
    PreBash,
    Stop,
    Unsupported,
)
from scripts.claw_hooks_impl.rules_custom import CustomFilter


def _rule(pattern: str, message: str, args: tuple[str, ...] | None = None) -> CustomFilterRule:
    return CustomFilterRule(re.compile(pattern), args, message)


def _deeply_nested(command: str, levels: int = 12) -> str:
    for _ in range(levels):
        command = f"sh -c {shlex.quote(command)}"
    return command


class BashEventTests(TestCase):
    def test_approves_harmless_command(self) -> None:
        chain = FilterChain.from_config(FilterConfig())
        self.assertEqual(chain.evaluate(PreBash("ls -la && git status")), Approve())

    def test_builtin_order_beats_textual_order(self) -> None:
        chain = FilterChain.from_config(FilterConfig())
        self.assertEqual(chain.evaluate(PreBash("kill 1; rm x")), Block(DEFAULT_RM_MESSAGE))

    def test_builtin_runs_before_custom(self) -> None:
        config = FilterConfig(custom_filters=(_rule("rm", "custom rm"),))
        chain = FilterChain.from_config(config)
        self.assertEqual(chain.evaluate(PreBash("rm x")), Block(DEFAULT_RM_MESSAGE))

        config = FilterConfig(rm_block=False, custom_filters=(_rule("rm", "custom rm"),))
        chain = FilterChain.from_config(config)
        self.assertEqual(chain.evaluate(PreBash("rm x")), Block("custom rm"))

    def test_custom_rules_in_config_order(self) -> None:
        config = FilterConfig(
            custom_filters=(_rule("npm", "first", ("install",)), _rule("npm", "second"))
        )
        chain = FilterChain.from_config(config)
        self.assertEqual(chain.evaluate(PreBash("npm install")), Block("first"))
        self.assertEqual(chain.evaluate(PreBash("npm run build")), Block("second"))

    def test_first_block_stops_evaluation(self) -> None:
        config = FilterConfig(custom_filters=(_rule("yarn", "use pnpm"),))
        chain = FilterChain.from_config(config)
        with mock.patch.object(CustomFilter, "evaluate") as custom_evaluate:
            decision = chain.evaluate(PreBash("pkill node"))
        self.assertEqual(decision, Block(DEFAULT_KILL_MESSAGE))
        custom_evaluate.assert_not_called()

    def test_depth_limit_blocks_when_filters_active(self) -> None:
        chain = FilterChain.from_config(FilterConfig())
        decision = chain.evaluate(PreBash(_deeply_nested("echo hi")))
        self.assertEqual(decision, Block(RECURSION_LIMIT_MESSAGE))

    def test_depth_limit_approves_when_nothing_can_block(self) -> None:
        config = FilterConfig(rm_block=False, kill_block=False, dd_block=False)
        chain = FilterChain.from_config(config)
        self.assertEqual(chain.evaluate(PreBash(_deeply_nested("rm -rf /"))), Approve())

    def test_degraded_parse_still_blocks_head(self) -> None:
        chain = FilterChain.from_config(FilterConfig())
        self.assertEqual(chain.evaluate(PreBash("rm -rf 'unterminated")), Block(DEFAULT_RM_MESSAGE))


class SideEffectEventTests(TestCase):
    def setUp(self) -> None:
        config = FilterConfig(
            rm_block=True,
            extension_hooks=MappingProxyType({".py": ("black {file}",)}),
            stop_hooks=("notify-send done",),
        )
        self.chain = FilterChain.from_config(config)

    def test_post_write_runs_extension_hooks_and_approves(self) -> None:
        with mock.patch.object(side_effects.subprocess, "run") as run:
            run.return_value.returncode = 0
            decision = self.chain.evaluate(PostWrite("rm.py"))
        self.assertEqual(decision, Approve())
        run.assert_called_once()
        self.assertEqual(run.call_args.args[0], ["black", "rm.py"])

    def test_stop_runs_stop_hooks_and_approves(self) -> None:
        with mock.patch.object(side_effects.subprocess, "run") as run:
            run.return_value.returncode = 0
            decision = self.chain.evaluate(Stop())
        self.assertEqual(decision, Approve())
        self.assertEqual(run.call_args.args[0], ["notify-send", "done"])

    def test_failing_side_effect_still_approves(self) -> None:
        with mock.patch.object(side_effects.subprocess, "run", side_effect=OSError("boom")):
            with self.assertLogs("scripts.claw_hooks_impl.side_effects", "WARNING"):
                self.assertEqual(self.chain.evaluate(Stop()), Approve())

    def test_unsupported_runs_nothing(self) -> None:
        with mock.patch.object(side_effects.subprocess, "run") as run:
            decision = self.chain.evaluate(Unsupported("claude Notification"))
        self.assertEqual(decision, Approve())
        run.assert_not_called()
