"""Tests for the rm / kill / dd filters."""

from unittest import TestCase

from scripts.claw_hooks_impl.config import (
    DEFAULT_DD_MESSAGE,
    DEFAULT_KILL_MESSAGE,
    DEFAULT_RM_MESSAGE,
    FilterConfig,
)
from scripts.claw_hooks_impl.model import Block, PreBash
from scripts.claw_hooks_impl.rules_builtin import (
    BuiltinFilter,
    dd_filter,
    kill_filter,
    rm_filter,
)
from scripts.claw_hooks_impl.shell import parse


def _evaluate(f: BuiltinFilter, command: str) -> Block | None:
    return f.evaluate(PreBash(command), parse(command))


class RmFilterTests(TestCase):
    def setUp(self) -> None:
        self.filter = rm_filter(FilterConfig())

    def test_blocks_rm_family(self) -> None:
        for command in ("rm -rf /", "rmdir build", "del file.txt", "erase x"):
            with self.subTest(command=command):
                self.assertEqual(_evaluate(self.filter, command), Block(DEFAULT_RM_MESSAGE))

    def test_blocks_wrapped_and_nested_rm(self) -> None:
        for command in (
            "sudo rm -rf /",
            "cat files | xargs rm",
            "sudo bash -c 'rm -rf /'",
            "echo $(rm -rf ~)",
            "find . -name '*.o' -exec rm {} +",
            "/bin/rm x",
        ):
            with self.subTest(command=command):
                self.assertIsNotNone(_evaluate(self.filter, command))

    def test_allows_rm_as_argument(self) -> None:
        for command in ('echo "rm -rf /"', "docker rm web", "git rm --cached x", "ls"):
            with self.subTest(command=command):
                self.assertIsNone(_evaluate(self.filter, command))

    def test_disabled_filter_never_blocks(self) -> None:
        f = rm_filter(FilterConfig(rm_block=False))
        self.assertFalse(f.active)
        self.assertIsNone(_evaluate(f, "rm -rf /"))

    def test_custom_message(self) -> None:
        f = rm_filter(FilterConfig(rm_block_message="use trash"))
        self.assertEqual(_evaluate(f, "rm x"), Block("use trash"))


class KillFilterTests(TestCase):
    def setUp(self) -> None:
        self.filter = kill_filter(FilterConfig())

    def test_blocks_kill_family(self) -> None:
        for command in (
            "kill -9 123",
            "pkill -f node",
            "killall python",
            "taskkill /F /PID 1",
            "ps aux | grep node | awk '{print $2}' | xargs kill",
        ):
            with self.subTest(command=command):
                self.assertEqual(
                    _evaluate(self.filter, command), Block(DEFAULT_KILL_MESSAGE)
                )

    def test_allows_kill_in_quotes(self) -> None:
        self.assertIsNone(_evaluate(self.filter, "echo 'kill it'"))


class DdFilterTests(TestCase):
    def test_blocks_dd(self) -> None:
        f = dd_filter(FilterConfig())
        self.assertEqual(
            _evaluate(f, "dd if=/dev/zero of=/dev/sda"), Block(DEFAULT_DD_MESSAGE)
        )

    def test_allows_dd_as_argument(self) -> None:
        self.assertIsNone(_evaluate(dd_filter(FilterConfig()), "echo dd"))

    def test_disabled(self) -> None:
        f = dd_filter(FilterConfig(dd_block=False))
        self.assertIsNone(_evaluate(f, "dd if=/dev/zero"))
