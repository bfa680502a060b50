"""Tests for the debug log file and secret redaction."""

import logging
import os
import time
from unittest import TestCase

from scripts.claw_hooks_impl import logger as log_file
from scripts.claw_hooks_impl.config import FilterConfig

from . import TempDirTestCase


class CleanupOldLogsTests(TempDirTestCase):
    def test_removes_only_old_claw_hooks_logs(self) -> None:
        now = time.time()
        old = now - 3 * 24 * 60 * 60
        log_dir = self.tmpdir / "logs"
        log_dir.mkdir()
        stale = log_dir / "claw-hooks.log.2020-01-01"
        fresh = log_dir / "claw-hooks.log"
        unrelated = log_dir / "other.log"
        for path in (stale, fresh, unrelated):
            path.write_text("x", encoding="utf-8")
        os.utime(stale, (old, old))
        os.utime(unrelated, (old, old))

        removed = log_file.cleanup_old_logs(log_dir, now=now)

        self.assertEqual(removed, [stale])
        self.assertFalse(stale.exists())
        self.assertTrue(fresh.exists())
        self.assertTrue(unrelated.exists())

    def test_missing_directory(self) -> None:
        self.assertEqual(log_file.cleanup_old_logs(self.tmpdir / "none"), [])


class InitTests(TempDirTestCase):
    def tearDown(self) -> None:
        log_file.shutdown()
        super().tearDown()

    def test_writes_package_records_to_file(self) -> None:
        log_dir = self.tmpdir / "nested" / "logs"
        handler = log_file.init(FilterConfig(debug=True, log_path=log_dir))

        logging.getLogger("scripts.claw_hooks_impl.chain").debug("hello from chain")
        handler.flush()

        content = (log_dir / "claw-hooks.log").read_text(encoding="utf-8")
        self.assertIn("hello from chain", content)
        self.assertIn("DEBUG", content)

    def test_second_init_replaces_handler(self) -> None:
        first = log_file.init(FilterConfig(log_path=self.tmpdir / "a"))
        second = log_file.init(FilterConfig(log_path=self.tmpdir / "b"))
        package_logger = logging.getLogger("scripts.claw_hooks_impl")
        self.assertNotIn(first, package_logger.handlers)
        self.assertIn(second, package_logger.handlers)


class RedactSecretsTests(TestCase):
    def test_key_value(self) -> None:
        self.assertEqual(
            log_file.redact_secrets("API_KEY=abc123 curl x"), "API_KEY=<redacted> curl x"
        )

    def test_authorization_header(self) -> None:
        self.assertEqual(
            log_file.redact_secrets("curl -H 'Authorization: Bearer tok123' x"),
            "curl -H 'Authorization: <redacted>' x",
        )

    def test_url_credentials(self) -> None:
        self.assertEqual(
            log_file.redact_secrets("git clone https://me:pw@github.com/x"),
            "git clone https://<redacted>:<redacted>@github.com/x",
        )

    def test_token_prefix(self) -> None:
        token = "ghp_" + "a" * 36
        self.assertEqual(log_file.redact_secrets(f"gh auth {token}"), "gh auth <redacted>")

    def test_plain_text_unchanged(self) -> None:
        self.assertEqual(log_file.redact_secrets("ls -la"), "ls -la")
