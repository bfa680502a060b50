"""
Test package initializer.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from typing import Any
from unittest import mock


class TempDirTestCase(unittest.TestCase):
    """Base test class that provides a temporary directory for each test.

    Also patches Path.home() to return the temp directory, so the default
    config (~/.config/claw-hooks/config.toml) and log directory resolve
    inside it instead of the real user's.
    """

    tmpdir: Path
    _tmpdir_obj: tempfile.TemporaryDirectory[str]
    _home_patch: Any

    def setUp(self) -> None:
        super().setUp()
        self._tmpdir_obj = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmpdir_obj.name)
        self._home_patch = mock.patch.object(Path, "home", return_value=self.tmpdir)
        self._home_patch.start()

    def tearDown(self) -> None:
        self._home_patch.stop()
        self._tmpdir_obj.cleanup()
        super().tearDown()

    @property
    def default_config_path(self) -> Path:
        return self.tmpdir / ".config" / "claw-hooks" / "config.toml"

    def write_config(self, content: str, path: Path | None = None) -> Path:
        """Write TOML config text, to the default location unless ``path`` is given."""
        target = path if path is not None else self.default_config_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target
