"""CLI argument and default-path behavior tests."""

from __future__ import annotations

import io
import logging
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from permview import cli


class CliTests(unittest.TestCase):
    def _run(self, argv: list[str], default_path: Path | None = None, tty: bool = True):
        stdout = io.StringIO()
        with mock.patch.object(sys, "argv", ["permview", *argv]), mock.patch(
            "permview.cli.run_browser"
        ) as run_browser, mock.patch("permview.cli.os.isatty", return_value=tty), mock.patch(
            "permview.cli.sys.stdin"
        ), mock.patch.object(sys, "stdout", stdout), mock.patch(
            "permview.cli.load_theme_name", return_value=None
        ), mock.patch("permview.cli.load_margin", return_value=4), mock.patch.dict(
            os.environ, {}, clear=False
        ):
            os.environ.pop("NO_COLOR", None)
            cli.main(default_path=default_path)
        return run_browser, stdout.getvalue()

    def test_main_defaults_to_current_working_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            previous_cwd = Path.cwd()
            try:
                os.chdir(root)
                run_browser, _out = self._run([])
            finally:
                os.chdir(previous_cwd)

        run_browser.assert_called_once()
        path, theme_name, no_color, margin = run_browser.call_args.args
        self.assertEqual(path, root)
        self.assertIsNone(theme_name)
        self.assertFalse(no_color)
        self.assertEqual(margin, 4)

    def test_explicit_options_are_forwarded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            run_browser, _out = self._run([str(root), "--theme", "ocean", "--no-color", "--margin", "6"])

        path, theme_name, no_color, margin = run_browser.call_args.args
        self.assertEqual(path, root)
        self.assertEqual(theme_name, "ocean")
        self.assertTrue(no_color)
        self.assertEqual(margin, 6)

    def test_margin_below_chrome_height_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.object(sys, "stderr", io.StringIO()) as stderr:
                with self.assertRaises(SystemExit):
                    self._run([tmp, "--margin", "2"])

        self.assertIn("value must be >= 4", stderr.getvalue())

    def test_missing_path_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit) as ctx:
                self._run([str(Path(tmp) / "missing")])

        self.assertIn("Path not found", str(ctx.exception))

    def test_file_path_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "file.txt"
            target.write_text("x", encoding="utf-8")
            with self.assertRaises(SystemExit) as ctx:
                self._run([str(target)])

        self.assertIn("Not a directory", str(ctx.exception))

    def test_list_mode_prints_listing_and_skips_browser(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "notes.txt").write_text("x", encoding="utf-8")
            run_browser, out = self._run([str(root), "--list", "--no-color"])

        run_browser.assert_not_called()
        self.assertRegex(out, r"^-[rwx-]{9} notes\.txt\n$")

    def test_non_tty_stdin_falls_back_to_listing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "sub").mkdir()
            run_browser, out = self._run([str(root)], tty=False)

        run_browser.assert_not_called()
        self.assertIn("sub", out)
        self.assertIn("\033[", out)


class ConfigureLoggingTests(unittest.TestCase):
    def test_log_file_receives_package_records(self) -> None:
        package_logger = logging.getLogger("permview")
        previous_level = package_logger.level
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "permview.log"
            cli.configure_logging(log_path, verbose=True)
            handler = package_logger.handlers[-1]
            try:
                logging.getLogger("permview.loader").debug("hello %s", "log")
                handler.flush()
                text = log_path.read_text(encoding="utf-8")
            finally:
                package_logger.removeHandler(handler)
                handler.close()
                package_logger.setLevel(previous_level)

        self.assertIn("DEBUG permview.loader: hello log", text)

    def test_no_log_file_adds_no_handler(self) -> None:
        package_logger = logging.getLogger("permview")
        before = list(package_logger.handlers)

        cli.configure_logging(None)

        self.assertEqual(package_logger.handlers, before)


if __name__ == "__main__":
    unittest.main()
