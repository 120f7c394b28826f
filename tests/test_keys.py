"""Regression tests for raw-key decoding and key bindings.

Covers ESC timing, arrow sequences and the default navigation key map.
"""

from __future__ import annotations

import os
import time
import unittest

from permview import keys as keys_mod
from permview.keys import KeyBinding, KeyMap
from permview.navigator import Action


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        keys_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        keys_mod._PENDING_BYTES.clear()

    def _read_all(self, data: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, data)
            return [keys_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_arrow_sequences_are_recognized(self) -> None:
        self.assertEqual(
            self._read_all(b"\x1b[A\x1b[B\x1b[C\x1b[D", 4),
            ["UP", "DOWN", "RIGHT", "LEFT"],
        )

    def test_application_mode_arrows_are_recognized(self) -> None:
        self.assertEqual(self._read_all(b"\x1bOA", 1), ["UP"])

    def test_single_escape_returns_without_second_keypress(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, b"\x1b")
            started = time.monotonic()
            key = keys_mod.read_key(read_fd, timeout_ms=20)
            elapsed = time.monotonic() - started
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(key, "ESC")
        self.assertLess(elapsed, 0.2)

    def test_modified_arrows_consume_whole_sequence(self) -> None:
        self.assertEqual(
            self._read_all(b"\x1b[1;5Ax\x1b[1;2Dy", 4),
            ["CTRL_UP", "x", "SHIFT_LEFT", "y"],
        )

    def test_unknown_csi_sequence_leaves_no_stray_keys(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[3~j\x1b[1;7Bk", 4), ["ESC", "j", "ESC", "k"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._read_all(b"\x1bq", 2), ["ESC", "q"])

    def test_control_keys_map_to_tokens(self) -> None:
        self.assertEqual(self._read_all(b"\x03\r\x7f", 3), ["CTRL_C", "ENTER", "BACKSPACE"])

    def test_multibyte_character_is_decoded_whole(self) -> None:
        self.assertEqual(self._read_all("é".encode("utf-8"), 1), ["é"])

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(self._read_all(b"", 1), [""])


class KeyMapTests(unittest.TestCase):
    def test_default_bindings(self) -> None:
        keymap = KeyMap()

        self.assertIs(keymap.action_for("k"), Action.MOVE_UP)
        self.assertIs(keymap.action_for("UP"), Action.MOVE_UP)
        self.assertIs(keymap.action_for("j"), Action.MOVE_DOWN)
        self.assertIs(keymap.action_for("DOWN"), Action.MOVE_DOWN)
        self.assertIs(keymap.action_for("l"), Action.OPEN)
        self.assertIs(keymap.action_for("RIGHT"), Action.OPEN)
        self.assertIs(keymap.action_for("h"), Action.PARENT)
        self.assertIs(keymap.action_for("LEFT"), Action.PARENT)

    def test_unrecognized_keys_are_unbound(self) -> None:
        keymap = KeyMap()

        self.assertIsNone(keymap.action_for("q"))
        self.assertIsNone(keymap.action_for("ESC"))

    def test_custom_bindings_replace_defaults(self) -> None:
        keymap = KeyMap((KeyBinding(("ENTER",), Action.OPEN, "enter", "open"),))

        self.assertIs(keymap.action_for("ENTER"), Action.OPEN)
        self.assertIsNone(keymap.action_for("l"))

    def test_help_line_lists_bindings_and_extras(self) -> None:
        line = KeyMap().help_line(extra=(("q", "quit"),))

        self.assertTrue(line.startswith("↑/k move up"))
        self.assertIn("←/h parent", line)
        self.assertTrue(line.endswith("q quit"))


if __name__ == "__main__":
    unittest.main()
