"""Keyboard input: raw byte decoding and logical key bindings.

``read_key`` turns raw stdin bytes into normalized tokens; ``KeyMap`` maps
tokens onto navigator actions. Unbound tokens map to ``None`` so the host
shell can decide what to do with them (quit, theme switch).
"""

from __future__ import annotations

import os
import select
from dataclasses import dataclass

from .navigator import Action

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_TOKENS = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_ARROW_TOKENS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
}

_MODIFIER_PREFIXES = {
    b"2": "SHIFT",
    b"3": "ALT",
    b"5": "CTRL",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, lead: bytes) -> bytes:
    first = lead[0]
    if first >= 0xF0:
        extra = 3
    elif first >= 0xE0:
        extra = 2
    elif first >= 0xC0:
        extra = 1
    else:
        return lead
    out = lead
    for _ in range(extra):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        out += nxt
    return out


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; return ``""`` on timeout or EOF."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    token = _CONTROL_TOKENS.get(ch)
    if token is not None:
        return token

    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch).decode("utf-8", errors="replace")

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq not in {b"[", b"O"}:
        _PENDING_BYTES.append(seq)
        return "ESC"
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _ARROW_TOKENS.get(final, "ESC")
    return _read_csi(fd)


def _read_csi(fd: int) -> str:
    """Consume a CSI sequence through its final byte and map arrow keys.

    ``ESC [ A`` is a plain arrow; ``ESC [ 1 ; <mod> A`` carries a modifier.
    Anything else is reported as ``ESC`` with no bytes left behind.
    """
    params = b""
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if 0x40 <= part[0] <= 0x7E:
            final = part
            break
        params += part
        if len(params) > 16:
            return "ESC"
    arrow = _ARROW_TOKENS.get(final)
    if arrow is None:
        return "ESC"
    if not params:
        return arrow
    _, _, modifier = params.partition(b";")
    prefix = _MODIFIER_PREFIXES.get(modifier)
    return f"{prefix}_{arrow}" if prefix is not None else "ESC"


@dataclass(frozen=True)
class KeyBinding:
    """Tokens bound to one action plus the footer help text for it."""

    keys: tuple[str, ...]
    action: Action
    help_keys: str
    help_text: str


DEFAULT_BINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding(("k", "UP"), Action.MOVE_UP, "↑/k", "move up"),
    KeyBinding(("j", "DOWN"), Action.MOVE_DOWN, "↓/j", "move down"),
    KeyBinding(("l", "RIGHT"), Action.OPEN, "→/l", "open"),
    KeyBinding(("h", "LEFT"), Action.PARENT, "←/h", "parent"),
)


class KeyMap:
    """Dispatch table from key tokens to navigator actions."""

    def __init__(self, bindings: tuple[KeyBinding, ...] = DEFAULT_BINDINGS) -> None:
        self.bindings = bindings
        self._actions: dict[str, Action] = {}
        for binding in bindings:
            for key in binding.keys:
                self._actions[key] = binding.action

    def action_for(self, key: str) -> Action | None:
        return self._actions.get(key)

    def help_line(self, extra: tuple[tuple[str, str], ...] = ()) -> str:
        """Return a one-line key summary for the footer."""
        items = [(b.help_keys, b.help_text) for b in self.bindings] + list(extra)
        return " • ".join(f"{keys} {text}" for keys, text in items)


__all__ = [
    "DEFAULT_BINDINGS",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyBinding",
    "KeyMap",
    "read_key",
]
