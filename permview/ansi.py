"""ANSI styling and width helpers for rendered rows.

Rows are built from SGR-styled fragments; clipping must skip escape
sequences so a long file name never wraps onto the next terminal line.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
RESET = "\033[0m"


def style(text: str, sgr: str) -> str:
    """Wrap ``text`` in one SGR sequence; empty ``sgr`` leaves it plain."""
    if not sgr or not text:
        return text
    return f"\033[{sgr}m{text}{RESET}"


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def char_display_width(ch: str) -> int:
    """Return terminal column width of one character.

    Combining marks consume no columns; East Asian wide/fullwidth characters
    consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim and do not count toward width. A
    reset is appended when clipping cut through styled text.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        w = char_display_width(text[i])
        if col + w > max_cols:
            if "\x1b" in text:
                out.append(RESET)
            break
        out.append(text[i])
        col += w
        i += 1

    return "".join(out)
