"""Renderer for the visible slice of a directory listing.

``Renderer.render`` is a pure function of navigator state: it never mutates
it. Frame composition (header, footer, terminal writes) lives in
``render_frame`` and ``write_frame`` so the row renderer stays testable on
its own.
"""

from __future__ import annotations

import os
import sys
import unicodedata

from .ansi import clip_ansi_line, style
from .entries import Entry, EntryKind
from .navigator import NavigatorState
from .theme import DEFAULT_THEME, PermStyles, Theme

LOADING_TEXT = "Loading..."
CHROME_LINES = 4
_SPECIAL_CHARS = frozenset("sStT")
_LINE_BREAKING_CATEGORIES = frozenset({"Cc", "Zl", "Zp"})


def _type_style(type_char: str, styles: PermStyles) -> str:
    if type_char == "d":
        return styles.dir
    if type_char == "l":
        return styles.symlink
    return styles.file


def _permission_style(ch: str, styles: PermStyles) -> str | None:
    """Return the style for one permission character, or ``None`` if unknown."""
    if ch == "r":
        return styles.read
    if ch == "w":
        return styles.write
    if ch == "x":
        return styles.exec
    if ch in _SPECIAL_CHARS:
        return styles.special
    if ch == "-":
        return styles.none
    return None


def style_permissions(mode: str, styles: PermStyles) -> str:
    """Colour a ``drwxr-xr-x`` style string one character at a time.

    The first character is styled by file type; the rest by permission class.
    Characters outside the known classes pass through unstyled.
    """
    if not mode:
        return ""
    out = [style(mode[0], _type_style(mode[0], styles))]
    for ch in mode[1:]:
        sgr = _permission_style(ch, styles)
        out.append(ch if sgr is None else style(ch, sgr))
    return "".join(out)


def display_name(name: str) -> str:
    """Replace control and line-separator characters with ``?`` like ``ls -q``."""
    return "".join("?" if unicodedata.category(ch) in _LINE_BREAKING_CATEGORIES else ch for ch in name)


def render_entry_row(entry: Entry, theme: Theme, selected: bool = False) -> str:
    """Render ``<mode> <name>`` for one entry, highlighted when selected."""
    styles = theme.selected_perm() if selected else theme.perm
    separator = style(" ", theme.selected_background) if selected else " "
    name_style = styles.dir if entry.kind is EntryKind.DIRECTORY else styles.file
    return style_permissions(entry.mode, styles) + separator + style(display_name(entry.name), name_style)


class Renderer:
    """Turns the navigator's visible window into styled text."""

    def __init__(self, theme: Theme = DEFAULT_THEME) -> None:
        self.theme = theme

    def render(self, state: NavigatorState) -> str:
        top = max(0, state.viewport.top)
        stop = min(top + state.viewport.height, len(state.entries))
        out: list[str] = []
        for idx in range(top, stop):
            out.append(render_entry_row(state.entries[idx], self.theme, idx == state.selected))
            out.append("\n")
        return "".join(out)


def render_frame(state: NavigatorState, renderer: Renderer, help_line: str = "") -> str:
    """Compose the full screen: header, row block and key help footer.

    The chrome uses exactly the default four-line margin: a blank line, the
    directory header, the rows padded to viewport height, a blank line and the
    help footer.
    """
    if not state.ready:
        return LOADING_TEXT
    width = state.viewport.width
    theme = renderer.theme
    rows = renderer.render(state).split("\n")[:-1]
    rows.extend([""] * max(0, state.viewport.height - len(rows)))

    lines = ["", style(str(state.cwd), theme.header), *rows, "", style(help_line, theme.help)]
    if width > 0:
        lines = [clip_ansi_line(line, width) for line in lines]
    return "\r\n".join(lines)


def write_frame(frame: str) -> None:
    """Clear the screen and write one composed frame to stdout."""
    data = "\033[H\033[J" + frame
    os.write(sys.stdout.fileno(), data.encode("utf-8", errors="replace"))


__all__ = [
    "CHROME_LINES",
    "LOADING_TEXT",
    "Renderer",
    "display_name",
    "render_entry_row",
    "render_frame",
    "style_permissions",
    "write_frame",
]
