"""Interactive browser session and main loop.

``BrowserSession`` wires one navigator to the loader, renderer and key map and
exposes the per-tick operations of the loop. ``run_browser`` owns the
terminal and drives those operations until the user quits.
"""

from __future__ import annotations

import itertools
import logging
import shutil
import sys
from pathlib import Path

from .config import save_theme_name
from .keys import KeyMap, read_key
from .loader import DirectoryLoader
from .navigator import DEFAULT_MARGIN, KeyAction, Navigator, Resize
from .render import CHROME_LINES, Renderer, render_frame, write_frame
from .terminal import TerminalController
from .theme import next_theme_name, normalize_theme_name, resolve_theme

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "CTRL_C"})
THEME_KEY = "t"
KEY_TIMEOUT_MS = 120

_IDENTITIES = itertools.count(1)


class BrowserSession:
    """One browser pane: navigator state plus its collaborators."""

    def __init__(
        self,
        path: Path,
        loader: DirectoryLoader,
        theme_name: str | None = None,
        no_color: bool = False,
        margin: int = DEFAULT_MARGIN,
        keymap: KeyMap | None = None,
    ) -> None:
        self.loader = loader
        self.navigator = Navigator(next(_IDENTITIES), path, loader, margin=max(margin, CHROME_LINES))
        self.keymap = keymap if keymap is not None else KeyMap()
        self.no_color = no_color
        self.theme_name = normalize_theme_name(theme_name)
        self.renderer = Renderer(resolve_theme(self.theme_name, no_color=no_color))
        self.size: tuple[int, int] | None = None
        self.dirty = True

    def start(self) -> None:
        self.navigator.init()

    def sync_size(self, columns: int, lines: int) -> None:
        """Emit a resize event when the terminal size changed."""
        if self.size == (columns, lines):
            return
        self.size = (columns, lines)
        self.navigator.update(Resize(width=columns, height=lines))
        self.dirty = True

    def drain_loader(self) -> None:
        for result in self.loader.drain_results():
            before = self.navigator.state.pending
            self.navigator.update(result)
            if self.navigator.state.pending is not before:
                self.dirty = True

    def cycle_theme(self) -> None:
        self.theme_name = next_theme_name(self.theme_name)
        self.renderer = Renderer(resolve_theme(self.theme_name, no_color=self.no_color))
        save_theme_name(self.theme_name)
        self.dirty = True

    def handle_key(self, key: str) -> bool:
        """Process one key token; return ``True`` when the user asked to quit."""
        if key in QUIT_KEYS:
            return True
        if key == THEME_KEY:
            self.cycle_theme()
            return False
        action = self.keymap.action_for(key)
        if action is None:
            return False
        self.navigator.update(KeyAction(action))
        self.dirty = True
        return False

    def help_line(self) -> str:
        return self.keymap.help_line(extra=(("t", "theme"), ("q", "quit")))

    def frame(self) -> str:
        return render_frame(self.navigator.state, self.renderer, self.help_line())


def run_browser(
    path: Path,
    theme_name: str | None = None,
    no_color: bool = False,
    margin: int = DEFAULT_MARGIN,
) -> None:
    """Run the interactive browser on ``path`` until a quit key is pressed."""
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    session = BrowserSession(
        path,
        DirectoryLoader(),
        theme_name=theme_name,
        no_color=no_color,
        margin=margin,
    )
    session.start()
    logger.info("browsing %s", path)

    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            session.sync_size(term.columns, term.lines)
            session.drain_loader()
            if session.dirty:
                write_frame(session.frame())
                session.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=KEY_TIMEOUT_MS)
            except KeyboardInterrupt:
                break
            if key == "":
                continue
            if session.handle_key(key):
                break


__all__ = [
    "BrowserSession",
    "run_browser",
]
