"""Navigation state machine and viewport model.

The navigator owns the working directory, the current listing, the cursor and
the scroll window. It consumes one event at a time and restores the
selection/viewport invariants after every mutation:

* ``0 <= selected < max(1, len(entries))``
* ``top <= selected <= top + height - 1`` whenever there are entries

Directory reads are delegated to a loader; results come back later as
``DirectoryLoaded`` events and are applied only when they answer the newest
request issued by this navigator.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Hashable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Union

from .entries import Entry
from .loader import DirectoryLoaded, LoadRequest

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = 4


class Action(enum.Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    OPEN = "open"
    PARENT = "parent"


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class KeyAction:
    action: Action


Event = Union[Resize, KeyAction, DirectoryLoaded]


class Loader(Protocol):
    def load(self, identity: Hashable, path: Path) -> LoadRequest: ...


@dataclass
class Viewport:
    """Visible window over the entry list; ``height`` rows from ``top``."""

    top: int = 0
    height: int = 0
    width: int = 0

    @property
    def bottom(self) -> int:
        return self.top + self.height - 1


@dataclass
class NavigatorState:
    identity: Hashable
    cwd: Path
    entries: tuple[Entry, ...] = ()
    selected: int = 0
    viewport: Viewport = field(default_factory=Viewport)
    margin: int = DEFAULT_MARGIN
    ready: bool = False
    pending: LoadRequest | None = None


def centered_top(selected: int, height: int) -> int:
    """Scroll offset that puts ``selected`` near the middle of the window."""
    return max(0, selected - height // 2)


def clamp_selected(selected: int, entry_count: int) -> int:
    return max(0, min(selected, entry_count - 1))


class Navigator:
    """Single-threaded update function over one ``NavigatorState``."""

    def __init__(
        self,
        identity: Hashable,
        cwd: Path | str,
        loader: Loader,
        margin: int = DEFAULT_MARGIN,
    ) -> None:
        self.state = NavigatorState(identity=identity, cwd=Path(cwd), margin=max(0, margin))
        self._loader = loader

    def init(self) -> LoadRequest:
        """Issue the initial read of the starting directory."""
        return self._request_load()

    def update(self, event: Event) -> LoadRequest | None:
        """Apply one event; return the load request it issued, if any."""
        if isinstance(event, Resize):
            self._resize(event.width, event.height)
            return None
        if isinstance(event, DirectoryLoaded):
            self._directory_loaded(event)
            return None
        if isinstance(event, KeyAction):
            return self.handle_action(event.action)
        return None

    def handle_action(self, action: Action) -> LoadRequest | None:
        if action is Action.MOVE_UP:
            self.move_up()
        elif action is Action.MOVE_DOWN:
            self.move_down()
        elif action is Action.OPEN:
            return self.open_selected()
        elif action is Action.PARENT:
            return self.go_parent()
        return None

    def _request_load(self) -> LoadRequest:
        request = self._loader.load(self.state.identity, self.state.cwd)
        self.state.pending = request
        return request

    def _recenter(self) -> None:
        state = self.state
        state.viewport.top = centered_top(state.selected, state.viewport.height)

    def _ensure_visible(self) -> None:
        state = self.state
        if state.selected < state.viewport.top or state.selected > state.viewport.bottom:
            self._recenter()

    def _resize(self, width: int, height: int) -> None:
        state = self.state
        state.viewport.height = max(1, height - state.margin)
        state.viewport.width = max(0, width)
        if not state.ready:
            state.ready = True
            logger.debug("viewport ready: %dx%d", state.viewport.width, state.viewport.height)

    def _directory_loaded(self, result: DirectoryLoaded) -> None:
        state = self.state
        if result.identity != state.identity:
            return
        pending = state.pending
        if pending is None or result.request_id != pending.request_id:
            logger.debug("dropping stale listing of %s (request %d)", result.path, result.request_id)
            return
        state.pending = None
        state.entries = tuple(result.entries)
        state.selected = clamp_selected(state.selected, len(state.entries))
        self._recenter()

    def move_up(self) -> None:
        state = self.state
        state.selected = max(0, state.selected - 1)
        self._ensure_visible()

    def move_down(self) -> None:
        state = self.state
        if not state.entries:
            return
        state.selected = min(len(state.entries) - 1, state.selected + 1)
        self._ensure_visible()

    def selected_entry(self) -> Entry | None:
        state = self.state
        if not state.entries:
            return None
        return state.entries[state.selected]

    def open_selected(self) -> LoadRequest | None:
        entry = self.selected_entry()
        if entry is None or not entry.is_dir:
            return None
        return self._change_directory(self.state.cwd / entry.name)

    def go_parent(self) -> LoadRequest:
        return self._change_directory(self.state.cwd.parent)

    def _change_directory(self, target: Path) -> LoadRequest:
        state = self.state
        state.cwd = target
        state.selected = 0
        state.viewport.top = 0
        return self._request_load()

    def visible_range(self) -> tuple[int, int]:
        """Return ``[start, stop)`` indices of entries inside the window."""
        state = self.state
        start = min(state.viewport.top, len(state.entries))
        stop = min(state.viewport.top + state.viewport.height, len(state.entries))
        return start, max(start, stop)


__all__ = [
    "Action",
    "DEFAULT_MARGIN",
    "Event",
    "KeyAction",
    "Navigator",
    "NavigatorState",
    "Resize",
    "Viewport",
    "centered_top",
    "clamp_selected",
]
