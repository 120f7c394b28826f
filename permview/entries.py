"""Directory entry model and OS listing.

Entries are immutable snapshots of one ``os.scandir`` pass. A directory is
always replaced wholesale on reload, never patched in place.
"""

from __future__ import annotations

import enum
import os
import stat
from dataclasses import dataclass
from pathlib import Path

UNKNOWN_MODE = "?" * 10


class EntryKind(enum.Enum):
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"


@dataclass(frozen=True)
class Entry:
    """One listed directory child with its ``ls -l`` style mode string."""

    name: str
    kind: EntryKind
    mode: str

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def mode_string(st_mode: int) -> str:
    """Return the 10-character permission string for a raw ``st_mode``."""
    return stat.filemode(st_mode)


def _entry_kind(child: os.DirEntry) -> EntryKind:
    try:
        if child.is_symlink():
            return EntryKind.SYMLINK
        if child.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
    except OSError:
        pass
    return EntryKind.FILE


def list_directory(path: Path | str) -> list[Entry]:
    """List ``path`` in OS order without following symlinks.

    A child whose stat fails keeps its row with ``UNKNOWN_MODE``. Errors
    opening the directory itself propagate as ``OSError``.
    """
    out: list[Entry] = []
    with os.scandir(path) as children:
        for child in children:
            try:
                mode = mode_string(child.stat(follow_symlinks=False).st_mode)
            except OSError:
                mode = UNKNOWN_MODE
            out.append(Entry(name=child.name, kind=_entry_kind(child), mode=mode))
    return out


__all__ = [
    "Entry",
    "EntryKind",
    "UNKNOWN_MODE",
    "list_directory",
    "mode_string",
]
