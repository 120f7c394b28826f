"""Background directory loader with identity-tagged results.

One daemon worker thread services read requests. Pending requests collapse
per identity so a burst of navigation only reads the newest directory, and
every result carries the identity and request id that issued it so the
navigator can drop stale ones.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from .entries import Entry, list_directory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadRequest:
    """One in-flight directory read correlated with the issuing identity."""

    identity: Hashable
    request_id: int
    path: Path


@dataclass(frozen=True)
class DirectoryLoaded:
    """Completed directory read delivered back to the host loop."""

    identity: Hashable
    request_id: int
    path: Path
    entries: tuple[Entry, ...]


class DirectoryLoader:
    """Single-threaded latest-request-wins directory reader."""

    def __init__(self, list_directory: Callable[[Path], list[Entry]] = list_directory) -> None:
        self._list_directory = list_directory
        self._lock = threading.Lock()
        self._pending: dict[Hashable, LoadRequest] = {}
        self._running = False
        self._next_request_id = 1
        self._results: Queue[DirectoryLoaded] = Queue()

    def _read(self, request: LoadRequest) -> DirectoryLoaded:
        try:
            entries = tuple(self._list_directory(request.path))
        except OSError as exc:
            logger.warning("cannot read directory %s: %s", request.path, exc)
            entries = ()
        except Exception:
            logger.exception("listing %s failed", request.path)
            entries = ()
        return DirectoryLoaded(
            identity=request.identity,
            request_id=request.request_id,
            path=request.path,
            entries=entries,
        )

    def _worker(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._running = False
                    return
                identity = next(iter(self._pending))
                request = self._pending.pop(identity)
            self._results.put(self._read(request))

    def _new_request(self, identity: Hashable, path: Path) -> LoadRequest:
        request = LoadRequest(identity=identity, request_id=self._next_request_id, path=Path(path))
        self._next_request_id += 1
        return request

    def load(self, identity: Hashable, path: Path) -> LoadRequest:
        """Queue a read of ``path`` for ``identity`` and return its request.

        A request still waiting for the worker is replaced; one already being
        read finishes and is later discarded by request id.
        """
        with self._lock:
            request = self._new_request(identity, path)
            self._pending.pop(identity, None)
            self._pending[identity] = request
            if self._running:
                return request
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="permview-dir-loader",
            daemon=True,
        )
        worker.start()
        return request

    def load_sync(self, identity: Hashable, path: Path) -> DirectoryLoaded:
        """Read ``path`` on the calling thread with the same error handling."""
        with self._lock:
            request = self._new_request(identity, path)
        return self._read(request)

    def drain_results(self) -> list[DirectoryLoaded]:
        """Drain all completed results in completion order."""
        out: list[DirectoryLoaded] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "DirectoryLoaded",
    "DirectoryLoader",
    "LoadRequest",
]
