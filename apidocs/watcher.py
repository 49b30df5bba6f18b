"""Polling file watcher used for continuous regeneration."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .logging import get_logger

FileSignature = Optional[Tuple[int, int]]


def file_signature(path: Path) -> FileSignature:
    """Return ``(mtime_ns, size)`` or None when the file is missing."""
    try:
        stat_result = path.stat()
    except FileNotFoundError:
        return None
    return stat_result.st_mtime_ns, stat_result.st_size


class SourceWatcher:
    """Polls each file on its own thread and reports changes to ``callback``.

    A callback runs on the polling thread of the file that changed, so the
    next poll for that file waits until the callback returns.
    """

    def __init__(
        self,
        paths: Iterable[Path],
        callback: Callable[[Path], object],
        *,
        interval: float = 1.0,
    ) -> None:
        self.paths = list(paths)
        self.callback = callback
        self.interval = interval
        self.logger = get_logger("watcher")
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []
        self._signatures: Dict[Path, FileSignature] = {}

    @property
    def running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Watcher already started")
        self._stop.clear()
        self.snapshot()
        for path in self.paths:
            thread = threading.Thread(
                target=self._poll,
                args=(path,),
                name=f"apidocs-watch:{path.name}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()
        self.logger.info("Watching %d source files for changes", len(self.paths))

    def snapshot(self) -> None:
        """Record the current state of every watched file as the baseline."""
        for path in self.paths:
            self._signatures[path] = file_signature(path)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        for thread in self._threads:
            thread.join(timeout)
        self._threads = []

    def poll_once(self, path: Path) -> bool:
        """Check ``path`` once and run the callback if it changed."""
        current = file_signature(path)
        if current == self._signatures.get(path):
            return False
        self._signatures[path] = current
        self.logger.debug("Change detected in %s", path)
        try:
            self.callback(path)
        except Exception as exc:  # watch mode re-attempts on the next change
            self._log_exception(f"Regeneration for {path} failed", exc)
        return True

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)

    def _poll(self, path: Path) -> None:
        while not self._stop.wait(self.interval):
            self.poll_once(path)


__all__ = ["SourceWatcher", "file_signature"]
