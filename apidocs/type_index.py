"""Cross-reference of documented type names to their output locations."""

from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional, Tuple


class TypeReferenceIndex:
    """Maps declaration titles to ``category/slug`` paths for hyperlinking.

    Entries are inserted or overwritten, never removed: a title that disappears
    from the sources keeps resolving for the lifetime of the index. The lock
    only guards individual dictionary operations so concurrent regenerations
    can take snapshots while another file registers its titles.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()

    def register(self, title: str, path: str) -> Optional[str]:
        """Insert or overwrite ``title``; return the path it previously pointed at."""
        with self._lock:
            previous = self._entries.get(title)
            self._entries[title] = path
        return previous

    def resolve(self) -> List[Tuple[str, str]]:
        """Return ``(title, path)`` pairs in insertion order."""
        with self._lock:
            return list(self._entries.items())

    def get(self, title: str) -> Optional[str]:
        with self._lock:
            return self._entries.get(title)

    def __contains__(self, title: object) -> bool:
        with self._lock:
            return title in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.resolve())


__all__ = ["TypeReferenceIndex"]
