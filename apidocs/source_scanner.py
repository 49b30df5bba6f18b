"""Discovery of source files to document."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

# Never descended into, whatever the ignore files say.
_SKIPPED_DIRS = frozenset({".git", ".hg", ".svn", "node_modules", "dist", "coverage", ".cache"})

IGNORE_FILENAME = ".gitignore"


@dataclass(frozen=True)
class IgnoreRule:
    """One gitignore-style pattern, relative to the source directory."""

    pattern: str
    directory_only: bool = False
    anchored: bool = False
    negate: bool = False

    @classmethod
    def parse(cls, line: str) -> Optional["IgnoreRule"]:
        """Build a rule from an ignore-file line; blank lines and comments give None."""
        text = line.strip()
        if not text or text.startswith("#"):
            return None
        negate = text.startswith("!")
        if negate:
            text = text[1:]
        directory_only = text.endswith("/")
        text = text.rstrip("/")
        # A slash anywhere but the end pins the pattern to the source directory.
        anchored = "/" in text
        text = text.lstrip("/")
        if not text:
            return None
        return cls(text, directory_only=directory_only, anchored=anchored, negate=negate)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored:
            return fnmatchcase(rel_path, self.pattern)
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.pattern)


def read_ignore_file(path: Path) -> List[IgnoreRule]:
    if not path.is_file():
        return []
    rules = (IgnoreRule.parse(line) for line in path.read_text(encoding="utf-8").splitlines())
    return [rule for rule in rules if rule is not None]


@dataclass
class SourceFilter:
    """Decides which directories to enter and which files are sources.

    Rules apply in order and the last match wins, so a later ``!pattern``
    re-includes a path an earlier rule excluded.
    """

    suffixes: Tuple[str, ...] = (".ts",)
    rules: List[IgnoreRule] = field(default_factory=list)

    @classmethod
    def for_directory(
        cls,
        root: Path,
        suffixes: Sequence[str] = (".ts",),
        exclude_paths: Iterable[str] = (),
    ) -> "SourceFilter":
        rules = read_ignore_file(root / IGNORE_FILENAME)
        rules.extend(rule for rule in map(IgnoreRule.parse, exclude_paths) if rule is not None)
        return cls(tuple(suffix.lower() for suffix in suffixes), rules)

    def is_ignored(self, rel_path: str, is_dir: bool) -> bool:
        ignored = False
        for rule in self.rules:
            if rule.matches(rel_path, is_dir):
                ignored = not rule.negate
        return ignored

    def enters(self, rel_dir: str) -> bool:
        name = rel_dir.rsplit("/", 1)[-1]
        return name not in _SKIPPED_DIRS and not self.is_ignored(rel_dir, True)

    def accepts(self, rel_file: str) -> bool:
        return rel_file.lower().endswith(self.suffixes) and not self.is_ignored(rel_file, False)


def _walk(root: Path, source_filter: SourceFilter) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        prefix = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if prefix == "." else f"{prefix}/"
        dirnames[:] = [name for name in dirnames if source_filter.enters(prefix + name)]
        for filename in filenames:
            if source_filter.accepts(prefix + filename):
                yield Path(dirpath) / filename


def discover_sources(
    source_dir: Path,
    *,
    suffixes: Sequence[str] = (".ts",),
    exclude_paths: Sequence[str] = (),
) -> List[Path]:
    """Return sorted absolute paths of the source files below ``source_dir``."""
    root = source_dir.expanduser().resolve()
    if not root.exists():
        raise FileNotFoundError(f"Source directory not found: {source_dir}")
    if not root.is_dir():
        raise NotADirectoryError(f"Source path is not a directory: {source_dir}")
    return sorted(_walk(root, SourceFilter.for_directory(root, suffixes, exclude_paths)))


__all__ = ["IgnoreRule", "SourceFilter", "discover_sources", "read_ignore_file"]
