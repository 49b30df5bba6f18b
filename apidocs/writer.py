"""Persists rendered documents into the category-partitioned output tree."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict

from .logging import get_logger
from .models import DEFAULT_WEIGHT, DeclarationRecord
from .rendering.markers import is_generated

IndexFactory = Callable[[str], str]


@dataclass
class CategoryState:
    """What the current run already ensured for one category directory."""

    directory: Path
    index_path: Path
    index_created: bool


class OutputWriter:
    """Writes documents to ``<root>/<category>/<slug>.<ext>``.

    Each category's directory and index document are checked once per run; an
    existing index document is never overwritten.
    """

    def __init__(
        self,
        output_root: Path,
        index_factory: IndexFactory,
        *,
        extension: str = "md",
        index_name: str = "_index",
    ) -> None:
        self.output_root = output_root
        self.index_factory = index_factory
        self.extension = extension.lstrip(".")
        self.index_name = index_name
        self.logger = get_logger("writer")
        self._categories: Dict[str, CategoryState] = {}
        self._lock = threading.Lock()

    def begin_run(self) -> None:
        """Forget category initialisation from previous runs."""
        with self._lock:
            self._categories.clear()

    def document_path(self, record: DeclarationRecord) -> Path:
        return self.output_root / record.category / f"{record.file_name}.{self.extension}"

    def write(self, record: DeclarationRecord, content: str) -> Path:
        """Write ``content`` for ``record``, overwriting any previous document."""
        self.ensure_category(record.category)
        path = self.document_path(record)
        path.write_text(content, encoding="utf-8")
        self.logger.debug("Wrote %s", path)
        return path

    def ensure_category(self, category: str) -> CategoryState:
        with self._lock:
            state = self._categories.get(category)
            if state is not None:
                return state
            directory = self.output_root / category
            directory.mkdir(parents=True, exist_ok=True)
            index_path = directory / f"{self.index_name}.{self.extension}"
            created = False
            if not index_path.exists():
                index_path.write_text(self.index_factory(category), encoding="utf-8")
                created = True
                self.logger.debug("Created category index %s", index_path)
            state = CategoryState(directory=directory, index_path=index_path, index_created=created)
            self._categories[category] = state
            return state


def category_index_factory(front_matter: Callable[..., str]) -> IndexFactory:
    """Build the minimal index document body for a category."""

    def _factory(category: str) -> str:
        return front_matter(category, DEFAULT_WEIGHT, show_toc=False) + f"\n\n# {category}"

    return _factory


def delete_generated_docs(output_root: Path) -> int:
    """Delete every generated document below ``output_root``; return how many went."""
    logger = get_logger("writer")
    if not output_root.exists():
        return 0
    deleted = 0
    for dirpath, _dirnames, filenames in os.walk(output_root):
        for filename in filenames:
            path = Path(dirpath) / filename
            try:
                content = path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                continue
            if is_generated(content):
                path.unlink()
                deleted += 1
    logger.info("Deleted %d generated docs", deleted)
    return deleted


__all__ = [
    "CategoryState",
    "OutputWriter",
    "category_index_factory",
    "delete_generated_docs",
]
