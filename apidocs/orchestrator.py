"""Pipeline orchestration: discover, extract, render and write API docs."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import ExitStack
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import DocsConfig
from .extractor import DeclarationExtractor, Record
from .logging import get_logger
from .models import DeclarationRecord, sort_by_weight
from .parser import ParsedSource, SourceParser
from .rendering.renderer import Renderer
from .rendering.types import LinkMatching, TypeLinker
from .source_scanner import discover_sources
from .type_index import TypeReferenceIndex
from .watcher import SourceWatcher
from .writer import OutputWriter, category_index_factory, delete_generated_docs


class GenerationError(RuntimeError):
    """Raised when one or more files could not be documented."""

    def __init__(self, failures: Sequence["FileFailure"]) -> None:
        summary = "; ".join(f"{failure.path} ({failure.stage}): {failure.error}" for failure in failures)
        super().__init__(f"{len(failures)} file(s) failed: {summary}")
        self.failures = list(failures)


@dataclass
class FileFailure:
    """A source file whose processing stopped at ``stage``."""

    path: Path
    stage: str
    error: Exception


@dataclass
class GenerationReport:
    """Outcome of a generation pass."""

    records: List[DeclarationRecord] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failures

    def by_category(self) -> Dict[str, List[DeclarationRecord]]:
        """Group records per category, each list ordered by ascending weight."""
        grouped: Dict[str, List[DeclarationRecord]] = {}
        for record in self.records:
            grouped.setdefault(record.category, []).append(record)
        return {category: sort_by_weight(records) for category, records in grouped.items()}

    def raise_for_failures(self) -> None:
        if self.failures:
            raise GenerationError(self.failures)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class DocsGenerator:
    """Coordinates API doc generation for a set of TypeScript sources."""

    def __init__(
        self,
        config: DocsConfig,
        *,
        parser: SourceParser | None = None,
        extractor: DeclarationExtractor | None = None,
        renderer: Renderer | None = None,
        writer: OutputWriter | None = None,
        type_index: TypeReferenceIndex | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.config = config
        self.parser = parser or SourceParser(config.source_root)
        self.extractor = extractor or DeclarationExtractor()
        self.renderer = renderer or Renderer(
            TypeLinker(config.docs_path, LinkMatching(config.link_matching)),
            clock=clock,
            source_label=config.source_label,
        )
        self.writer = writer or self._build_writer(config.output_dir)
        self.type_index = type_index if type_index is not None else TypeReferenceIndex()
        self.logger = get_logger("orchestrator")
        self.watcher: SourceWatcher | None = None
        self._file_locks: Dict[Path, threading.Lock] = {}
        self._file_locks_guard = threading.Lock()

    def run(self, *, watch: bool = False) -> GenerationReport:
        """Regenerate all docs from scratch, optionally watching for changes."""
        paths = discover_sources(
            self.config.source_dir,
            suffixes=self.config.suffixes,
            exclude_paths=self.config.exclude_paths,
        )
        self.logger.debug("Discovered %d source files", len(paths))
        delete_generated_docs(self.writer.output_root)
        report = self.generate_docs(paths)
        if watch:
            self.watch(paths)
        return report

    def watch(self, paths: Iterable[Path]) -> SourceWatcher:
        """Start polling ``paths``; each change regenerates just that file."""
        if self.watcher is not None:
            self.watcher.stop()
        self.watcher = SourceWatcher(
            paths,
            self._regenerate_file,
            interval=self.config.watch_interval,
        )
        self.watcher.start()
        return self.watcher

    def stop(self) -> None:
        if self.watcher is not None:
            self.watcher.stop()
            self.watcher = None

    def generate_docs(
        self,
        paths: Sequence[Path],
        output_root: Path | None = None,
        type_index: TypeReferenceIndex | None = None,
    ) -> GenerationReport:
        """Document ``paths``: extract every file first, then render and write."""
        started = time.perf_counter()
        index = type_index if type_index is not None else self.type_index
        writer = self.writer
        if output_root is not None and output_root != writer.output_root:
            writer = self._build_writer(output_root)
        writer.begin_run()

        report = GenerationReport()
        unique_paths = sorted({Path(p) for p in paths})
        with ExitStack() as stack:
            for path in unique_paths:
                stack.enter_context(self._lock_for(path))

            extracted: List[Tuple[Path, List[Record]]] = []
            for path in paths:
                records = self._extract_file(Path(path), index, report)
                if records is not None:
                    extracted.append((Path(path), records))

            self._warn_on_collisions(extracted)

            for path, records in extracted:
                self._write_file(path, records, index, writer, report)

        report.duration_ms = (time.perf_counter() - started) * 1000
        if report.records:
            self.logger.info(
                "Generated %d docs in %dms", len(report.records), round(report.duration_ms)
            )
        return report

    def _extract_file(
        self, path: Path, index: TypeReferenceIndex, report: GenerationReport
    ) -> Optional[List[Record]]:
        try:
            parsed: ParsedSource = self.parser.parse_file(path)
            return self.extractor.extract_all(parsed, index)
        except Exception as exc:
            self._log_exception(f"Failed to parse {path}", exc)
            report.failures.append(FileFailure(path=path, stage="parse", error=exc))
            return None

    def _write_file(
        self,
        path: Path,
        records: List[Record],
        index: TypeReferenceIndex,
        writer: OutputWriter,
        report: GenerationReport,
    ) -> None:
        written: List[Path] = []
        try:
            for record in records:
                content = self.renderer.render(record, index)
                written.append(writer.write(record, content))
        except Exception as exc:
            self._log_exception(f"Failed to write docs for {path}", exc)
            report.failures.append(FileFailure(path=path, stage="write", error=exc))
            return
        report.records.extend(records)
        report.written.extend(written)

    def _warn_on_collisions(self, extracted: Sequence[Tuple[Path, List[Record]]]) -> None:
        seen: Dict[str, DeclarationRecord] = {}
        for _path, records in extracted:
            for record in records:
                earlier = seen.get(record.output_path)
                if earlier is not None:
                    self.logger.warning(
                        "%s:%d overwrites %s from %s:%d (same output path %s)",
                        record.source_file,
                        record.source_line,
                        earlier.title,
                        earlier.source_file,
                        earlier.source_line,
                        record.output_path,
                    )
                seen[record.output_path] = record

    def _regenerate_file(self, path: Path) -> GenerationReport:
        report = self.generate_docs([path])
        for failure in report.failures:
            self.logger.warning("Watch regeneration of %s failed at %s stage", failure.path, failure.stage)
        return report

    def _lock_for(self, path: Path) -> threading.Lock:
        with self._file_locks_guard:
            lock = self._file_locks.get(path)
            if lock is None:
                lock = threading.Lock()
                self._file_locks[path] = lock
            return lock

    def _build_writer(self, output_root: Path) -> OutputWriter:
        return OutputWriter(
            output_root,
            category_index_factory(self.renderer.front_matter),
            extension=self.config.extension,
        )

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


def generate_docs(
    paths: Sequence[Path],
    output_root: Path,
    type_index: TypeReferenceIndex,
    *,
    watch: bool = False,
    config: DocsConfig | None = None,
    clock: Callable[[], datetime] = _utc_now,
) -> Tuple[GenerationReport, DocsGenerator]:
    """Generate docs for ``paths`` into ``output_root`` using a shared ``type_index``.

    With ``watch`` set, every path is additionally polled and regenerated on
    its own when it changes; call ``stop()`` on the returned generator to end
    watching.
    """
    if config is None:
        config = DocsConfig.defaults(Path.cwd())
    config = replace(config, output_dir=output_root)
    generator = DocsGenerator(config, type_index=type_index, clock=clock)
    report = generator.generate_docs(paths)
    if watch:
        generator.watch(paths)
    return report, generator


__all__ = [
    "DocsGenerator",
    "FileFailure",
    "GenerationError",
    "GenerationReport",
    "generate_docs",
]
