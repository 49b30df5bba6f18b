"""Tree-sitter powered parser for TypeScript declaration sources."""

from __future__ import annotations

import bisect
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from .models import SourceStatement
from .tags import DocTag, is_doc_comment, parse_doc_comment

_TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

VALID_DECLARATION_TYPES = frozenset({"interface_declaration", "type_alias_declaration"})

_WRAPPER_TYPES = frozenset({"export_statement", "ambient_declaration"})


class SourceParseError(RuntimeError):
    """Raised when a source file does not parse cleanly."""

    def __init__(self, path: str, line: int, message: str) -> None:
        super().__init__(f"{path}:{line}: {message}")
        self.path = path
        self.line = line


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def is_valid_declaration(node: Optional[Node]) -> bool:
    """Return True for the declaration shapes the extractor can document."""
    return node is not None and node.type in VALID_DECLARATION_TYPES


def relative_source_path(path: Path, source_root: Optional[Path]) -> str:
    """Render ``path`` relative to ``source_root`` with a leading slash."""
    resolved = path.resolve()
    if source_root is not None:
        try:
            return "/" + resolved.relative_to(source_root.resolve()).as_posix()
        except ValueError:
            pass
    return resolved.as_posix()


@dataclass
class ParsedSource:
    """A parsed file: its bytes, top-level statements and documentation comments."""

    path: Path
    source: bytes
    statements: List[SourceStatement]
    _comment_ends: List[int] = field(default_factory=list, repr=False)
    _comments: List[Node] = field(default_factory=list, repr=False)

    def text(self, node: Node) -> str:
        return node_text(node, self.source)

    def doc_tags_before(self, start_byte: int) -> List[DocTag]:
        """Return the tags of every doc comment directly preceding ``start_byte``."""
        tags: List[DocTag] = []
        for comment in self.doc_comments_before(start_byte):
            tags.extend(parse_doc_comment(self.text(comment)))
        return tags

    def doc_comments_before(self, start_byte: int) -> List[Node]:
        """Return the ``/** */`` comments in the comment run leading up to ``start_byte``.

        Plain ``//`` and ``/* */`` comments inside the run are passed over, so a
        lint directive between a doc comment and its declaration keeps them
        attached. The run ends at the first non-comment source text.
        """
        attached: List[Node] = []
        start = start_byte
        index = bisect.bisect_right(self._comment_ends, start) - 1
        while index >= 0:
            comment = self._comments[index]
            if self.source[comment.end_byte : start].strip():
                break
            if is_doc_comment(self.text(comment)):
                attached.append(comment)
            start = comment.start_byte
            index -= 1
        attached.reverse()
        return attached


class SourceParser:
    """Parses TypeScript sources into top-level statements."""

    def __init__(self, source_root: Optional[Path] = None) -> None:
        self.source_root = source_root
        self._local = threading.local()

    def _get_parser(self) -> Parser:
        # tree-sitter parsers must not be shared between watch threads
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = Parser(_TS_LANGUAGE)
            self._local.parser = parser
        return parser

    def parse_file(self, path: Path) -> ParsedSource:
        return self.parse(path, path.read_text(encoding="utf-8"))

    def parse(self, path: Path, text: str) -> ParsedSource:
        """Parse ``text`` and return its statements, raising on any syntax error."""
        source = text.encode("utf-8")
        tree = self._get_parser().parse(source)
        root = tree.root_node
        source_file = relative_source_path(path, self.source_root)
        if root.has_error:
            bad = _first_error(root)
            line = bad.start_point[0] + 1 if bad is not None else 1
            kind = "missing token" if bad is not None and bad.is_missing else "syntax error"
            raise SourceParseError(source_file, line, kind)

        statements: List[SourceStatement] = []
        for child in root.named_children:
            if child.type == "comment":
                continue
            statements.append(
                SourceStatement(
                    node=_unwrap(child),
                    source_file=source_file,
                    source_line=child.start_point[0] + 1,
                    start_byte=child.start_byte,
                )
            )

        comments = sorted(_iter_comments(root), key=lambda c: c.end_byte)
        return ParsedSource(
            path=path,
            source=source,
            statements=statements,
            _comment_ends=[c.end_byte for c in comments],
            _comments=comments,
        )


def _unwrap(node: Node) -> Node:
    """Reach the declaration inside ``export``/``declare`` wrappers."""
    while node.type in _WRAPPER_TYPES:
        inner = node.child_by_field_name("declaration")
        if inner is None:
            inner = next(
                (c for c in node.named_children if c.type in VALID_DECLARATION_TYPES),
                None,
            )
        if inner is None:
            return node
        node = inner
    return node


def _iter_comments(node: Node):  # type: ignore[no-untyped-def]
    for child in node.children:
        if child.type == "comment":
            yield child
        else:
            yield from _iter_comments(child)


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


__all__ = [
    "ParsedSource",
    "SourceParseError",
    "SourceParser",
    "VALID_DECLARATION_TYPES",
    "is_valid_declaration",
    "node_text",
    "relative_source_path",
]
