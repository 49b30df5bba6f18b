"""Escaping and cross-reference linking of rendered type strings."""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, Tuple

from ..type_index import TypeReferenceIndex

_ENTITY_CHARS = re.compile("[\u00a0-\u9999<>&]")
_IDENTIFIER_CHAR = r"[A-Za-z0-9_$]"


class LinkMatching(Enum):
    """How registered titles are located inside a type string."""

    WORD = "word"
    SUBSTRING = "substring"


def escape_type_text(type_text: str) -> str:
    """Trim, encode special characters as numeric references and flatten newlines."""
    text = _ENTITY_CHARS.sub(lambda m: f"&#{ord(m.group(0))};", type_text.strip())
    return text.replace("\r\n", " ").replace("\n", " ")


class TypeLinker:
    """Renders type strings with known type names turned into hyperlinks.

    ``SUBSTRING`` replaces each registered title wherever it occurs, one title
    after another in index order, so a title contained in another (``Order`` in
    ``OrderLine``) can end up wrapped twice. ``WORD`` matches whole identifiers
    in a single pass, trying longer titles first, and never re-scans its own
    output.
    """

    def __init__(
        self,
        docs_path: str = "/docs/api",
        matching: LinkMatching = LinkMatching.WORD,
    ) -> None:
        self.docs_path = docs_path.rstrip("/")
        self.matching = matching

    def link(self, title: str, path: str) -> str:
        return f"<a href='{self.docs_path}/{path}/'>{title}</a>"

    def render(self, type_text: str, type_index: TypeReferenceIndex) -> str:
        text = escape_type_text(type_text)
        entries = type_index.resolve()
        if not text or not entries:
            return text
        if self.matching is LinkMatching.SUBSTRING:
            return self._replace_substrings(text, entries)
        return self._replace_words(text, entries)

    def _replace_substrings(self, text: str, entries: Iterable[Tuple[str, str]]) -> str:
        for title, path in entries:
            if title:
                text = text.replace(title, self.link(title, path))
        return text

    def _replace_words(self, text: str, entries: Iterable[Tuple[str, str]]) -> str:
        targets = {title: path for title, path in entries if title}
        if not targets:
            return text
        alternation = "|".join(
            re.escape(title) for title in sorted(targets, key=len, reverse=True)
        )
        pattern = re.compile(
            rf"(?<!{_IDENTIFIER_CHAR})(?:{alternation})(?!{_IDENTIFIER_CHAR})"
        )
        return pattern.sub(lambda m: self.link(m.group(0), targets[m.group(0)]), text)


__all__ = ["LinkMatching", "TypeLinker", "escape_type_text"]
