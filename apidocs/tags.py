"""Parsing of ``/** ... */`` documentation comments into tags."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

_CONTINUATION_PREFIX = re.compile(r"^\s*\*\s?")
_TAG_LINE = re.compile(r"^\s*@([A-Za-z][\w-]*)\s?(.*)$")
_FENCE = "```"


class TagKind(Enum):
    """Documentation tags understood by the extractor."""

    DOCS_CATEGORY = "docsCategory"
    DOCS_WEIGHT = "docsWeight"
    DESCRIPTION = "description"
    EXAMPLE = "example"
    DEFAULT = "default"
    OTHER = ""

    @classmethod
    def from_name(cls, name: str) -> "TagKind":
        for kind in cls:
            if kind is not cls.OTHER and kind.value == name:
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class DocTag:
    """A single ``@name comment`` entry from a documentation comment."""

    name: str
    comment: str

    @property
    def kind(self) -> TagKind:
        return TagKind.from_name(self.name)


def is_doc_comment(text: str) -> bool:
    """Return True for ``/** ... */`` blocks (but not the empty ``/**/``)."""
    return text.startswith("/**") and not text.startswith("/**/") and text.endswith("*/")


def parse_doc_comment(text: str) -> List[DocTag]:
    """Return the tags of a documentation comment in source order."""
    if not is_doc_comment(text):
        return []

    tags: List[DocTag] = []
    name: Optional[str] = None
    buffer: List[str] = []
    in_fence = False

    def _flush() -> None:
        if name is not None:
            tags.append(DocTag(name=name, comment="\n".join(buffer).strip()))

    for line in _comment_lines(text):
        match = None if in_fence else _TAG_LINE.match(line)
        if match:
            _flush()
            name = match.group(1)
            buffer = [match.group(2)]
            in_fence = match.group(2).count(_FENCE) % 2 == 1
            continue
        if line.count(_FENCE) % 2 == 1:
            in_fence = not in_fence
        if name is not None:
            buffer.append(line)
    _flush()
    return tags


def _comment_lines(text: str) -> List[str]:
    body = text[3:-2]
    lines = body.split("\n")
    result = [lines[0].strip()]
    for line in lines[1:]:
        result.append(_CONTINUATION_PREFIX.sub("", line.rstrip()))
    return result


__all__ = ["DocTag", "TagKind", "is_doc_comment", "parse_doc_comment"]
