"""Core data models shared across apidocs components."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, List, Tuple

DEFAULT_WEIGHT = 10

_UPPERCASE_BOUNDARY = re.compile(r"(?=[A-Z])")


def slugify(title: str) -> str:
    """Split ``title`` at uppercase letters and join the parts as a lower-case slug."""
    parts = [part for part in _UPPERCASE_BOUNDARY.split(title) if part]
    return "-".join(parts).lower()


@dataclass(frozen=True)
class SourceStatement:
    """A top-level syntax node annotated with where it came from."""

    node: Any
    source_file: str
    source_line: int
    start_byte: int = 0


@dataclass(frozen=True)
class MethodParameter:
    """Name and raw annotation text of a single method parameter."""

    name: str
    type: str = ""


@dataclass(frozen=True)
class MemberRecord:
    """Common attributes of an interface member."""

    kind: ClassVar[str] = "member"

    name: str
    full_text: str
    type: str = ""
    description: str = ""


@dataclass(frozen=True)
class PropertyMember(MemberRecord):
    kind: ClassVar[str] = "property"

    default_value: str = ""


@dataclass(frozen=True)
class MethodMember(MemberRecord):
    kind: ClassVar[str] = "method"

    parameters: Tuple[MethodParameter, ...] = ()


@dataclass(frozen=True)
class DeclarationRecord:
    """Normalized view of a documented declaration."""

    kind: ClassVar[str] = "declaration"

    source_file: str
    source_line: int
    title: str
    full_text: str
    category: str
    weight: int = DEFAULT_WEIGHT
    description: str = ""

    @property
    def file_name(self) -> str:
        return slugify(self.title)

    @property
    def output_path(self) -> str:
        """Location relative to the docs root, as registered in the type index."""
        return f"{self.category}/{self.file_name}"


@dataclass(frozen=True)
class InterfaceRecord(DeclarationRecord):
    kind: ClassVar[str] = "interface"

    members: Tuple[MemberRecord, ...] = ()


@dataclass(frozen=True)
class TypeAliasRecord(DeclarationRecord):
    kind: ClassVar[str] = "typeAlias"

    type: str = ""


def sort_by_weight(records: Iterable[DeclarationRecord]) -> List[DeclarationRecord]:
    """Order records for a category listing; ties keep their emission order."""
    return sorted(records, key=lambda record: record.weight)


__all__ = [
    "DEFAULT_WEIGHT",
    "DeclarationRecord",
    "InterfaceRecord",
    "MemberRecord",
    "MethodMember",
    "MethodParameter",
    "PropertyMember",
    "SourceStatement",
    "TypeAliasRecord",
    "slugify",
    "sort_by_weight",
]
