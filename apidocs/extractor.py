"""Turns parsed declarations into normalized documentation records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from tree_sitter import Node

from .logging import get_logger
from .models import (
    DEFAULT_WEIGHT,
    DeclarationRecord,
    InterfaceRecord,
    MemberRecord,
    MethodMember,
    MethodParameter,
    PropertyMember,
    SourceStatement,
    TypeAliasRecord,
)
from .parser import ParsedSource, is_valid_declaration
from .tags import DocTag, TagKind
from .type_index import TypeReferenceIndex

Record = Union[InterfaceRecord, TypeAliasRecord]

_MEMBER_SEPARATORS = (";", ",")
_PARAMETER_TYPES = frozenset({"required_parameter", "optional_parameter"})


def _append_paragraph(text: str, addition: str) -> str:
    if not addition:
        return text
    if not text:
        return addition
    return f"{text}\n\n{addition}"


def parse_weight(value: str) -> int:
    """Parse a ``@docsWeight`` value, falling back to the default weight."""
    try:
        return int(value.strip())
    except ValueError:
        return DEFAULT_WEIGHT


@dataclass
class _DeclarationBuilder:
    category: Optional[str] = None
    weight: int = DEFAULT_WEIGHT
    description: str = ""

    def apply(self, tag: DocTag) -> None:
        kind = tag.kind
        if kind is TagKind.DOCS_CATEGORY:
            self.category = tag.comment.strip()
        elif kind is TagKind.DOCS_WEIGHT:
            self.weight = parse_weight(tag.comment)
        elif kind is TagKind.DESCRIPTION:
            self.description = _append_paragraph(self.description, tag.comment)


@dataclass
class _MemberBuilder:
    description: str = ""
    default_value: str = ""

    def apply(self, tag: DocTag) -> None:
        kind = tag.kind
        if kind is TagKind.DESCRIPTION or kind is TagKind.EXAMPLE:
            self.description = _append_paragraph(self.description, tag.comment)
        elif kind is TagKind.DEFAULT:
            self.default_value = tag.comment


class DeclarationExtractor:
    """Builds declaration records from tagged interface and type-alias statements."""

    def __init__(self) -> None:
        self.logger = get_logger("extractor")

    def extract(self, parsed: ParsedSource, statement: SourceStatement) -> Optional[Record]:
        """Return a record for ``statement`` or None when it is not documented."""
        node: Node = statement.node
        if not is_valid_declaration(node):
            return None

        builder = _DeclarationBuilder()
        for tag in parsed.doc_tags_before(statement.start_byte):
            builder.apply(tag)
        if not builder.category:
            return None

        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        title = parsed.text(name_node)
        common = dict(
            source_file=statement.source_file,
            source_line=statement.source_line,
            title=title,
            full_text=title + _type_parameters_text(parsed, node),
            category=builder.category,
            weight=builder.weight,
            description=builder.description,
        )

        if node.type == "interface_declaration":
            body = node.child_by_field_name("body") or next(
                (c for c in node.named_children if c.type in ("interface_body", "object_type")),
                None,
            )
            members = self._parse_members(parsed, body) if body is not None else []
            return InterfaceRecord(members=tuple(members), **common)

        value = node.child_by_field_name("value")
        alias_type = parsed.text(value).strip() if value is not None else ""
        return TypeAliasRecord(type=alias_type, **common)

    def extract_all(
        self, parsed: ParsedSource, type_index: TypeReferenceIndex
    ) -> List[Record]:
        """Extract every documented declaration of a file, registering each title."""
        records: List[Record] = []
        for statement in parsed.statements:
            record = self.extract(parsed, statement)
            if record is None:
                continue
            previous = type_index.register(record.title, record.output_path)
            if previous is not None and previous != record.output_path:
                self.logger.warning(
                    "Type %s from %s:%d replaces earlier entry %s",
                    record.title,
                    record.source_file,
                    record.source_line,
                    previous,
                )
            records.append(record)
        return records

    def _parse_members(self, parsed: ParsedSource, body: Node) -> List[MemberRecord]:
        members: List[MemberRecord] = []
        for member in body.named_children:
            if member.type not in ("property_signature", "method_signature"):
                continue
            name_node = member.child_by_field_name("name")
            if name_node is None:
                continue

            builder = _MemberBuilder()
            for tag in parsed.doc_tags_before(member.start_byte):
                builder.apply(tag)

            name = parsed.text(name_node)
            full_text = _member_full_text(parsed, member)
            if member.type == "method_signature":
                return_type = member.child_by_field_name("return_type")
                members.append(
                    MethodMember(
                        name=name,
                        full_text=full_text,
                        type=_annotation_text(parsed, return_type),
                        description=builder.description,
                        parameters=tuple(_parameters(parsed, member)),
                    )
                )
            else:
                members.append(
                    PropertyMember(
                        name=name,
                        full_text=full_text,
                        type=_annotation_text(parsed, member.child_by_field_name("type")),
                        description=builder.description,
                        default_value=builder.default_value,
                    )
                )
        return members


def _type_parameters_text(parsed: ParsedSource, node: Node) -> str:
    type_parameters = node.child_by_field_name("type_parameters")
    if type_parameters is None:
        return ""
    params = [
        parsed.text(child)
        for child in type_parameters.named_children
        if child.type == "type_parameter"
    ]
    return "<" + ", ".join(params) + ">"


def _annotation_text(parsed: ParsedSource, annotation: Optional[Node]) -> str:
    """Return the type of a ``: Type`` annotation without its colon."""
    if annotation is None:
        return ""
    text = parsed.text(annotation).strip()
    if text.startswith(":"):
        text = text[1:]
    return text.strip()


def _member_full_text(parsed: ParsedSource, member: Node) -> str:
    text = parsed.text(member)
    separator = member.next_sibling
    if (
        separator is not None
        and separator.type in _MEMBER_SEPARATORS
        and separator.end_byte > separator.start_byte
    ):
        text += parsed.text(separator)
    return text


def _parameters(parsed: ParsedSource, method: Node) -> Iterable[MethodParameter]:
    formal = method.child_by_field_name("parameters")
    if formal is None:
        return
    for param in formal.named_children:
        if param.type not in _PARAMETER_TYPES:
            continue
        pattern = param.child_by_field_name("pattern") or param.child_by_field_name("name")
        name = parsed.text(pattern) if pattern is not None else ""
        if name.startswith("..."):
            name = name[3:]
        yield MethodParameter(
            name=name,
            type=_annotation_text(parsed, param.child_by_field_name("type")),
        )


def extract_declarations(
    parsed_sources: Iterable[ParsedSource],
    type_index: TypeReferenceIndex,
    extractor: Optional[DeclarationExtractor] = None,
) -> List[DeclarationRecord]:
    """Extract records across several files; every title is registered before returning."""
    extractor = extractor or DeclarationExtractor()
    records: List[DeclarationRecord] = []
    for parsed in parsed_sources:
        records.extend(extractor.extract_all(parsed, type_index))
    return records


__all__ = ["DeclarationExtractor", "Record", "extract_declarations", "parse_weight"]
