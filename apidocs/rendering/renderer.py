"""Markdown rendering of declaration records."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Callable, List, Optional

from ..models import (
    DeclarationRecord,
    InterfaceRecord,
    MemberRecord,
    MethodMember,
    PropertyMember,
    TypeAliasRecord,
)
from ..type_index import TypeReferenceIndex
from .front_matter import render_front_matter
from .types import TypeLinker


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Renderer:
    """Renders interface and type-alias records into Hugo markdown documents."""

    def __init__(
        self,
        linker: Optional[TypeLinker] = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
        source_label: str = "TypeScript source",
    ) -> None:
        self.linker = linker or TypeLinker()
        self.clock = clock
        self.source_label = source_label

    def render(self, record: DeclarationRecord, type_index: TypeReferenceIndex) -> str:
        if isinstance(record, InterfaceRecord):
            return self.render_interface(record, type_index)
        if isinstance(record, TypeAliasRecord):
            return self.render_type_alias(record)
        raise TypeError(f"Cannot render declaration of kind {record.kind!r}")

    def front_matter(self, title: str, weight: int, *, show_toc: bool = True) -> str:
        return render_front_matter(
            title,
            weight,
            timestamp=self.clock(),
            show_toc=show_toc,
            source_label=self.source_label,
        )

    def render_interface(self, record: InterfaceRecord, type_index: TypeReferenceIndex) -> str:
        output = self._header(record)
        output += "## Signature\n\n"
        output += render_interface_signature(record)
        output += "## Members\n\n"
        for member in record.members:
            output += f"### {member.name}\n\n"
            output += self._member_info(member, type_index)
            output += f"{member.description}\n\n"
        return output

    def render_type_alias(self, record: TypeAliasRecord) -> str:
        output = self._header(record)
        output += "## Signature\n\n"
        output += f"```ts\ntype {record.full_text} = {record.type};\n```"
        return output

    def render_member_type(self, member: MemberRecord, type_index: TypeReferenceIndex) -> str:
        """Return the hyperlinked type of a property, or a function type for a method."""
        if isinstance(member, MethodMember):
            args = ", ".join(
                f"{param.name}: {self.linker.render(param.type, type_index)}"
                for param in member.parameters
            )
            return f"({args}) => {self.linker.render(member.type, type_index)}"
        return self.linker.render(member.type, type_index)

    def _header(self, record: DeclarationRecord) -> str:
        output = self.front_matter(record.title, record.weight)
        output += f"\n\n# {record.title}\n\n"
        output += render_generation_info(record)
        output += f"{record.description}\n\n"
        return output

    def _member_info(self, member: MemberRecord, type_index: TypeReferenceIndex) -> str:
        type_text = self.render_member_type(member, type_index)
        default_param = ""
        if isinstance(member, PropertyMember) and member.default_value:
            default_param = f'default="{member.default_value}" '
        return f'{{{{< member-info kind="{member.kind}" type="{type_text}" {default_param}>}}}}\n\n'


def render_generation_info(record: DeclarationRecord) -> str:
    """Shortcode the site theme turns into a "view source" link."""
    return (
        f'{{{{< generation-info sourceFile="{record.source_file}" '
        f'sourceLine="{record.source_line}">}}}}\n\n'
    )


def render_interface_signature(record: InterfaceRecord) -> str:
    # An interface without members still gets a blank line between its braces.
    body = "\n".join(f"  {member.full_text}" for member in record.members)
    return f"```ts\ninterface {record.full_text} {{\n{body}\n}}\n```\n"


__all__ = ["Renderer", "render_generation_info", "render_interface_signature"]
