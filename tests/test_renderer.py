"""Tests for markdown rendering of declaration records."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from apidocs.models import InterfaceRecord, MethodMember, MethodParameter, PropertyMember, TypeAliasRecord
from apidocs.rendering.front_matter import format_timestamp, render_front_matter
from apidocs.rendering.markers import is_generated
from apidocs.rendering.renderer import Renderer, render_interface_signature
from apidocs.rendering.types import TypeLinker
from apidocs.type_index import TypeReferenceIndex
from tests._fixtures.clock import FIXED_TIME


def _foo() -> InterfaceRecord:
    return InterfaceRecord(
        source_file="/server/src/common/foo.ts",
        source_line=12,
        title="Foo",
        full_text="Foo<T>",
        category="common",
        weight=3,
        description="A foo.",
        members=(
            PropertyMember(
                name="bar",
                full_text="bar: string;",
                type="string",
                description="the bar value",
            ),
            PropertyMember(
                name="limit",
                full_text="limit?: number;",
                type="number",
                description="The limit.",
                default_value="5",
            ),
            MethodMember(
                name="ship",
                full_text="ship(method: ShippingMethod, count: number): Promise<boolean>;",
                type="Promise<boolean>",
                description="Ships it.",
                parameters=(
                    MethodParameter("method", "ShippingMethod"),
                    MethodParameter("count", "number"),
                ),
            ),
        ),
    )


@pytest.fixture
def renderer() -> Renderer:
    return Renderer(TypeLinker("/docs/api"), clock=lambda: FIXED_TIME)


def test_front_matter_layout() -> None:
    text = render_front_matter("Foo", 3, timestamp=FIXED_TIME, show_toc=False)
    assert text == (
        "---\n"
        'title: "Foo"\n'
        "weight: 3\n"
        "date: 2024-01-02T03:04:05.678Z\n"
        "showtoc: false\n"
        "generated: true\n"
        "---\n"
        "<!-- This file was generated from the TypeScript source. Do not modify. "
        'Instead, re-run "generate-docs" -->\n'
    )
    assert is_generated(text)


def test_format_timestamp_converts_to_utc() -> None:
    moment = datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(moment) == "2024-01-02T03:04:05.000Z"


def test_interface_document_sections_in_order(renderer: Renderer) -> None:
    index = TypeReferenceIndex()
    index.register("ShippingMethod", "shipping/shipping-method")
    doc = renderer.render(_foo(), index)

    positions = [
        doc.index("generated: true\n---\n"),
        doc.index("\n# Foo\n"),
        doc.index('{{< generation-info sourceFile="/server/src/common/foo.ts" sourceLine="12">}}'),
        doc.index("A foo."),
        doc.index("## Signature"),
        doc.index("## Members"),
        doc.index("### bar"),
        doc.index("### limit"),
        doc.index("### ship"),
    ]
    assert positions == sorted(positions)
    assert 'title: "Foo"\nweight: 3\n' in doc
    assert "showtoc: true" in doc


def test_interface_signature_block() -> None:
    assert render_interface_signature(_foo()) == (
        "```ts\n"
        "interface Foo<T> {\n"
        "  bar: string;\n"
        "  limit?: number;\n"
        "  ship(method: ShippingMethod, count: number): Promise<boolean>;\n"
        "}\n"
        "```\n"
    )


def test_empty_interface_signature_keeps_blank_body_line() -> None:
    empty = InterfaceRecord(
        source_file="/server/src/common/marker.ts",
        source_line=1,
        title="Marker",
        full_text="Marker",
        category="common",
    )
    assert render_interface_signature(empty) == "```ts\ninterface Marker {\n\n}\n```\n"


def test_member_sections(renderer: Renderer) -> None:
    index = TypeReferenceIndex()
    index.register("ShippingMethod", "shipping/shipping-method")
    doc = renderer.render(_foo(), index)

    assert '### bar\n\n{{< member-info kind="property" type="string" >}}\n\nthe bar value\n\n' in doc
    assert '{{< member-info kind="property" type="number" default="5" >}}\n\nThe limit.' in doc
    link = "<a href='/docs/api/shipping/shipping-method/'>ShippingMethod</a>"
    assert (
        f'{{{{< member-info kind="method" type="(method: {link}, count: number) => '
        f'Promise&#60;boolean&#62;" >}}}}\n\nShips it.'
    ) in doc
    assert doc.count("default=") == 1


def test_type_alias_document(renderer: Renderer) -> None:
    alias = TypeAliasRecord(
        source_file="/server/src/ids.ts",
        source_line=1,
        title="ID",
        full_text="ID",
        category="common",
        description="An identifier.",
        type="string | number",
    )
    doc = renderer.render(alias, TypeReferenceIndex())
    assert doc.endswith("## Signature\n\n```ts\ntype ID = string | number;\n```")
    assert "\n# ID\n" in doc
    assert "An identifier." in doc
    assert "## Members" not in doc


def test_rendering_is_deterministic_with_fixed_clock(renderer: Renderer) -> None:
    index = TypeReferenceIndex()
    assert renderer.render(_foo(), index) == renderer.render(_foo(), index)
