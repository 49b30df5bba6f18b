"""Tests for type string escaping and hyperlinking."""

from __future__ import annotations

from apidocs.rendering.types import LinkMatching, TypeLinker, escape_type_text
from apidocs.type_index import TypeReferenceIndex


def _index(*entries: tuple[str, str]) -> TypeReferenceIndex:
    index = TypeReferenceIndex()
    for title, path in entries:
        index.register(title, path)
    return index


def test_escape_encodes_special_characters_and_flattens_newlines() -> None:
    assert escape_type_text("  Array<string>  ") == "Array&#60;string&#62;"
    assert escape_type_text("A & B") == "A &#38; B"
    assert escape_type_text("{\n  a: string;\n}") == "{   a: string; }"
    assert escape_type_text("'é'") == "'&#233;'"
    assert escape_type_text("string | number") == "string | number"


def test_links_each_occurrence_of_a_registered_title() -> None:
    index = _index(("ShippingMethod", "shipping/shipping-method"))
    linker = TypeLinker("/docs/api")
    link = "<a href='/docs/api/shipping/shipping-method/'>ShippingMethod</a>"

    assert linker.render("ShippingMethod", index) == link
    assert linker.render("Array<ShippingMethod>", index) == f"Array&#60;{link}&#62;"
    rendered = linker.render("ShippingMethod | ShippingMethod[]", index)
    assert rendered == f"{link} | {link}[]"
    assert rendered.count("<a href=") == 2


def test_unknown_types_are_left_alone() -> None:
    linker = TypeLinker()
    assert linker.render("string", _index(("Foo", "common/foo"))) == "string"
    assert linker.render("", _index(("Foo", "common/foo"))) == ""
    assert linker.render("Foo", TypeReferenceIndex()) == "Foo"


def test_word_matching_does_not_link_inside_longer_names() -> None:
    index = _index(("Order", "orders/order"), ("OrderLine", "orders/order-line"))
    rendered = TypeLinker("/docs/api").render("Order | OrderLine", index)
    assert rendered == (
        "<a href='/docs/api/orders/order/'>Order</a> | "
        "<a href='/docs/api/orders/order-line/'>OrderLine</a>"
    )


def test_substring_matching_can_double_wrap_nested_names() -> None:
    index = _index(("OrderLine", "orders/order-line"), ("Order", "orders/order"))
    linker = TypeLinker("/docs/api", LinkMatching.SUBSTRING)
    rendered = linker.render("OrderLine", index)
    assert rendered == (
        "<a href='/docs/api/orders/order-line/'>"
        "<a href='/docs/api/orders/order/'>Order</a>Line</a>"
    )


def test_substring_matching_links_inside_longer_names() -> None:
    index = _index(("Order", "orders/order"))
    linker = TypeLinker("/docs/api", LinkMatching.SUBSTRING)
    assert linker.render("OrderLine", index) == "<a href='/docs/api/orders/order/'>Order</a>Line"


def test_docs_path_trailing_slash_is_normalised() -> None:
    index = _index(("Foo", "common/foo"))
    assert TypeLinker("/reference/").render("Foo", index) == "<a href='/reference/common/foo/'>Foo</a>"
