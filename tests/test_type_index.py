"""Tests for the type reference index."""

from __future__ import annotations

import threading

from apidocs.type_index import TypeReferenceIndex


def test_register_inserts_and_overwrites() -> None:
    index = TypeReferenceIndex()
    assert index.register("Foo", "common/foo") is None
    assert index.register("Foo", "other/foo") == "common/foo"
    assert index.get("Foo") == "other/foo"
    assert "Foo" in index
    assert len(index) == 1


def test_resolve_keeps_insertion_order() -> None:
    index = TypeReferenceIndex()
    index.register("Zeta", "a/zeta")
    index.register("Alpha", "a/alpha")
    index.register("Zeta", "b/zeta")
    assert index.resolve() == [("Zeta", "b/zeta"), ("Alpha", "a/alpha")]
    assert list(index) == index.resolve()


def test_concurrent_registration_and_snapshots() -> None:
    index = TypeReferenceIndex()

    def _register(prefix: str) -> None:
        for i in range(500):
            index.register(f"{prefix}{i}", f"c/{prefix}-{i}")
            index.resolve()

    threads = [threading.Thread(target=_register, args=(name,)) for name in ("A", "B", "C")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(index) == 1500
