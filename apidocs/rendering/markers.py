"""Marker utilities identifying machine-generated documents."""

from __future__ import annotations

import re

GENERATED_MARKER = "generated: true"

_GENERATED_PATTERN = re.compile(r"generated: true\n---\n")


def is_generated(content: str) -> bool:
    """Return True if the content carries the generated front-matter marker."""
    return _GENERATED_PATTERN.search(content) is not None


def do_not_edit_notice(source_label: str) -> str:
    return (
        f"<!-- This file was generated from the {source_label}. Do not modify. "
        'Instead, re-run "generate-docs" -->'
    )


__all__ = ["GENERATED_MARKER", "do_not_edit_notice", "is_generated"]
