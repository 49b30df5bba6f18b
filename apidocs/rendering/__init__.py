"""Rendering of declaration records into markdown documents."""

from .front_matter import format_timestamp, render_front_matter
from .markers import GENERATED_MARKER, is_generated
from .renderer import Renderer
from .types import LinkMatching, TypeLinker, escape_type_text

__all__ = [
    "GENERATED_MARKER",
    "LinkMatching",
    "Renderer",
    "TypeLinker",
    "escape_type_text",
    "format_timestamp",
    "is_generated",
    "render_front_matter",
]
