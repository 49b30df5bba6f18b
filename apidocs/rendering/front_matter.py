"""Hugo front matter for generated documents."""

from __future__ import annotations

from datetime import UTC, datetime

from .markers import GENERATED_MARKER, do_not_edit_notice


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_front_matter(
    title: str,
    weight: int,
    *,
    timestamp: datetime,
    show_toc: bool = True,
    source_label: str = "TypeScript source",
) -> str:
    """Return the metadata block that opens every generated document."""
    lines = [
        "---",
        f'title: "{title}"',
        f"weight: {weight}",
        f"date: {format_timestamp(timestamp)}",
        f"showtoc: {'true' if show_toc else 'false'}",
        GENERATED_MARKER,
        "---",
        do_not_edit_notice(source_label),
    ]
    return "\n".join(lines) + "\n"


__all__ = ["format_timestamp", "render_front_matter"]
