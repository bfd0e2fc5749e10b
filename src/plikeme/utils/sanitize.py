"""Helpers for cleaning user supplied text before it is stored."""
from __future__ import annotations

from collections.abc import Iterable

from markupsafe import escape


def sanitize_input(value: str | None) -> str:
    """Trim whitespace and HTML-escape a user supplied string."""
    if value is None:
        return ""
    return str(escape(value.strip()))


def sanitize_list(values: Iterable[str] | None) -> list[str]:
    """Sanitize every entry of a list, dropping entries that end up empty."""
    if not values:
        return []
    cleaned = (sanitize_input(value) for value in values)
    return [value for value in cleaned if value]
