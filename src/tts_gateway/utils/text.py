"""Text helpers for log output."""
from __future__ import annotations


def preview(text: str, limit: int = 80) -> str:
    """
    Single-line, length-limited view of ``text`` for log messages.

    >>> preview("Hello\\nworld", 8)
    'Hello w…'
    """
    flat = " ".join(text.split())
    if limit <= 0:
        return ""
    if len(flat) <= limit:
        return flat
    return flat[: limit - 1] + "…"
