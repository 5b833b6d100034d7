"""Text helpers shared by the tree renderers and the issue detail page."""

from __future__ import annotations

ELLIPSIS = "..."


def truncate(text: str | None, max_len: int) -> str:
    """Shorten ``text`` to ``max_len`` characters, ending with ``...`` when cut.

    Limits of three or fewer leave no room for the ellipsis, so the raw prefix
    is returned instead.

    Examples
    --------
    >>> truncate("Hello World", 5)
    'He...'
    >>> truncate("Hi", 10)
    'Hi'
    >>> truncate("abcdef", 2)
    'ab'
    """
    if not text or max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    if max_len <= len(ELLIPSIS):
        return text[:max_len]
    return text[: max_len - len(ELLIPSIS)] + ELLIPSIS


def truncate_bytes(text: str | None, max_bytes: int) -> str:
    """Like :func:`truncate` but bounded by UTF-8 byte length.

    Never splits a multi-byte character, so the result may be a few bytes
    shorter than ``max_bytes``.
    """
    if not text or max_bytes <= 0:
        return ""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    if max_bytes <= len(ELLIPSIS):
        return encoded[:max_bytes].decode("utf-8", errors="ignore")
    head = encoded[: max_bytes - len(ELLIPSIS)].decode("utf-8", errors="ignore")
    return head + ELLIPSIS


def wrap_text(text: str | None, width: int) -> list[str]:
    """Greedy word wrap; a single word wider than ``width`` keeps its own line."""
    words = (text or "").split()
    lines: list[str] = []
    current = ""
    for word in words:
        if current and len(current) + 1 + len(word) > width:
            lines.append(current)
            current = ""
        current = f"{current} {word}" if current else word
    if current:
        lines.append(current)
    return lines
