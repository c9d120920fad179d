"""
Size-bounded truncation for outbound message text.

truncate_in_bytes returns ``(text, truncated)``. When a marker fits it is
appended, and the result including the marker never exceeds the limit.
"""

from __future__ import annotations

TRUNCATION_MARKER = "…"

_MARKER_BYTES = len(TRUNCATION_MARKER.encode("utf-8"))


def truncate_in_bytes(text: str, limit: int) -> tuple[str, bool]:
    """Truncate ``text`` to at most ``limit`` UTF-8 bytes.

    Cuts land on a character boundary, so the result is always valid UTF-8.
    A trailing "…" is used when the limit leaves room for it.
    """
    encoded = text.encode("utf-8")
    if len(encoded) <= limit:
        return text, False

    marker = ""
    if limit > _MARKER_BYTES:
        limit -= _MARKER_BYTES
        marker = TRUNCATION_MARKER

    # A byte prefix of valid UTF-8 can only be broken at its tail
    head = encoded[: max(limit, 0)].decode("utf-8", errors="ignore")
    return head + marker, True

