"""Masking helpers for secrets that end up in reprs or log lines."""

from __future__ import annotations


def mask_secret(value: str) -> str:
    """Keep a short prefix and the last 4 chars of *value*, star the rest.

    Anthropic keys share the ``sk-ant-`` prefix, so the tail is what tells two
    keys apart in a log line. Values of 8 chars or fewer are fully starred.
    """
    normalized = value.strip()
    length = len(normalized)
    if length == 0:
        return ""
    if length <= 8:
        return "*" * length
    head = 3 if length >= 16 else 1
    tail = 4
    return f"{normalized[:head]}{'*' * (length - head - tail)}{normalized[-tail:]}"
