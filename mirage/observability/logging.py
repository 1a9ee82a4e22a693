"""One-line key=value events on top of the project logger."""

from __future__ import annotations

import logging

from mirage.util.logger import get_logger

_events = get_logger("events")


def format_event(event: str, payload: dict[str, object]) -> str:
    fields = " ".join(f"{key}={payload[key]!r}" for key in sorted(payload))
    return f"event={event} {fields}".rstrip()


def log_event(event: str, level: int = logging.INFO, **payload: object) -> None:
    _events.log(level, "%s", format_event(event, payload))
