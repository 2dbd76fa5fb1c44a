"""Index telemetry: named mutation events and the sinks that receive them.

Events describe what happened to the index, never what is stored in it:
attributes hold counts, flags and key reprs only.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable

IndexEventName = Literal[
    "index.add",
    "index.delete",
    "index.replace",
    "index.clear",
    "index.duplicate_key",
]

ADD: IndexEventName = "index.add"
DELETE: IndexEventName = "index.delete"
REPLACE: IndexEventName = "index.replace"
CLEAR: IndexEventName = "index.clear"
DUPLICATE_KEY: IndexEventName = "index.duplicate_key"


@dataclass
class IndexEvent:
    name: IndexEventName
    attributes: dict[str, Any] = field(default_factory=dict)
    timestamp_ms: float = field(default_factory=lambda: time.time() * 1000)


@runtime_checkable
class TelemetrySink(Protocol):
    def emit(self, event: IndexEvent) -> None:
        raise NotImplementedError


class NoOpTelemetrySink:
    """Default sink for an index nobody is watching."""

    def emit(self, event: IndexEvent) -> None:
        _ = event


class RecordingTelemetrySink:
    """Keeps every event, in order, for later inspection."""

    def __init__(self) -> None:
        self.events: list[IndexEvent] = []

    def emit(self, event: IndexEvent) -> None:
        self.events.append(event)

    def names(self) -> list[IndexEventName]:
        return [event.name for event in self.events]

    def of(self, name: IndexEventName) -> list[IndexEvent]:
        return [event for event in self.events if event.name == name]


class LoggerTelemetrySink:
    """Logs each index event, with its attributes attached to the record."""

    def __init__(
        self, logger_name: str = "multikey_index.telemetry", level: int = logging.INFO
    ) -> None:
        self.logger = logging.getLogger(logger_name)
        self.level = level

    def emit(self, event: IndexEvent) -> None:
        self.logger.log(
            self.level,
            "%s %s",
            event.name,
            event.attributes,
            extra={
                "event_name": event.name,
                "event_timestamp_ms": event.timestamp_ms,
                "event_attributes": event.attributes,
            },
        )
