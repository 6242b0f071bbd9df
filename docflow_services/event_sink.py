"""
docflow_services.event_sink -- Workflow event receivers.

Responsibility:
    Concrete ``EventSink`` implementations for the event names declared in
    ``docflow_kernel.domain.events``.  Applications normally inject their
    own bus; these cover the defaults, structured logging, and tests.

Architecture position:
    Services layer.  Imports kernel only.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from docflow_kernel.logging_config import get_logger

logger = get_logger("services.event_sink")


class NullEventSink:
    """Discards every event."""

    def emit(self, name: str, payload: Mapping[str, Any]) -> None:
        return None


class LoggingEventSink:
    """Writes each event as one structured ``workflow_event`` log line."""

    def __init__(self, log: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = log or logger
        self._level = level

    def emit(self, name: str, payload: Mapping[str, Any]) -> None:
        self._logger.log(
            self._level,
            "workflow_event",
            extra={"event_name": name, "payload": dict(payload)},
        )


@dataclass
class CollectingEventSink:
    """Records events in memory, in emission order."""

    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def emit(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def payloads(self, name: str) -> list[dict[str, Any]]:
        """Payloads of every event called ``name``."""
        return [payload for event_name, payload in self.events if event_name == name]

    def clear(self) -> None:
        self.events.clear()
