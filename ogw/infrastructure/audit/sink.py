"""Audit sinks that need no external storage."""

import json
import logging

from ogw.domain.audit.model.event import AuditEvent
from ogw.domain.audit.port.sink import AuditSink

audit_logger = logging.getLogger("ogw.audit")


class LoggingAuditSink(AuditSink):
    """One JSON line per event on the `ogw.audit` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or audit_logger

    async def record(self, event: AuditEvent) -> None:
        self._logger.info("%s", json.dumps(event.model_dump(mode="json"), sort_keys=True))


class InMemoryAuditSink(AuditSink):
    """Keeps events in a list. For tests and local development."""

    def __init__(self) -> None:
        self.events: list[AuditEvent] = []

    async def record(self, event: AuditEvent) -> None:
        self.events.append(event)

    def actions(self) -> list[str]:
        return [event.action for event in self.events]
