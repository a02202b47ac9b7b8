"""Audit sink port."""

from abc import abstractmethod
from typing import Protocol

from ogw.domain.audit.model.event import AuditEvent
from ogw.domain.shared.port import Port


class AuditSink(Port, Protocol):
    """Append-only destination for audit events."""

    @abstractmethod
    async def record(self, event: AuditEvent) -> None:
        """Append an event."""
        ...
