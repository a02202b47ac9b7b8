"""AuditLog: best-effort recording of security-relevant transitions."""

import logging
from typing import Any

from ogw.domain.audit.model.event import ANONYMOUS, AuditEvent
from ogw.domain.audit.port.sink import AuditSink
from ogw.domain.shared.service import Service

logger = logging.getLogger(__name__)


class AuditLog(Service):
    """Fire-and-forget front for the AuditSink.

    Audit is observability, not a correctness dependency: a failing sink is
    logged and never fails the interaction being audited.
    """

    _sink: AuditSink

    async def record(
        self,
        action: str,
        actor: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> AuditEvent | None:
        """Record an event. Returns the event, or None if the sink failed."""
        event = AuditEvent(actor=actor or ANONYMOUS, action=action, payload=payload or {})
        try:
            await self._sink.record(event)
        except Exception:
            logger.exception(
                "Failed to record audit event: action=%s, actor=%s", action, event.actor
            )
            return None
        return event
