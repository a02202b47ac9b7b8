"""AuditEvent: immutable record of a security-relevant transition."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import Field

from ogw.domain.shared.model.value import ValueObject

ANONYMOUS = "anonymous"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class AuditEvent(ValueObject):
    """Write-once audit record. There is no update or delete path."""

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=_utc_now)
    actor: str = ANONYMOUS  # Account id, or "anonymous" before sign-in
    action: str
    payload: dict[str, Any] = Field(default_factory=dict)
