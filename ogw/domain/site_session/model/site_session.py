"""SiteSession entity: gateway login state bridged into a middleware-protected site."""

import secrets
from datetime import UTC, datetime
from typing import Any

from pydantic import Field, RootModel

from ogw.domain.shared.model.entity import Entity


class SiteSessionId(RootModel[str]):
    """Identity of a site session, carried by the browser in the signed cookie."""

    @classmethod
    def generate(cls) -> "SiteSessionId":
        return cls(secrets.token_hex(16))

    def __str__(self) -> str:
        return self.root

    def __hash__(self) -> int:
        return hash(self.root)


class SiteSession(Entity):
    """A longer-lived session object derived for a middleware client.

    Created on first consent for a middleware client; on every later consent
    from the same browser only `session_id` is rebound to the current OIDC
    session.
    """

    id: SiteSessionId
    session_id: str | None  # The OIDC session's own identifier
    account_id: str
    client_id: str
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        session_id: str | None,
        account_id: str,
        client_id: str,
        payload: dict[str, Any] | None = None,
    ) -> "SiteSession":
        return cls(
            id=SiteSessionId.generate(),
            session_id=session_id,
            account_id=account_id,
            client_id=client_id,
            payload=payload or {},
            created_at=datetime.now(UTC),
        )

    def rebind(self, session_id: str) -> "SiteSession":
        """Return a copy bound to another OIDC session."""
        return self.model_copy(update={"session_id": session_id, "updated_at": datetime.now(UTC)})
