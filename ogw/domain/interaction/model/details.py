"""Interaction details and the tagged lookup result."""

from dataclasses import dataclass, field
from typing import Any

from ogw.domain.interaction.model.session import SessionRecord


@dataclass(frozen=True)
class InteractionDetails:
    """A suspended authorization as reported by the protocol layer.

    `result` holds the partial submissions merged so far (login, consent,
    the displayed ToS checksum, a provisional site session).
    """

    uid: str
    prompt_name: str | None
    params: dict[str, Any] = field(default_factory=dict)
    session: SessionRecord | None = None
    grant_id: str | None = None
    result: dict[str, Any] = field(default_factory=dict)

    @property
    def client_id(self) -> str | None:
        return self.params.get("client_id")

    @property
    def account_id(self) -> str | None:
        """Account bound to this interaction: a fresh login wins over the session."""
        login = self.result.get("login") or {}
        return login.get("accountId") or (self.session.account_id if self.session else None)

    @property
    def requested_scopes(self) -> frozenset[str]:
        return frozenset((self.params.get("scope") or "").split())

    @property
    def consented_grant_id(self) -> str | None:
        consent = self.result.get("consent") or {}
        return consent.get("grantId") or self.grant_id


@dataclass(frozen=True)
class Found:
    details: InteractionDetails


@dataclass(frozen=True)
class Expired:
    """The interaction id is unknown or its TTL ran out."""

    uid: str
    reason: str = "interaction session not found"


InteractionLookup = Found | Expired
