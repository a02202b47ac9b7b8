"""In-process OIDC protocol adapter.

Holds suspended interactions, browser sessions and the static client list
in memory. It stands in for the external protocol library during local
development and tests; token issuance stays out of scope.
"""

import logging
import secrets
import time
from dataclasses import dataclass, field, replace
from typing import Any

from ogw.domain.interaction.model.client import ClientRecord
from ogw.domain.interaction.model.details import (
    Expired,
    Found,
    InteractionDetails,
    InteractionLookup,
)
from ogw.domain.interaction.model.session import SessionRecord
from ogw.domain.interaction.port.provider import OIDCProvider
from ogw.domain.shared.error import ProtocolError

logger = logging.getLogger(__name__)


@dataclass
class _Interaction:
    uid: str
    params: dict[str, Any]
    session_id: str
    expires_at: float
    result: dict[str, Any] = field(default_factory=dict)
    finished: bool = False


class InMemoryOIDCProvider(OIDCProvider):
    """OIDCProvider keeping all protocol state in process memory."""

    def __init__(
        self,
        issuer: str,
        clients: list[ClientRecord] | None = None,
        interaction_ttl_seconds: int = 3600,
    ) -> None:
        self._issuer = issuer.rstrip("/")
        self._clients = {c.client_id: c for c in clients or []}
        self._ttl = interaction_ttl_seconds
        self._interactions: dict[str, _Interaction] = {}
        self._sessions: dict[str, SessionRecord] = {}

    # --- Protocol-side entry points ------------------------------------------

    def start_session(self, account_id: str | None = None) -> SessionRecord:
        session = SessionRecord(uid=secrets.token_urlsafe(16), account_id=account_id)
        self._sessions[session.uid] = session
        return session

    def start_interaction(
        self,
        client_id: str,
        params: dict[str, Any] | None = None,
        session_id: str | None = None,
    ) -> str:
        """Suspend an authorization request and return the interaction uid.

        The browser always has an OIDC session by the time the gateway sees the
        interaction; one is started here when `session_id` is absent or unknown.
        """
        if session_id is None or session_id not in self._sessions:
            session_id = self.start_session().uid
        uid = secrets.token_urlsafe(16)
        self._interactions[uid] = _Interaction(
            uid=uid,
            params={"client_id": client_id, **(params or {})},
            session_id=session_id,
            expires_at=time.monotonic() + self._ttl,
        )
        logger.debug("Interaction started: uid=%s, client_id=%s", uid, client_id)
        return uid

    # --- OIDCProvider ----------------------------------------------------------

    async def interaction_details(self, uid: str) -> InteractionLookup:
        interaction = self._interactions.get(uid)
        if interaction is None or interaction.finished:
            return Expired(uid=uid)
        if interaction.expires_at <= time.monotonic():
            del self._interactions[uid]
            return Expired(uid=uid, reason="interaction session expired")
        return Found(self._details(interaction))

    async def interaction_result(
        self,
        uid: str,
        result: dict[str, Any],
        *,
        merge_with_last_submission: bool = True,
    ) -> None:
        interaction = self._require(uid)
        interaction.result = self._merge(interaction.result, result, merge_with_last_submission)

    async def interaction_finished(
        self,
        uid: str,
        result: dict[str, Any],
        *,
        merge_with_last_submission: bool = True,
    ) -> str:
        interaction = self._require(uid)
        interaction.result = self._merge(interaction.result, result, merge_with_last_submission)
        interaction.finished = True
        self._apply_to_session(interaction)
        logger.debug("Interaction finished: uid=%s", uid)
        return f"{self._issuer}/auth/{uid}"

    async def find_client(self, client_id: str) -> ClientRecord | None:
        return self._clients.get(client_id)

    async def get_session(self, session_id: str | None) -> SessionRecord | None:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    # --- Internals -----------------------------------------------------------

    def _require(self, uid: str) -> _Interaction:
        interaction = self._interactions.get(uid)
        expired = interaction is None or interaction.expires_at <= time.monotonic()
        if expired or interaction.finished:
            raise ProtocolError("interaction session not found", error="invalid_request")
        return interaction

    def _details(self, interaction: _Interaction) -> InteractionDetails:
        session = self._sessions.get(interaction.session_id)
        client_id = interaction.params.get("client_id")
        login = interaction.result.get("login") or {}
        signed_in = bool(login.get("accountId") or (session and session.account_id))
        return InteractionDetails(
            uid=interaction.uid,
            prompt_name="consent" if signed_in else "login",
            params=dict(interaction.params),
            session=session,
            grant_id=session.grant_id_for(client_id) if session and client_id else None,
            result=dict(interaction.result),
        )

    @staticmethod
    def _merge(
        last: dict[str, Any], result: dict[str, Any], merge_with_last_submission: bool
    ) -> dict[str, Any]:
        return {**last, **result} if merge_with_last_submission else dict(result)

    def _apply_to_session(self, interaction: _Interaction) -> None:
        """Bind the login and consent outcome to the browser session."""
        result = interaction.result
        account_id = (result.get("login") or {}).get("accountId")
        grant_id = (result.get("consent") or {}).get("grantId")
        if account_id is None and grant_id is None:
            return

        session = self._sessions[interaction.session_id]
        if account_id is not None and account_id != session.account_id:
            # A different account signed in; earlier grants belong to the old one
            session = replace(session, account_id=account_id, grants={})
        client_id = interaction.params.get("client_id")
        if grant_id is not None and client_id:
            session = replace(session, grants={**session.grants, client_id: grant_id})
        self._sessions[session.uid] = session
