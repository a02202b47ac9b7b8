"""Site-session bridge: signed cookies and persistence for middleware clients."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from ogw.config import SiteSessionConfig
from ogw.domain.interaction.model.client import ClientRecord
from ogw.domain.shared.error import BackendError
from ogw.domain.shared.service import Service
from ogw.domain.site_session.model.site_session import SiteSession, SiteSessionId
from ogw.domain.site_session.port.repository import SiteSessionRepository

logger = logging.getLogger(__name__)

# Authorization parameters copied into the site session payload
PAYLOAD_PARAMS = ("redirect_uri", "scope", "state")


class SiteSessionService(Service):
    """Issues, validates and persists site sessions.

    - Cookies are HS256 JWTs: `sub` is the site session id, `aud` the client id
    - Validation never raises; any failure means "not validated"
    """

    _repo: SiteSessionRepository
    _config: SiteSessionConfig

    @property
    def cookie_name(self) -> str:
        return self._config.cookie_name

    @property
    def ttl_seconds(self) -> int:
        return self._config.ttl_hours * 3600

    def payload_from_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return {key: params[key] for key in PAYLOAD_PARAMS if params.get(key) is not None}

    async def issue(
        self,
        session_id: str | None,
        account_id: str,
        client: ClientRecord,
        payload: dict[str, Any] | None = None,
    ) -> tuple[SiteSession, str]:
        """Create and persist a site session for a middleware client.

        Returns:
            Tuple of (site_session, signed cookie value)
        """
        site_session = SiteSession.create(
            session_id=session_id,
            account_id=account_id,
            client_id=client.client_id,
            payload=payload,
        )
        site_session = await self._repo.upsert(site_session)
        logger.info(
            "Site session issued: site_session_id=%s, client_id=%s, account_id=%s",
            site_session.id,
            client.client_id,
            account_id,
        )
        return site_session, self.sign(site_session.id, client.client_id)

    def sign(self, site_session_id: SiteSessionId, client_id: str) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": str(site_session_id),
            "aud": client_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.ttl_seconds)).timestamp()),
        }
        return jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

    async def validate(self, cookie: str | None, client_id: str) -> bool:
        """True iff `cookie` is a valid site-session token bound to `client_id`."""
        if not cookie:
            return False
        try:
            claims = jwt.decode(
                cookie,
                self._config.secret,
                algorithms=[self._config.algorithm],
                audience=client_id,
            )
        except jwt.InvalidTokenError as e:
            logger.debug("Site session cookie rejected: client_id=%s, reason=%s", client_id, e)
            return False

        try:
            site_session = await self._repo.get(SiteSessionId(claims["sub"]))
        except (BackendError, KeyError) as e:
            logger.warning("Site session lookup failed: client_id=%s, error=%s", client_id, e)
            return False

        return site_session is not None and site_session.client_id == client_id

    async def upsert(self, site_session: SiteSession) -> SiteSession:
        return await self._repo.upsert(site_session)
