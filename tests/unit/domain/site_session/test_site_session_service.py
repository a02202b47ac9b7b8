"""Unit tests for SiteSessionService."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import jwt
import pytest

from ogw.config import SiteSessionConfig
from ogw.domain.interaction.model import MIDDLEWARE_CLIENT_KIND, ClientRecord
from ogw.domain.shared.error import BackendError
from ogw.domain.site_session.model import SiteSession, SiteSessionId
from ogw.domain.site_session.service.site_session import SiteSessionService

SECRET = "test-site-session-secret-unit-tests"
PROXY = ClientRecord(client_id="proxy", kind=MIDDLEWARE_CLIENT_KIND)


def make_service(repo: AsyncMock | None = None) -> SiteSessionService:
    if repo is None:
        repo = AsyncMock()
        repo.upsert.side_effect = lambda site_session: site_session
    return SiteSessionService(_repo=repo, _config=SiteSessionConfig(secret=SECRET, ttl_hours=1))


def stored(site_session_id: str, client_id: str = "proxy") -> SiteSession:
    return SiteSession(
        id=SiteSessionId(site_session_id),
        session_id="sess-1",
        account_id="github-1",
        client_id=client_id,
        created_at=datetime.now(UTC),
    )


class TestIssue:
    @pytest.mark.asyncio
    async def test_cookie_binds_site_session_and_client(self):
        service = make_service()

        site_session, cookie = await service.issue(
            session_id="sess-1",
            account_id="github-1",
            client=PROXY,
            payload=service.payload_from_params(
                {"redirect_uri": "https://x/cb", "scope": "openid", "nonce": "n"}
            ),
        )

        claims = jwt.decode(cookie, SECRET, algorithms=["HS256"], audience="proxy")
        assert claims["sub"] == str(site_session.id)
        assert claims["exp"] - claims["iat"] == 3600
        assert site_session.payload == {"redirect_uri": "https://x/cb", "scope": "openid"}


class TestValidate:
    @pytest.mark.asyncio
    async def test_valid_cookie(self):
        repo = AsyncMock()
        repo.get.return_value = stored("abc")
        service = make_service(repo)

        assert await service.validate(service.sign(SiteSessionId("abc"), "proxy"), "proxy")

    @pytest.mark.asyncio
    async def test_missing_cookie(self):
        assert not await make_service().validate(None, "proxy")

    @pytest.mark.asyncio
    async def test_audience_mismatch(self):
        repo = AsyncMock()
        repo.get.return_value = stored("abc")
        service = make_service(repo)

        assert not await service.validate(service.sign(SiteSessionId("abc"), "other"), "proxy")

    @pytest.mark.asyncio
    async def test_expired_cookie(self):
        service = make_service()
        past = datetime.now(UTC) - timedelta(hours=2)
        cookie = jwt.encode(
            {"sub": "abc", "aud": "proxy", "exp": int(past.timestamp())}, SECRET, algorithm="HS256"
        )

        assert not await service.validate(cookie, "proxy")

    @pytest.mark.asyncio
    async def test_unknown_site_session(self):
        repo = AsyncMock()
        repo.get.return_value = None
        service = make_service(repo)

        assert not await service.validate(service.sign(SiteSessionId("abc"), "proxy"), "proxy")

    @pytest.mark.asyncio
    async def test_backend_failure_is_not_validated(self):
        repo = AsyncMock()
        repo.get.side_effect = BackendError("down")
        service = make_service(repo)

        assert not await service.validate(service.sign(SiteSessionId("abc"), "proxy"), "proxy")


class TestRebind:
    def test_rebind_only_moves_session(self):
        original = stored("abc")

        rebound = original.rebind("sess-2")

        assert rebound.session_id == "sess-2"
        assert rebound.id == original.id
        assert rebound.account_id == original.account_id
        assert rebound.updated_at is not None
