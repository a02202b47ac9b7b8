"""Unit tests for DocumentSiteSessionRepository."""

import pytest

from ogw.config import KubeConfig
from ogw.domain.site_session.model import SiteSession, SiteSessionId
from ogw.infrastructure.store.document import InMemoryDocumentStore
from ogw.infrastructure.store.site_session import DocumentSiteSessionRepository

CONFIG = KubeConfig()


@pytest.fixture
def repo() -> DocumentSiteSessionRepository:
    return DocumentSiteSessionRepository(InMemoryDocumentStore(), CONFIG)


class TestUpsert:
    @pytest.mark.asyncio
    async def test_creates_then_reads(self, repo):
        site_session = SiteSession.create("sess-1", "github-1", "proxy", {"scope": "openid"})

        await repo.upsert(site_session)
        fetched = await repo.get(site_session.id)

        assert fetched.session_id == "sess-1"
        assert fetched.payload == {"scope": "openid"}
        assert fetched.client_id == "proxy"

    @pytest.mark.asyncio
    async def test_existing_only_rebinds_session(self, repo):
        site_session = await repo.upsert(SiteSession.create("sess-1", "github-1", "proxy"))

        tampered = site_session.rebind("sess-2").model_copy(update={"account_id": "github-2"})
        updated = await repo.upsert(tampered)

        assert updated.session_id == "sess-2"
        assert updated.account_id == "github-1"
        assert updated.client_id == "proxy"
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_get_missing(self, repo):
        assert await repo.get(SiteSessionId("missing")) is None
