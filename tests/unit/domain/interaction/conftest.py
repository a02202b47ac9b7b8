"""In-memory gateway wiring shared by the interaction tests."""

from dataclasses import dataclass
from typing import Any

import pytest

from ogw.config import KubeConfig, SiteSessionConfig
from ogw.domain.account.service.account import AccountService
from ogw.domain.audit.service.audit import AuditLog
from ogw.domain.interaction.model import (
    MIDDLEWARE_CLIENT_KIND,
    ClientRecord,
    Found,
    SessionRecord,
    TextCatalog,
)
from ogw.domain.interaction.service.controller import InteractionController
from ogw.domain.interaction.service.policy import build_policy_chain
from ogw.domain.site_session.service.site_session import SiteSessionService
from ogw.infrastructure.audit.sink import InMemoryAuditSink
from ogw.infrastructure.auth.provider_registry import InMemoryProviderRegistry
from ogw.infrastructure.oidc.grant_repository import InMemoryGrantRepository
from ogw.infrastructure.oidc.memory import InMemoryOIDCProvider
from ogw.infrastructure.store.account import DocumentAccountRepository
from ogw.infrastructure.store.document import InMemoryDocumentStore
from ogw.infrastructure.store.site_session import DocumentSiteSessionRepository

TOS_TEXT = "Be nice."
ISSUER = "https://auth.example.com"

CLIENTS = [
    ClientRecord(client_id="app", display_name="App"),
    ClientRecord(client_id="proxy", kind=MIDDLEWARE_CLIENT_KIND, display_name="Proxy"),
    ClientRecord(client_id="admin-app", allowed_groups=frozenset({"codemowers:admins"})),
]


class RecordingOIDCProvider(InMemoryOIDCProvider):
    """Keeps what each finished interaction handed back, for assertions."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.finished: dict[str, dict[str, Any]] = {}
        self.finished_sessions: dict[str, str] = {}

    async def interaction_finished(
        self,
        uid: str,
        result: dict[str, Any],
        *,
        merge_with_last_submission: bool = True,
    ) -> str:
        lookup = await self.interaction_details(uid)
        if isinstance(lookup, Found):
            last = lookup.details.result if merge_with_last_submission else {}
            self.finished[uid] = {**last, **result}
            self.finished_sessions[uid] = lookup.details.session.uid
        return await super().interaction_finished(
            uid, result, merge_with_last_submission=merge_with_last_submission
        )

    async def finished_session(self, uid: str) -> SessionRecord | None:
        return await self.get_session(self.finished_sessions.get(uid))


@dataclass
class Gateway:
    store: InMemoryDocumentStore
    kube: KubeConfig
    provider: RecordingOIDCProvider
    grants: InMemoryGrantRepository
    audit_sink: InMemoryAuditSink
    accounts: AccountService
    site_sessions: SiteSessionService
    registry: InMemoryProviderRegistry

    def controller(
        self, tos: str = TOS_TEXT, require_approval: bool = False
    ) -> InteractionController:
        return InteractionController(
            _provider=self.provider,
            _grants=self.grants,
            _accounts=self.accounts,
            _chain=build_policy_chain(require_approval=require_approval),
            _site_sessions=self.site_sessions,
            _audit=AuditLog(_sink=self.audit_sink),
            _texts=TextCatalog(tos=tos, approval="Wait for an admin."),
            _identity_providers=self.registry,
        )

    def start(self, client_id: str = "app", session_id: str | None = None) -> str:
        return self.provider.start_interaction(
            client_id,
            {"scope": "openid profile", "redirect_uri": "https://app.example.com/cb", "state": "s"},
            session_id=session_id,
        )


@pytest.fixture
def gateway() -> Gateway:
    store = InMemoryDocumentStore()
    kube = KubeConfig()
    accounts = AccountService(_accounts=DocumentAccountRepository(store, kube))
    site_sessions = SiteSessionService(
        _repo=DocumentSiteSessionRepository(store, kube),
        _config=SiteSessionConfig(secret="test-site-session-secret-unit-tests"),
    )
    return Gateway(
        store=store,
        kube=kube,
        provider=RecordingOIDCProvider(issuer=ISSUER, clients=CLIENTS),
        grants=InMemoryGrantRepository(),
        audit_sink=InMemoryAuditSink(),
        accounts=accounts,
        site_sessions=site_sessions,
        registry=InMemoryProviderRegistry(),
    )
