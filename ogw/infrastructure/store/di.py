"""DI provider for the document store and its repositories."""

from typing import AsyncIterable

import httpx
from dishka import from_context, provide

from ogw.config import Config
from ogw.domain.account.port.repository import AccountRepository
from ogw.domain.site_session.port.repository import SiteSessionRepository
from ogw.infrastructure.store.account import DocumentAccountRepository
from ogw.infrastructure.store.document import DocumentStore, InMemoryDocumentStore
from ogw.infrastructure.store.kube import KubeDocumentStore
from ogw.infrastructure.store.site_session import DocumentSiteSessionRepository
from ogw.util.di.base import Provider
from ogw.util.di.scope import Scope


class StoreProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    async def get_document_store(self, config: Config) -> AsyncIterable[DocumentStore]:
        if config.storage.backend == "memory":
            yield InMemoryDocumentStore()
            return

        kube = config.storage.kube
        async with httpx.AsyncClient(
            timeout=kube.timeout,
            verify=kube.ca_path if kube.ca_path else True,
        ) as http_client:
            yield KubeDocumentStore(kube, http_client)

    @provide(scope=Scope.UOW)
    def get_account_repository(self, config: Config, store: DocumentStore) -> AccountRepository:
        return DocumentAccountRepository(store, config.storage.kube)

    @provide(scope=Scope.UOW)
    def get_site_session_repository(
        self, config: Config, store: DocumentStore
    ) -> SiteSessionRepository:
        return DocumentSiteSessionRepository(store, config.storage.kube)
