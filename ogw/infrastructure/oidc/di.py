"""DI provider for the in-process protocol adapter."""

from dishka import provide

from ogw.config import Config
from ogw.domain.interaction.model.client import ClientRecord
from ogw.domain.interaction.port.grant_repository import GrantRepository
from ogw.domain.interaction.port.provider import OIDCProvider
from ogw.infrastructure.oidc.grant_repository import InMemoryGrantRepository
from ogw.infrastructure.oidc.memory import InMemoryOIDCProvider
from ogw.util.di.base import Provider
from ogw.util.di.scope import Scope


class OIDCInfraProvider(Provider):
    @provide(scope=Scope.APP)
    def get_in_memory_provider(self, config: Config) -> InMemoryOIDCProvider:
        clients = [
            ClientRecord(
                client_id=c.client_id,
                kind=c.kind,
                allowed_groups=frozenset(c.allowed_groups),
                display_name=c.display_name,
            )
            for c in config.clients
        ]
        return InMemoryOIDCProvider(
            issuer=config.oidc.issuer,
            clients=clients,
            interaction_ttl_seconds=config.oidc.interaction_ttl_seconds,
        )

    @provide(scope=Scope.APP)
    def get_oidc_provider(self, provider: InMemoryOIDCProvider) -> OIDCProvider:
        return provider

    grant_repo = provide(InMemoryGrantRepository, scope=Scope.APP, provides=GrantRepository)
