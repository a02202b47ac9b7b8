"""DI provider for sign-in infrastructure."""

from typing import AsyncIterable

import httpx
from dishka import provide

from ogw.config import Config
from ogw.domain.account.port.identity_provider import IdentityProvider, ProviderRegistry
from ogw.domain.account.port.mailer import Mailer
from ogw.infrastructure.auth.github import GitHubIdentityProvider
from ogw.infrastructure.auth.mailer import LoggingMailer
from ogw.infrastructure.auth.provider_registry import InMemoryProviderRegistry
from ogw.util.di.base import Provider
from ogw.util.di.scope import Scope

# HTTP client timeout configuration
_HTTP_TIMEOUT = httpx.Timeout(
    connect=5.0,  # Connection timeout
    read=10.0,  # Read timeout
    write=5.0,  # Write timeout
    pool=5.0,  # Pool timeout
)


class AuthInfraProvider(Provider):
    """DI provider for identity provider adapters."""

    @provide(scope=Scope.APP)
    async def get_auth_http_client(self) -> AsyncIterable[httpx.AsyncClient]:
        """Shared HTTP client for upstream identity providers (connection pooling)."""
        async with httpx.AsyncClient(timeout=_HTTP_TIMEOUT) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_provider_registry(
        self, config: Config, http_client: httpx.AsyncClient
    ) -> ProviderRegistry:
        """Provide ProviderRegistry with configured identity providers."""
        providers: dict[str, IdentityProvider] = {}

        if config.auth.github.enabled:
            providers["github"] = GitHubIdentityProvider(
                config=config.auth.github, http_client=http_client
            )

        return InMemoryProviderRegistry(providers)

    @provide(scope=Scope.APP)
    def get_mailer(self, config: Config) -> Mailer:
        return LoggingMailer(config.auth.email)
