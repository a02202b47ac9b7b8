"""Provider registry implementation."""

from ogw.domain.account.port.identity_provider import IdentityProvider, ProviderRegistry


class InMemoryProviderRegistry(ProviderRegistry):
    """In-memory provider registry.

    Stores a mapping of provider names to their implementations.
    Providers are registered at application startup via DI.
    """

    def __init__(self, providers: dict[str, IdentityProvider] | None = None) -> None:
        self._providers: dict[str, IdentityProvider] = providers or {}

    def get(self, provider: str) -> IdentityProvider | None:
        return self._providers.get(provider)

    def available_providers(self) -> list[str]:
        return list(self._providers.keys())

    def register(self, name: str, provider: IdentityProvider) -> None:
        self._providers[name] = provider
