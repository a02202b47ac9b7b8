"""Identity provider port for the account domain."""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Protocol

from ogw.domain.shared.port import Port


@dataclass(frozen=True)
class IdentityInfo:
    """Information returned by an identity provider after successful auth."""

    provider: str  # e.g., "github", "email"
    external_id: str  # Provider-specific user ID
    display_name: str | None
    email: str | None  # May not be available from all providers
    raw_data: dict[str, Any] = field(default_factory=dict)

    def profile_fields(self) -> dict[str, str]:
        """Profile fields seeded into a newly created account."""
        profile: dict[str, str] = {}
        if self.display_name:
            profile["name"] = self.display_name
        if self.email:
            profile["email"] = self.email
        login = self.raw_data.get("login")
        if isinstance(login, str) and login:
            profile["login"] = login
        return profile


class IdentityProvider(Port, Protocol):
    """Port for upstream OAuth identity providers.

    Implementations are adapters in infrastructure/ (e.g., GitHubIdentityProvider).
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique identifier for this provider (e.g., 'github')."""
        ...

    @abstractmethod
    def get_authorization_url(self, state: str, redirect_uri: str) -> str:
        """Generate URL to redirect user for authentication.

        Args:
            state: CSRF protection token binding the pending interaction
            redirect_uri: Where the IdP should redirect after auth

        Returns:
            Full URL to redirect the user to
        """
        ...

    @abstractmethod
    async def exchange_code(self, code: str, redirect_uri: str) -> IdentityInfo:
        """Exchange authorization code for identity information.

        Raises:
            ExternalServiceError: If the IdP request fails
        """
        ...


class ProviderRegistry(Port, Protocol):
    """Registry of configured identity providers."""

    @abstractmethod
    def get(self, provider: str) -> IdentityProvider | None:
        """Get an identity provider by name, None if not configured."""
        ...

    @abstractmethod
    def available_providers(self) -> list[str]:
        """Names of providers that can be used for authentication."""
        ...

    def is_available(self, provider: str) -> bool:
        return provider in self.available_providers()
