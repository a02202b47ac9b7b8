"""Account domain ports."""

from .identity_provider import IdentityInfo, IdentityProvider, ProviderRegistry
from .mailer import Mailer
from .repository import AccountRepository

__all__ = [
    "AccountRepository",
    "IdentityInfo",
    "IdentityProvider",
    "Mailer",
    "ProviderRegistry",
]
