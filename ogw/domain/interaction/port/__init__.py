"""Interaction domain ports."""

from .grant_repository import GrantRepository
from .provider import OIDCProvider

__all__ = ["GrantRepository", "OIDCProvider"]
