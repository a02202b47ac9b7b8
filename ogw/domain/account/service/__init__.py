"""Account domain services."""

from .account import AccountService
from .login import LoginTokenService

__all__ = ["AccountService", "LoginTokenService"]
