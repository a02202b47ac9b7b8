"""DI provider for the account domain."""

from dishka import provide

from ogw.config import Config
from ogw.domain.account.service.account import AccountService
from ogw.domain.account.service.login import LoginTokenService
from ogw.util.di.base import Provider
from ogw.util.di.scope import Scope


class AccountProvider(Provider):
    """DI provider for account services."""

    account_service = provide(AccountService, scope=Scope.UOW)

    @provide(scope=Scope.UOW)
    def get_login_token_service(self, config: Config) -> LoginTokenService:
        return LoginTokenService(_config=config.auth)
