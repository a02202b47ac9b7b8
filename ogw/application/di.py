from dishka import AsyncContainer, make_async_container

from ogw.config import Config
from ogw.domain.account.util.di import AccountProvider
from ogw.domain.interaction.util.di import InteractionProvider
from ogw.infrastructure.audit import AuditInfraProvider
from ogw.infrastructure.auth import AuthInfraProvider
from ogw.infrastructure.oidc import OIDCInfraProvider
from ogw.infrastructure.store import StoreProvider
from ogw.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        StoreProvider(),
        AuditInfraProvider(),
        AuthInfraProvider(),
        OIDCInfraProvider(),
        AccountProvider(),
        InteractionProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
