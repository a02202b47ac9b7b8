"""DI provider for the interaction domain."""

from dishka import provide

from ogw.config import Config
from ogw.domain.audit.service.audit import AuditLog
from ogw.domain.interaction.command.interaction import (
    AbortInteractionHandler,
    ConfirmConsentHandler,
    ConfirmTosHandler,
    GetSessionViewHandler,
    RecheckInteractionHandler,
    ShowInteractionHandler,
    SubmitNameHandler,
)
from ogw.domain.interaction.command.login import (
    BeginFederatedLoginHandler,
    CompleteFederatedLoginHandler,
    SendLoginLinkHandler,
    VerifyLoginLinkHandler,
)
from ogw.domain.interaction.model.policy import PolicyChain
from ogw.domain.interaction.model.text import TextCatalog
from ogw.domain.interaction.service.controller import InteractionController
from ogw.domain.interaction.service.policy import build_policy_chain
from ogw.domain.site_session.port.repository import SiteSessionRepository
from ogw.domain.site_session.service.site_session import SiteSessionService
from ogw.util.di.base import Provider
from ogw.util.di.scope import Scope


class InteractionProvider(Provider):
    """DI provider for interaction services and handlers."""

    # Command Handlers
    show_interaction_handler = provide(ShowInteractionHandler, scope=Scope.UOW)
    get_session_view_handler = provide(GetSessionViewHandler, scope=Scope.UOW)
    submit_name_handler = provide(SubmitNameHandler, scope=Scope.UOW)
    confirm_tos_handler = provide(ConfirmTosHandler, scope=Scope.UOW)
    confirm_consent_handler = provide(ConfirmConsentHandler, scope=Scope.UOW)
    recheck_interaction_handler = provide(RecheckInteractionHandler, scope=Scope.UOW)
    abort_interaction_handler = provide(AbortInteractionHandler, scope=Scope.UOW)
    begin_federated_login_handler = provide(BeginFederatedLoginHandler, scope=Scope.UOW)
    complete_federated_login_handler = provide(CompleteFederatedLoginHandler, scope=Scope.UOW)
    send_login_link_handler = provide(SendLoginLinkHandler, scope=Scope.UOW)
    verify_login_link_handler = provide(VerifyLoginLinkHandler, scope=Scope.UOW)

    # Services
    controller = provide(InteractionController, scope=Scope.UOW)
    audit_log = provide(AuditLog, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_text_catalog(self, config: Config) -> TextCatalog:
        return TextCatalog(tos=config.texts.tos, approval=config.texts.approval)

    @provide(scope=Scope.UOW)
    def get_site_session_service(
        self, config: Config, repo: SiteSessionRepository
    ) -> SiteSessionService:
        return SiteSessionService(_repo=repo, _config=config.site_session)

    @provide(scope=Scope.APP)
    def get_policy_chain(self, config: Config) -> PolicyChain:
        return build_policy_chain(require_approval=config.policy.require_approval)
