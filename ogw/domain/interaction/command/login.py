"""Login commands: federated OAuth and e-mail magic links."""

import logging
from dataclasses import dataclass

from ogw.domain.account.port.identity_provider import ProviderRegistry
from ogw.domain.account.port.mailer import Mailer
from ogw.domain.account.service.login import LoginTokenService, normalize_email
from ogw.domain.audit.service.audit import AuditLog
from ogw.domain.interaction.model.context import InteractionRequest
from ogw.domain.interaction.model.outcome import InteractionOutcome
from ogw.domain.interaction.service.controller import InteractionController
from ogw.domain.interaction.service.policy import LOGIN
from ogw.domain.shared.command import Command, CommandHandler, Result
from ogw.domain.shared.error import ExternalServiceError, NotFoundError, ProtocolError

logger = logging.getLogger(__name__)

UPSTREAM_DENIED = "End-User denied sign-in at the identity provider"
UPSTREAM_FAILED = "Sign-in with the identity provider failed"


class BeginFederatedLogin(Command):
    """Start sign-in with an upstream identity provider."""

    uid: str
    provider: str
    callback_url: str  # Where the provider redirects after auth


class BeginFederatedLoginResult(Result):
    authorization_url: str


class CompleteFederatedLogin(Command):
    """Finish upstream sign-in; the interaction uid comes from the verified state."""

    state: str
    callback_url: str  # Must match the one used in authorization
    code: str | None = None
    error: str | None = None  # Set when the provider reports a failure
    session_id: str | None = None
    site_cookie: str | None = None


class SendLoginLink(Command):
    uid: str
    email: str
    base_url: str  # Public base URL the link points at


class SendLoginLinkResult(Result):
    email: str


class VerifyLoginLink(Command):
    uid: str
    token: str
    session_id: str | None = None
    site_cookie: str | None = None


@dataclass
class BeginFederatedLoginHandler(CommandHandler[BeginFederatedLogin, BeginFederatedLoginResult]):
    """Handler for BeginFederatedLogin."""

    controller: InteractionController
    provider_registry: ProviderRegistry
    login_tokens: LoginTokenService

    async def run(self, cmd: BeginFederatedLogin) -> BeginFederatedLoginResult:
        identity_provider = self.provider_registry.get(cmd.provider)
        if identity_provider is None:
            raise NotFoundError(
                f"Unknown identity provider: {cmd.provider}",
                code="unknown_provider",
            )

        details = await self.controller.details(cmd.uid)
        if details.prompt_name != LOGIN:
            raise ProtocolError("Interaction is not awaiting sign-in", error="invalid_request")

        state = self.login_tokens.create_oauth_state(cmd.uid, cmd.provider)
        authorization_url = identity_provider.get_authorization_url(
            state=state,
            redirect_uri=cmd.callback_url,
        )
        return BeginFederatedLoginResult(authorization_url=authorization_url)


@dataclass
class CompleteFederatedLoginHandler(
    CommandHandler[CompleteFederatedLogin, InteractionOutcome]
):
    """Handler for CompleteFederatedLogin.

    Upstream refusal or failure finishes the interaction with access_denied
    so the relying party learns about it.
    """

    controller: InteractionController
    provider_registry: ProviderRegistry
    login_tokens: LoginTokenService

    async def run(self, cmd: CompleteFederatedLogin) -> InteractionOutcome:
        verified = self.login_tokens.verify_oauth_state(cmd.state)
        if verified is None:
            raise ProtocolError("Invalid or expired OAuth state", error="invalid_request")

        request = InteractionRequest(
            uid=verified.uid, session_id=cmd.session_id, site_cookie=cmd.site_cookie
        )
        if cmd.error or not cmd.code:
            logger.info(
                "Upstream sign-in refused: provider=%s, error=%s", verified.provider, cmd.error
            )
            return await self.controller.abort(request, UPSTREAM_DENIED)

        identity_provider = self.provider_registry.get(verified.provider)
        if identity_provider is None:
            raise NotFoundError(
                f"Unknown identity provider: {verified.provider}",
                code="unknown_provider",
            )

        try:
            identity = await identity_provider.exchange_code(
                code=cmd.code,
                redirect_uri=cmd.callback_url,
            )
        except ExternalServiceError as e:
            logger.warning("Upstream sign-in failed: provider=%s, error=%s", verified.provider, e)
            return await self.controller.abort(request, UPSTREAM_FAILED)

        return await self.controller.complete_login(request, identity)


@dataclass
class SendLoginLinkHandler(CommandHandler[SendLoginLink, SendLoginLinkResult]):
    """Handler for SendLoginLink."""

    controller: InteractionController
    login_tokens: LoginTokenService
    mailer: Mailer
    audit: AuditLog

    async def run(self, cmd: SendLoginLink) -> SendLoginLinkResult:
        email = normalize_email(cmd.email)
        details = await self.controller.details(cmd.uid)

        token = self.login_tokens.create_email_token(details.uid, email)
        link = f"{cmd.base_url.rstrip('/')}/interaction/{details.uid}/verify-email/{token}"
        await self.mailer.send_login_link(email, link)
        await self.audit.record("Login link sent", payload={"uid": details.uid, "email": email})

        return SendLoginLinkResult(email=email)


@dataclass
class VerifyLoginLinkHandler(CommandHandler[VerifyLoginLink, InteractionOutcome]):
    controller: InteractionController
    login_tokens: LoginTokenService

    async def run(self, cmd: VerifyLoginLink) -> InteractionOutcome:
        identity = self.login_tokens.verify_email_token(cmd.uid, cmd.token)
        request = InteractionRequest(
            uid=cmd.uid, session_id=cmd.session_id, site_cookie=cmd.site_cookie
        )
        return await self.controller.complete_login(request, identity)
