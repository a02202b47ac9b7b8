"""Interaction controller: drives one suspended authorization through the policy chain."""

import logging
from typing import Any

import logfire

from ogw.domain.account.model.account import Account
from ogw.domain.account.model.condition import TOS_ACCEPTED
from ogw.domain.account.model.value import AccountId
from ogw.domain.account.port.identity_provider import IdentityInfo, ProviderRegistry
from ogw.domain.account.service.account import AccountService
from ogw.domain.audit.service.audit import AuditLog
from ogw.domain.interaction.model.context import InteractionContext, InteractionRequest
from ogw.domain.interaction.model.details import Expired, InteractionDetails
from ogw.domain.interaction.model.grant import Grant, GrantId
from ogw.domain.interaction.model.outcome import (
    InteractionOutcome,
    Redirect,
    Render,
    SessionView,
    SetCookie,
)
from ogw.domain.interaction.model.policy import PolicyChain, Prompt
from ogw.domain.interaction.model.text import TextCatalog
from ogw.domain.interaction.port.grant_repository import GrantRepository
from ogw.domain.interaction.port.provider import OIDCProvider
from ogw.domain.interaction.service.policy import (
    APPROVAL_REQUIRED,
    CONSENT,
    GROUPS_REQUIRED,
    LOGIN,
    NAME,
    TOS,
)
from ogw.domain.shared.error import ProtocolError, ValidationError
from ogw.domain.shared.service import Service
from ogw.domain.site_session.service.site_session import SiteSessionService

logger = logging.getLogger(__name__)

TOS_CHECKSUM_KEY = "tosTextChecksum"
GROUPS_DENIED_MESSAGE = "You need to be a member of an allowed group to access this resource"


class InteractionController(Service):
    """Resolves what a pending interaction needs next.

    Every call reloads the interaction, the client and the account, then
    evaluates the policy chain from the top. Verdicts are never carried
    across requests, so a step that has become satisfied in the meantime
    (an admin flag flipped, a group added) is skipped on the next visit.

    - resolve: the "current prompt" query
    - complete_login / submit_name / confirm_tos / confirm_consent / recheck:
      apply one prompt's answer, then re-enter the chain
    - abort: finish the interaction with access_denied
    - session_view: degraded read-only view that never fails on expiry
    """

    _provider: OIDCProvider
    _grants: GrantRepository
    _accounts: AccountService
    _chain: PolicyChain
    _site_sessions: SiteSessionService
    _audit: AuditLog
    _texts: TextCatalog
    _identity_providers: ProviderRegistry

    # --- Queries -------------------------------------------------------------

    async def session_view(self, request: InteractionRequest) -> SessionView:
        """Read-only view of the interaction, falling back to the bare session."""
        lookup = await self._provider.interaction_details(request.uid)
        if isinstance(lookup, Expired):
            session = await self._provider.get_session(request.session_id)
            return SessionView(
                uid=None, prompt_name=None, params={}, session=session, client=None
            )

        details = lookup.details
        client = await self._provider.find_client(details.client_id) if details.client_id else None
        return SessionView(
            uid=details.uid,
            prompt_name=details.prompt_name,
            params=details.params,
            session=details.session,
            client=client,
        )

    async def resolve(self, request: InteractionRequest) -> InteractionOutcome:
        """Evaluate the chain and serve the first unsatisfied prompt, or finish."""
        ctx = await self._load(request)
        return await self._advance(ctx)

    # --- Commands ------------------------------------------------------------

    async def complete_login(
        self, request: InteractionRequest, identity: IdentityInfo
    ) -> InteractionOutcome:
        """Bind the upstream identity's account to the interaction and re-enter the chain."""
        details = await self.details(request.uid)
        account = await self._accounts.find_or_create(identity)
        await self._audit.record(
            "Logged in",
            actor=str(account.id),
            payload={"uid": details.uid, "provider": identity.provider},
        )
        await self._provider.interaction_result(
            details.uid,
            {"login": {"accountId": str(account.id)}},
            merge_with_last_submission=True,
        )
        return await self.resolve(request)

    async def submit_name(self, request: InteractionRequest, name: str) -> InteractionOutcome:
        """Store the user's display name.

        Raises:
            ValidationError: If the name is blank or too long (re-prompt)
        """
        ctx = await self._load(request)
        prompt = await self._chain.first_pending(ctx)
        if prompt is None or prompt.name != NAME:
            return await self._answer_out_of_turn(ctx, prompt, NAME)

        with logfire.span("SubmitName"):
            account = await self._accounts.update_name(ctx.account.id, name)
        await self._audit.record(
            "User name updated",
            actor=str(account.id),
            payload={"uid": ctx.uid, "name": account.name},
        )
        return await self._advance(ctx.with_account(account))

    async def confirm_tos(self, request: InteractionRequest) -> InteractionOutcome:
        """Record acceptance of the ToS text that was displayed for this interaction.

        The recorded fingerprint is the one stored when the text was shown,
        so accepting stale text never satisfies the current version.

        Raises:
            ValidationError: If no ToS text was displayed for this interaction
        """
        ctx = await self._load(request)
        prompt = await self._chain.first_pending(ctx)
        if prompt is None or prompt.name != TOS:
            return await self._answer_out_of_turn(ctx, prompt, TOS)

        checksum = ctx.result.get(TOS_CHECKSUM_KEY)
        if not checksum:
            raise ValidationError(
                "Terms of Service must be displayed before they can be accepted",
                field="tos",
            )

        with logfire.span("ConfirmTos"):
            account = await self._accounts.confirm_condition(
                ctx.account.id, TOS_ACCEPTED, checksum
            )
        await self._audit.record(
            "ToS approved",
            actor=str(account.id),
            payload={"uid": ctx.uid, "fingerprint": checksum},
        )
        return await self._advance(ctx.with_account(account))

    async def confirm_consent(self, request: InteractionRequest) -> InteractionOutcome:
        """Re-enter the chain; a pending consent prompt grants the requested scopes."""
        return await self.resolve(request)

    async def recheck(self, request: InteractionRequest) -> InteractionOutcome:
        """Re-enter the chain after approval or group membership may have changed."""
        return await self.resolve(request)

    async def abort(
        self,
        request: InteractionRequest,
        description: str = "End-User aborted interaction",
    ) -> Redirect:
        """Finish the interaction with an access_denied error."""
        details = await self.details(request.uid)
        await self._audit.record(
            "Interaction aborted",
            actor=details.account_id,
            payload={"uid": details.uid, "reason": description},
        )
        location = await self._provider.interaction_finished(
            details.uid,
            {"error": "access_denied", "error_description": description},
            merge_with_last_submission=False,
        )
        return Redirect(location=location)

    # --- Chain ---------------------------------------------------------------

    async def _advance(self, ctx: InteractionContext) -> InteractionOutcome:
        prompt = await self._chain.first_pending(ctx)
        if prompt is None:
            return await self._finish(ctx)
        logger.debug("Interaction pending: uid=%s, prompt=%s", ctx.uid, prompt.name)
        return await self._dispatch(ctx, prompt)

    async def _answer_out_of_turn(
        self, ctx: InteractionContext, pending: Prompt | None, answered: str
    ) -> InteractionOutcome:
        """An answer for a prompt that is not pending is ignored; serve what is."""
        logger.info(
            "Ignoring out-of-turn answer: uid=%s, answered=%s, pending=%s",
            ctx.uid,
            answered,
            pending.name if pending else None,
        )
        if pending is None:
            return await self._finish(ctx)
        return await self._dispatch(ctx, pending)

    async def _dispatch(self, ctx: InteractionContext, prompt: Prompt) -> InteractionOutcome:
        if prompt.name == LOGIN:
            return self._render(
                ctx,
                LOGIN,
                "login",
                "Sign-in",
                {"providers": self._identity_providers.available_providers()},
            )
        if prompt.name == CONSENT:
            return await self._grant_consent(ctx)
        if prompt.name == TOS:
            await self._provider.interaction_result(
                ctx.uid,
                {TOS_CHECKSUM_KEY: self._texts.tos_fingerprint},
                merge_with_last_submission=True,
            )
            return self._render(
                ctx, TOS, "tos", "Terms of Service", {"text": self._texts.tos}, wide=True
            )
        if prompt.name == APPROVAL_REQUIRED:
            await self._audit.record(
                "User is not authorized", actor=ctx.actor, payload=self._audit_payload(ctx)
            )
            return self._render(
                ctx,
                APPROVAL_REQUIRED,
                "approval_required",
                "Approval required",
                {"text": self._texts.approval},
                wide=True,
            )
        if prompt.name == GROUPS_REQUIRED:
            await self._audit.record(
                "User does not have required groups",
                actor=ctx.actor,
                payload=self._audit_payload(ctx),
            )
            return self._render(
                ctx,
                GROUPS_REQUIRED,
                "message",
                "Access denied",
                {"message": GROUPS_DENIED_MESSAGE},
                wide=True,
            )
        if prompt.name == NAME:
            return self._render(ctx, NAME, "enter-name", "Enter your name")

        raise ProtocolError(f"Unsupported prompt: {prompt.name}", status=500, error="server_error")

    async def _grant_consent(self, ctx: InteractionContext) -> InteractionOutcome:
        """Grant the requested scopes and, for middleware clients, issue a site session."""
        account = ctx.account
        if account is None:
            raise ProtocolError("Consent requires a signed-in account", error="login_required")

        grant = ctx.grant
        if grant is None or grant.account_id != str(account.id):
            grant = Grant.create(account_id=str(account.id), client_id=ctx.client.client_id)
        grant = grant.extend(ctx.details.requested_scopes)
        await self._grants.save(grant)

        result: dict[str, Any] = {"consent": {"grantId": str(grant.id)}}
        audit_payload = {**self._audit_payload(ctx), "grant_id": str(grant.id)}
        cookies: tuple[SetCookie, ...] = ()
        site_cookie = ctx.site_cookie
        if ctx.client.is_middleware:
            site_session, site_cookie = await self._site_sessions.issue(
                session_id=ctx.session_id,
                account_id=str(account.id),
                client=ctx.client,
                payload=self._site_sessions.payload_from_params(ctx.details.params),
            )
            result["siteSession"] = site_session.model_dump(mode="json")
            audit_payload["site_session_id"] = str(site_session.id)
            cookies = (
                SetCookie(
                    name=self._site_sessions.cookie_name,
                    value=site_cookie,
                    max_age=self._site_sessions.ttl_seconds,
                ),
            )

        await self._audit.record("Client authorized", actor=str(account.id), payload=audit_payload)
        await self._provider.interaction_result(ctx.uid, result, merge_with_last_submission=True)

        ctx = ctx.with_result(result).with_grant(grant).with_site_cookie(site_cookie)
        prompt = await self._chain.first_pending(ctx)
        if prompt is None:
            outcome = await self._finish(ctx)
            return Redirect(location=outcome.location, cookies=cookies)
        if prompt.name == CONSENT:
            # The fresh grant and cookie did not satisfy consent; let the user confirm again
            return self._render(ctx, CONSENT, "consent", "Authorize", cookies=cookies)
        outcome = await self._dispatch(ctx, prompt)
        if isinstance(outcome, Render):
            return Render(
                prompt=outcome.prompt,
                template=outcome.template,
                title=outcome.title,
                data=outcome.data,
                wide=outcome.wide,
                cookies=cookies + outcome.cookies,
            )
        return Redirect(location=outcome.location, cookies=cookies + outcome.cookies)

    async def _finish(self, ctx: InteractionContext) -> Redirect:
        """Every prompt is satisfied: hand the accumulated result back to the protocol layer."""
        location = await self._provider.interaction_finished(
            ctx.uid,
            ctx.result,
            merge_with_last_submission=True,
        )
        logger.info("Interaction finished: uid=%s, account_id=%s", ctx.uid, ctx.actor)
        return Redirect(location=location)

    # --- Loading -------------------------------------------------------------

    async def details(self, uid: str) -> InteractionDetails:
        """The pending interaction.

        Raises:
            ProtocolError: If it is expired or unknown
        """
        lookup = await self._provider.interaction_details(uid)
        if isinstance(lookup, Expired):
            raise ProtocolError(lookup.reason, status=400, error="invalid_request")
        return lookup.details

    async def _load(self, request: InteractionRequest) -> InteractionContext:
        details = await self.details(request.uid)

        client = await self._provider.find_client(details.client_id) if details.client_id else None
        if client is None:
            raise ProtocolError("client is invalid", status=400, error="invalid_client")

        account: Account | None = None
        if details.account_id:
            account = await self._accounts.find(AccountId(details.account_id))

        grant: Grant | None = None
        if details.consented_grant_id:
            grant = await self._grants.get(GrantId.model_validate(details.consented_grant_id))
        elif account is not None:
            grant = await self._grants.find(str(account.id), client.client_id)

        return InteractionContext(
            details=details,
            client=client,
            texts=self._texts,
            account=account,
            grant=grant,
            site_cookie=request.site_cookie,
            site_sessions=self._site_sessions,
        )

    def _render(
        self,
        ctx: InteractionContext,
        prompt: str,
        template: str,
        title: str,
        extra: dict[str, Any] | None = None,
        wide: bool = False,
        cookies: tuple[SetCookie, ...] = (),
    ) -> Render:
        data = {
            "uid": ctx.uid,
            "client_id": ctx.client.client_id,
            "client_name": ctx.client.display_name,
            "params": ctx.details.params,
            **(extra or {}),
        }
        return Render(
            prompt=prompt, template=template, title=title, data=data, wide=wide, cookies=cookies
        )

    @staticmethod
    def _audit_payload(ctx: InteractionContext) -> dict[str, Any]:
        return {
            "uid": ctx.uid,
            "client_id": ctx.client.client_id,
            "prompt": ctx.details.prompt_name,
        }
