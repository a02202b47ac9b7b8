"""Default interaction policy.

Base prompts mirror what the protocol library ships (`login`, `consent`);
the gateway inserts its own prompts between them:

    login, approval_required, name, tos, groups_required, consent
"""

import logging

from ogw.domain.account.model.account import Account
from ogw.domain.account.model.condition import Approved
from ogw.domain.interaction.model.context import InteractionContext
from ogw.domain.interaction.model.policy import (
    Check,
    PolicyChain,
    PolicyChainBuilder,
    Prompt,
    Verdict,
)
from ogw.domain.site_session.model.site_session import SiteSession

logger = logging.getLogger(__name__)

LOGIN = "login"
APPROVAL_REQUIRED = "approval_required"
NAME = "name"
TOS = "tos"
GROUPS_REQUIRED = "groups_required"
CONSENT = "consent"


# --- Base prompts -----------------------------------------------------------


async def no_session(ctx: InteractionContext, account: Account | None) -> Verdict:
    return Verdict.prompt_if(account is None)


async def scopes_missing(ctx: InteractionContext, account: Account | None) -> Verdict:
    if account is None:
        return Verdict.REQUEST_PROMPT
    grant = ctx.grant
    if grant is None or grant.account_id != str(account.id):
        return Verdict.REQUEST_PROMPT
    return Verdict.prompt_if(not grant.covers(ctx.details.requested_scopes))


def base_policy() -> PolicyChainBuilder:
    """The protocol library's own prompts."""
    login = Prompt(
        name=LOGIN,
        checks=(
            Check(
                "no_session",
                "End-User authentication is required",
                no_session,
                error="login_required",
            ),
        ),
    )
    consent = Prompt(
        name=CONSENT,
        checks=(
            Check(
                "op_scopes_missing",
                "requested scopes not granted",
                scopes_missing,
                error="consent_required",
            ),
        ),
    )
    return PolicyChainBuilder([login, consent])


# --- Gateway prompts --------------------------------------------------------


async def approval_required(ctx: InteractionContext, account: Account | None) -> Verdict:
    if account is None:
        return Verdict.REQUEST_PROMPT
    # Administrators never wait for approval
    if account.is_admin:
        return Verdict.NO_NEED_TO_PROMPT
    return Verdict.prompt_if(not account.check_condition(Approved()))


async def name_required(ctx: InteractionContext, account: Account | None) -> Verdict:
    return Verdict.prompt_if(account is None or not account.name)


async def tos_not_accepted(ctx: InteractionContext, account: Account | None) -> Verdict:
    if account is None:
        return Verdict.REQUEST_PROMPT
    return Verdict.prompt_if(not account.check_condition(ctx.texts.tos_condition()))


def check_account_groups(ctx: InteractionContext, account: Account | None) -> bool:
    """True if the client puts no group constraint on the account, or the account meets it."""
    allowed = ctx.client.allowed_groups
    if not allowed:
        return True
    if account is None:
        return False
    return not allowed.isdisjoint(account.groups)


async def allowed_groups_required(ctx: InteractionContext, account: Account | None) -> Verdict:
    return Verdict.prompt_if(not check_account_groups(ctx, account))


async def site_cookie_required(ctx: InteractionContext, account: Account | None) -> Verdict:
    """Consent check for middleware clients: the browser must hold a valid site session.

    When the cookie validates and the interaction already carries a
    provisional site session, that session is rebound to the current OIDC
    session and persisted before the check passes.
    """
    if not ctx.client.is_middleware:
        return Verdict.NO_NEED_TO_PROMPT

    site_sessions = ctx.site_sessions
    if site_sessions is None:
        logger.warning("No site session service for middleware client %s", ctx.client.client_id)
        return Verdict.REQUEST_PROMPT

    if not await site_sessions.validate(ctx.site_cookie, ctx.client.client_id):
        return Verdict.REQUEST_PROMPT

    provisional = ctx.result.get("siteSession")
    if provisional and ctx.session_id:
        site_session = SiteSession.model_validate(provisional).rebind(ctx.session_id)
        await site_sessions.upsert(site_session)
        logger.debug(
            "Site session rebound: site_session_id=%s, session_id=%s",
            site_session.id,
            ctx.session_id,
        )
    return Verdict.NO_NEED_TO_PROMPT


def build_policy_chain(require_approval: bool = True) -> PolicyChain:
    """Build the gateway's policy chain. Built once at startup.

    With `require_approval` off the approval prompt is left out entirely and
    the remaining gateway prompts move up one position.
    """
    builder = base_policy()
    index = 1
    if require_approval:
        builder.add(
            Prompt(
                APPROVAL_REQUIRED,
                (Check("approval_required", "User needs to be approved", approval_required),),
                requestable=False,
            ),
            index,
        )
        index += 1
    builder.add(
        Prompt(NAME, (Check("name_required", "User profile requires name", name_required),)),
        index,
    )
    builder.add(
        Prompt(TOS, (Check("tos_not_accepted", "ToS needs to be accepted", tos_not_accepted),)),
        index + 1,
    )
    builder.add(
        Prompt(
            GROUPS_REQUIRED,
            (Check("allowed_groups_required", "Allowed groups required", allowed_groups_required),),
        ),
        index + 2,
    )
    builder.add_check(
        CONSENT, Check("site_cookie_required", "Site cookie required", site_cookie_required)
    )
    return builder.build()
