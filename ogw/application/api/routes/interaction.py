"""Interaction routes: one endpoint per prompt answer.

Every response is derived from the outcome of re-evaluating the policy
chain: a prompt view (JSON) or a 303 redirect back to the protocol layer.
"""

import logging
from typing import Annotated, Any

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from ogw.config import Config
from ogw.domain.interaction.command.interaction import (
    AbortInteraction,
    AbortInteractionHandler,
    ConfirmConsent,
    ConfirmConsentHandler,
    ConfirmTos,
    ConfirmTosHandler,
    GetSessionView,
    GetSessionViewHandler,
    RecheckInteraction,
    RecheckInteractionHandler,
    ShowInteraction,
    ShowInteractionHandler,
    SubmitName,
    SubmitNameHandler,
)
from ogw.domain.interaction.command.login import (
    BeginFederatedLogin,
    BeginFederatedLoginHandler,
    CompleteFederatedLogin,
    CompleteFederatedLoginHandler,
    SendLoginLink,
    SendLoginLinkHandler,
    VerifyLoginLink,
    VerifyLoginLinkHandler,
)
from ogw.domain.interaction.model.outcome import InteractionOutcome, Redirect, SetCookie
from ogw.domain.shared.error import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interaction", tags=["Interaction"], route_class=DishkaRoute)


class FederatedLoginRequest(BaseModel):
    upstream: str = "github"


class EmailLoginRequest(BaseModel):
    email: str


class UpdateNameRequest(BaseModel):
    name: str


class SessionResponse(BaseModel):
    """Read-only interaction view. Degraded (uid null) when the interaction expired."""

    uid: str | None
    prompt: str | None
    params: dict[str, Any]
    account_id: str | None
    client_id: str | None
    client_name: str | None


class EmailSentResponse(BaseModel):
    prompt: str = "login"
    template: str = "email-sent"
    email: str


def _cookies(request: Request, config: Config) -> dict[str, str | None]:
    return {
        "session_id": request.cookies.get(config.oidc.session_cookie),
        "site_cookie": request.cookies.get(config.site_session.cookie_name),
    }


def _set_cookies(response: Response, cookies: tuple[SetCookie, ...], secure: bool) -> None:
    for cookie in cookies:
        response.set_cookie(
            cookie.name,
            cookie.value,
            max_age=cookie.max_age,
            httponly=True,
            secure=secure,
            samesite="lax",
        )


def _respond(outcome: InteractionOutcome, config: Config) -> Response:
    """Turn an interaction outcome into an HTTP response."""
    secure = config.server.public_url.startswith("https://")
    if isinstance(outcome, Redirect):
        response: Response = RedirectResponse(url=outcome.location, status_code=303)
    else:
        response = JSONResponse(
            content={
                "prompt": outcome.prompt,
                "template": outcome.template,
                "title": outcome.title,
                "wide": outcome.wide,
                "data": outcome.data,
            }
        )
    _set_cookies(response, outcome.cookies, secure)
    return response


def _callback_url(config: Config, provider: str) -> str:
    return f"{config.server.public_url.rstrip('/')}/interaction/callback/{provider}"


@router.get("/callback/{provider}")
async def federated_callback(
    provider: str,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[CompleteFederatedLoginHandler],
    state: Annotated[str, Query()],
    code: Annotated[str | None, Query()] = None,
    error: Annotated[str | None, Query()] = None,
    error_description: Annotated[str | None, Query()] = None,
) -> Response:
    """Handle the upstream identity provider's redirect."""
    if error:
        logger.warning(
            "Upstream OAuth error: provider=%s, %s - %s", provider, error, error_description
        )

    outcome = await handler.run(
        CompleteFederatedLogin(
            state=state,
            code=code,
            error=error,
            callback_url=_callback_url(config, provider),
            **_cookies(request, config),
        )
    )
    return _respond(outcome, config)


@router.get("/{uid}")
async def show_interaction(
    uid: str,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[ShowInteractionHandler],
) -> Response:
    """Serve the first unsatisfied prompt, or redirect once none is left."""
    outcome = await handler.run(ShowInteraction(uid=uid, **_cookies(request, config)))
    return _respond(outcome, config)


@router.get("/{uid}/session")
async def show_session(
    uid: str,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[GetSessionViewHandler],
) -> SessionResponse:
    view = await handler.run(GetSessionView(uid=uid, **_cookies(request, config)))
    return SessionResponse(
        uid=view.uid,
        prompt=view.prompt_name,
        params=view.params,
        account_id=view.session.account_id if view.session else None,
        client_id=view.client.client_id if view.client else None,
        client_name=view.client.display_name if view.client else None,
    )


@router.post("/{uid}/federated")
async def federated_login(
    uid: str,
    body: FederatedLoginRequest,
    config: FromDishka[Config],
    handler: FromDishka[BeginFederatedLoginHandler],
) -> Response:
    """Redirect to the upstream identity provider's authorization page."""
    result = await handler.run(
        BeginFederatedLogin(
            uid=uid,
            provider=body.upstream,
            callback_url=_callback_url(config, body.upstream),
        )
    )
    logger.info("Federated login initiated: uid=%s, provider=%s", uid, body.upstream)
    return RedirectResponse(url=result.authorization_url, status_code=303)


@router.post("/{uid}/email")
async def email_login(
    uid: str,
    body: EmailLoginRequest,
    config: FromDishka[Config],
    handler: FromDishka[SendLoginLinkHandler],
) -> EmailSentResponse:
    if not config.auth.email.enabled:
        raise NotFoundError("E-mail login is not enabled", code="unknown_provider")
    result = await handler.run(
        SendLoginLink(uid=uid, email=body.email, base_url=config.server.public_url)
    )
    return EmailSentResponse(email=result.email)


@router.get("/{uid}/verify-email/{token}")
async def verify_email(
    uid: str,
    token: str,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[VerifyLoginLinkHandler],
) -> Response:
    outcome = await handler.run(
        VerifyLoginLink(uid=uid, token=token, **_cookies(request, config))
    )
    return _respond(outcome, config)


@router.post("/{uid}/update-name")
async def update_name(
    uid: str,
    body: UpdateNameRequest,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[SubmitNameHandler],
) -> Response:
    outcome = await handler.run(SubmitName(uid=uid, name=body.name, **_cookies(request, config)))
    return _respond(outcome, config)


@router.post("/{uid}/confirm-tos")
async def confirm_tos(
    uid: str,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[ConfirmTosHandler],
) -> Response:
    outcome = await handler.run(ConfirmTos(uid=uid, **_cookies(request, config)))
    return _respond(outcome, config)


@router.post("/{uid}/consent")
async def confirm_consent(
    uid: str,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[ConfirmConsentHandler],
) -> Response:
    outcome = await handler.run(ConfirmConsent(uid=uid, **_cookies(request, config)))
    return _respond(outcome, config)


@router.post("/{uid}/recheck")
async def recheck(
    uid: str,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[RecheckInteractionHandler],
) -> Response:
    """Re-run the chain after an administrator approved the account or changed its groups."""
    outcome = await handler.run(RecheckInteraction(uid=uid, **_cookies(request, config)))
    return _respond(outcome, config)


@router.get("/{uid}/abort")
async def abort(
    uid: str,
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[AbortInteractionHandler],
) -> Response:
    outcome = await handler.run(AbortInteraction(uid=uid, **_cookies(request, config)))
    return _respond(outcome, config)
