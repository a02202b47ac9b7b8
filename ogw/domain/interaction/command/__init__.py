"""Interaction commands."""

from .interaction import (
    AbortInteraction,
    AbortInteractionHandler,
    ConfirmConsent,
    ConfirmConsentHandler,
    ConfirmTos,
    ConfirmTosHandler,
    GetSessionView,
    GetSessionViewHandler,
    InteractionCommand,
    RecheckInteraction,
    RecheckInteractionHandler,
    ShowInteraction,
    ShowInteractionHandler,
    SubmitName,
    SubmitNameHandler,
)
from .login import (
    BeginFederatedLogin,
    BeginFederatedLoginHandler,
    BeginFederatedLoginResult,
    CompleteFederatedLogin,
    CompleteFederatedLoginHandler,
    SendLoginLink,
    SendLoginLinkHandler,
    SendLoginLinkResult,
    VerifyLoginLink,
    VerifyLoginLinkHandler,
)

__all__ = [
    "AbortInteraction",
    "AbortInteractionHandler",
    "BeginFederatedLogin",
    "BeginFederatedLoginHandler",
    "BeginFederatedLoginResult",
    "CompleteFederatedLogin",
    "CompleteFederatedLoginHandler",
    "ConfirmConsent",
    "ConfirmConsentHandler",
    "ConfirmTos",
    "ConfirmTosHandler",
    "GetSessionView",
    "GetSessionViewHandler",
    "InteractionCommand",
    "RecheckInteraction",
    "RecheckInteractionHandler",
    "SendLoginLink",
    "SendLoginLinkHandler",
    "SendLoginLinkResult",
    "ShowInteraction",
    "ShowInteractionHandler",
    "SubmitName",
    "SubmitNameHandler",
    "VerifyLoginLink",
    "VerifyLoginLinkHandler",
]
