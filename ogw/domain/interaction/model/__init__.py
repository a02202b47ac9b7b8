"""Interaction domain models."""

from .client import MIDDLEWARE_CLIENT_KIND, ClientRecord
from .context import InteractionContext, InteractionRequest
from .details import Expired, Found, InteractionDetails, InteractionLookup
from .grant import Grant, GrantId
from .outcome import InteractionOutcome, Redirect, Render, SessionView, SetCookie
from .policy import Check, PolicyChain, PolicyChainBuilder, Prompt, Verdict
from .session import SessionRecord
from .text import TextCatalog

__all__ = [
    "MIDDLEWARE_CLIENT_KIND",
    "Check",
    "ClientRecord",
    "Expired",
    "Found",
    "Grant",
    "GrantId",
    "InteractionContext",
    "InteractionDetails",
    "InteractionLookup",
    "InteractionOutcome",
    "InteractionRequest",
    "PolicyChain",
    "PolicyChainBuilder",
    "Prompt",
    "Redirect",
    "Render",
    "SessionRecord",
    "SessionView",
    "SetCookie",
    "TextCatalog",
    "Verdict",
]
