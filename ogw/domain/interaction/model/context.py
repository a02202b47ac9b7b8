"""Request-scoped inputs to the policy chain."""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from ogw.domain.account.model.account import Account
from ogw.domain.interaction.model.client import ClientRecord
from ogw.domain.interaction.model.details import InteractionDetails
from ogw.domain.interaction.model.grant import Grant
from ogw.domain.interaction.model.text import TextCatalog

if TYPE_CHECKING:
    from ogw.domain.site_session.service.site_session import SiteSessionService


@dataclass(frozen=True)
class InteractionRequest:
    """What the web layer knows about an interaction request."""

    uid: str
    session_id: str | None = None  # OIDC session cookie
    site_cookie: str | None = None  # Signed site-session cookie


@dataclass(frozen=True)
class InteractionContext:
    """Everything a check may read, loaded fresh on every request.

    Nothing in here survives the request; verdicts are never cached.
    """

    details: InteractionDetails
    client: ClientRecord
    texts: TextCatalog
    account: Account | None = None
    grant: Grant | None = None
    site_cookie: str | None = None
    # Validates site cookies for middleware clients
    site_sessions: "SiteSessionService | None" = None

    @property
    def uid(self) -> str:
        return self.details.uid

    @property
    def session_id(self) -> str | None:
        return self.details.session.uid if self.details.session else None

    @property
    def result(self) -> dict[str, Any]:
        return self.details.result

    @property
    def actor(self) -> str | None:
        return str(self.account.id) if self.account else self.details.account_id

    def with_result(self, result: dict[str, Any]) -> "InteractionContext":
        """Copy with `result` shallow-merged over the interaction's last submission."""
        details = replace(self.details, result={**self.details.result, **result})
        return replace(self, details=details)

    def with_grant(self, grant: Grant) -> "InteractionContext":
        return replace(self, grant=grant)

    def with_account(self, account: Account | None) -> "InteractionContext":
        return replace(self, account=account)

    def with_site_cookie(self, site_cookie: str | None) -> "InteractionContext":
        return replace(self, site_cookie=site_cookie)
