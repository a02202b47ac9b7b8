"""Browser session record owned by the protocol layer."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SessionRecord:
    """The OIDC session of one browser.

    `uid` is the session's own identifier (the value site sessions bind to).
    `grants` maps client id to the grant id consented for that client.
    """

    uid: str
    account_id: str | None = None
    grants: dict[str, str] = field(default_factory=dict)

    def grant_id_for(self, client_id: str) -> str | None:
        return self.grants.get(client_id)
