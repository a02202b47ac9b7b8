"""Client records as seen by the interaction layer."""

from dataclasses import dataclass

MIDDLEWARE_CLIENT_KIND = "OIDCGWMiddlewareClient"


@dataclass(frozen=True)
class ClientRecord:
    """An OIDC client registered with the protocol layer.

    `kind` distinguishes middleware clients (reverse proxies guarding another
    site) from ordinary relying parties. An empty `allowed_groups` means the
    client puts no group constraint on its users.
    """

    client_id: str
    kind: str | None = None
    allowed_groups: frozenset[str] = frozenset()
    display_name: str | None = None

    @property
    def is_middleware(self) -> bool:
        return self.kind == MIDDLEWARE_CLIENT_KIND
