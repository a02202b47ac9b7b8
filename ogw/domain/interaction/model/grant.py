"""Grant entity: what an account consented to share with a client."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import RootModel

from ogw.domain.shared.model.entity import Entity


class GrantId(RootModel[UUID]):
    """Unique identifier for a Grant."""

    @classmethod
    def generate(cls) -> "GrantId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


class Grant(Entity):
    """Scopes and claims an (account, client) pair has consented to.

    Invariants:
    - created or extended, never shrunk by the gateway
    """

    id: GrantId
    account_id: str
    client_id: str
    scopes: frozenset[str] = frozenset()
    claims: frozenset[str] = frozenset()
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(cls, account_id: str, client_id: str) -> "Grant":
        return cls(
            id=GrantId.generate(),
            account_id=account_id,
            client_id=client_id,
            created_at=datetime.now(UTC),
        )

    def covers(self, scopes: frozenset[str]) -> bool:
        return scopes <= self.scopes

    def extend(self, scopes: frozenset[str], claims: frozenset[str] = frozenset()) -> "Grant":
        """Return a copy that additionally covers `scopes` and `claims`."""
        return self.model_copy(
            update={
                "scopes": self.scopes | scopes,
                "claims": self.claims | claims,
                "updated_at": datetime.now(UTC),
            }
        )
