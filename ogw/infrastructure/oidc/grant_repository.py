"""In-memory grant repository."""

from ogw.domain.interaction.model.grant import Grant, GrantId
from ogw.domain.interaction.port.grant_repository import GrantRepository


class InMemoryGrantRepository(GrantRepository):
    def __init__(self) -> None:
        self._grants: dict[GrantId, Grant] = {}

    async def get(self, grant_id: GrantId) -> Grant | None:
        return self._grants.get(grant_id)

    async def find(self, account_id: str, client_id: str) -> Grant | None:
        matches = [
            g
            for g in self._grants.values()
            if g.account_id == account_id and g.client_id == client_id
        ]
        if not matches:
            return None
        return max(matches, key=lambda g: g.updated_at or g.created_at)

    async def save(self, grant: Grant) -> None:
        self._grants[grant.id] = grant
