"""Repository port for consent grants."""

from abc import abstractmethod
from typing import Protocol

from ogw.domain.interaction.model.grant import Grant, GrantId
from ogw.domain.shared.port import Port


class GrantRepository(Port, Protocol):
    """Persistence for grants, keyed by id and by (account, client)."""

    @abstractmethod
    async def get(self, grant_id: GrantId) -> Grant | None:
        """Get a grant by id."""
        ...

    @abstractmethod
    async def find(self, account_id: str, client_id: str) -> Grant | None:
        """Get the grant an account holds for a client, if any."""
        ...

    @abstractmethod
    async def save(self, grant: Grant) -> None:
        """Save a grant (create or extend)."""
        ...
