"""Port for the OIDC protocol library that owns suspended interactions."""

from abc import abstractmethod
from typing import Any, Protocol

from ogw.domain.interaction.model.client import ClientRecord
from ogw.domain.interaction.model.details import InteractionLookup
from ogw.domain.interaction.model.session import SessionRecord
from ogw.domain.shared.port import Port


class OIDCProvider(Port, Protocol):
    """The protocol layer: token issuance and message validation stay behind it.

    The gateway only reads interaction state, adds partial results to it and
    tells it when an interaction is finished.
    """

    @abstractmethod
    async def interaction_details(self, uid: str) -> InteractionLookup:
        """Load a pending interaction. Expired or unknown ids yield `Expired`."""
        ...

    @abstractmethod
    async def interaction_result(
        self,
        uid: str,
        result: dict[str, Any],
        *,
        merge_with_last_submission: bool = True,
    ) -> None:
        """Store a partial submission on the interaction without finishing it.

        Raises:
            ProtocolError: If the interaction is expired or unknown
        """
        ...

    @abstractmethod
    async def interaction_finished(
        self,
        uid: str,
        result: dict[str, Any],
        *,
        merge_with_last_submission: bool = True,
    ) -> str:
        """Finish the interaction and return the URL that resumes authorization.

        Raises:
            ProtocolError: If the interaction is expired or unknown
        """
        ...

    @abstractmethod
    async def find_client(self, client_id: str) -> ClientRecord | None:
        """Look up a registered client. None if unknown."""
        ...

    @abstractmethod
    async def get_session(self, session_id: str | None) -> SessionRecord | None:
        """The browser's OIDC session, None if there is none."""
        ...
