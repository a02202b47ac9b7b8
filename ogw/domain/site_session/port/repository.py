"""Repository port for site sessions."""

from abc import abstractmethod
from typing import Protocol

from ogw.domain.shared.port import Port
from ogw.domain.site_session.model.site_session import SiteSession, SiteSessionId


class SiteSessionRepository(Port, Protocol):
    """Persistence for site sessions, keyed by the browser-facing cookie identity."""

    @abstractmethod
    async def get(self, site_session_id: SiteSessionId) -> SiteSession | None:
        """Get a site session by id. None if it does not exist."""
        ...

    @abstractmethod
    async def upsert(self, site_session: SiteSession) -> SiteSession:
        """Create the site session, or overwrite only `session_id` if it exists."""
        ...
