"""SiteSessionRepository over a DocumentStore (OIDCGWSiteSession custom objects)."""

import logging

from pydantic import ValidationError as PydanticValidationError

from ogw.config import KubeConfig
from ogw.domain.shared.error import AlreadyExistsError, BackendError
from ogw.domain.site_session.model.site_session import SiteSession, SiteSessionId
from ogw.domain.site_session.port.repository import SiteSessionRepository
from ogw.infrastructure.store.document import Document, DocumentStore

logger = logging.getLogger(__name__)


def document_to_site_session(document: Document) -> SiteSession:
    try:
        spec = document["spec"]
        return SiteSession(
            id=SiteSessionId(document["metadata"]["name"]),
            session_id=spec.get("sessionId"),
            account_id=spec["accountId"],
            client_id=spec["clientId"],
            payload=spec.get("payload") or {},
            created_at=spec["createdAt"],
            updated_at=spec.get("updatedAt"),
        )
    except (KeyError, TypeError, PydanticValidationError) as e:
        raise BackendError("Site session document is malformed", code="malformed_record") from e


class DocumentSiteSessionRepository(SiteSessionRepository):
    def __init__(self, store: DocumentStore, config: KubeConfig) -> None:
        self._store = store
        self._config = config

    @property
    def _collection(self) -> str:
        return self._config.site_session_plural

    async def get(self, site_session_id: SiteSessionId) -> SiteSession | None:
        document = await self._store.get(self._collection, str(site_session_id))
        if document is None:
            return None
        return document_to_site_session(document)

    async def upsert(self, site_session: SiteSession) -> SiteSession:
        existing = await self._store.get(self._collection, str(site_session.id))
        if existing is None:
            try:
                document = self._to_document(site_session)
                created = await self._store.create(self._collection, document)
                return document_to_site_session(created)
            except AlreadyExistsError:
                logger.debug("Site session created concurrently: id=%s", site_session.id)

        # Existing record: only the OIDC session binding moves
        updated_at = (site_session.updated_at or site_session.created_at).isoformat()
        updated = await self._store.patch(
            self._collection,
            str(site_session.id),
            [
                {"op": "add", "path": "/spec/sessionId", "value": site_session.session_id},
                {"op": "add", "path": "/spec/updatedAt", "value": updated_at},
            ],
        )
        return document_to_site_session(updated)

    def _to_document(self, site_session: SiteSession) -> Document:
        return {
            "apiVersion": self._config.api_version,
            "kind": self._config.site_session_kind,
            "metadata": {"name": str(site_session.id)},
            "spec": {
                "sessionId": site_session.session_id,
                "accountId": site_session.account_id,
                "clientId": site_session.client_id,
                "payload": site_session.payload,
                "createdAt": site_session.created_at.isoformat(),
            },
        }
