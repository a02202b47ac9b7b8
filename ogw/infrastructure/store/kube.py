"""Kubernetes custom-objects API adapter for the DocumentStore port."""

import logging
from pathlib import Path
from typing import Any

import httpx

from ogw.config import KubeConfig
from ogw.domain.shared.error import AlreadyExistsError, BackendError, NotFoundError
from ogw.infrastructure.store.document import Document, DocumentStore, PatchOp

logger = logging.getLogger(__name__)

JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"


class KubeDocumentStore(DocumentStore):
    """DocumentStore backed by namespaced custom objects.

    Collections are resource plurals under the configured group and version:
    /apis/{group}/{version}/namespaces/{namespace}/{plural}/{name}
    """

    def __init__(self, config: KubeConfig, http_client: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http_client

    async def get(self, collection: str, name: str) -> Document | None:
        response = await self._request("GET", self._url(collection, name))
        if response.status_code == 404:
            return None
        self._raise_for_status(response, f"get {collection}/{name}")
        return self._json(response)

    async def create(self, collection: str, document: Document) -> Document:
        name = document.get("metadata", {}).get("name", "")
        response = await self._request("POST", self._url(collection), json=document)
        if response.status_code == 409:
            raise AlreadyExistsError(f"{collection}/{name} already exists")
        self._raise_for_status(response, f"create {collection}/{name}")
        return self._json(response)

    async def patch(self, collection: str, name: str, ops: list[PatchOp]) -> Document:
        response = await self._request(
            "PATCH",
            self._url(collection, name),
            json=ops,
            headers={"Content-Type": JSON_PATCH_CONTENT_TYPE},
        )
        if response.status_code == 404:
            raise NotFoundError(f"{collection}/{name} not found")
        self._raise_for_status(response, f"patch {collection}/{name}")
        return self._json(response)

    def _url(self, collection: str, name: str | None = None) -> str:
        c = self._config
        url = (
            f"{c.api_server.rstrip('/')}/apis/{c.group}/{c.version}"
            f"/namespaces/{c.namespace}/{collection}"
        )
        return f"{url}/{name}" if name else url

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        # Service account tokens rotate; read on every request
        token_path = Path(self._config.token_path)
        if token_path.exists():
            headers["Authorization"] = f"Bearer {token_path.read_text().strip()}"
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            return await self._http.request(
                method,
                url,
                json=json,
                headers={**self._headers(), **(headers or {})},
            )
        except httpx.RequestError as e:
            logger.error("Kubernetes API request failed: %s %s: %s", method, url, e)
            raise BackendError(
                "Failed to connect to the Kubernetes API",
                code="backend_unavailable",
            ) from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.is_success:
            return
        logger.error(
            "Kubernetes API error: action=%s, status=%d, body=%s",
            action,
            response.status_code,
            response.text,
        )
        raise BackendError(
            f"Kubernetes API failed to {action}: {response.status_code}",
            code="backend_error",
        )

    @staticmethod
    def _json(response: httpx.Response) -> Document:
        try:
            return response.json()
        except ValueError as e:
            raise BackendError("Kubernetes API returned invalid JSON", code="backend_error") from e
