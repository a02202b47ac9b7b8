"""Document store port and the dict-backed adapter.

Documents are Kubernetes-style custom objects: `{apiVersion, kind,
metadata: {name, ...}, spec: {...}}`. Updates are RFC 6902 JSON Patch
operation lists; only `add` and `replace` are used.
"""

import copy
import logging
from abc import abstractmethod
from datetime import UTC, datetime
from typing import Any, Protocol

from ogw.domain.shared.error import AlreadyExistsError, BackendError, NotFoundError
from ogw.domain.shared.port import Port

logger = logging.getLogger(__name__)

Document = dict[str, Any]
PatchOp = dict[str, Any]


class DocumentStore(Port, Protocol):
    """Named documents grouped by collection (a custom resource plural)."""

    @abstractmethod
    async def get(self, collection: str, name: str) -> Document | None:
        """Fetch a document. None if it does not exist.

        Raises:
            BackendError: If the store cannot be reached or answers unexpectedly
        """
        ...

    @abstractmethod
    async def create(self, collection: str, document: Document) -> Document:
        """Create a document named by `metadata.name`.

        Raises:
            AlreadyExistsError: If the name is taken
            BackendError: On any other failure
        """
        ...

    @abstractmethod
    async def patch(self, collection: str, name: str, ops: list[PatchOp]) -> Document:
        """Apply JSON Patch operations and return the updated document.

        Raises:
            NotFoundError: If the document does not exist
            BackendError: On any other failure
        """
        ...


def escape_pointer_token(token: str) -> str:
    """Escape one JSON Pointer reference token (RFC 6901)."""
    return token.replace("~", "~0").replace("/", "~1")


def unescape_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def pointer(*tokens: str) -> str:
    return "".join(f"/{escape_pointer_token(token)}" for token in tokens)


def apply_patch(document: Document, ops: list[PatchOp]) -> Document:
    """Apply `add`/`replace` JSON Patch operations to a copy of `document`.

    Raises:
        BackendError: If an operation is unsupported or its path is invalid
    """
    result = copy.deepcopy(document)
    for op in ops:
        kind = op.get("op")
        path = op.get("path", "")
        if kind not in ("add", "replace"):
            raise BackendError(f"Unsupported patch operation: {kind}", code="invalid_patch")
        if not path.startswith("/"):
            raise BackendError(f"Invalid patch path: {path!r}", code="invalid_patch")

        tokens = [unescape_pointer_token(t) for t in path[1:].split("/")]
        parent: Any = result
        for token in tokens[:-1]:
            try:
                parent = parent[int(token)] if isinstance(parent, list) else parent[token]
            except (KeyError, IndexError, ValueError) as e:
                raise BackendError(f"Patch path not found: {path}", code="invalid_patch") from e

        last = tokens[-1]
        value = copy.deepcopy(op.get("value"))
        if isinstance(parent, list):
            if last == "-" and kind == "add":
                parent.append(value)
                continue
            try:
                index = int(last)
            except ValueError as e:
                raise BackendError(f"Invalid list index: {path}", code="invalid_patch") from e
            if kind == "add":
                parent.insert(index, value)
            else:
                parent[index] = value
        elif isinstance(parent, dict):
            if kind == "replace" and last not in parent:
                raise BackendError(f"Cannot replace missing member: {path}", code="invalid_patch")
            parent[last] = value
        else:
            raise BackendError(f"Patch path not found: {path}", code="invalid_patch")
    return result


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed DocumentStore for local development and tests."""

    def __init__(self, documents: dict[str, dict[str, Document]] | None = None) -> None:
        self._documents: dict[str, dict[str, Document]] = documents or {}
        self._resource_version = 0

    async def get(self, collection: str, name: str) -> Document | None:
        document = self._documents.get(collection, {}).get(name)
        return copy.deepcopy(document) if document is not None else None

    async def create(self, collection: str, document: Document) -> Document:
        name = document.get("metadata", {}).get("name")
        if not name:
            raise BackendError("Document has no metadata.name", code="invalid_document")
        documents = self._documents.setdefault(collection, {})
        if name in documents:
            raise AlreadyExistsError(f"{collection}/{name} already exists")

        stored = copy.deepcopy(document)
        metadata = stored.setdefault("metadata", {})
        metadata["creationTimestamp"] = datetime.now(UTC).isoformat()
        metadata["resourceVersion"] = self._next_version()
        documents[name] = stored
        return copy.deepcopy(stored)

    async def patch(self, collection: str, name: str, ops: list[PatchOp]) -> Document:
        documents = self._documents.get(collection, {})
        if name not in documents:
            raise NotFoundError(f"{collection}/{name} not found")

        patched = apply_patch(documents[name], ops)
        patched.setdefault("metadata", {})["resourceVersion"] = self._next_version()
        documents[name] = patched
        return copy.deepcopy(patched)

    def _next_version(self) -> str:
        self._resource_version += 1
        return str(self._resource_version)
