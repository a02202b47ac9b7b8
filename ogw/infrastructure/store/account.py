"""AccountRepository over a DocumentStore (OIDCGWUser custom objects)."""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ogw.config import KubeConfig
from ogw.domain.account.model.account import Account
from ogw.domain.account.model.value import AccountId, ConditionRecord
from ogw.domain.account.port.repository import AccountRepository
from ogw.domain.shared.error import BackendError, NotFoundError
from ogw.infrastructure.store.document import Document, DocumentStore, PatchOp, pointer

logger = logging.getLogger(__name__)


def _group_name(group: Any) -> str:
    """Groups are stored as {prefix, name}; plain strings are accepted as-is."""
    if isinstance(group, str):
        return group
    prefix = group.get("prefix")
    return f"{prefix}:{group['name']}" if prefix else group["name"]


def document_to_account(document: Document) -> Account:
    """Map an OIDCGWUser document to an Account.

    Raises:
        BackendError: With code `malformed_record` if the document cannot be decoded
    """
    try:
        spec = document.get("spec") or {}
        return Account(
            id=AccountId(document["metadata"]["name"]),
            profile={k: str(v) for k, v in (spec.get("profile") or {}).items() if v is not None},
            is_admin=bool(spec.get("isAdmin", False)),
            groups=frozenset(_group_name(g) for g in spec.get("groups") or []),
            conditions=frozenset(
                ConditionRecord(name=c["name"], fingerprint=c.get("fingerprint"))
                for c in spec.get("conditions") or []
            ),
        )
    except (KeyError, TypeError, AttributeError, PydanticValidationError) as e:
        name = (document.get("metadata") or {}).get("name") if isinstance(document, dict) else None
        logger.error("Malformed account document: name=%s, error=%s", name, e)
        raise BackendError(
            f"Account document {name!r} is malformed",
            code="malformed_record",
        ) from e


def condition_to_document(record: ConditionRecord) -> dict[str, str]:
    data = {"name": record.name}
    if record.fingerprint is not None:
        data["fingerprint"] = record.fingerprint
    return data


class DocumentAccountRepository(AccountRepository):
    """Accounts as custom objects of kind OIDCGWUser.

    All writes are JSON Patch operations scoped to the fields being changed,
    so operator-owned fields (`isAdmin`, `groups`) are never rewritten.
    """

    def __init__(self, store: DocumentStore, config: KubeConfig) -> None:
        self._store = store
        self._config = config

    @property
    def _collection(self) -> str:
        return self._config.account_plural

    async def find(self, account_id: AccountId) -> Account | None:
        document = await self._store.get(self._collection, str(account_id))
        if document is None:
            return None
        return document_to_account(document)

    async def create(self, account_id: AccountId, profile: dict[str, str]) -> Account:
        document = {
            "apiVersion": self._config.api_version,
            "kind": self._config.account_kind,
            "metadata": {"name": str(account_id)},
            "spec": {"profile": dict(profile)},
        }
        created = await self._store.create(self._collection, document)
        logger.debug("Account document created: name=%s", account_id)
        return document_to_account(created)

    async def update_partial(self, account_id: AccountId, profile_patch: dict[str, str]) -> Account:
        current_doc = await self._require(account_id)
        if not profile_patch:
            return document_to_account(current_doc)

        spec = current_doc.get("spec")
        profile = (spec or {}).get("profile")
        ops: list[PatchOp] = []
        if spec is None:
            ops.append({"op": "add", "path": "/spec", "value": {"profile": {}}})
            profile = {}
        elif profile is None:
            ops.append({"op": "add", "path": "/spec/profile", "value": {}})
            profile = {}
        for key, value in profile_patch.items():
            ops.append(
                {
                    "op": "replace" if key in profile else "add",
                    "path": pointer("spec", "profile", key),
                    "value": value,
                }
            )

        updated = await self._store.patch(self._collection, str(account_id), ops)
        return document_to_account(updated)

    async def confirm_condition(self, account_id: AccountId, record: ConditionRecord) -> Account:
        current_doc = await self._require(account_id)
        current = document_to_account(current_doc)
        if current.has_condition(record):
            return current

        value = condition_to_document(record)
        spec = current_doc.get("spec")
        if spec is None:
            op: PatchOp = {"op": "add", "path": "/spec", "value": {"conditions": [value]}}
        elif spec.get("conditions") is None:
            op = {"op": "add", "path": "/spec/conditions", "value": [value]}
        else:
            op = {"op": "add", "path": "/spec/conditions/-", "value": value}

        updated = await self._store.patch(self._collection, str(account_id), [op])
        logger.info(
            "Condition recorded: account_id=%s, condition=%s", account_id, record.name
        )
        return document_to_account(updated)

    async def _require(self, account_id: AccountId) -> Document:
        document = await self._store.get(self._collection, str(account_id))
        if document is None:
            raise NotFoundError(f"Account not found: {account_id}", code="account_not_found")
        return document
