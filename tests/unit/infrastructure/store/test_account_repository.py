"""Unit tests for DocumentAccountRepository over the in-memory store."""

import pytest

from ogw.config import KubeConfig
from ogw.domain.account.model import AccountId, Approved, ConditionRecord
from ogw.domain.account.model.condition import APPROVED
from ogw.domain.shared.error import BackendError, NotFoundError
from ogw.infrastructure.store.account import DocumentAccountRepository, document_to_account
from ogw.infrastructure.store.document import InMemoryDocumentStore

CONFIG = KubeConfig()
COLLECTION = CONFIG.account_plural
ACCOUNT_ID = AccountId("github-1")


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def repo(store) -> DocumentAccountRepository:
    return DocumentAccountRepository(store, CONFIG)


async def seed(store: InMemoryDocumentStore, spec: dict) -> None:
    await store.create(COLLECTION, {"metadata": {"name": "github-1"}, "spec": spec})


class TestDocumentToAccount:
    def test_maps_operator_fields(self):
        account = document_to_account(
            {
                "metadata": {"name": "github-1"},
                "spec": {
                    "profile": {"name": "Jane"},
                    "isAdmin": True,
                    "groups": [{"prefix": "codemowers", "name": "admins"}, {"name": "plain"}],
                    "conditions": [{"name": APPROVED}],
                },
            }
        )

        assert account.is_admin
        assert account.groups == frozenset({"codemowers:admins", "plain"})
        assert account.has_condition(Approved().record())

    def test_malformed_document(self):
        with pytest.raises(BackendError) as exc_info:
            document_to_account({"metadata": {}, "spec": {}})
        assert exc_info.value.code == "malformed_record"


class TestFindAndCreate:
    @pytest.mark.asyncio
    async def test_find_missing_is_none(self, repo):
        assert await repo.find(ACCOUNT_ID) is None

    @pytest.mark.asyncio
    async def test_create_writes_custom_object(self, repo, store):
        await repo.create(ACCOUNT_ID, {"name": "Jane"})

        document = await store.get(COLLECTION, "github-1")
        assert document["kind"] == "OIDCGWUser"
        assert document["apiVersion"] == "codemowers.io/v1alpha1"
        assert document["spec"] == {"profile": {"name": "Jane"}}


class TestUpdatePartial:
    @pytest.mark.asyncio
    async def test_adds_then_replaces_name(self, repo, store):
        await seed(store, {"profile": {}})

        await repo.update_partial(ACCOUNT_ID, {"name": "Jane"})
        account = await repo.update_partial(ACCOUNT_ID, {"name": "Janet"})

        assert account.profile == {"name": "Janet"}

    @pytest.mark.asyncio
    async def test_creates_missing_profile(self, repo, store):
        await seed(store, {"isAdmin": True})

        account = await repo.update_partial(ACCOUNT_ID, {"name": "Jane"})

        assert account.profile == {"name": "Jane"}
        assert account.is_admin

    @pytest.mark.asyncio
    async def test_missing_account(self, repo):
        with pytest.raises(NotFoundError):
            await repo.update_partial(ACCOUNT_ID, {"name": "Jane"})

    @pytest.mark.asyncio
    async def test_malformed_account_is_not_not_found(self, repo, store):
        await seed(store, {"conditions": [{"fingerprint": "no-name"}]})

        with pytest.raises(BackendError):
            await repo.update_partial(ACCOUNT_ID, {"name": "Jane"})


class TestConfirmCondition:
    @pytest.mark.asyncio
    async def test_creates_conditions_list(self, repo, store):
        await seed(store, {"profile": {}})
        record = ConditionRecord(name="tos", fingerprint="abc")

        account = await repo.confirm_condition(ACCOUNT_ID, record)

        assert account.has_condition(record)
        document = await store.get(COLLECTION, "github-1")
        assert document["spec"]["conditions"] == [{"name": "tos", "fingerprint": "abc"}]

    @pytest.mark.asyncio
    async def test_is_idempotent(self, repo, store):
        await seed(store, {"conditions": [{"name": APPROVED}]})

        await repo.confirm_condition(ACCOUNT_ID, Approved().record())
        await repo.confirm_condition(ACCOUNT_ID, ConditionRecord(name="tos", fingerprint="abc"))
        await repo.confirm_condition(ACCOUNT_ID, ConditionRecord(name="tos", fingerprint="abc"))

        document = await store.get(COLLECTION, "github-1")
        assert [c["name"] for c in document["spec"]["conditions"]] == [APPROVED, "tos"]


class TestDocumentWithoutSpec:
    @pytest.mark.asyncio
    async def test_update_partial_creates_spec(self, repo, store):
        await store.create(COLLECTION, {"metadata": {"name": "github-1"}})

        account = await repo.update_partial(ACCOUNT_ID, {"name": "Jane"})

        assert account.profile == {"name": "Jane"}
        document = await store.get(COLLECTION, "github-1")
        assert document["spec"] == {"profile": {"name": "Jane"}}

    @pytest.mark.asyncio
    async def test_confirm_condition_creates_spec(self, repo, store):
        await store.create(COLLECTION, {"metadata": {"name": "github-1"}})

        account = await repo.confirm_condition(ACCOUNT_ID, Approved().record())

        assert account.check_condition(Approved())
        document = await store.get(COLLECTION, "github-1")
        assert document["spec"] == {"conditions": [{"name": APPROVED}]}
