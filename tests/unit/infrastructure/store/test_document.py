"""Unit tests for JSON Patch application and the in-memory document store."""

import pytest

from ogw.domain.shared.error import AlreadyExistsError, BackendError, NotFoundError
from ogw.infrastructure.store.document import InMemoryDocumentStore, apply_patch, pointer


def make_document(name: str = "github-1", **spec) -> dict:
    return {"apiVersion": "codemowers.io/v1alpha1", "metadata": {"name": name}, "spec": spec}


class TestPointer:
    def test_escapes_reserved_characters(self):
        assert pointer("spec", "profile", "a/b~c") == "/spec/profile/a~1b~0c"


class TestApplyPatch:
    def test_add_and_replace(self):
        doc = make_document(profile={"name": "Jane"})

        patched = apply_patch(
            doc,
            [
                {"op": "replace", "path": "/spec/profile/name", "value": "Janet"},
                {"op": "add", "path": "/spec/profile/email", "value": "j@example.com"},
            ],
        )

        assert patched["spec"]["profile"] == {"name": "Janet", "email": "j@example.com"}
        assert doc["spec"]["profile"] == {"name": "Jane"}

    def test_append_to_list(self):
        doc = make_document(conditions=[{"name": "approved"}])

        patched = apply_patch(doc, [{"op": "add", "path": "/spec/conditions/-", "value": {"x": 1}}])

        assert patched["spec"]["conditions"] == [{"name": "approved"}, {"x": 1}]

    def test_escaped_key(self):
        patched = apply_patch({"a": {}}, [{"op": "add", "path": pointer("a", "b/c"), "value": 1}])
        assert patched == {"a": {"b/c": 1}}

    def test_replace_missing_member_fails(self):
        with pytest.raises(BackendError) as exc_info:
            apply_patch(make_document(), [{"op": "replace", "path": "/spec/x", "value": 1}])
        assert exc_info.value.code == "invalid_patch"

    def test_missing_parent_fails(self):
        with pytest.raises(BackendError):
            apply_patch(make_document(), [{"op": "add", "path": "/spec/a/b", "value": 1}])

    def test_unsupported_operation(self):
        with pytest.raises(BackendError):
            apply_patch(make_document(), [{"op": "remove", "path": "/spec"}])


class TestInMemoryDocumentStore:
    @pytest.mark.asyncio
    async def test_create_then_get(self):
        store = InMemoryDocumentStore()

        created = await store.create("users", make_document(profile={}))
        fetched = await store.get("users", "github-1")

        assert fetched == created
        assert created["metadata"]["resourceVersion"] == "1"

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await InMemoryDocumentStore().get("users", "nobody") is None

    @pytest.mark.asyncio
    async def test_create_duplicate(self):
        store = InMemoryDocumentStore()
        await store.create("users", make_document())

        with pytest.raises(AlreadyExistsError):
            await store.create("users", make_document())

    @pytest.mark.asyncio
    async def test_patch_missing(self):
        with pytest.raises(NotFoundError):
            await InMemoryDocumentStore().patch("users", "nobody", [])

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self):
        store = InMemoryDocumentStore()
        created = await store.create("users", make_document(profile={}))

        created["spec"]["profile"]["name"] = "Mallory"

        assert (await store.get("users", "github-1"))["spec"]["profile"] == {}

    @pytest.mark.asyncio
    async def test_patch_bumps_resource_version(self):
        store = InMemoryDocumentStore()
        await store.create("users", make_document(profile={}))

        patched = await store.patch(
            "users", "github-1", [{"op": "add", "path": "/spec/profile/name", "value": "Jane"}]
        )

        assert patched["metadata"]["resourceVersion"] == "2"
        assert patched["spec"]["profile"] == {"name": "Jane"}
