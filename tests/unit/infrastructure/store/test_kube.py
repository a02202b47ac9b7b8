"""Unit tests for KubeDocumentStore using httpx.MockTransport."""

import json

import httpx
import pytest

from ogw.config import KubeConfig
from ogw.domain.shared.error import AlreadyExistsError, BackendError, NotFoundError
from ogw.infrastructure.store.kube import JSON_PATCH_CONTENT_TYPE, KubeDocumentStore

BASE = "https://kube.test/apis/codemowers.io/v1alpha1/namespaces/ns"


def make_store(handler, token_path: str = "/nonexistent/token") -> KubeDocumentStore:
    config = KubeConfig(api_server="https://kube.test", namespace="ns", token_path=token_path)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return KubeDocumentStore(config, client)


class TestGet:
    @pytest.mark.asyncio
    async def test_returns_document(self, tmp_path):
        token = tmp_path / "token"
        token.write_text("sa-token\n")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"metadata": {"name": "github-1"}})

        store = make_store(handler, token_path=str(token))

        document = await store.get("oidcgatewayusers", "github-1")

        assert document == {"metadata": {"name": "github-1"}}
        assert str(seen[0].url) == f"{BASE}/oidcgatewayusers/github-1"
        assert seen[0].headers["Authorization"] == "Bearer sa-token"

    @pytest.mark.asyncio
    async def test_not_found_is_none(self):
        store = make_store(lambda request: httpx.Response(404, json={"reason": "NotFound"}))
        assert await store.get("oidcgatewayusers", "github-1") is None

    @pytest.mark.asyncio
    async def test_server_error_is_backend_error(self):
        store = make_store(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(BackendError) as exc_info:
            await store.get("oidcgatewayusers", "github-1")
        assert exc_info.value.code == "backend_error"

    @pytest.mark.asyncio
    async def test_connection_error_is_backend_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(BackendError) as exc_info:
            await make_store(handler).get("oidcgatewayusers", "github-1")
        assert exc_info.value.code == "backend_unavailable"


class TestCreate:
    @pytest.mark.asyncio
    async def test_posts_to_collection(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert str(request.url) == f"{BASE}/oidcgatewayusers"
            return httpx.Response(201, json=json.loads(request.content))

        document = {"metadata": {"name": "github-1"}, "spec": {}}

        assert await make_store(handler).create("oidcgatewayusers", document) == document

    @pytest.mark.asyncio
    async def test_conflict(self):
        store = make_store(lambda request: httpx.Response(409, json={"reason": "AlreadyExists"}))

        with pytest.raises(AlreadyExistsError):
            await store.create("oidcgatewayusers", {"metadata": {"name": "github-1"}})


class TestPatch:
    @pytest.mark.asyncio
    async def test_sends_json_patch(self):
        ops = [{"op": "add", "path": "/spec/profile/name", "value": "Jane"}]

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PATCH"
            assert request.headers["Content-Type"] == JSON_PATCH_CONTENT_TYPE
            assert json.loads(request.content) == ops
            return httpx.Response(200, json={"spec": {"profile": {"name": "Jane"}}})

        patched = await make_store(handler).patch("oidcgatewayusers", "github-1", ops)

        assert patched["spec"]["profile"]["name"] == "Jane"

    @pytest.mark.asyncio
    async def test_missing_document(self):
        store = make_store(lambda request: httpx.Response(404))

        with pytest.raises(NotFoundError):
            await store.patch("oidcgatewayusers", "github-1", [])
