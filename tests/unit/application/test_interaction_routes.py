"""Route tests for the interaction endpoints, wired with in-memory backends."""

import pytest
from fastapi.testclient import TestClient

from ogw.application.api.rest.app import create_app
from ogw.config import (
    AuditConfig,
    AuthConfig,
    ClientConfig,
    Config,
    EmailConfig,
    OIDCConfig,
    PolicyConfig,
    Server,
    SiteSessionConfig,
    StorageConfig,
    TextsConfig,
)
from ogw.domain.account.service.login import LoginTokenService
from ogw.infrastructure.oidc.memory import InMemoryOIDCProvider

ISSUER = "https://auth.example.com"


def make_config(**overrides) -> Config:
    values = {
        "server": Server(public_url="http://gateway.test"),
        "storage": StorageConfig(backend="memory"),
        "audit": AuditConfig(backend="memory"),
        "auth": AuthConfig(
            state_secret="route-test-state-secret-32-chars",
            email=EmailConfig(enabled=True),
        ),
        "site_session": SiteSessionConfig(secret="route-test-site-secret-32-chars"),
        "oidc": OIDCConfig(issuer=ISSUER),
        "texts": TextsConfig(tos="Be nice."),
        "policy": PolicyConfig(require_approval=False),
        "clients": [ClientConfig(client_id="app", display_name="App")],
    }
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def client(config):
    with TestClient(create_app(config), follow_redirects=False) as test_client:
        yield test_client


def start_interaction(client: TestClient) -> str:
    container = client.app.state.dishka_container
    provider = client.portal.call(container.get, InMemoryOIDCProvider)
    return provider.start_interaction(
        "app", {"scope": "openid profile", "redirect_uri": "https://app.example.com/cb"}
    )


def email_link_path(config: Config, uid: str, email: str) -> str:
    token = LoginTokenService(_config=config.auth).create_email_token(uid, email)
    return f"/interaction/{uid}/verify-email/{token}"


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestShowInteraction:
    def test_login_prompt(self, client):
        uid = start_interaction(client)

        response = client.get(f"/interaction/{uid}")

        assert response.status_code == 200
        assert response.json()["prompt"] == "login"
        assert response.headers["Cache-Control"] == "no-store"

    def test_unknown_interaction(self, client):
        response = client.get("/interaction/does-not-exist")

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_request"

    def test_session_view_degrades_when_expired(self, client):
        response = client.get("/interaction/does-not-exist/session")

        assert response.status_code == 200
        assert response.json()["uid"] is None
        assert response.json()["account_id"] is None

    def test_session_view(self, client):
        uid = start_interaction(client)

        body = client.get(f"/interaction/{uid}/session").json()

        assert body["uid"] == uid
        assert body["client_name"] == "App"


class TestEmailSignIn:
    def test_full_flow_ends_in_redirect(self, client, config):
        uid = start_interaction(client)

        sent = client.post(f"/interaction/{uid}/email", json={"email": "Jane@Example.com"})
        assert sent.status_code == 200
        assert sent.json()["email"] == "jane@example.com"

        name_prompt = client.get(email_link_path(config, uid, "jane@example.com"))
        assert name_prompt.json()["prompt"] == "name"

        tos_prompt = client.post(f"/interaction/{uid}/update-name", json={"name": "Jane"})
        assert tos_prompt.json()["prompt"] == "tos"
        assert tos_prompt.json()["data"]["text"] == "Be nice."

        finished = client.post(f"/interaction/{uid}/confirm-tos")
        assert finished.status_code == 303
        assert finished.headers["location"] == f"{ISSUER}/auth/{uid}"

    def test_blank_name_is_rejected(self, client, config):
        uid = start_interaction(client)
        client.get(email_link_path(config, uid, "jane@example.com"))

        response = client.post(f"/interaction/{uid}/update-name", json={"name": "   "})

        assert response.status_code == 422
        assert response.json()["field"] == "name"

    def test_invalid_address(self, client):
        uid = start_interaction(client)

        response = client.post(f"/interaction/{uid}/email", json={"email": "not-an-address"})

        assert response.status_code == 422
        assert response.json()["field"] == "email"

    def test_disabled(self):
        config = make_config(auth=AuthConfig(state_secret="route-test-state-secret-32-chars"))
        with TestClient(create_app(config), follow_redirects=False) as client:
            uid = start_interaction(client)

            response = client.post(f"/interaction/{uid}/email", json={"email": "j@example.com"})

        assert response.status_code == 404


class TestFederatedSignIn:
    def test_unknown_upstream(self, client):
        uid = start_interaction(client)

        response = client.post(f"/interaction/{uid}/federated", json={"upstream": "gitlab"})

        assert response.status_code == 404

    def test_callback_with_bad_state(self, client):
        response = client.get("/interaction/callback/github", params={"state": "forged"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_request"


class TestAbort:
    def test_abort_redirects_back(self, client):
        uid = start_interaction(client)

        response = client.get(f"/interaction/{uid}/abort")

        assert response.status_code == 303
        assert response.headers["location"] == f"{ISSUER}/auth/{uid}"
        assert client.get(f"/interaction/{uid}").status_code == 400
