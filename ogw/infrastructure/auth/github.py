"""GitHub identity provider adapter."""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from ogw.config import GithubConfig
from ogw.domain.account.port.identity_provider import IdentityInfo, IdentityProvider
from ogw.domain.shared.error import ExternalServiceError

logger = logging.getLogger(__name__)


class GitHubIdentityProvider(IdentityProvider):
    """IdentityProvider implementation for GitHub OAuth apps."""

    def __init__(self, config: GithubConfig, http_client: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http_client

    @property
    def provider_name(self) -> str:
        return "github"

    def get_authorization_url(self, state: str, redirect_uri: str) -> str:
        """Generate GitHub authorization URL."""
        params = {
            "client_id": self._config.client_id,
            "scope": self._config.scope,
            "redirect_uri": redirect_uri,
            "state": state,
            "allow_signup": "false",
        }
        return f"{self._config.base_url}/login/oauth/authorize?{urlencode(params)}"

    async def exchange_code(
        self,
        code: str,
        redirect_uri: str,
    ) -> IdentityInfo:
        """Exchange authorization code for identity information."""
        token_data = await self._post_json(
            f"{self._config.base_url}/login/oauth/access_token",
            data={
                "client_id": self._config.client_id,
                "client_secret": self._config.client_secret,
                "code": code,
                "redirect_uri": redirect_uri,
            },
        )

        # GitHub reports OAuth errors with 200 and an "error" member
        access_token = token_data.get("access_token")
        if not access_token:
            logger.error("GitHub token exchange rejected: error=%s", token_data.get("error"))
            raise ExternalServiceError(
                f"GitHub token exchange failed: {token_data.get('error', 'no access_token')}",
                code="oauth_error",
            )

        user = await self._get_json(f"{self._config.api_url}/user", access_token)
        user_id = user.get("id")
        if user_id is None:
            raise ExternalServiceError("GitHub user response missing id", code="oauth_error")

        email = user.get("email") or await self._primary_email(access_token)

        return IdentityInfo(
            provider="github",
            external_id=str(user_id),
            display_name=user.get("name"),
            email=email,
            raw_data=user,
        )

    async def _primary_email(self, access_token: str) -> str | None:
        """Primary verified address; GitHub hides it from /user when private."""
        emails = await self._get_json(f"{self._config.api_url}/user/emails", access_token)
        if not isinstance(emails, list):
            return None
        for entry in emails:
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")
        return None

    async def _post_json(self, url: str, data: dict[str, str]) -> dict[str, Any]:
        try:
            response = await self._http.post(url, data=data, headers={"Accept": "application/json"})
        except httpx.RequestError as e:
            logger.exception("GitHub request failed: %s", e)
            raise ExternalServiceError("Failed to connect to GitHub", code="idp_unavailable") from e
        return self._json(response)

    async def _get_json(self, url: str, access_token: str) -> Any:
        try:
            response = await self._http.get(
                url,
                headers={
                    "Accept": "application/vnd.github+json",
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.RequestError as e:
            logger.exception("GitHub request failed: %s", e)
            raise ExternalServiceError("Failed to connect to GitHub", code="idp_unavailable") from e
        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if response.status_code != 200:
            logger.error(
                "GitHub request failed: url=%s, status=%d, body=%s",
                response.request.url,
                response.status_code,
                response.text,
            )
            raise ExternalServiceError(
                f"GitHub request failed: {response.status_code}",
                code="idp_unavailable",
            )
        return response.json()
