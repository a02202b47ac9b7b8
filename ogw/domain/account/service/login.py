"""Login token service: OAuth state and e-mail magic links."""

import hashlib
import hmac
import json
import logging
import secrets
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from ogw.config import AuthConfig
from ogw.domain.account.port.identity_provider import IdentityInfo
from ogw.domain.shared.error import ValidationError
from ogw.domain.shared.service import Service

logger = logging.getLogger(__name__)

# OAuth state validity period (5 minutes)
STATE_EXPIRY_SECONDS = 300

EMAIL_PROVIDER = "email"
EMAIL_LINK_AUDIENCE = "ogw:email-login"


@dataclass(frozen=True)
class OAuthState:
    """What a verified OAuth state token binds: the interaction and the upstream provider."""

    uid: str
    provider: str


class LoginTokenService(Service):
    """Signs and verifies the short-lived tokens used during sign-in.

    - OAuth state tokens are HMAC-signed payloads binding the interaction uid
    - E-mail login links carry an HS256 JWT bound to the interaction uid
    """

    _config: AuthConfig

    def create_oauth_state(self, uid: str, provider: str) -> str:
        """Create a signed, self-verifying OAuth state token.

        Returns:
            URL-safe signed state token in format: payload.signature
        """
        payload = {
            "nonce": secrets.token_urlsafe(16),
            "uid": uid,
            "provider": provider,
            "exp": int(time.time()) + STATE_EXPIRY_SECONDS,
        }
        payload_bytes = json.dumps(payload, separators=(",", ":")).encode()
        payload_b64 = urlsafe_b64encode(payload_bytes).rstrip(b"=").decode()

        signature = hmac.new(
            self._config.state_secret.encode(), payload_bytes, hashlib.sha256
        ).digest()
        signature_b64 = urlsafe_b64encode(signature).rstrip(b"=").decode()

        return f"{payload_b64}.{signature_b64}"

    def verify_oauth_state(self, state: str) -> OAuthState | None:
        """Verify a signed state token. None if invalid or expired."""
        try:
            parts = state.split(".")
            if len(parts) != 2:
                return None

            payload_b64, signature_b64 = parts

            # Restore base64 padding
            payload_bytes = urlsafe_b64decode(payload_b64 + "==")
            signature = urlsafe_b64decode(signature_b64 + "==")

            expected_sig = hmac.new(
                self._config.state_secret.encode(), payload_bytes, hashlib.sha256
            ).digest()
            if not hmac.compare_digest(signature, expected_sig):
                logger.warning("OAuth state signature verification failed")
                return None

            payload = json.loads(payload_bytes)
            if payload.get("exp", 0) < time.time():
                logger.warning("OAuth state expired")
                return None

            return OAuthState(uid=payload["uid"], provider=payload["provider"])

        except (ValueError, KeyError, TypeError) as e:
            logger.warning("OAuth state verification error: %s", e)
            return None

    def create_email_token(self, uid: str, email: str) -> str:
        """Create the token embedded in an e-mail login link."""
        now = datetime.now(UTC)
        expires = now + timedelta(minutes=self._config.email.link_expire_minutes)
        payload = {
            "email": normalize_email(email),
            "uid": uid,
            "aud": EMAIL_LINK_AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
            "jti": secrets.token_hex(16),
        }
        return jwt.encode(payload, self._config.state_secret, algorithm="HS256")

    def verify_email_token(self, uid: str, token: str) -> IdentityInfo:
        """Verify an e-mail login link for the given interaction.

        Raises:
            ValidationError: If the link is invalid, expired, or for another interaction
        """
        try:
            payload = jwt.decode(
                token,
                self._config.state_secret,
                algorithms=["HS256"],
                audience=EMAIL_LINK_AUDIENCE,
            )
        except jwt.ExpiredSignatureError as e:
            raise ValidationError("Login link has expired", field="token") from e
        except jwt.InvalidTokenError as e:
            raise ValidationError("Login link is invalid", field="token") from e

        if payload.get("uid") != uid:
            raise ValidationError("Login link belongs to another sign-in attempt", field="token")

        email = payload["email"]
        return IdentityInfo(
            provider=EMAIL_PROVIDER,
            external_id=email,
            display_name=None,
            email=email,
            raw_data={"email": email},
        )


def normalize_email(email: str) -> str:
    """Trim and lowercase an address.

    Raises:
        ValidationError: If it does not look like an e-mail address
    """
    email = (email or "").strip().lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain or " " in email:
        raise ValidationError("A valid e-mail address is required", field="email")
    return email
