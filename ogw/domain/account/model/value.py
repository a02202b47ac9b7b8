"""Value objects for the account domain."""

import hashlib
import re

from pydantic import RootModel, field_validator

from ogw.domain.shared.model.value import ValueObject

# Account documents are addressed by Kubernetes object name (RFC 1123 subdomain).
ACCOUNT_ID_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9.]*[a-z0-9])?$")
ACCOUNT_ID_MAX_LENGTH = 253


class AccountId(RootModel[str]):
    """Stable identifier of an account. Immutable and never reused."""

    @field_validator("root")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if len(v) > ACCOUNT_ID_MAX_LENGTH or not ACCOUNT_ID_PATTERN.match(v):
            raise ValueError(f"Invalid account id: {v!r}")
        return v

    @classmethod
    def for_identity(cls, provider: str, external_id: str) -> "AccountId":
        """Derive the account id for an upstream identity.

        Provider ids that are already valid object names are kept readable
        (``github-1234``); anything else (e-mail addresses, mixed case) is
        hashed so the id stays stable and valid.
        """
        candidate = f"{provider}-{external_id}".lower()
        if len(candidate) <= 63 and ACCOUNT_ID_PATTERN.match(candidate):
            return cls(candidate)
        digest = hashlib.sha256(external_id.strip().lower().encode("utf-8")).hexdigest()[:32]
        return cls(f"{provider}-{digest}")

    def __str__(self) -> str:
        return self.root

    def __hash__(self) -> int:
        return hash(self.root)


class ConditionRecord(ValueObject):
    """Proof that an account satisfied a named condition.

    ``fingerprint`` pins the exact content that was agreed to (e.g. the
    SHA-256 of the displayed ToS text). State conditions carry no fingerprint.
    """

    name: str
    fingerprint: str | None = None
