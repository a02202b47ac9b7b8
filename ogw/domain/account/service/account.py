"""Account service: sign-in provisioning and user-driven account changes."""

import logging

from ogw.domain.account.model.account import Account
from ogw.domain.account.model.condition import Approved, condition_for
from ogw.domain.account.model.value import AccountId
from ogw.domain.account.port.identity_provider import IdentityInfo
from ogw.domain.account.port.repository import AccountRepository
from ogw.domain.shared.error import AlreadyExistsError, BackendError, ValidationError
from ogw.domain.shared.service import Service

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 256


class AccountService(Service):
    """Orchestrates account reads and writes on top of the AccountRepository.

    - find_or_create: provision an account on first upstream sign-in
    - update_name: user-supplied display name
    - confirm_condition: record an explicitly confirmed condition
    - approve: administrative approval
    """

    _accounts: AccountRepository

    async def find(self, account_id: AccountId) -> Account | None:
        return await self._accounts.find(account_id)

    async def find_or_create(self, identity: IdentityInfo) -> Account:
        """Return the account for an upstream identity, creating it on first sign-in."""
        account_id = AccountId.for_identity(identity.provider, identity.external_id)

        existing = await self._accounts.find(account_id)
        if existing is not None:
            return existing

        try:
            account = await self._accounts.create(account_id, identity.profile_fields())
        except AlreadyExistsError:
            # Lost a race with a concurrent first sign-in
            account = await self._accounts.find(account_id)
            if account is None:
                raise BackendError(
                    f"Account {account_id} reported as existing but cannot be read",
                    code="inconsistent_backend",
                ) from None
            return account

        logger.info(
            "New account created: account_id=%s, provider=%s",
            account_id,
            identity.provider,
        )
        return account

    async def update_name(self, account_id: AccountId, name: str) -> Account:
        """Set the account's display name.

        Raises:
            ValidationError: If the name is blank or too long
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(
                f"Name must be at most {NAME_MAX_LENGTH} characters", field="name"
            )
        return await self._accounts.update_partial(account_id, {"name": name})

    async def confirm_condition(
        self, account_id: AccountId, name: str, fingerprint: str | None = None
    ) -> Account:
        """Record that the account satisfied a condition.

        Only called after the user explicitly confirmed the exact content
        identified by `fingerprint`.
        """
        record = condition_for(name, fingerprint).record()
        account = await self._accounts.confirm_condition(account_id, record)
        logger.info(
            "Condition confirmed: account_id=%s, condition=%s, fingerprint=%s",
            account_id,
            name,
            fingerprint,
        )
        return account

    async def approve(self, account_id: AccountId) -> Account:
        """Record administrative approval for the account."""
        return await self.confirm_condition(account_id, Approved().name)
