"""Repository port for the account store."""

from abc import abstractmethod
from typing import Protocol

from ogw.domain.account.model.account import Account
from ogw.domain.account.model.value import AccountId, ConditionRecord
from ogw.domain.shared.port import Port


class AccountRepository(Port, Protocol):
    """Durable access to Account records.

    Absence and malfunction are kept apart at this boundary: `find` returns
    None only when the backend positively has no such record, every other
    failure raises BackendError.

    No compare-and-swap token is used. Concurrent `update_partial` calls on
    one account race per profile field (last writer wins).
    """

    @abstractmethod
    async def find(self, account_id: AccountId) -> Account | None:
        """Get an account by id. None if it does not exist.

        Raises:
            BackendError: If the backend is unreachable or the record is malformed
        """
        ...

    @abstractmethod
    async def create(self, account_id: AccountId, profile: dict[str, str]) -> Account:
        """Create a new account.

        Raises:
            AlreadyExistsError: If the id is taken
            BackendError: On transport/storage failure
        """
        ...

    @abstractmethod
    async def update_partial(self, account_id: AccountId, profile_patch: dict[str, str]) -> Account:
        """Replace the given profile fields, one patch operation per key.

        Never touches `is_admin`, `groups` or `conditions`.

        Raises:
            NotFoundError: If the account vanished between read and write
            BackendError: On transport/storage failure
        """
        ...

    @abstractmethod
    async def confirm_condition(self, account_id: AccountId, record: ConditionRecord) -> Account:
        """Append a condition record. A record already present is not appended twice.

        Raises:
            NotFoundError: If the account does not exist
            BackendError: On transport/storage failure
        """
        ...
