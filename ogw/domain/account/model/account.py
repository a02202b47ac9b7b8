"""Account aggregate."""

from typing import TYPE_CHECKING

from pydantic import Field

from ogw.domain.account.model.value import AccountId, ConditionRecord
from ogw.domain.shared.model.aggregate import Aggregate

if TYPE_CHECKING:
    from ogw.domain.account.model.condition import Condition


class Account(Aggregate):
    """One end-user identity.

    Created on first successful sign-in through an upstream identity
    provider. Mutated only by profile updates and condition grants; never
    hard-deleted by the gateway.

    Invariants:
    - `id` is immutable after creation
    - `is_admin` and `groups` are owned by the store operator, never by the user
    - `conditions` only grows
    """

    id: AccountId
    profile: dict[str, str] = Field(default_factory=dict)
    is_admin: bool = False
    conditions: frozenset[ConditionRecord] = frozenset()
    groups: frozenset[str] = frozenset()

    @property
    def name(self) -> str | None:
        return self.profile.get("name") or None

    def check_condition(self, condition: "Condition") -> bool:
        """True if this account satisfies the given condition."""
        return condition.check(self)

    def has_condition(self, record: ConditionRecord) -> bool:
        return record in self.conditions
