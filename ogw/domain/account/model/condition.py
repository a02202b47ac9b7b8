"""Conditions: named, optionally versioned predicates over an Account."""

import hashlib
from abc import ABC
from dataclasses import dataclass
from typing import ClassVar

from ogw.domain.account.model.account import Account
from ogw.domain.account.model.value import ConditionRecord

APPROVED = "Approved"
TOS_ACCEPTED = "ToSAccepted"


def text_fingerprint(text: str) -> str:
    """Hex SHA-256 of the UTF-8 encoded text shown to the user."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Condition(ABC):
    """A named predicate over an account.

    Versioned conditions carry the fingerprint of the content the user must
    have agreed to; state conditions carry none.
    """

    name: str
    fingerprint: str | None = None

    versioned: ClassVar[bool] = False

    def record(self) -> ConditionRecord:
        """The record that proves this condition was satisfied."""
        return ConditionRecord(name=self.name, fingerprint=self.fingerprint)

    def check(self, account: Account) -> bool:
        return check_condition(account, self)


@dataclass(frozen=True)
class Approved(Condition):
    """The account was approved by an administrator."""

    name: str = APPROVED
    fingerprint: str | None = None


@dataclass(frozen=True)
class ToSAccepted(Condition):
    """The account accepted the Terms of Service text with this fingerprint."""

    name: str = TOS_ACCEPTED
    fingerprint: str | None = None

    versioned: ClassVar[bool] = True

    @classmethod
    def for_text(cls, text: str) -> "ToSAccepted":
        return cls(fingerprint=text_fingerprint(text))


@dataclass(frozen=True)
class UnknownCondition(Condition):
    """Placeholder for a condition name nobody defined. Never satisfied."""

    def check(self, account: Account) -> bool:
        return False


KNOWN_CONDITIONS: dict[str, type[Condition]] = {
    APPROVED: Approved,
    TOS_ACCEPTED: ToSAccepted,
}


def condition_for(name: str, fingerprint: str | None = None) -> Condition:
    """Resolve a condition by name. Unknown names fail closed."""
    condition_type = KNOWN_CONDITIONS.get(name)
    if condition_type is None:
        return UnknownCondition(name=name, fingerprint=fingerprint)
    return condition_type(fingerprint=fingerprint)


def check_condition(account: Account, condition: Condition) -> bool:
    """True iff the account holds a record matching the condition.

    The name must match and, for versioned conditions, so must the
    fingerprint. Accepting fingerprint F1 never satisfies a check against F2.
    """
    condition_type = KNOWN_CONDITIONS.get(condition.name)
    if condition_type is None:
        return False
    if condition_type.versioned:
        if condition.fingerprint is None:
            return False
        return ConditionRecord(name=condition.name, fingerprint=condition.fingerprint) in (
            account.conditions
        )
    return any(record.name == condition.name for record in account.conditions)
