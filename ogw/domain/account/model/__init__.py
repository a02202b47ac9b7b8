"""Account domain models."""

from .account import Account
from .condition import (
    Approved,
    Condition,
    ToSAccepted,
    UnknownCondition,
    check_condition,
    condition_for,
    text_fingerprint,
)
from .value import AccountId, ConditionRecord

__all__ = [
    "Account",
    "AccountId",
    "Approved",
    "Condition",
    "ConditionRecord",
    "ToSAccepted",
    "UnknownCondition",
    "check_condition",
    "condition_for",
    "text_fingerprint",
]
