"""Unit tests for conditions and their evaluation against accounts."""

from ogw.domain.account.model import Account, AccountId, ConditionRecord
from ogw.domain.account.model.condition import (
    APPROVED,
    TOS_ACCEPTED,
    Approved,
    ToSAccepted,
    UnknownCondition,
    condition_for,
    text_fingerprint,
)


def make_account(*records: ConditionRecord) -> Account:
    return Account(id=AccountId("github-1"), conditions=frozenset(records))


class TestTextFingerprint:
    def test_is_sha256_hex(self):
        assert text_fingerprint("") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_differs_per_text(self):
        assert text_fingerprint("v1") != text_fingerprint("v2")


class TestCheckCondition:
    def test_approved_satisfied_by_record(self):
        account = make_account(Approved().record())
        assert account.check_condition(Approved())

    def test_approved_missing(self):
        assert not make_account().check_condition(Approved())

    def test_tos_pinned_to_fingerprint(self):
        """Accepting F1 satisfies F1 only."""
        account = make_account(ToSAccepted.for_text("terms v1").record())

        assert account.check_condition(ToSAccepted.for_text("terms v1"))
        assert not account.check_condition(ToSAccepted.for_text("terms v2"))

    def test_tos_without_fingerprint_never_satisfied(self):
        account = make_account(ConditionRecord(name=TOS_ACCEPTED, fingerprint="abc"))
        assert not account.check_condition(ToSAccepted())

    def test_unknown_condition_fails_closed(self):
        account = make_account(ConditionRecord(name="Mystery"))
        assert not account.check_condition(UnknownCondition(name="Mystery"))

    def test_condition_for_resolves_known_names(self):
        assert isinstance(condition_for(APPROVED), Approved)
        tos = condition_for(TOS_ACCEPTED, "f1")
        assert isinstance(tos, ToSAccepted)
        assert tos.fingerprint == "f1"
        assert isinstance(condition_for("Other"), UnknownCondition)


class TestAccount:
    def test_name_from_profile(self):
        account = Account(id=AccountId("github-1"), profile={"name": "Jane"})
        assert account.name == "Jane"

    def test_blank_name_is_none(self):
        account = Account(id=AccountId("github-1"), profile={"name": ""})
        assert account.name is None


class TestAccountId:
    def test_readable_id_for_numeric_external_id(self):
        assert str(AccountId.for_identity("github", "1234")) == "github-1234"

    def test_hashed_id_for_email(self):
        account_id = AccountId.for_identity("email", "Jane@Example.com")
        assert str(account_id).startswith("email-")
        assert "@" not in str(account_id)
        # Case-insensitive and stable
        assert account_id == AccountId.for_identity("email", "jane@example.com")
