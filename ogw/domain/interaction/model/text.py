"""Texts users must read before a condition can be recorded."""

from dataclasses import dataclass

from ogw.domain.account.model.condition import ToSAccepted, text_fingerprint


@dataclass(frozen=True)
class TextCatalog:
    tos: str
    approval: str

    @property
    def tos_fingerprint(self) -> str:
        return text_fingerprint(self.tos)

    def tos_condition(self) -> ToSAccepted:
        return ToSAccepted(fingerprint=self.tos_fingerprint)
