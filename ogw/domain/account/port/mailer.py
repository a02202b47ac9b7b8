"""Mailer port for e-mail login links."""

from abc import abstractmethod
from typing import Protocol

from ogw.domain.shared.port import Port


class Mailer(Port, Protocol):
    @abstractmethod
    async def send_login_link(self, to: str, link: str) -> None:
        """Deliver a login link.

        Raises:
            ExternalServiceError: If delivery fails
        """
        ...
