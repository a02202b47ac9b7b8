"""Mailer adapters."""

import logging

from ogw.config import EmailConfig
from ogw.domain.account.port.mailer import Mailer

logger = logging.getLogger(__name__)


class LoggingMailer(Mailer):
    """Writes login links to the log instead of sending mail. For development."""

    def __init__(self, config: EmailConfig) -> None:
        self._config = config

    async def send_login_link(self, to: str, link: str) -> None:
        logger.info("Login link: from=%s, to=%s, link=%s", self._config.from_address, to, link)
