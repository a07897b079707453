"""Handler that sends each record as an e-mail."""

from __future__ import annotations

import smtplib
from collections.abc import Iterable
from dataclasses import dataclass

from gslog.formatter import Record
from gslog.handling import LevelWithFormatter
from gslog.handlers.writers import NopFlushClose
from gslog.levels import Level


@dataclass
class EmailOption:
    """Sender account and SMTP server."""

    smtp_host: str
    smtp_port: int
    from_addr: str
    password: str | None = None


class EmailHandler(NopFlushClose, LevelWithFormatter):
    """Sends formatted records to a list of addresses. Default level is INFO."""

    def __init__(self, sender: EmailOption, to_addresses: Iterable[str]) -> None:
        LevelWithFormatter.__init__(self, Level.INFO)
        self.sender = sender
        self.to_addresses = list(to_addresses)

    def handle(self, record: Record) -> None:
        """Format ``record`` and mail it."""
        message = self.format(record)
        sender = self.sender
        with smtplib.SMTP(sender.smtp_host, sender.smtp_port) as conn:
            conn.ehlo()
            if conn.has_extn("starttls"):
                conn.starttls()
                conn.ehlo()
            if conn.has_extn("auth"):
                conn.login(sender.from_addr, sender.password or "")
            conn.sendmail(sender.from_addr, self.to_addresses, message)

    def flush(self) -> None:
        """Every record is sent as it is handled, so nothing is held back."""
        NopFlushClose.flush(self)

    def close(self) -> None:
        """Mark the handler closed; each connection is already closed after use."""
        NopFlushClose.close(self)