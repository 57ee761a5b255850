from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional, Protocol

from ..core.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailSettings:
    host: Optional[str]
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None
    sender_name: str = "Prof-it Art School"
    use_tls: bool = True
    timeout: int = 15

    @classmethod
    def from_dict(cls, mail_config: dict) -> "MailSettings":
        return cls(
            host=mail_config.get("host") or None,
            port=int(mail_config.get("port", 587)),
            username=mail_config.get("username") or None,
            password=mail_config.get("password") or None,
            sender=mail_config.get("sender") or mail_config.get("username") or None,
            sender_name=mail_config.get("sender_name") or "Prof-it Art School",
            use_tls=bool(mail_config.get("use_tls", True)),
        )


class EmailSender(Protocol):
    def send(self, to: str, subject: str, text: str) -> None:
        """Deliver a plain-text message; raise ServiceUnavailableError on failure."""

        raise NotImplementedError


class SmtpEmailSender(EmailSender):
    def __init__(self, settings: MailSettings):
        self._settings = settings

    def send(self, to: str, subject: str, text: str) -> None:
        s = self._settings
        if not s.host or not s.sender:
            raise ServiceUnavailableError("Email service not configured")

        msg = MIMEText(text, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = formataddr((s.sender_name, s.sender))
        msg["To"] = to

        try:
            with smtplib.SMTP(s.host, s.port, timeout=s.timeout) as server:
                if s.use_tls:
                    server.starttls()
                if s.username and s.password:
                    server.login(s.username, s.password)
                server.sendmail(s.sender, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("failed to send email to %s", to)
            raise ServiceUnavailableError("Error sending email") from e
