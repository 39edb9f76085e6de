"""HTTP client for the Brevo transactional email API.

The client never raises: an unconfigured key, a network error or a non-2xx
answer all come back as a failed ``EmailResult`` and a log line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

import requests
import structlog
from django.conf import settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EmailResult:
    success: bool
    message: str = ""
    message_id: Optional[str] = None


NOT_CONFIGURED = EmailResult(success=False, message="Email service not configured")


class BrevoEmailClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        sender_email: Optional[str] = None,
        sender_name: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> None:
        self.api_key = settings.BREVO_API_KEY if api_key is None else api_key
        self.sender_email = sender_email or settings.SENDER_EMAIL
        self.sender_name = sender_name or settings.SENDER_NAME
        self.api_url = api_url or settings.BREVO_API_URL
        self.timeout = timeout or settings.EMAIL_TIMEOUT_SECONDS

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def send(
        self, to: Union[str, Iterable[str]], subject: str, html: str
    ) -> EmailResult:
        recipients = [to] if isinstance(to, str) else list(to)
        log = logger.bind(recipients=recipients, subject=subject)

        if not self.configured:
            log.warning("email.not_configured")
            return NOT_CONFIGURED

        body = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [{"email": address} for address in recipients],
            "subject": subject,
            "htmlContent": html,
        }
        try:
            response = requests.post(
                self.api_url,
                json=body,
                headers={
                    "api-key": self.api_key,
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            log.error("email.send_failed", error=str(exc))
            return EmailResult(success=False, message=str(exc))

        try:
            message_id = response.json().get("messageId")
        except ValueError:
            message_id = None
        log.info("email.sent", message_id=message_id)
        return EmailResult(
            success=True, message="Email sent successfully", message_id=message_id
        )
