"""Mailgun messages API notifier."""

import logging
from typing import Any, Optional

import httpx

from conversion_report.config import MailgunConfig
from conversion_report.errors import NotificationError, response_body
from conversion_report.notify.base import BaseNotifier

logger = logging.getLogger(__name__)


class MailgunNotifier(BaseNotifier):
    """Sends plain-text email through POST {base_url}/{domain}/messages."""

    def __init__(
        self,
        config: MailgunConfig,
        client: Optional[httpx.Client] = None,
        timeout: float = 60.0,
    ):
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def messages_url(self) -> str:
        return f"{self._config.base_url.rstrip('/')}/{self._config.domain}/messages"

    def send(self, sender: str, recipient: str, subject: str, text: str) -> Any:
        form = {"from": sender, "to": recipient, "subject": subject, "text": text}
        try:
            resp = self._client.post(
                self.messages_url,
                data=form,
                auth=(self._config.username, self._config.api_key),
            )
        except httpx.RequestError as e:
            raise NotificationError(f"Mailgun request failed: {e}") from e

        if not resp.is_success:
            raise NotificationError(
                f"Mailgun rejected message '{subject}'",
                status_code=resp.status_code,
                body=response_body(resp),
            )
        result = response_body(resp)
        logger.info("Email sent to %s: %s", recipient, result)
        return result

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
