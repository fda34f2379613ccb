"""
Email Channel Providers for Form Architect.

SendGrid when an API key is configured, otherwise a channel that only
logs what it would have sent.
"""

import logging
from typing import Optional

import httpx

from .base import ChannelProvider, ChannelMessage, ChannelResponse

logger = logging.getLogger(__name__)


def clean_header(value: str) -> str:
    """Strip CR/LF so a display name cannot inject extra headers."""
    return value.replace("\r", "").replace("\n", "")


class SendGridEmail(ChannelProvider):
    """Email via SendGrid API."""

    BASE_URL = "https://api.sendgrid.com/v3/mail/send"
    SCOPES_URL = "https://api.sendgrid.com/v3/scopes"

    def __init__(
        self,
        api_key: str,
        from_email: str,
        from_name: str = "Form Architect",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.from_name = clean_header(from_name)
        self.timeout = timeout
        self._transport = transport

    async def send_message(self, message: ChannelMessage) -> ChannelResponse:
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        payload = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": self.from_email, "name": self.from_name},
            "subject": message.subject,
            "content": [{"type": "text/plain", "value": message.content}],
        }
        if message.reply_to:
            payload["reply_to"] = {"email": message.reply_to}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(self.BASE_URL, json=payload, headers=headers, timeout=self.timeout)
                success = resp.status_code in (200, 202)
                return ChannelResponse(
                    success=success,
                    message_id=resp.headers.get("X-Message-Id"),
                    error=resp.text if not success else None,
                )
        except Exception as e:
            logger.error(f"SendGrid send failed: {e}")
            return ChannelResponse(success=False, error=str(e))

    async def health_check(self) -> bool:
        """Check the API key can be used against the SendGrid API."""
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.get(
                    self.SCOPES_URL,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    timeout=self.timeout,
                )
        except Exception as e:
            logger.warning(f"SendGrid health check failed: {e}")
            return False
        return resp.status_code == 200


class LogOnlyEmail(ChannelProvider):
    """Records outgoing mail in the log instead of delivering it."""

    def __init__(self, from_name: str = "Form Architect"):
        self.from_name = clean_header(from_name)
        self.sent = []

    async def send_message(self, message: ChannelMessage) -> ChannelResponse:
        self.sent.append(message)
        logger.info(f"Email to {message.to} from {self.from_name}: {message.subject}")
        return ChannelResponse(success=True, message_id=f"log-{len(self.sent)}")

    async def health_check(self) -> bool:
        return True


def build_email_channel(
    sendgrid_api_key: Optional[str],
    from_email: Optional[str],
    from_name: str = "Form Architect",
) -> ChannelProvider:
    """Pick SendGrid when fully configured, else the logging channel."""
    if sendgrid_api_key and from_email:
        return SendGridEmail(sendgrid_api_key, from_email, from_name)
    logger.info("SendGrid not configured, auto-responses will only be logged")
    return LogOnlyEmail(from_name)
