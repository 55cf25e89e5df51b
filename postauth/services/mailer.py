from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from fastapi import Request

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class Delivery:
    delivered: bool
    message_id: str | None = None


class Mailer:
    """Sends plain-text mail through the Resend HTTP API.

    Transport problems are reported as `Delivery(delivered=False)`, never
    raised; the timeout is owned here.
    """

    def __init__(self, api_key: str, sender: str, timeout: float = 20, transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self.transport = transport

    async def send_mail(self, to: str, subject: str, text: str) -> Delivery:
        if not self.api_key:
            raise RuntimeError("RESEND_API_KEY not set")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.post(
                    RESEND_URL,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={"from": self.sender, "to": [to], "subject": subject, "text": text},
                )
            except httpx.HTTPError as e:
                logger.warning("mail to %s not sent: %s", to, e)
                return Delivery(delivered=False)

        if r.is_error:
            logger.warning("mail to %s rejected by provider: %s %s", to, r.status_code, r.text)
            return Delivery(delivered=False)

        try:
            payload = r.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            logger.warning("mail to %s: unreadable provider response %r", to, r.text)
            return Delivery(delivered=False)
        message_id = payload.get("id")
        return Delivery(delivered=bool(message_id), message_id=message_id)


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer
