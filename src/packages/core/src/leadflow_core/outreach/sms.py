"""SMS delivery through the Twilio REST API."""
import re
from contextlib import nullcontext
from dataclasses import dataclass

import httpx
import structlog

logger = structlog.get_logger()

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"
PHONE_RE = re.compile(r"\+?[1-9]\d{10,14}")


def clean_phone_number(phone: str) -> str:
    return re.sub(r"[^0-9+]", "", phone or "")


def is_valid_phone_number(phone: str | None) -> bool:
    """E.164-style check: optional +, then 11 to 15 digits not starting with 0."""
    if not phone or not phone.strip():
        return False
    return PHONE_RE.fullmatch(clean_phone_number(phone)) is not None


@dataclass(frozen=True)
class TwilioConfig:
    """Twilio account settings."""

    account_sid: str = ""
    auth_token: str = ""
    from_number: str = ""
    messaging_service_sid: str = ""
    status_callback_url: str = ""
    timeout: float = 15.0


@dataclass(frozen=True)
class OutgoingSms:
    to: str
    body: str


class TwilioSmsGateway:
    """Sends text messages one request at a time."""

    def __init__(self, config: TwilioConfig, client: httpx.Client | None = None):
        self.config = config
        self._client = client

    @property
    def is_configured(self) -> bool:
        c = self.config
        return bool(
            c.account_sid and c.auth_token and (c.from_number or c.messaging_service_sid)
        )

    @property
    def messages_url(self) -> str:
        return f"{TWILIO_API_BASE}/Accounts/{self.config.account_sid}/Messages.json"

    def _payload(self, sms: OutgoingSms) -> dict[str, str]:
        data = {"To": clean_phone_number(sms.to), "Body": sms.body}
        if self.config.messaging_service_sid:
            data["MessagingServiceSid"] = self.config.messaging_service_sid
        else:
            data["From"] = self.config.from_number
        if self.config.status_callback_url:
            data["StatusCallback"] = self.config.status_callback_url
        return data

    def _send(self, client: httpx.Client, sms: OutgoingSms) -> str | None:
        try:
            resp = client.post(
                self.messages_url,
                data=self._payload(sms),
                auth=(self.config.account_sid, self.config.auth_token),
            )
        except httpx.HTTPError as e:
            logger.warning("sms_send_failed", to=sms.to, error=str(e))
            return f"Failed to send to {sms.to}: {e}"
        if resp.status_code >= 400:
            try:
                detail = resp.json().get("message") or resp.text
            except ValueError:
                detail = resp.text
            logger.warning("sms_send_rejected", to=sms.to, status=resp.status_code, detail=detail)
            return f"Failed to send to {sms.to}: {detail}"
        return None

    def send_batch(self, messages: list[OutgoingSms]) -> list[str | None]:
        """Send every message; returns None per accepted message, else the error."""
        ctx = (
            nullcontext(self._client)
            if self._client is not None
            else httpx.Client(timeout=self.config.timeout)
        )
        with ctx as client:
            return [self._send(client, sms) for sms in messages]
