import httpx
from typing import Any, Dict, List, Optional
from loguru import logger
from maq_bot.config import Settings
from maq_bot.models.dto import InboundMessage


class WhatsAppCloudTransport:
    """
    WhatsApp Cloud API adapter.

    Outbound text goes through `POST /{phone_number_id}/messages`; inbound
    messages arrive as webhook payloads that `parse_webhook` turns into
    InboundMessage objects (see maq_bot.webhook for the HTTP endpoint).
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        if not settings.WHATSAPP_TOKEN or not settings.WHATSAPP_PHONE_NUMBER_ID:
            raise ValueError("WHATSAPP_TOKEN and WHATSAPP_PHONE_NUMBER_ID are required")
        self.settings = settings
        self._client = client or httpx.AsyncClient(timeout=30.0)

    @property
    def messages_url(self) -> str:
        return f"{self.settings.WHATSAPP_API_URL.rstrip('/')}/{self.settings.WHATSAPP_PHONE_NUMBER_ID}/messages"

    async def send_text(self, recipient_id: str, text: str) -> None:
        headers = {
            "Authorization": f"Bearer {self.settings.WHATSAPP_TOKEN}",
            "Content-Type": "application/json",
        }
        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": recipient_id,
            "type": "text",
            "text": {"preview_url": False, "body": text},
        }
        try:
            r = await self._client.post(self.messages_url, headers=headers, json=payload)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ HTTP error sending WhatsApp message to {recipient_id}: {e.response.status_code}")
            logger.error(f"   URL: {self.messages_url}")
            logger.error(f"   Response: {e.response.text[:500]}")
            raise
        logger.debug(f"WhatsApp message sent to {recipient_id}")

    async def send_typing(self, recipient_id: str) -> None:
        # Cloud API has no standalone typing indicator
        return None

    async def close(self) -> None:
        await self._client.aclose()


def verify_webhook(settings: Settings, mode: Optional[str], token: Optional[str], challenge: Optional[str]) -> Optional[str]:
    """
    Subscription handshake. Returns the challenge to echo back, or None to reject.
    """
    if mode == "subscribe" and settings.WHATSAPP_VERIFY_TOKEN and token == settings.WHATSAPP_VERIFY_TOKEN:
        return challenge
    logger.warning(f"Rejected webhook verification: mode={mode!r}")
    return None


def parse_webhook(payload: Dict[str, Any]) -> List[InboundMessage]:
    """
    Extract text messages from a Cloud API webhook payload.

    Status updates and non-text messages (images, audio, reactions...) are
    skipped. Messages posted in groups carry a `group_id` and are skipped too.
    """
    result: List[InboundMessage] = []
    for entry in payload.get("entry") or []:
        for change in entry.get("changes") or []:
            value = change.get("value") or {}
            names = {
                c.get("wa_id"): (c.get("profile") or {}).get("name")
                for c in value.get("contacts") or []
            }
            for msg in value.get("messages") or []:
                if msg.get("type") != "text" or msg.get("group_id"):
                    continue
                sender = msg.get("from")
                if not sender:
                    continue
                result.append(InboundMessage(
                    sender_id=sender,
                    text=(msg.get("text") or {}).get("body", ""),
                    display_name=names.get(sender),
                ))
    return result
