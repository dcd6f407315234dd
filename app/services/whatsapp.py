"""
WhatsApp Cloud API dispatcher.

One call to send() is one POST to /{phone_number_id}/messages. Failures are
logged and returned as a DeliveryResult; nothing is retried and nothing is
raised back to the webhook handlers.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

from app.core import config
from app.core.activity_tracker import ActivityTracker, activity_tracker
from app.core.logger import logger


class MessageKind(str, Enum):
    TEMPLATE = "template"
    TEXT = "text"


class DeliveryResult(BaseModel):
    recipient: str
    kind: MessageKind
    success: bool
    template_name: Optional[str] = None
    status_code: Optional[int] = None
    message_id: Optional[str] = None
    error: Optional[str] = None


def build_template_payload(to: str, template_name: str, parameters: List[str], language_code: str = "en") -> Dict[str, Any]:
    return {
        "messaging_product": "whatsapp",
        "to": to,
        "type": MessageKind.TEMPLATE.value,
        "template": {
            "name": template_name,
            "language": {"code": language_code},
            "components": [
                {
                    "type": "body",
                    "parameters": [{"type": "text", "text": str(text)} for text in parameters],
                }
            ],
        },
    }


def build_text_payload(to: str, body: str) -> Dict[str, Any]:
    return {
        "messaging_product": "whatsapp",
        "to": to,
        "type": MessageKind.TEXT.value,
        "text": {"body": body},
    }


def _message_id(response: httpx.Response) -> Optional[str]:
    try:
        messages = response.json().get("messages") or []
        return messages[0].get("id") if messages else None
    except (ValueError, AttributeError, IndexError):
        return None


class WhatsAppClient:
    """Sends template and text messages through the WhatsApp Cloud API."""

    def __init__(
        self,
        phone_number_id: Optional[str] = None,
        token: Optional[str] = None,
        api_version: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        language_code: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        tracker: ActivityTracker = activity_tracker,
    ):
        self.phone_number_id = phone_number_id if phone_number_id is not None else config.WHATSAPP_PHONE_NUMBER_ID
        self.token = token if token is not None else config.WHATSAPP_TOKEN
        self.api_version = api_version or config.WHATSAPP_API_VERSION
        self.base_url = (base_url or config.WHATSAPP_API_BASE_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds or config.WHATSAPP_TIMEOUT_SECONDS
        self.language_code = language_code or config.TEMPLATE_LANGUAGE_CODE
        self.tracker = tracker
        self._http_client = http_client

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/{self.api_version}/{self.phone_number_id}/messages"

    async def send_template(self, to: str, template_name: str, parameters: List[str]) -> DeliveryResult:
        return await self.send(to, MessageKind.TEMPLATE, template_name=template_name, parameters=parameters)

    async def send_text(self, to: str, message: str) -> DeliveryResult:
        return await self.send(to, MessageKind.TEXT, message=message)

    async def send(
        self,
        to: str,
        kind: MessageKind,
        template_name: Optional[str] = None,
        parameters: Optional[List[str]] = None,
        message: Optional[str] = None,
    ) -> DeliveryResult:
        """
        Send one message to one recipient.

        Args:
            to: Recipient number in 91XXXXXXXXXX form.
            kind: MessageKind.TEMPLATE or MessageKind.TEXT.
            template_name: Approved template name (template messages only).
            parameters: Positional body parameters (template messages only).
            message: Message body (text messages only).

        Returns:
            DeliveryResult; success is False on any transport error, non-2xx
            or a template message without a template name.
        """
        if kind == MessageKind.TEMPLATE:
            if not template_name:
                logger.bind(recipient=to).error(f"No template name configured, not sending to {to}")
                return DeliveryResult(
                    recipient=to, kind=kind, success=False, error="template_name is required for template messages"
                )
            payload = build_template_payload(to, template_name, parameters or [], self.language_code)
        else:
            payload = build_text_payload(to, message or "")

        self.tracker.touch()
        log = logger.bind(recipient=to, kind=kind.value, template=template_name)
        if kind == MessageKind.TEMPLATE:
            log.info(f"Sending WhatsApp template '{template_name}' to {to}")
        else:
            log.info(f"Sending WhatsApp text message to {to}")

        result = DeliveryResult(recipient=to, kind=kind, template_name=template_name, success=False)
        try:
            response = await self._post(payload)
            result.status_code = response.status_code
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.error(f"WhatsApp API rejected message to {to}: {e.response.status_code} {e.response.text}")
            result.error = f"HTTP {e.response.status_code}: {e.response.text[:500]}"
            return result
        except httpx.RequestError as e:
            log.error(f"WhatsApp request to {to} failed: {e!r}")
            result.error = f"Network error: {e!r}"
            return result
        except Exception as e:
            log.exception(f"Unexpected error sending WhatsApp message to {to}: {e}")
            result.error = f"Unexpected error: {e}"
            return result

        result.success = True
        result.message_id = _message_id(response)
        log.info(f"WhatsApp message sent to {to} (id: {result.message_id})")
        return result

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        if self._http_client is not None:
            return await self._http_client.post(self.messages_url, json=payload, headers=headers, timeout=self.timeout_seconds)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.post(self.messages_url, json=payload, headers=headers)
