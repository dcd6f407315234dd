"""
Order webhook orchestration.

Validates a Shopify order payload, notifies the admins and then, best effort,
the customer. Validation problems become 400s, anything unexpected a 500;
delivery failures are only logged so Shopify never retries a webhook because
WhatsApp was unhappy.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from app.core import config
from app.core.logger import logger
from app.schemas import Order
from app.services.fanout import FanoutReport, broadcast_template, broadcast_text
from app.services.messages import (
    admin_new_order_params,
    admin_order_fulfilled_params,
    build_admin_text_message,
    order_confirmation_params,
    order_fulfilled_params,
    order_label,
    resolve_contact_phone,
)
from app.services.phone import NormalizedPhone, normalize_phone
from app.services.tracking import extract_tracking_info
from app.services.whatsapp import WhatsAppClient


class OrderEvent(str, Enum):
    CREATED = "orders/create"
    FULFILLED = "orders/fulfilled"


class ClientPayloadError(Exception):
    """The webhook body can't be processed; answered with a 400."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class WebhookOutcome:
    status_code: int
    body: str


def _summarize(report: FanoutReport) -> str:
    if report.no_recipients:
        return "no admins configured"
    return f"{report.delivered}/{len(report.outcomes)} delivered"


class OrderEventHandler:
    def __init__(self, client: Optional[WhatsAppClient] = None):
        self.client = client or WhatsAppClient()

    async def handle(self, event: OrderEvent, payload: Any) -> WebhookOutcome:
        log = logger.bind(event=event.value)
        log.info(f"Order webhook received: {event.value}")

        try:
            order = self.validate(event, payload)
        except ClientPayloadError as e:
            log.error(f"Rejected {event.value} webhook: {e.message}")
            return WebhookOutcome(400, e.message)

        log = log.bind(order_id=order_label(order, "unknown"))
        try:
            if event == OrderEvent.CREATED:
                await self._handle_created(order)
            else:
                await self._handle_fulfilled(order)
        except Exception as e:
            log.exception(f"Error processing {event.value} webhook: {e}")
            return WebhookOutcome(500, "Internal server error")

        log.info(f"Order processed successfully: {order_label(order, 'unknown')}")
        return WebhookOutcome(200, "OK")

    @staticmethod
    def validate(event: OrderEvent, payload: Any) -> Order:
        if not payload or not isinstance(payload, dict):
            raise ClientPayloadError("Invalid payload")

        customer = payload.get("customer")
        if customer is None:
            raise ClientPayloadError("Missing customer info")
        if event == OrderEvent.FULFILLED and not isinstance(customer, dict):
            raise ClientPayloadError("Missing customer info")

        try:
            return Order.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Order payload failed validation: {e.error_count()} error(s): {e.errors()[:3]}")
            raise ClientPayloadError("Invalid payload")

    async def _handle_created(self, order: Order):
        if config.ADMIN_NOTIFICATION_MODE == "text":
            report = await broadcast_text(
                self.client,
                lambda admin: build_admin_text_message(order, admin.name, config.STORE_BOT_NAME),
            )
        else:
            report = await broadcast_template(self.client, config.ADMIN_NEW_ORDER_TEMPLATE, admin_new_order_params(order))
        logger.info(f"Admin new-order notifications: {_summarize(report)}")

        await self._notify_customer(order, config.ORDER_CONFIRMATION_TEMPLATE, order_confirmation_params(order))

    async def _handle_fulfilled(self, order: Order):
        tracking = extract_tracking_info(order)
        logger.info(
            f"Tracking for {order_label(order, 'unknown')}: number={tracking.number} "
            f"link={tracking.link} carrier={tracking.carrier}"
        )

        report = await broadcast_template(
            self.client,
            config.ADMIN_ORDER_FULFILLED_TEMPLATE,
            admin_order_fulfilled_params(order, tracking),
        )
        logger.info(f"Admin fulfillment notifications: {_summarize(report)}")
        await self._notify_customer(order, config.ORDER_FULFILLED_TEMPLATE, order_fulfilled_params(order, tracking))

    async def _notify_customer(self, order: Order, template_name: str, parameters: list):
        result = normalize_phone(resolve_contact_phone(order))
        if not isinstance(result, NormalizedPhone):
            logger.warning(
                f"Skipping customer '{template_name}' for {order_label(order, 'unknown')}: "
                f"phone {result.status.value}"
            )
            return

        await self.client.send_template(result.phone, template_name, parameters)

