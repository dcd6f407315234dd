"""Shared fixtures for the notifier test suite."""

from __future__ import annotations

import base64
import copy
import hashlib
import hmac
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.services.whatsapp import DeliveryResult, MessageKind

WEBHOOK_SECRET = "test-webhook-secret"

_ORDER = {
    "id": 5123456789,
    "name": "#1001",
    "total_price": "1298.00",
    "gateway": "razorpay",
    "line_items": [
        {"name": "Ashwagandha Capsules", "quantity": 2},
    ],
    "shipping_address": {
        "name": "Asha Rao",
        "address1": "12 MG Road",
        "address2": None,
        "city": "Pune",
        "province": "Maharashtra",
        "zip": "411001",
        "country": "India",
    },
    "customer": {
        "first_name": "Asha",
        "last_name": "Rao",
        "phone": "9876543210",
    },
}


def sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    """Compute a valid Shopify signature for body."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


@pytest.fixture()
def order_payload() -> dict:
    """orders/create payload: one line item, customer with a bare 10 digit phone."""
    return copy.deepcopy(_ORDER)


@pytest.fixture()
def fulfilled_payload(order_payload) -> dict:
    order_payload["fulfillments"] = [
        {
            "status": "success",
            "tracking_company": "Delhivery",
            "tracking_number": "DLV123456",
            "tracking_url": "https://track.example.com/DLV123456",
            "line_items": [{"name": "Ashwagandha Capsules", "quantity": 2}],
        }
    ]
    return order_payload


@pytest.fixture()
def fake_client() -> MagicMock:
    """WhatsAppClient stand-in whose sends always succeed."""
    client = MagicMock()

    async def send_template(to, template_name, parameters):
        return DeliveryResult(recipient=to, kind=MessageKind.TEMPLATE, template_name=template_name, success=True)

    async def send_text(to, message):
        return DeliveryResult(recipient=to, kind=MessageKind.TEXT, success=True)

    client.send_template = AsyncMock(side_effect=send_template)
    client.send_text = AsyncMock(side_effect=send_text)
    return client


class FakeClock:
    """Manually advanced clock for ActivityTracker."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
