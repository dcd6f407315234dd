"""Admin text message and template parameter composition."""

from __future__ import annotations

import pytest

from app.schemas import Address, LineItem, Order, TrackingInfo
from app.services.messages import (
    admin_new_order_params,
    admin_order_fulfilled_params,
    build_admin_text_message,
    format_address,
    format_line_items,
    order_confirmation_params,
    order_fulfilled_params,
    payment_method,
    quantity_label,
    resolve_contact_phone,
)


class TestQuantity:
    @pytest.mark.parametrize("quantity,expected", [(1, "1 no"), (2, "2 nos"), (10, "10 nos"), (None, "1 no")])
    def test_pluralization(self, quantity, expected):
        assert quantity_label(quantity) == expected

    def test_line_items_are_numbered_from_one(self):
        items = [LineItem(name="Oil", quantity=1), LineItem(name="Tea", quantity=3)]
        assert format_line_items(items, ", ") == "1. Oil - 1 no, 2. Tea - 3 nos"
        assert format_line_items(items, "\n", pluralize=False) == "1. Oil - 1 nos\n2. Tea - 3 nos"

    def test_title_used_when_name_missing(self):
        assert format_line_items([LineItem(title="Ghee", quantity=1)], ", ") == "1. Ghee - 1 no"

    def test_no_items(self):
        assert format_line_items([], ", ") == "No items"


class TestAddress:
    def test_missing_fields_are_skipped(self, order_payload):
        order = Order.model_validate(order_payload)
        assert format_address(order.shipping_address) == "Asha Rao, 12 MG Road, Pune, Maharashtra, 411001, India"

    def test_doubled_and_edge_separators_are_cleaned(self):
        address = Address(address1=", Flat 4,", address2=" ,", city="Pune", country="India,")
        assert format_address(address) == "Flat 4, Pune, India"

    def test_no_address(self):
        assert format_address(None) == "Address not provided"
        assert format_address(Address()) == "Address not provided"

    def test_billing_used_when_no_shipping(self, order_payload):
        order_payload["shipping_address"] = None
        order_payload["billing_address"] = {"city": "Mumbai", "country": "India"}
        assert admin_new_order_params(Order.model_validate(order_payload))[3] == "Mumbai, India"


class TestContactPhone:
    def test_customer_phone_first(self, order_payload):
        assert resolve_contact_phone(Order.model_validate(order_payload)) == "9876543210"

    def test_falls_back_through_default_and_shipping_address(self, order_payload):
        order_payload["customer"] = {"first_name": "Asha", "default_address": {"phone": "+91 90000 00001"}}
        assert resolve_contact_phone(Order.model_validate(order_payload)) == "+91 90000 00001"

        order_payload["customer"] = {"first_name": "Asha", "phone": "  "}
        order_payload["shipping_address"]["phone"] = "9000000002"
        assert resolve_contact_phone(Order.model_validate(order_payload)) == "9000000002"

    def test_none_available(self, order_payload):
        order_payload["customer"] = {"first_name": "Asha"}
        order = Order.model_validate(order_payload)
        assert resolve_contact_phone(order) is None
        assert admin_new_order_params(order)[2] == "Not Provided"


class TestPaymentMethod:
    def test_gateway(self, order_payload):
        assert payment_method(Order.model_validate(order_payload)) == "razorpay"

    def test_gateway_names_fallback(self, order_payload):
        order_payload["gateway"] = None
        order_payload["payment_gateway_names"] = ["Cash on Delivery (COD)"]
        assert payment_method(Order.model_validate(order_payload)) == "Cash on Delivery (COD)"

    def test_not_specified(self, order_payload):
        del order_payload["gateway"]
        assert payment_method(Order.model_validate(order_payload)) == "Not specified"


class TestTemplateParams:
    def test_order_confirmation(self, order_payload):
        assert order_confirmation_params(Order.model_validate(order_payload)) == [
            "Asha",
            "#1001",
            "1298.00",
            "1. Ashwagandha Capsules - 2 nos",
        ]

    def test_order_confirmation_defaults(self):
        order = Order.model_validate({"customer": {"last_name": "Rao"}})
        assert order_confirmation_params(order) == ["Customer", "Order", "N/A", "No items"]

    def test_admin_new_order_has_seven_params(self, order_payload):
        assert admin_new_order_params(Order.model_validate(order_payload)) == [
            "#1001",
            "Asha Rao",
            "9876543210",
            "Asha Rao, 12 MG Road, Pune, Maharashtra, 411001, India",
            "razorpay",
            "1. Ashwagandha Capsules - 2 nos",
            "1298.00",
        ]

    def test_template_params_never_contain_newlines(self, order_payload):
        order_payload["line_items"].append({"name": "Triphala", "quantity": 1})
        params = admin_new_order_params(Order.model_validate(order_payload))
        assert all("\n" not in param for param in params)
        assert params[5] == "1. Ashwagandha Capsules - 2 nos, 2. Triphala - 1 no"

    def test_fulfilled_params_use_fulfillment_items(self, fulfilled_payload):
        fulfilled_payload["line_items"].append({"name": "Backordered Tea", "quantity": 1})
        order = Order.model_validate(fulfilled_payload)
        tracking = TrackingInfo(number="DLV123456", link="https://track.example.com/DLV123456")

        assert order_fulfilled_params(order, tracking) == [
            "Asha",
            "#1001",
            "1. Ashwagandha Capsules - 2 nos",
            "DLV123456",
            "https://track.example.com/DLV123456",
        ]
        assert admin_order_fulfilled_params(order, tracking) == [
            "#1001",
            "Asha Rao",
            "9876543210",
            "1. Ashwagandha Capsules - 2 nos",
            "DLV123456",
            "https://track.example.com/DLV123456",
        ]


class TestAdminTextMessage:
    def test_message_body(self, order_payload):
        message = build_admin_text_message(Order.model_validate(order_payload), "Arun", "Store Bot")
        assert message.startswith("Dear Arun,\n\n")
        assert "📦 Order ID: #1001\n" in message
        assert "👤 Customer Name: Asha Rao\n" in message
        assert "📱 Contact No: 9876543210\n" in message
        assert "🚚 Shipping Address:\nAsha Rao, 12 MG Road, Pune, Maharashtra, 411001, India\n" in message
        assert "💳 Payment Method: razorpay\n" in message
        assert "🧾 Products:\n1. Ashwagandha Capsules - 2 nos\n\n" in message
        assert "💰 Total Amount: ₹1298.00" in message
        assert message.endswith("Thanks and Regards,\nStore Bot")

    def test_fallbacks(self):
        message = build_admin_text_message(Order.model_validate({"customer": {}}), "Admin", "Bot")
        assert "Contact No: Not Provided" in message
        assert "Address not provided" in message
        assert "Payment Method: Not specified" in message
        assert "Products:\nNo items" in message
        assert "Total Amount: ₹0" in message
