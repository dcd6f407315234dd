"""
Message composition for order notifications.

Builds the free-text admin message and the positional parameter lists for the
approved WhatsApp templates. Everything here is pure string work on an
already-validated Order.
"""
import re
from typing import List, Optional

from app.schemas import Address, Customer, LineItem, Order, TrackingInfo

NOT_PROVIDED = "Not Provided"
PAYMENT_NOT_SPECIFIED = "Not specified"
ADDRESS_NOT_PROVIDED = "Address not provided"
NO_ITEMS = "No items"

# WhatsApp rejects template parameters containing newlines.
TEMPLATE_ITEM_SEPARATOR = ", "
TEXT_ITEM_SEPARATOR = "\n"

_ADDRESS_FIELDS = ("name", "address1", "address2", "city", "province", "zip", "country")
_REPEATED_SEPARATORS = re.compile(r"(\s*,\s*){2,}")


def _clean(value: Optional[str]) -> str:
    return str(value).strip() if value is not None else ""


def quantity_label(quantity: Optional[int]) -> str:
    """1 -> "1 no", 2 -> "2 nos"."""
    quantity = 1 if quantity is None else quantity
    return f"{quantity} no{'s' if quantity > 1 else ''}"


def _item_name(item: LineItem) -> str:
    return _clean(item.name) or _clean(item.title) or "Item"


def format_line_items(items: List[LineItem], separator: str, pluralize: bool = True) -> str:
    if not items:
        return NO_ITEMS
    lines = []
    for index, item in enumerate(items, start=1):
        if pluralize:
            quantity = quantity_label(item.quantity)
        else:
            # The admin text message has always said "nos" regardless of count.
            quantity = f"{1 if item.quantity is None else item.quantity} nos"
        lines.append(f"{index}. {_item_name(item)} - {quantity}")
    return separator.join(lines)


def shipped_items(order: Order) -> List[LineItem]:
    """Items covered by the first fulfillment, or the whole order when it doesn't list them."""
    if order.fulfillments and order.fulfillments[0].line_items:
        return order.fulfillments[0].line_items
    return order.line_items


def order_label(order: Order, default: str) -> str:
    return _clean(order.name) or _clean(order.id) or default


def customer_first_name(customer: Optional[Customer]) -> str:
    return _clean(customer.first_name) if customer else ""


def customer_full_name(customer: Optional[Customer]) -> str:
    if customer is None:
        return "Customer"
    full_name = f"{_clean(customer.first_name)} {_clean(customer.last_name)}".strip()
    return full_name or "Customer"


def resolve_contact_phone(order: Order) -> Optional[str]:
    """
    First non-blank phone from: customer, customer's default address,
    shipping address, billing address, order.
    """
    customer = order.customer
    candidates = [
        customer.phone if customer else None,
        customer.default_address.phone if customer and customer.default_address else None,
        order.shipping_address.phone if order.shipping_address else None,
        order.billing_address.phone if order.billing_address else None,
        order.phone,
    ]
    for candidate in candidates:
        if _clean(candidate):
            return _clean(candidate)
    return None


def format_address(address: Optional[Address]) -> str:
    if address is None:
        return ADDRESS_NOT_PROVIDED
    parts = [_clean(getattr(address, field)) for field in _ADDRESS_FIELDS]
    flattened = ", ".join(part for part in parts if part)
    flattened = _REPEATED_SEPARATORS.sub(", ", flattened).strip().strip(",").strip()
    return flattened or ADDRESS_NOT_PROVIDED


def order_address(order: Order) -> str:
    return format_address(order.shipping_address or order.billing_address)


def payment_method(order: Order) -> str:
    if _clean(order.gateway):
        return _clean(order.gateway)
    names = [_clean(name) for name in order.payment_gateway_names if _clean(name)]
    return ", ".join(names) if names else PAYMENT_NOT_SPECIFIED


def build_admin_text_message(order: Order, admin_name: str, bot_name: str) -> str:
    """Free-text new-order message for one admin."""
    products = format_line_items(order.line_items, TEXT_ITEM_SEPARATOR, pluralize=False)
    total = _clean(order.total_price) or "0"
    return (
        f"Dear {admin_name},\n\n"
        f"🛍️ New Order received on Shopify. Please visit Shopify and fulfill the items.\n\n"
        f"📦 Order ID: {order_label(order, 'N/A')}\n"
        f"👤 Customer Name: {customer_full_name(order.customer)}\n"
        f"📱 Contact No: {resolve_contact_phone(order) or NOT_PROVIDED}\n"
        f"🚚 Shipping Address:\n{order_address(order)}\n"
        f"💳 Payment Method: {payment_method(order)}\n"
        f"🧾 Products:\n{products}\n\n"
        f"💰 Total Amount: ₹{total}\n\n"
        f"Thanks and Regards,\n{bot_name}"
    )


def order_confirmation_params(order: Order) -> List[str]:
    return [
        customer_first_name(order.customer) or "Customer",
        order_label(order, "Order"),
        _clean(order.total_price) or "N/A",
        format_line_items(order.line_items, TEMPLATE_ITEM_SEPARATOR),
    ]


def order_fulfilled_params(order: Order, tracking: TrackingInfo) -> List[str]:
    return [
        customer_first_name(order.customer) or "Customer",
        order_label(order, "N/A"),
        format_line_items(shipped_items(order), TEMPLATE_ITEM_SEPARATOR),
        tracking.number,
        tracking.link,
    ]


def admin_new_order_params(order: Order) -> List[str]:
    return [
        order_label(order, "N/A"),
        customer_full_name(order.customer),
        resolve_contact_phone(order) or NOT_PROVIDED,
        order_address(order),
        payment_method(order),
        format_line_items(order.line_items, TEMPLATE_ITEM_SEPARATOR),
        _clean(order.total_price) or "N/A",
    ]


def admin_order_fulfilled_params(order: Order, tracking: TrackingInfo) -> List[str]:
    return [
        order_label(order, "N/A"),
        customer_full_name(order.customer),
        resolve_contact_phone(order) or NOT_PROVIDED,
        format_line_items(shipped_items(order), TEMPLATE_ITEM_SEPARATOR),
        tracking.number,
        tracking.link,
    ]
