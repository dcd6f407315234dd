from typing import List, Optional

from app.core.logger import logger
from app.schemas import (
    CARRIER_UNAVAILABLE,
    TRACKING_LINK_UNAVAILABLE,
    TRACKING_NUMBER_UNAVAILABLE,
    Order,
    TrackingInfo,
)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _first(values: List[str]) -> Optional[str]:
    for value in values or []:
        cleaned = _clean(value)
        if cleaned:
            return cleaned
    return None


def extract_tracking_info(order: Optional[Order]) -> TrackingInfo:
    """
    Find the best available tracking number, link and carrier for an order.

    The first fulfillment is authoritative: its list-valued tracking_numbers /
    tracking_urls win over the singular fields. When it has no number, line
    items are scanned for a per-item fulfillment tracking number. Each field
    resolves independently and falls back to its "unavailable" default.
    """
    number = link = carrier = None

    if order is None:
        return TrackingInfo()

    fulfillment = order.fulfillments[0] if order.fulfillments else None
    if fulfillment is not None:
        number = _first(fulfillment.tracking_numbers) or _clean(fulfillment.tracking_number)
        link = _first(fulfillment.tracking_urls) or _clean(fulfillment.tracking_url)
        carrier = _clean(fulfillment.tracking_company)

    if not number:
        for item in order.line_items:
            item_number = _clean(item.fulfillment.tracking_number) if item.fulfillment else None
            if item_number:
                logger.debug(f"Tracking number for order {order.name} taken from line item '{item.name}'")
                number = item_number
                break

    # Shipping lines only describe the chosen rate; logged to help debug stores
    # whose carriers never populate fulfillment tracking.
    for shipping_line in order.shipping_lines:
        logger.debug(
            f"Order {order.name} shipping line: title={shipping_line.title} "
            f"code={shipping_line.code} source={shipping_line.source}"
        )

    return TrackingInfo(
        number=number or TRACKING_NUMBER_UNAVAILABLE,
        link=link or TRACKING_LINK_UNAVAILABLE,
        carrier=carrier or CARRIER_UNAVAILABLE,
    )
