from typing import Optional, List, Any, get_args
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Shopify payloads carry far more keys than we read and occasionally send
# numbers where strings are documented, so every webhook model is lenient.
_LENIENT = ConfigDict(extra="allow", coerce_numbers_to_str=True)

TRACKING_NUMBER_UNAVAILABLE = "Not Available"
TRACKING_LINK_UNAVAILABLE = "No link"
CARRIER_UNAVAILABLE = "Not specified"


class _ShopifyModel(BaseModel):
    model_config = _LENIENT

    @field_validator("*", mode="before")
    @classmethod
    def _null_lists_as_empty(cls, value: Any, info):
        field = cls.model_fields.get(info.field_name)
        if field is None or field.default_factory is not list:
            return value
        if value is None:
            return []
        if isinstance(value, list):
            # Null entries in object lists keep their position as an empty
            # object so fulfillments[0] stays the first fulfillment.
            item_type = (get_args(field.annotation) or (None,))[0]
            if isinstance(item_type, type) and issubclass(item_type, BaseModel):
                return [{} if item is None else item for item in value]
            return [item for item in value if item is not None]
        return value


class Address(_ShopifyModel):
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None


class Customer(_ShopifyModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    default_address: Optional[Address] = None


class LineItemFulfillment(_ShopifyModel):
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None


class LineItem(_ShopifyModel):
    name: Optional[str] = None
    title: Optional[str] = None
    quantity: Optional[int] = None
    fulfillment_status: Optional[str] = None
    fulfillment: Optional[LineItemFulfillment] = None


class Fulfillment(_ShopifyModel):
    status: Optional[str] = None
    tracking_company: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_numbers: List[str] = Field(default_factory=list)
    tracking_url: Optional[str] = None
    tracking_urls: List[str] = Field(default_factory=list)
    line_items: List[LineItem] = Field(default_factory=list)


class ShippingLine(_ShopifyModel):
    title: Optional[str] = None
    code: Optional[str] = None
    source: Optional[str] = None
    carrier_identifier: Optional[str] = None


class Order(_ShopifyModel):
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    total_price: Optional[str] = None
    gateway: Optional[str] = None
    payment_gateway_names: List[str] = Field(default_factory=list)
    line_items: List[LineItem] = Field(default_factory=list)
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    fulfillments: List[Fulfillment] = Field(default_factory=list)
    shipping_lines: List[ShippingLine] = Field(default_factory=list)
    customer: Optional[Customer] = None


class TrackingInfo(BaseModel):
    number: str = TRACKING_NUMBER_UNAVAILABLE
    link: str = TRACKING_LINK_UNAVAILABLE
    carrier: str = CARRIER_UNAVAILABLE


class AdminRecipient(BaseModel):
    phone: str
    name: str
    contact: str


class TrackingProbeRequest(BaseModel):
    order: Order


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str
    lastActivity: str
    timeSinceLastActivity: int
    isKeepAliveRequest: bool
    admins: List[AdminRecipient] = Field(default_factory=list)


class ActivityStatusResponse(BaseModel):
    lastActivity: str
    timeSinceLastActivity: int
    thresholdSeconds: int
    isInactive: bool
    keepAliveEnabled: bool
    admins: List[AdminRecipient] = Field(default_factory=list)
