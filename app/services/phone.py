"""
Phone number normalization for WhatsApp recipients.

WhatsApp expects the full international number without "+", so every customer
number is brought into the 12 digit "91XXXXXXXXXX" shape before sending.
"""
import re
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

COUNTRY_CODE = "91"
NATIONAL_NUMBER_LENGTH = 10
NORMALIZED_LENGTH = len(COUNTRY_CODE) + NATIONAL_NUMBER_LENGTH

_WHITESPACE = re.compile(r"\s+")
_CANONICAL = re.compile(r"91[0-9]{10}")


class PhoneNormalizationStatus(Enum):
    SUCCESS = "success"
    NO_PHONE_PROVIDED = "no_phone_provided"
    TOO_SHORT = "too_short"
    UNRECOGNIZED_FORMAT = "unrecognized_format"


class NormalizedPhone(BaseModel):
    status: PhoneNormalizationStatus = Field(default=PhoneNormalizationStatus.SUCCESS)
    phone: str


class PhoneRejected(BaseModel):
    status: PhoneNormalizationStatus
    raw: Optional[str] = None


PhoneNormalizationResult = Union[NormalizedPhone, PhoneRejected]


def _is_canonical(phone: str) -> bool:
    return _CANONICAL.fullmatch(phone) is not None


def normalize_phone(raw_phone: Optional[str]) -> PhoneNormalizationResult:
    """
    Normalize a raw phone string into the 91-prefixed 12 digit dialing format.

    Args:
        raw_phone: Phone as typed by the customer, e.g. "+91 98765 43210",
            "09876543210" or "9876543210". None means no phone; blank is too short.

    Returns:
        NormalizedPhone on success, otherwise PhoneRejected carrying the reason.
    """
    if raw_phone is None:
        return PhoneRejected(status=PhoneNormalizationStatus.NO_PHONE_PROVIDED, raw=raw_phone)

    digits = _WHITESPACE.sub("", str(raw_phone))
    if digits.startswith("+"):
        digits = digits[1:]

    if len(digits) < NATIONAL_NUMBER_LENGTH:
        return PhoneRejected(status=PhoneNormalizationStatus.TOO_SHORT, raw=raw_phone)

    if digits.startswith(COUNTRY_CODE) and len(digits) == NORMALIZED_LENGTH:
        candidate = digits
    elif len(digits) == NATIONAL_NUMBER_LENGTH and not digits.startswith(COUNTRY_CODE):
        candidate = COUNTRY_CODE + digits
    elif len(digits) == NATIONAL_NUMBER_LENGTH + 1 and digits.startswith("0"):
        candidate = COUNTRY_CODE + digits[1:]
    elif len(digits) == NORMALIZED_LENGTH:
        # Twelve characters with some other prefix: passed through, then held
        # to the same shape check as every other branch below.
        candidate = digits
    else:
        return PhoneRejected(status=PhoneNormalizationStatus.UNRECOGNIZED_FORMAT, raw=raw_phone)

    if not _is_canonical(candidate):
        return PhoneRejected(status=PhoneNormalizationStatus.UNRECOGNIZED_FORMAT, raw=raw_phone)

    return NormalizedPhone(phone=candidate)
