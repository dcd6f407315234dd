from typing import List, Optional

from app.core import config
from app.core.logger import logger
from app.schemas import AdminRecipient

DEFAULT_ADMIN_NAME = "Admin"
ADMIN_COUNTRY_CODE = "91"


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",")]


def build_admin_roster(
    numbers: Optional[str],
    names: Optional[str] = None,
    contacts: Optional[str] = None,
) -> List[AdminRecipient]:
    """
    Build the admin roster from three parallel comma-separated strings.

    Names and contacts are matched to numbers by position. A missing name
    becomes "Admin" and a missing contact falls back to the raw number.
    Numbers only get the country code prepended; they are not validated.
    """
    name_tokens = _split(names)
    contact_tokens = _split(contacts)

    roster = []
    for index, number in enumerate(_split(numbers)):
        if not number:
            continue

        name = name_tokens[index] if index < len(name_tokens) and name_tokens[index] else DEFAULT_ADMIN_NAME
        contact = contact_tokens[index] if index < len(contact_tokens) and contact_tokens[index] else number
        phone = number if number.startswith(ADMIN_COUNTRY_CODE) else ADMIN_COUNTRY_CODE + number

        roster.append(AdminRecipient(phone=phone, name=name, contact=contact))

    return roster


def get_admin_recipients() -> List[AdminRecipient]:
    """Resolve the admin roster from the loaded configuration on every call."""
    numbers = config.ADMIN_WHATSAPP_NUMBERS or config.TO_WHATSAPP_NUMBER
    roster = build_admin_roster(numbers, config.ADMIN_NAMES, config.ADMIN_CONTACTS)
    if not roster:
        logger.warning("No admin WhatsApp numbers configured (ADMIN_WHATSAPP_NUMBERS / TO_WHATSAPP_NUMBER)")
    return roster
