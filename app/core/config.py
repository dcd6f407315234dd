import os
from app.core.logger import logger

# --- Configuration ---

# Environment
ENVIRONMENT = os.environ.get("ENVIRONMENT", "production")
PROD_LOG_LEVEL = os.environ.get("PROD_LOG_LEVEL", "INFO")

# Uvicorn
PORT = int(os.environ.get("PORT", 3000))
HOST = os.environ.get("HOST", "0.0.0.0")
UVICORN_RELOAD = os.environ.get("UVICORN_RELOAD", "false").lower() == "true"
UVICORN_LOG_LEVEL = os.environ.get("UVICORN_LOG_LEVEL", "info")

# Shopify webhook verification
SHOPIFY_WEBHOOK_SECRET = os.environ.get("SHOPIFY_WEBHOOK_SECRET", "")
SHOPIFY_HMAC_HEADER = "x-shopify-hmac-sha256"

# WhatsApp Cloud API
WHATSAPP_PHONE_NUMBER_ID = os.environ.get("WHATSAPP_PHONE_NUMBER_ID", "")
WHATSAPP_TOKEN = os.environ.get("WHATSAPP_TOKEN", "")
WHATSAPP_API_VERSION = os.environ.get("WHATSAPP_API_VERSION", "v19.0")
WHATSAPP_API_BASE_URL = os.environ.get("WHATSAPP_API_BASE_URL", "https://graph.facebook.com")
WHATSAPP_TIMEOUT_SECONDS = float(os.environ.get("WHATSAPP_TIMEOUT_SECONDS", 15))
TEMPLATE_LANGUAGE_CODE = os.environ.get("TEMPLATE_LANGUAGE_CODE", "en")

# Templates (names must match the ones approved in WhatsApp Manager)
ORDER_CONFIRMATION_TEMPLATE = os.environ.get("ORDER_CONFIRMATION_TEMPLATE", "order_confirmation")
ORDER_FULFILLED_TEMPLATE = os.environ.get("ORDER_FULFILLED_TEMPLATE", "order_fulfilled")
ADMIN_NEW_ORDER_TEMPLATE = os.environ.get("ADMIN_NEW_ORDER_TEMPLATE", "admin_new_order")
ADMIN_ORDER_FULFILLED_TEMPLATE = os.environ.get("ADMIN_ORDER_FULFILLED_TEMPLATE", "admin_order_fulfilled")

# Admin roster
TO_WHATSAPP_NUMBER = os.environ.get("TO_WHATSAPP_NUMBER", "")  # single-admin fallback
ADMIN_WHATSAPP_NUMBERS = os.environ.get("ADMIN_WHATSAPP_NUMBERS", "")
ADMIN_NAMES = os.environ.get("ADMIN_NAMES", "")
ADMIN_CONTACTS = os.environ.get("ADMIN_CONTACTS", "")
ADMIN_NOTIFICATION_MODE = os.environ.get("ADMIN_NOTIFICATION_MODE", "template").lower()  # template | text
STORE_BOT_NAME = os.environ.get("STORE_BOT_NAME", "Order Notification Bot")

# Keep-alive
KEEP_ALIVE_URL = os.environ.get("KEEP_ALIVE_URL", "")
KEEP_ALIVE_HEADER = "X-Keep-Alive"
INACTIVITY_THRESHOLD_SECONDS = int(os.environ.get("INACTIVITY_THRESHOLD_SECONDS", 5 * 60))
KEEP_ALIVE_INTERVAL_SECONDS = int(os.environ.get("KEEP_ALIVE_INTERVAL_SECONDS", 10 * 60))
KEEP_ALIVE_TIMEOUT_SECONDS = float(os.environ.get("KEEP_ALIVE_TIMEOUT_SECONDS", 10))

REQUIRED_SECRETS = [
    "SHOPIFY_WEBHOOK_SECRET",
    "WHATSAPP_PHONE_NUMBER_ID",
    "WHATSAPP_TOKEN",
    "TO_WHATSAPP_NUMBER",
    "ADMIN_WHATSAPP_NUMBERS",
    "KEEP_ALIVE_URL",
]


def keep_alive_enabled() -> bool:
    return bool(KEEP_ALIVE_URL)


def log_config_summary():
    """Log which settings are present without echoing their values."""
    logger.info(f"Server port: {PORT}")
    logger.info(f"Environment: {ENVIRONMENT}")
    logger.info(f"Keep-alive monitoring: {'ENABLED' if keep_alive_enabled() else 'DISABLED'}")
    logger.info(f"Admin notification mode: {ADMIN_NOTIFICATION_MODE}")
    logger.info("Environment variables check:")
    for name in REQUIRED_SECRETS:
        logger.info(f"- {name}: {'Set' if globals().get(name) else 'Missing'}")
