import json
from contextlib import asynccontextmanager
from typing import Any, Dict

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from app import __version__
from app.api.verification import verify_shopify_webhook
from app.core import config
from app.core.activity_tracker import activity_tracker
from app.core.logger import logger
from app.schemas import ActivityStatusResponse, HealthResponse, TrackingProbeRequest
from app.services.admin_directory import get_admin_recipients
from app.services.keep_alive import KeepAliveMonitor
from app.services.order_events import OrderEvent, OrderEventHandler
from app.services.tracking import extract_tracking_info
from app.services.whatsapp import WhatsAppClient

# Long-lived clients created in the lifespan
http_clients: Dict[str, httpx.AsyncClient] = {}
monitors: Dict[str, KeepAliveMonitor] = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan manager that handles startup and shutdown tasks."""
    logger.info("Application startup...")
    config.log_config_summary()

    http_clients["whatsapp"] = httpx.AsyncClient(timeout=config.WHATSAPP_TIMEOUT_SECONDS)
    logger.info("WhatsApp HTTP client initialized.")

    if config.keep_alive_enabled():
        monitors["keep_alive"] = KeepAliveMonitor(base_url=config.KEEP_ALIVE_URL)
        await monitors["keep_alive"].start()

    yield

    logger.info("Application shutdown event triggered...")

    keep_alive = monitors.pop("keep_alive", None)
    if keep_alive:
        await keep_alive.stop()

    client = http_clients.pop("whatsapp", None)
    if client:
        await client.aclose()
        logger.info("WhatsApp HTTP client closed.")


app = FastAPI(title="Shopify WhatsApp Notifier", version=__version__, lifespan=lifespan)


def is_keep_alive_request(request: Request) -> bool:
    return request.headers.get(config.KEEP_ALIVE_HEADER) == "true"


@app.middleware("http")
async def track_activity(request: Request, call_next):
    """Count every non keep-alive request as activity and log it."""
    if is_keep_alive_request(request):
        logger.info(f"Keep-alive request: {request.method} {request.url.path}")
    else:
        activity_tracker.touch()
        client = request.client.host if request.client else "unknown"
        logger.info(f"{request.method} {request.url.path} - {client}")
    return await call_next(request)


def get_order_event_handler() -> OrderEventHandler:
    return OrderEventHandler(WhatsAppClient(http_client=http_clients.get("whatsapp")))


async def _read_json(request: Request) -> Any:
    try:
        return json.loads(await request.body())
    except ValueError:
        return None


@app.post("/webhook/orders/create", dependencies=[Depends(verify_shopify_webhook)])
async def order_created(request: Request, handler: OrderEventHandler = Depends(get_order_event_handler)):
    """New order: admin fanout plus order confirmation to the customer."""
    outcome = await handler.handle(OrderEvent.CREATED, await _read_json(request))
    return PlainTextResponse(outcome.body, status_code=outcome.status_code)


@app.post("/webhook/orders/fulfilled", dependencies=[Depends(verify_shopify_webhook)])
async def order_fulfilled(request: Request, handler: OrderEventHandler = Depends(get_order_event_handler)):
    """Order fulfilled: admin fanout plus shipping update with tracking to the customer."""
    outcome = await handler.handle(OrderEvent.FULFILLED, await _read_json(request))
    return PlainTextResponse(outcome.body, status_code=outcome.status_code)


# Health check endpoint (also the keep-alive target)
@app.get("/health")
async def health_check(request: Request):
    snapshot = activity_tracker.snapshot()
    return HealthResponse(
        status="OK",
        timestamp=snapshot["timestamp"],
        lastActivity=snapshot["lastActivity"],
        timeSinceLastActivity=snapshot["timeSinceLastActivity"],
        isKeepAliveRequest=is_keep_alive_request(request),
        admins=get_admin_recipients(),
    )


@app.get("/activity-status")
async def activity_status():
    snapshot = activity_tracker.snapshot()
    return ActivityStatusResponse(
        lastActivity=snapshot["lastActivity"],
        timeSinceLastActivity=snapshot["timeSinceLastActivity"],
        thresholdSeconds=config.INACTIVITY_THRESHOLD_SECONDS,
        isInactive=activity_tracker.is_inactive(config.INACTIVITY_THRESHOLD_SECONDS),
        keepAliveEnabled=config.keep_alive_enabled(),
        admins=get_admin_recipients(),
    )


# Version endpoint
@app.get("/version")
async def get_version():
    """Get application version."""
    return JSONResponse({"version": __version__})


# Diagnostic endpoints, unsigned
@app.post("/test")
async def test_echo(request: Request):
    body = await _read_json(request)
    logger.info(f"Test endpoint hit: {body}")
    return {"received": True, "body": body}


@app.post("/test-tracking")
async def test_tracking(probe: TrackingProbeRequest):
    tracking = extract_tracking_info(probe.order)
    logger.info(f"Test tracking for {probe.order.name}: {tracking.model_dump()}")
    return {"tracking": tracking.model_dump()}


# The main block is only for direct execution; run.py is the standard entry point.
if __name__ == "__main__":
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level="info")
