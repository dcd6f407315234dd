import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from app.core.logger import logger
from app.schemas import AdminRecipient
from app.services.admin_directory import get_admin_recipients
from app.services.whatsapp import DeliveryResult, MessageKind, WhatsAppClient


@dataclass
class FanoutReport:
    """Outcome of one broadcast. Individual failures never raise."""
    outcomes: List[DeliveryResult] = field(default_factory=list)
    no_recipients: bool = False

    @property
    def delivered(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.delivered


async def _broadcast(
    label: str,
    kind: MessageKind,
    send_one: Callable[[AdminRecipient], Awaitable[DeliveryResult]],
    recipients: Optional[List[AdminRecipient]],
    template_name: Optional[str] = None,
) -> FanoutReport:
    if recipients is None:
        recipients = get_admin_recipients()

    if not recipients:
        logger.warning(f"No admin recipients configured, skipping {label} broadcast")
        return FanoutReport(no_recipients=True)

    logger.info(f"Broadcasting {label} to {len(recipients)} admin(s)")
    results = await asyncio.gather(*(send_one(recipient) for recipient in recipients), return_exceptions=True)

    report = FanoutReport()
    for recipient, result in zip(recipients, results):
        if isinstance(result, BaseException):
            logger.bind(recipient=recipient.phone).error(
                f"Admin notification to {recipient.name} ({recipient.phone}) raised: {result!r}"
            )
            result = DeliveryResult(
                recipient=recipient.phone,
                kind=kind,
                template_name=template_name,
                success=False,
                error=repr(result),
            )
        report.outcomes.append(result)

    logger.info(f"{label} broadcast finished: {report.delivered} delivered, {report.failed} failed")
    return report


async def broadcast_template(
    client: WhatsAppClient,
    template_name: str,
    base_parameters: List[str],
    recipients: Optional[List[AdminRecipient]] = None,
) -> FanoutReport:
    """
    Send template_name to every admin concurrently.

    Each admin receives [admin name, *base_parameters]. Returns once every
    send has finished, whether it succeeded or not.
    """
    async def send_one(recipient: AdminRecipient) -> DeliveryResult:
        return await client.send_template(recipient.phone, template_name, [recipient.name, *base_parameters])

    return await _broadcast(f"template '{template_name}'", MessageKind.TEMPLATE, send_one, recipients, template_name)


async def broadcast_text(
    client: WhatsAppClient,
    compose: Callable[[AdminRecipient], str],
    recipients: Optional[List[AdminRecipient]] = None,
) -> FanoutReport:
    """Send a free-text message, built per admin by compose(), to every admin concurrently."""
    async def send_one(recipient: AdminRecipient) -> DeliveryResult:
        return await client.send_text(recipient.phone, compose(recipient))

    return await _broadcast("text message", MessageKind.TEXT, send_one, recipients)
