import asyncio
from typing import Optional

import httpx

from app.core import config
from app.core.activity_tracker import ActivityTracker, activity_tracker
from app.core.logger import logger

KEEP_ALIVE_USER_AGENT = "Keep-Alive-Bot"


class KeepAliveMonitor:
    """
    Pings our own /health endpoint when the service has been idle long enough
    for the host to consider spinning it down.

    The probe carries the X-Keep-Alive header so the activity middleware does
    not count it as traffic.
    """

    def __init__(
        self,
        base_url: str,
        tracker: ActivityTracker = activity_tracker,
        interval_seconds: float = config.KEEP_ALIVE_INTERVAL_SECONDS,
        threshold_seconds: float = config.INACTIVITY_THRESHOLD_SECONDS,
        timeout_seconds: float = config.KEEP_ALIVE_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.tracker = tracker
        self.interval_seconds = interval_seconds
        self.threshold_seconds = threshold_seconds
        self.timeout_seconds = timeout_seconds
        self._http_client = http_client
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the periodic keep-alive loop."""
        if self._running:
            return

        logger.info(f"Keep-alive monitoring started (checking every {self.interval_seconds / 60:g} minutes)")
        self._running = True
        self._task = asyncio.create_task(self._monitor_loop())

    async def stop(self):
        """Cancel the loop and wait for it to unwind."""
        if not self._running:
            return

        logger.info("Stopping keep-alive monitoring...")
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _monitor_loop(self):
        while self._running:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.check_and_ping()
            except Exception as e:
                logger.exception(f"Error in keep-alive loop: {e}")

    async def check_and_ping(self) -> bool:
        """
        Run one keep-alive cycle.

        Returns:
            True if a probe was sent this cycle (whatever its outcome).
        """
        idle_seconds = self.tracker.seconds_since_activity()
        logger.info(f"Checking activity: {round(idle_seconds)}s since last activity")

        if idle_seconds <= self.threshold_seconds:
            logger.info("Recent activity detected, skipping keep-alive request")
            return False

        logger.info("Sending keep-alive request to prevent spin-down")
        url = f"{self.base_url}/health"
        try:
            response = await asyncio.wait_for(self._get(url), timeout=self.timeout_seconds)
            if response.is_success:
                logger.info("Keep-alive request successful")
            else:
                logger.warning(f"Keep-alive request failed with status: {response.status_code}")
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.error(f"Keep-alive request timed out after {self.timeout_seconds}s")
        except httpx.HTTPError as e:
            logger.error(f"Keep-alive request failed: {e}")
        return True

    async def _get(self, url: str) -> httpx.Response:
        headers = {
            "User-Agent": KEEP_ALIVE_USER_AGENT,
            config.KEEP_ALIVE_HEADER: "true",
        }
        if self._http_client is not None:
            return await self._http_client.get(url, headers=headers, timeout=self.timeout_seconds)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.get(url, headers=headers)
