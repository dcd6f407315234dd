import time
from datetime import datetime, timezone
from typing import Callable


def to_iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat().replace("+00:00", "Z")


class ActivityTracker:
    """
    Process-wide "last seen traffic" timestamp.

    Written by the request middleware and by every outbound send, read by the
    keep-alive loop and the status endpoints. Writes are plain attribute
    assignments on the event loop thread; last writer wins.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self.last_activity = clock()

    def touch(self):
        """Record activity now."""
        self.last_activity = self._clock()

    def now(self) -> float:
        return self._clock()

    def seconds_since_activity(self) -> float:
        return max(0.0, self._clock() - self.last_activity)

    def is_inactive(self, threshold_seconds: float) -> bool:
        return self.seconds_since_activity() > threshold_seconds

    def snapshot(self) -> dict:
        """Timestamps in the shape the status endpoints return."""
        return {
            "timestamp": to_iso(self._clock()),
            "lastActivity": to_iso(self.last_activity),
            "timeSinceLastActivity": round(self.seconds_since_activity()),
        }


# Global activity tracker instance
activity_tracker = ActivityTracker()
