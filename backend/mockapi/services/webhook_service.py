import threading
from collections import deque
from typing import Any, List, Optional

from mockapi.schemas.webhook_schema import WebhookEvent
from mockapi.utils.clock import SystemClock
from mockapi.utils.log import get_logger

log = get_logger("mockapi.webhooks", "WEBHOOK")


class WebhookEventLog:
    """
    Bounded audit trail of triggered webhook events, most recent first.

    Triggering only records the event; nothing is delivered or signed.
    """

    def __init__(self, max_events: int = 10, clock=None):
        self.clock = clock or SystemClock()
        self.max_events = max_events
        # appendleft on a full deque drops the right end, i.e. the oldest event
        self._events = deque(maxlen=max_events)
        self._last_ms = 0
        self._lock = threading.Lock()

    def trigger(self, event_type: Optional[str] = None, payload: Any = None) -> WebhookEvent:
        with self._lock:
            now = self.clock.utcnow()
            # ids are epoch millis, bumped so two events in one ms stay distinct
            ms = max(int(now.timestamp() * 1000), self._last_ms + 1)
            self._last_ms = ms
            event = WebhookEvent(
                id=f"evt_{ms}",
                type=event_type if isinstance(event_type, str) and event_type else "ping",
                payload=payload if payload is not None else {},
                timestamp=now.isoformat().replace("+00:00", "Z"),
            )
            evicted = self._events[-1] if self._events and len(self._events) == self.max_events else None
            self._events.appendleft(event)
        if evicted is not None:
            log.debug(f"evicted {evicted.id}")
        log.info(f"queued {event.type} event {event.id}")
        return event

    def history(self) -> List[WebhookEvent]:
        with self._lock:
            return list(self._events)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self):
        return len(self._events)
