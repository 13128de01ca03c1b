import time
from datetime import datetime, timezone


class SystemClock:
    """
    Wall-clock time and blocking delay.
    Anything that reads time or simulates latency takes a clock so tests can
    swap in a controllable one.
    """

    def now(self) -> float:
        return time.time()

    def utcnow(self) -> datetime:
        return datetime.fromtimestamp(self.now(), tz=timezone.utc)

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
