from datetime import datetime, timezone

import pytest

from mockapi.config import Settings
from mockapi.services.mock_api_service import MockApiService


class FakeClock:
    """Manually advanced clock; sleeping only records the requested delay."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.t = start
        self.slept = []

    def now(self) -> float:
        return self.t

    def utcnow(self) -> datetime:
        return datetime.fromtimestamp(self.t, tz=timezone.utc)

    def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)

    def advance(self, seconds: float) -> None:
        self.t += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    return Settings(LATENCY_MS=300, DATABASE_URL="sqlite://")


@pytest.fixture
def api(test_settings, clock):
    return MockApiService(settings=test_settings, clock=clock)
