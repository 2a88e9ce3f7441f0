import pytest

from launcher_agent.cache.store import CacheStore


class FakeClock:
    """Manually advanced clock for TTL and debounce tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return CacheStore(tmp_path / "cache")
