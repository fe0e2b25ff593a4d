"""Pytest configuration and fixtures."""
import logging
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from quattrodue.engine.cache import CalendarCache
from quattrodue.engine.pattern import PatternEngine
from quattrodue.models.config import DEFAULT_REFERENCE_START_DATE, ScheduleConfig
from quattrodue.services.work_schedule import build_service
from quattrodue.utils.structured_logging import configure_structlog

TODAY = date(2024, 2, 15)


class FakeTimer:
    """Monotonic clock advanced by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_logging():
    """Structured events at DEBUG; no handlers left over between tests."""
    configure_structlog(level="DEBUG")
    yield
    logging.getLogger("quattrodue").handlers.clear()


@pytest.fixture
def reference():
    return DEFAULT_REFERENCE_START_DATE


@pytest.fixture
def engine():
    """Engine anchored to the default reference date."""
    return PatternEngine()


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def cache(engine, timer):
    """Cache with a hand-driven timer and a fixed today."""
    return CalendarCache(engine, timer=timer, clock=lambda: TODAY)


@pytest.fixture
def service(timer):
    """Service wired from the default configuration."""
    return build_service(ScheduleConfig(), timer=timer, clock=lambda: TODAY)
