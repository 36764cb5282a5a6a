# File: tests/conftest.py

import logging

import pytest

from rehearsal_coach.scoring import AudioMetrics, ScoringProfile
from rehearsal_coach.infrastructure.audio.processing.events import RecordingEventBus


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="session", autouse=True)
def quiet_logs():
    """Keeps debug output from the scoring loggers out of test reports."""
    logging.getLogger().setLevel(logging.WARNING)


@pytest.fixture
def default_profile():
    return ScoringProfile.default()


@pytest.fixture
def zero_metrics():
    return AudioMetrics(rms_windows=(), peak_windows=(), duration=0.0)


@pytest.fixture
def alternating_metrics():
    """120 windows alternating speech (0.4) and a quiet gap (0.02) over 12 seconds."""
    rms = tuple(0.4 if i % 2 == 0 else 0.02 for i in range(120))
    return AudioMetrics(rms_windows=rms, peak_windows=rms, duration=12.0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def event_bus():
    return RecordingEventBus()


@pytest.fixture
def captured_events(event_bus):
    """Every event emitted on the bus, in order."""
    events = []
    event_bus.subscribe_all(events.append)
    return events
