import logging

import numpy as np
import pytest

from rehearsal_coach.infrastructure.audio.processing import (
    EventLogger, EventType, LevelSampler, RecordingEvent, RecordingEventBus, db_to_linear, levels_from_db,
)


def test_measure_float_frame():
    rms, peak = LevelSampler(remove_offset=False).measure(np.full(100, 0.5))
    assert rms == pytest.approx(0.5)
    assert peak == pytest.approx(0.5)


def test_measure_removes_dc_offset():
    assert LevelSampler().measure(np.full(100, 0.5)) == (0.0, 0.0)


def test_measure_scales_integer_pcm():
    frame = np.full(100, 16384, dtype=np.int16)
    rms, peak = LevelSampler(remove_offset=False).measure(frame)
    assert rms == pytest.approx(0.5)
    assert peak == pytest.approx(0.5)


def test_measure_averages_channels():
    frame = np.array([[0.2, 0.4]] * 10)
    rms, _ = LevelSampler(remove_offset=False).measure(frame)
    assert rms == pytest.approx(0.3)


def test_measure_empty_frame():
    assert LevelSampler().measure(np.array([])) == (0.0, 0.0)


def test_iter_levels_splits_into_metering_frames():
    t = np.arange(1600) / 16000
    signal = 0.5 * np.sin(2 * np.pi * 500 * t)

    levels = list(LevelSampler().iter_levels(signal, sample_rate=16000, interval=0.01))

    assert len(levels) == 10
    assert all(rms == pytest.approx(0.5 / np.sqrt(2), rel=0.05) for rms, _ in levels)


def test_iter_levels_rejects_bad_rate():
    with pytest.raises(ValueError):
        list(LevelSampler().iter_levels(np.zeros(10), sample_rate=0))


def test_db_conversion():
    assert db_to_linear(0.0) == pytest.approx(1.0)
    assert db_to_linear(-20.0) == pytest.approx(0.1)
    assert db_to_linear(12.0) == 1.0
    assert list(levels_from_db([(-40.0, -6.0)])) == [pytest.approx((0.01, 0.501), rel=1e-3)]


def test_event_bus_survives_failing_handler():
    bus = RecordingEventBus()
    received = []

    def broken(event):
        raise RuntimeError("display went away")

    bus.subscribe(EventType.RECORDING_STARTED, broken)
    bus.subscribe(EventType.RECORDING_STARTED, received.append)
    bus.subscribe_all(received.append)

    bus.emit(RecordingEvent(EventType.RECORDING_STARTED, 0.0))

    assert len(received) == 2


def test_unsubscribe():
    bus = RecordingEventBus()
    received = []
    bus.subscribe(EventType.RECORDING_STOPPED, received.append)
    bus.unsubscribe(EventType.RECORDING_STOPPED, received.append)

    bus.emit(RecordingEvent(EventType.RECORDING_STOPPED, 1.0))

    assert received == []


def test_event_logger_records_events(caplog):
    bus = RecordingEventBus()
    bus.subscribe_all(EventLogger().handle_event)

    with caplog.at_level(logging.INFO, logger="event_logger"):
        bus.emit(RecordingEvent(EventType.NOISE_FLOOR_CALIBRATED, 0.3, {"noise_floor": 0.012}))

    assert "noise_floor_calibrated" in caplog.text
