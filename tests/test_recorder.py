import pytest

from rehearsal_coach.scoring import AudioMetrics
from rehearsal_coach.infrastructure.audio.processing import (
    EventType, RecordingState, RecordingWarning, RehearsalRecorder, run_metering,
)


@pytest.fixture
def recorder(event_bus, clock):
    return RehearsalRecorder(event_bus=event_bus, clock=clock)


def _feed(recorder, clock, samples, step=0.1):
    for rms, peak in samples:
        clock.advance(step)
        recorder.record_sample(rms, peak)


def _warning_events(events):
    return [e.data["warning"] for e in events if e.event_type == EventType.QUALITY_WARNING_CHANGED]


def test_state_transitions(recorder):
    assert recorder.state == RecordingState.IDLE
    assert not recorder.pause()
    assert recorder.start()
    assert not recorder.start()
    assert not recorder.resume()
    assert recorder.pause()
    assert recorder.state == RecordingState.PAUSED
    assert recorder.resume()
    recorder.stop()
    assert recorder.state == RecordingState.FINISHED
    assert not recorder.start()
    recorder.reset()
    assert recorder.state == RecordingState.IDLE


def test_samples_outside_recording_are_dropped(recorder, clock):
    assert not recorder.record_sample(0.3, 0.4)
    recorder.start()
    recorder.pause()
    assert not recorder.record_sample(0.3, 0.4)
    assert recorder.sample_count == 0


def test_elapsed_excludes_paused_time(recorder, clock):
    recorder.start()
    clock.advance(1.0)
    recorder.pause()
    clock.advance(5.0)
    assert recorder.elapsed == pytest.approx(1.0)
    recorder.resume()
    clock.advance(1.0)

    metrics = recorder.stop()

    assert metrics.duration == pytest.approx(2.0)
    assert recorder.remaining == pytest.approx(358.0)


def test_stop_freezes_metrics(recorder, clock):
    recorder.start()
    _feed(recorder, clock, [(0.2, 0.3), (1.4, 2.0), (-0.1, 0.1), (0.3, 0.5), (0.2, 0.2)])

    metrics = recorder.stop()

    assert isinstance(metrics, AudioMetrics)
    assert metrics.window_count == 5
    assert metrics.rms_windows[1] == 1.0
    assert metrics.rms_windows[2] == 0.0
    assert metrics.duration == pytest.approx(0.5)
    assert recorder.last_metrics is metrics
    assert recorder.stop() == AudioMetrics.empty()
    assert not recorder.record_sample(0.3, 0.3)
    assert recorder.last_metrics.window_count == 5


def test_noise_floor_calibrates_from_first_samples(recorder, clock, captured_events):
    recorder.start()
    _feed(recorder, clock, [(0.004, 0.01)] * 2)
    assert not recorder.has_calibrated

    _feed(recorder, clock, [(0.004, 0.01)])

    assert recorder.has_calibrated
    assert recorder.noise_floor == pytest.approx(0.009)
    assert any(e.event_type == EventType.NOISE_FLOOR_CALIBRATED for e in captured_events)


def test_quality_warning_is_emitted_once_per_change(recorder, clock, captured_events):
    recorder.start()
    _feed(recorder, clock, [(0.005, 0.01)] * 9)
    assert recorder.active_warning is None

    _feed(recorder, clock, [(0.005, 0.01)] * 6)
    assert recorder.active_warning == RecordingWarning.TOO_QUIET
    assert _warning_events(captured_events) == ["too_quiet"]

    _feed(recorder, clock, [(0.5, 0.99)] * 10)
    assert recorder.active_warning == RecordingWarning.TOO_LOUD
    assert _warning_events(captured_events) == ["too_quiet", "too_loud"]

    _feed(recorder, clock, [(0.3, 0.5)] * 10)
    assert recorder.active_warning is None
    assert _warning_events(captured_events) == ["too_quiet", "too_loud", None]


def test_noisy_environment_warning(recorder, clock):
    recorder.start()
    _feed(recorder, clock, [(0.1, 0.2)] * 3)
    assert recorder.noise_floor == pytest.approx(0.105)

    _feed(recorder, clock, [(0.3, 0.5)] * 7)

    assert recorder.classify_quality() == RecordingWarning.NOISY_ENVIRONMENT
    assert recorder.active_warning.message == "Noisy environment detected"


def test_pause_clears_warning(recorder, clock, captured_events):
    recorder.start()
    _feed(recorder, clock, [(0.005, 0.01)] * 10)
    assert recorder.active_warning == RecordingWarning.TOO_QUIET

    recorder.pause()

    assert recorder.active_warning is None
    assert _warning_events(captured_events) == ["too_quiet", None]


def test_max_duration_stops_recording(event_bus, clock, captured_events):
    recorder = RehearsalRecorder(event_bus=event_bus, clock=clock, max_duration=1.0)
    recorder.start()

    _feed(recorder, clock, [(0.3, 0.4)] * 6, step=0.25)

    assert recorder.state == RecordingState.FINISHED
    assert recorder.last_metrics.window_count == 4
    assert recorder.last_metrics.duration == pytest.approx(1.0)
    types = [e.event_type for e in captured_events]
    assert types.index(EventType.MAX_DURATION_REACHED) < types.index(EventType.RECORDING_STOPPED)


def test_waveform_keeps_most_recent_samples(recorder, clock):
    recorder.start()
    _feed(recorder, clock, [(i / 100, 0.5) for i in range(60)], step=0.01)
    assert len(recorder.waveform) == 50
    assert recorder.waveform[0] == pytest.approx(0.1)


def test_reset_discards_everything(recorder, clock):
    recorder.start()
    _feed(recorder, clock, [(0.3, 0.4)] * 5)
    recorder.reset()
    assert recorder.sample_count == 0
    assert recorder.elapsed == 0.0
    assert recorder.last_metrics is None


def test_run_metering_drives_recorder(recorder, clock):
    naps = []

    def sleep(seconds):
        naps.append(seconds)
        clock.advance(seconds)

    metrics = run_metering(recorder, [(0.3, 0.4)] * 5, interval=0.25, sleep=sleep)

    assert metrics.window_count == 5
    assert metrics.duration == pytest.approx(1.25)
    assert naps == [0.25] * 5
    assert recorder.state == RecordingState.FINISHED


def test_run_metering_can_leave_recorder_running(recorder, clock):
    metrics = run_metering(recorder, [(0.3, 0.4)] * 3, interval=0.25,
                           sleep=clock.advance, stop_when_exhausted=False)
    assert metrics == AudioMetrics.empty()
    assert recorder.state == RecordingState.RECORDING
    assert recorder.sample_count == 3
