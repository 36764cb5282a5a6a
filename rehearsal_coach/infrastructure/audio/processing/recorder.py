"""
Live rehearsal recorder: the recording state machine and metric buffers.

The recorder owns the in-progress RMS/peak buffers. It is driven one tick at
a time from a single thread and hands out an immutable AudioMetrics snapshot
only once recording stops.
"""
import logging
import time
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np

from ....config import (
    METERING_INTERVAL, MAX_RECORDING_DURATION, DEFAULT_NOISE_FLOOR, WAVEFORM_SAMPLE_COUNT,
    TOO_QUIET_THRESHOLD, TOO_LOUD_THRESHOLD, NOISY_ENVIRONMENT_THRESHOLD,
    WARNING_CHECK_WINDOW_SIZE, NOISE_FLOOR_CALIBRATION_DURATION,
    NOISE_FLOOR_CALIBRATION_SAMPLES, NOISE_FLOOR_MARGIN,
)
from ....scoring.models import AudioMetrics
from .events import EventType, RecordingEvent, RecordingEventBus

logger = logging.getLogger("rehearsal_recorder")


class RecordingState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"
    FINISHED = "finished"


class RecordingWarning(str, Enum):
    """Live quality problems shown while recording."""
    TOO_QUIET = "too_quiet"
    TOO_LOUD = "too_loud"
    NOISY_ENVIRONMENT = "noisy_environment"

    @property
    def message(self) -> str:
        return _WARNING_MESSAGES[self]


_WARNING_MESSAGES = {
    RecordingWarning.TOO_QUIET: "Speak up or move closer",
    RecordingWarning.TOO_LOUD: "Too loud, move back slightly",
    RecordingWarning.NOISY_ENVIRONMENT: "Noisy environment detected",
}


class RehearsalRecorder:
    """
    Recording state machine: idle -> recording <-> paused -> finished.

    Invalid transitions are logged and ignored. Samples arriving outside the
    recording state are dropped.
    """

    def __init__(self,
                 event_bus: Optional[RecordingEventBus] = None,
                 clock: Callable[[], float] = time.monotonic,
                 max_duration: float = MAX_RECORDING_DURATION):
        self.event_bus = event_bus or RecordingEventBus()
        self.clock = clock
        self.max_duration = max_duration
        self.state = RecordingState.IDLE
        self._reset_metrics()

    def _reset_metrics(self):
        self._rms: List[float] = []
        self._peaks: List[float] = []
        self.waveform: List[float] = []
        self.current_level = 0.0
        self._accumulated = 0.0
        self._start_time: Optional[float] = None
        self.noise_floor = DEFAULT_NOISE_FLOOR
        self.has_calibrated = False
        self.active_warning: Optional[RecordingWarning] = None
        self.last_metrics: Optional[AudioMetrics] = None

    def _emit(self, event_type: EventType, **data):
        self.event_bus.emit(RecordingEvent(event_type, self.elapsed, data))

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def elapsed(self) -> float:
        """Recorded seconds, excluding paused time."""
        if self.state == RecordingState.RECORDING and self._start_time is not None:
            return self._accumulated + (self.clock() - self._start_time)
        return self._accumulated

    @property
    def remaining(self) -> float:
        return max(0.0, self.max_duration - self.elapsed)

    @property
    def sample_count(self) -> int:
        return len(self._rms)

    @property
    def is_active(self) -> bool:
        return self.state in (RecordingState.RECORDING, RecordingState.PAUSED)

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        if self.state != RecordingState.IDLE:
            logger.warning("Cannot start recording from state: %s", self.state.value)
            return False
        self._reset_metrics()
        self._start_time = self.clock()
        self.state = RecordingState.RECORDING
        logger.info("Recording started")
        self._emit(EventType.RECORDING_STARTED)
        return True

    def pause(self) -> bool:
        if self.state != RecordingState.RECORDING:
            logger.warning("Cannot pause from state: %s", self.state.value)
            return False
        self._accumulated = self.elapsed
        self._start_time = None
        self.state = RecordingState.PAUSED
        self._clear_warning()
        logger.info("Recording paused at %.1fs", self._accumulated)
        self._emit(EventType.RECORDING_PAUSED)
        return True

    def resume(self) -> bool:
        if self.state != RecordingState.PAUSED:
            logger.warning("Cannot resume from state: %s", self.state.value)
            return False
        self._start_time = self.clock()
        self.state = RecordingState.RECORDING
        logger.info("Recording resumed")
        self._emit(EventType.RECORDING_RESUMED)
        return True

    def stop(self) -> AudioMetrics:
        """
        Finish recording and freeze the metrics.

        Returns:
            Immutable AudioMetrics snapshot, or AudioMetrics.empty() when not active
        """
        if not self.is_active:
            logger.warning("Cannot stop from state: %s", self.state.value)
            return AudioMetrics.empty()

        self._accumulated = self.elapsed
        self._start_time = None
        self.state = RecordingState.FINISHED
        self.active_warning = None

        metrics = AudioMetrics(tuple(self._rms), tuple(self._peaks), self._accumulated)
        self.last_metrics = metrics
        logger.info("Recording stopped. Duration: %.1fs, Samples: %d", metrics.duration, metrics.window_count)
        self._emit(EventType.RECORDING_STOPPED, duration=metrics.duration, samples=metrics.window_count)
        return metrics

    def reset(self):
        """Discard everything and return to idle."""
        self._reset_metrics()
        self.state = RecordingState.IDLE
        self._emit(EventType.RECORDING_RESET)

    # -------------------------------------------------------------------------
    # Metering
    # -------------------------------------------------------------------------

    def record_sample(self, rms: float, peak: float) -> bool:
        """
        Append one metering tick.

        Returns:
            True if the sample was recorded
        """
        if self.state != RecordingState.RECORDING:
            logger.debug("Dropping sample in state %s", self.state.value)
            return False

        rms = max(0.0, min(1.0, float(rms)))
        peak = max(0.0, min(1.0, float(peak)))
        self.current_level = rms
        self._rms.append(rms)
        self._peaks.append(peak)

        self.waveform.append(rms)
        if len(self.waveform) > WAVEFORM_SAMPLE_COUNT:
            self.waveform.pop(0)

        if not self.has_calibrated and self.elapsed >= NOISE_FLOOR_CALIBRATION_DURATION:
            self._calibrate_noise_floor()

        self._check_quality()

        if self.elapsed >= self.max_duration:
            logger.info("Max recording duration reached")
            self._emit(EventType.MAX_DURATION_REACHED)
            self.stop()

        return True

    def _calibrate_noise_floor(self):
        if len(self._rms) < NOISE_FLOOR_CALIBRATION_SAMPLES:
            return
        ambient = float(np.mean(self._rms[:NOISE_FLOOR_CALIBRATION_SAMPLES]))
        self.noise_floor = ambient + NOISE_FLOOR_MARGIN
        self.has_calibrated = True
        logger.info("Noise floor calibrated: %.4f", self.noise_floor)
        self._emit(EventType.NOISE_FLOOR_CALIBRATED, noise_floor=self.noise_floor)

    def classify_quality(self) -> Optional[RecordingWarning]:
        """Classify the trailing window; None until enough samples exist or when all is well."""
        if len(self._rms) < WARNING_CHECK_WINDOW_SIZE:
            return None
        recent_average = float(np.mean(self._rms[-WARNING_CHECK_WINDOW_SIZE:]))
        recent_peak = float(np.max(self._peaks[-WARNING_CHECK_WINDOW_SIZE:]))

        if recent_average < TOO_QUIET_THRESHOLD:
            return RecordingWarning.TOO_QUIET
        if recent_peak > TOO_LOUD_THRESHOLD:
            return RecordingWarning.TOO_LOUD
        if self.has_calibrated and self.noise_floor > NOISY_ENVIRONMENT_THRESHOLD:
            return RecordingWarning.NOISY_ENVIRONMENT
        return None

    def _check_quality(self):
        if len(self._rms) < WARNING_CHECK_WINDOW_SIZE:
            return
        warning = self.classify_quality()
        if warning == self.active_warning:
            return
        self.active_warning = warning
        self._emit(EventType.QUALITY_WARNING_CHANGED,
                   warning=warning.value if warning else None,
                   message=warning.message if warning else None)

    def _clear_warning(self):
        if self.active_warning is not None:
            self.active_warning = None
            self._emit(EventType.QUALITY_WARNING_CHANGED, warning=None, message=None)


def run_metering(recorder: RehearsalRecorder,
                 levels: Iterable[Tuple[float, float]],
                 interval: float = METERING_INTERVAL,
                 sleep: Callable[[float], None] = time.sleep,
                 stop_when_exhausted: bool = True) -> AudioMetrics:
    """
    Drive the recorder from a level source at the metering cadence.

    Runs on the calling thread, one tick at a time, until the recorder leaves
    the recording state or the source is exhausted.

    Args:
        recorder: Recorder to feed; started here if idle
        levels: Iterable of (rms, peak) samples
        interval: Seconds between ticks
        sleep: Sleep function (injectable for tests)
        stop_when_exhausted: Stop the recorder when the source runs out

    Returns:
        The frozen AudioMetrics, or AudioMetrics.empty() if recording is still active
    """
    if recorder.state == RecordingState.IDLE:
        recorder.start()

    for rms, peak in levels:
        if recorder.state != RecordingState.RECORDING:
            break
        recorder.record_sample(rms, peak)
        if recorder.state == RecordingState.RECORDING:
            sleep(interval)

    if recorder.is_active and stop_when_exhausted:
        recorder.stop()

    return recorder.last_metrics or AudioMetrics.empty()
