"""
Statistical features derived from the 10 Hz RMS/peak window stream.

Every function is pure and treats an empty window sequence as a neutral
(zero) result.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from ..config import DEFAULT_NOISE_FLOOR, SPIKE_STD_DEV_MULTIPLIER, METERING_INTERVAL
from .models import AudioMetrics
from .profile import ScoringProfile, in_range

logger = logging.getLogger("audio_metrics")


def _rms_array(metrics: AudioMetrics) -> np.ndarray:
    return np.asarray(metrics.rms_windows, dtype=np.float64)


def _count_runs(mask: np.ndarray) -> int:
    """Number of maximal runs of True values."""
    if mask.size == 0:
        return 0
    starts = mask[1:] & ~mask[:-1]
    return int(mask[0]) + int(np.count_nonzero(starts))


def _run_lengths(mask: np.ndarray) -> List[int]:
    """Lengths of each maximal run of True values, in order."""
    lengths = []
    current = 0
    for flag in mask:
        if flag:
            current += 1
        elif current:
            lengths.append(current)
            current = 0
    if current:
        lengths.append(current)
    return lengths


def average_rms(metrics: AudioMetrics) -> float:
    rms = _rms_array(metrics)
    return float(np.mean(rms)) if rms.size else 0.0


def rms_standard_deviation(metrics: AudioMetrics) -> float:
    """Sample standard deviation of RMS windows (n - 1 denominator)."""
    rms = _rms_array(metrics)
    if rms.size <= 1:
        return 0.0
    return float(np.std(rms, ddof=1))


def spike_count(metrics: AudioMetrics, multiplier: float = SPIKE_STD_DEV_MULTIPLIER) -> int:
    """Windows louder than mean + multiplier * sample std."""
    rms = _rms_array(metrics)
    if rms.size == 0:
        return 0
    threshold = average_rms(metrics) + multiplier * rms_standard_deviation(metrics)
    return int(np.count_nonzero(rms > threshold))


def silence_ratio(metrics: AudioMetrics, noise_floor: float = DEFAULT_NOISE_FLOOR) -> float:
    rms = _rms_array(metrics)
    if rms.size == 0:
        return 0.0
    return float(np.count_nonzero(rms < noise_floor)) / rms.size


def pause_count(metrics: AudioMetrics, noise_floor: float = DEFAULT_NOISE_FLOOR) -> int:
    """
    Count maximal runs of silent windows.

    A single window under the floor is enough to enter a pause.
    """
    return _count_runs(_rms_array(metrics) < noise_floor)


def voiced_segments_per_minute(metrics: AudioMetrics, noise_floor: float = DEFAULT_NOISE_FLOOR) -> float:
    if metrics.duration <= 0:
        return 0.0
    segments = _count_runs(_rms_array(metrics) >= noise_floor)
    return segments / (metrics.duration / 60.0)


def normalized_waveform(metrics: AudioMetrics) -> List[float]:
    """RMS windows scaled so the loudest is 1.0 (display only)."""
    rms = _rms_array(metrics)
    if rms.size == 0:
        return []
    peak = float(np.max(rms))
    if peak <= 0:
        return rms.tolist()
    return (rms / peak).tolist()


def peak_level(metrics: AudioMetrics) -> float:
    if not metrics.peak_windows:
        return 0.0
    return float(np.max(np.asarray(metrics.peak_windows, dtype=np.float64)))


def downsample_waveform(values: Sequence[float], count: int) -> List[float]:
    """Reduce a waveform to `count` points by averaging equal-width buckets."""
    if count <= 0 or not values:
        return []
    if len(values) <= count:
        return list(values)
    buckets = np.array_split(np.asarray(values, dtype=np.float64), count)
    return [float(np.mean(b)) for b in buckets]


# =============================================================================
# Full analysis used by the audio-only scorers
# =============================================================================

@dataclass(frozen=True)
class AnalyzedMetrics:
    """Derived audio patterns for one recording, read against a profile."""
    pause_count: int
    spike_count: int
    segments_per_minute: float
    volume_stability: float
    average_level: float
    peak_level: float
    silence_ratio: float
    duration: float
    effective_duration: float
    profile: ScoringProfile = field(default_factory=ScoringProfile.default, repr=False, compare=False)

    @property
    def is_pacing_too_fast(self) -> bool:
        return self.segments_per_minute > self.profile.audio.pacing_too_fast_segments_per_minute

    @property
    def is_pacing_too_slow(self) -> bool:
        return self.segments_per_minute < self.profile.audio.pacing_too_slow_segments_per_minute

    @property
    def is_pacing_optimal(self) -> bool:
        return in_range(self.segments_per_minute, self.profile.audio.pacing_optimal_range)

    @property
    def spikes_per_minute(self) -> float:
        return self.spike_count / max(0.1, self.duration / 60.0)

    @property
    def has_too_many_spikes(self) -> bool:
        if self.duration <= 0:
            return False
        return self.spike_count / (self.duration / 60.0) > self.profile.audio.spikes_per_minute_max

    @property
    def has_inconsistent_volume(self) -> bool:
        return self.volume_stability < self.profile.audio.volume_stability_minimum

    @property
    def is_too_quiet(self) -> bool:
        return self.average_level < self.profile.audio.average_level_minimum

    @property
    def has_too_much_silence(self) -> bool:
        return self.silence_ratio > self.profile.audio.silence_ratio_max

    @property
    def ideal_pause_count(self) -> int:
        # Roughly one pause per ideal interval
        return max(1, int(self.duration / self.profile.audio.ideal_pause_interval_seconds))

    @property
    def has_good_pause_pattern(self) -> bool:
        ideal = self.ideal_pause_count
        tolerance = max(1, int(ideal * self.profile.audio.pause_tolerance_factor))
        return abs(self.pause_count - ideal) <= tolerance

    @property
    def effective_duration_ratio(self) -> float:
        return self.effective_duration / self.duration if self.duration > 0 else 0.0


def _volume_stability(voiced: np.ndarray) -> float:
    """1 - coefficient of variation, clamped to [0, 1]. 1.0 means perfectly steady."""
    if voiced.size < 2:
        return 1.0
    mean = float(np.mean(voiced))
    if mean <= 0:
        return 1.0
    cv = float(np.std(voiced)) / mean
    return max(0.0, min(1.0, 1.0 - cv))


def analyze(metrics: AudioMetrics, profile: Optional[ScoringProfile] = None,
            interval: float = METERING_INTERVAL) -> AnalyzedMetrics:
    """
    Derive audio patterns from raw metrics.

    Args:
        metrics: Frozen RMS/peak windows from a finished recording
        profile: Scoring profile supplying the noise floor and thresholds
        interval: Seconds per window, used for effective speaking duration

    Returns:
        AnalyzedMetrics bound to the profile
    """
    profile = profile or ScoringProfile.default()
    floor = profile.audio.noise_floor
    rms = _rms_array(metrics)

    voiced = rms[rms > floor]
    silent_runs = _run_lengths(rms < floor)
    pauses = sum(1 for n in silent_runs if n >= profile.audio.pause_min_consecutive_windows)

    if metrics.duration > 0:
        segments = _count_runs(rms >= floor) / max(0.1, metrics.duration / 60.0)
    else:
        segments = 0.0

    result = AnalyzedMetrics(
        pause_count=pauses,
        spike_count=spike_count(metrics, profile.audio.spike_std_dev_multiplier),
        segments_per_minute=segments,
        volume_stability=_volume_stability(voiced),
        average_level=float(np.mean(voiced)) if voiced.size else 0.0,
        peak_level=peak_level(metrics),
        silence_ratio=(rms.size - voiced.size) / rms.size if rms.size else 0.0,
        duration=metrics.duration,
        effective_duration=int(np.count_nonzero(rms >= floor)) * interval,
        profile=profile,
    )
    logger.debug("Analyzed %d windows: pauses=%d spikes=%d spm=%.1f stability=%.2f level=%.3f",
                 rms.size, result.pause_count, result.spike_count, result.segments_per_minute,
                 result.volume_stability, result.average_level)
    return result
