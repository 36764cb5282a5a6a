"""
Level sampling: one RMS and one peak value per metering interval.

Levels are linear amplitudes on a 0-1 scale, where 1.0 is digital full scale.
"""
import logging
from typing import Iterator, Tuple

import numpy as np

from ....config import METERING_INTERVAL

logger = logging.getLogger("audio_levels")

Level = Tuple[float, float]


def stereo_to_mono(x: np.ndarray) -> np.ndarray:
    """Convert multi-channel audio (frames x channels) to mono by averaging channels."""
    return np.mean(x, axis=1)


def remove_dc(x: np.ndarray) -> np.ndarray:
    """Remove DC offset from audio signal."""
    return x - np.mean(x)


def db_to_linear(db: float) -> float:
    """Convert a dBFS power reading (e.g. -160..0) to a linear 0-1 level."""
    return float(min(1.0, max(0.0, 10 ** (db / 20.0))))


def _full_scale(dtype: np.dtype) -> float:
    if np.issubdtype(dtype, np.integer):
        return float(-np.iinfo(dtype).min)
    return 1.0


class LevelSampler:
    """Computes (rms, peak) for a PCM frame."""

    def __init__(self, remove_offset: bool = True):
        self.remove_offset = remove_offset

    def measure(self, frame: np.ndarray) -> Level:
        """
        Measure one frame.

        Args:
            frame: PCM samples, 1-D mono or 2-D (frames x channels), integer or float

        Returns:
            (rms, peak), each clamped to [0, 1]; (0.0, 0.0) for an empty frame
        """
        frame = np.asarray(frame)
        if frame.size == 0:
            return 0.0, 0.0

        scale = _full_scale(frame.dtype)
        x = frame.astype(np.float64) / scale
        if x.ndim == 2:
            x = stereo_to_mono(x)
        if self.remove_offset:
            x = remove_dc(x)

        rms = float(np.sqrt(np.mean(x ** 2)))
        peak = float(np.max(np.abs(x)))
        return min(1.0, rms), min(1.0, peak)

    def iter_levels(self, signal: np.ndarray, sample_rate: int,
                    interval: float = METERING_INTERVAL) -> Iterator[Level]:
        """Split a signal into metering-interval frames and yield each frame's levels."""
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        frame_len = max(1, int(round(sample_rate * interval)))
        signal = np.asarray(signal)
        logger.debug("Metering %d samples at %d Hz in %d-sample frames", len(signal), sample_rate, frame_len)
        for start in range(0, len(signal), frame_len):
            yield self.measure(signal[start:start + frame_len])


def levels_from_db(readings: Iterator[Tuple[float, float]]) -> Iterator[Level]:
    """Convert (average dB, peak dB) meter readings into linear levels."""
    for average_db, peak_db in readings:
        yield db_to_linear(average_db), db_to_linear(peak_db)
