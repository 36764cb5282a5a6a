"""
Data models for the scoring pipeline.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger("scoring_models")


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class AudioMetrics:
    """Raw level measurements captured during one recording, sampled at 10 Hz."""
    rms_windows: Tuple[float, ...] = ()
    peak_windows: Tuple[float, ...] = ()
    duration: float = 0.0

    def __post_init__(self):
        rms = tuple(_clamp_unit(v) for v in self.rms_windows)
        peaks = tuple(_clamp_unit(v) for v in self.peak_windows)
        if len(rms) != len(peaks):
            logger.warning("RMS/peak length mismatch (%d vs %d), truncating to the shorter",
                           len(rms), len(peaks))
            count = min(len(rms), len(peaks))
            rms, peaks = rms[:count], peaks[:count]
        object.__setattr__(self, "rms_windows", rms)
        object.__setattr__(self, "peak_windows", peaks)
        object.__setattr__(self, "duration", max(0.0, float(self.duration)))

    @classmethod
    def empty(cls) -> 'AudioMetrics':
        return cls((), (), 0.0)

    @property
    def window_count(self) -> int:
        return len(self.rms_windows)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AudioMetrics':
        return cls(
            rms_windows=tuple(data.get("rms_windows") or ()),
            peak_windows=tuple(data.get("peak_windows") or ()),
            duration=float(data.get("duration") or 0.0),
        )


@dataclass(frozen=True)
class TranscriptSegment:
    """One recognized word or phrase with its timing and recognizer confidence."""
    text: str
    timestamp: float
    duration: float
    confidence: float

    @property
    def end(self) -> float:
        return self.timestamp + self.duration


@dataclass(frozen=True)
class TranscriptionResult:
    """Transcript produced by the speech-to-text collaborator."""
    text: str
    segments: Tuple[TranscriptSegment, ...] = field(default_factory=tuple)

    @property
    def words(self) -> list:
        return [w for w in self.text.split(" ") if w]

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TranscriptionResult':
        """Build from a collaborator payload: {text, segments: [{text, timestamp, duration, confidence}]}"""
        segments = tuple(
            TranscriptSegment(
                text=str(seg.get("text") or ""),
                timestamp=float(seg.get("timestamp") or 0.0),
                duration=float(seg.get("duration") or 0.0),
                confidence=_clamp_unit(seg.get("confidence", 1.0)),
            )
            for seg in data.get("segments") or []
        )
        return cls(text=str(data.get("text") or ""), segments=segments)


@dataclass(frozen=True)
class BaselineMetrics:
    """Rolling averages over a user's recent sessions for one scenario category."""
    segments_per_minute: Optional[float] = None
    average_level: Optional[float] = None
    silence_ratio: Optional[float] = None
    volume_stability: Optional[float] = None
    words_per_minute: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return all(v is None for v in (self.segments_per_minute, self.average_level,
                                       self.silence_ratio, self.volume_stability,
                                       self.words_per_minute))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaselineMetrics':
        def opt(key: str) -> Optional[float]:
            value = data.get(key)
            return float(value) if value is not None else None

        return cls(
            segments_per_minute=opt("segments_per_minute"),
            average_level=opt("average_level"),
            silence_ratio=opt("silence_ratio"),
            volume_stability=opt("volume_stability"),
            words_per_minute=opt("words_per_minute"),
        )
