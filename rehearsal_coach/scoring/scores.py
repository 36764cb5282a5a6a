"""
Feedback scores: the four delivery dimensions plus derived aggregates.
"""
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .profile import ScoreWeights


def clamp_score(value: float) -> int:
    return max(0, min(100, int(value)))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class ScoreType(str, Enum):
    """Delivery dimensions, in tie-break order."""
    CLARITY = "clarity"
    PACING = "pacing"
    TONE = "tone"
    CONFIDENCE = "confidence"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def explanation(self) -> str:
        return _SCORE_EXPLANATIONS[self]


_SCORE_EXPLANATIONS = {
    ScoreType.CLARITY: "Based on pause patterns and silence. Clear speakers pause intentionally.",
    ScoreType.PACING: "Based on rhythm, phrases per minute. Too fast or slow affects your score.",
    ScoreType.TONE: "Based on volume stability. Consistent volume sounds calm and controlled.",
    ScoreType.CONFIDENCE: "Based on volume level and consistency. Steady delivery sounds assured.",
}


class Tier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    DEVELOPING = "developing"
    NEEDS_WORK = "needs_work"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @classmethod
    def for_score(cls, overall: int) -> 'Tier':
        if overall >= 85:
            return cls.EXCELLENT
        if overall >= 70:
            return cls.GOOD
        if overall >= 55:
            return cls.DEVELOPING
        return cls.NEEDS_WORK


def _argmax(pairs: List[Tuple[ScoreType, float]]) -> ScoreType:
    # First entry wins ties
    best = pairs[0]
    for pair in pairs[1:]:
        if pair[1] > best[1]:
            best = pair
    return best[0]


def _argmin(pairs: List[Tuple[ScoreType, float]]) -> ScoreType:
    best = pairs[0]
    for pair in pairs[1:]:
        if pair[1] < best[1]:
            best = pair
    return best[0]


@dataclass(frozen=True)
class ScoreDelta:
    """Per-dimension change, current minus previous."""
    clarity: int
    pacing: int
    tone: int
    confidence: int

    @property
    def overall(self) -> int:
        # Truncates toward zero
        return int((self.clarity + self.pacing + self.tone + self.confidence) / 4)

    @property
    def has_improvement(self) -> bool:
        return any(v > 0 for v in (self.clarity, self.pacing, self.tone, self.confidence))

    @property
    def has_decline(self) -> bool:
        return any(v < 0 for v in (self.clarity, self.pacing, self.tone, self.confidence))

    @staticmethod
    def formatted(value: int) -> str:
        """Signed display string, e.g. '+5' or '-3'."""
        return f"+{value}" if value > 0 else str(value)

    def to_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data["overall"] = self.overall
        return data


@dataclass(frozen=True)
class FeedbackScores:
    """Four 0-100 delivery scores for one completed session."""
    clarity: int
    pacing: int
    tone: int
    confidence: int

    def __post_init__(self):
        for name in ("clarity", "pacing", "tone", "confidence"):
            object.__setattr__(self, name, clamp_score(getattr(self, name)))

    @classmethod
    def empty(cls) -> 'FeedbackScores':
        return cls(0, 0, 0, 0)

    def score(self, score_type: ScoreType) -> int:
        return getattr(self, ScoreType(score_type).value)

    def _pairs(self) -> List[Tuple[ScoreType, float]]:
        return [(t, self.score(t)) for t in ScoreType]

    def _weighted_pairs(self, weights: ScoreWeights) -> List[Tuple[ScoreType, float]]:
        return [(t, self.score(t) * getattr(weights, t.value)) for t in ScoreType]

    @property
    def overall(self) -> int:
        return (self.clarity + self.pacing + self.tone + self.confidence) // 4

    @property
    def tier(self) -> Tier:
        return Tier.for_score(self.overall)

    @property
    def primary_strength(self) -> ScoreType:
        return _argmax(self._pairs())

    @property
    def primary_weakness(self) -> ScoreType:
        return _argmin(self._pairs())

    def weighted_strength(self, weights: ScoreWeights) -> ScoreType:
        return _argmax(self._weighted_pairs(weights))

    def weighted_weakness(self, weights: ScoreWeights) -> ScoreType:
        return _argmin(self._weighted_pairs(weights))

    def delta(self, previous: Optional['FeedbackScores']) -> Optional[ScoreDelta]:
        """Change since a previous session, or None without one."""
        if previous is None:
            return None
        return ScoreDelta(
            clarity=self.clarity - previous.clarity,
            pacing=self.pacing - previous.pacing,
            tone=self.tone - previous.tone,
            confidence=self.confidence - previous.confidence,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flat JSON-compatible form for persistence."""
        data: Dict[str, Any] = asdict(self)
        data["overall"] = self.overall
        data["tier"] = self.tier.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeedbackScores':
        record = FeedbackRecord.model_validate(data)
        return record.to_scores()


class FeedbackRecord(BaseModel):
    """Validated persisted form of FeedbackScores."""
    clarity: int = Field(ge=0, le=100)
    pacing: int = Field(ge=0, le=100)
    tone: int = Field(ge=0, le=100)
    confidence: int = Field(ge=0, le=100)
    overall: Optional[int] = Field(default=None, ge=0, le=100)
    tier: Optional[Tier] = None

    @classmethod
    def from_scores(cls, scores: FeedbackScores) -> 'FeedbackRecord':
        return cls(**scores.to_dict())

    def to_scores(self) -> FeedbackScores:
        return FeedbackScores(
            clarity=self.clarity,
            pacing=self.pacing,
            tone=self.tone,
            confidence=self.confidence,
        )
