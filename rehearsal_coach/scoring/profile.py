"""
Scoring profiles: every threshold, penalty and weight used by one scoring pass.

A profile is composed per call from the default tables, the scenario
category weights, the coach tone bias and (optionally) the user's baseline.
Profiles are frozen; every adjustment returns a new value.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from ..config import (
    DEFAULT_NOISE_FLOOR, SPIKE_STD_DEV_MULTIPLIER,
    PAUSE_THRESHOLD_SECONDS, SHORT_PAUSE_UPPER_BOUND, MEDIUM_PAUSE_UPPER_BOUND,
    BASELINE_PACING_SHIFT_FACTOR, BASELINE_SLOW_FLOOR, BASELINE_FAST_CEILING,
    BASELINE_LEVEL_FACTOR, BASELINE_LEVEL_FLOOR,
    BASELINE_SILENCE_MARGIN, BASELINE_SILENCE_CEILING,
)
from .models import BaselineMetrics

logger = logging.getLogger("scoring_profile")

Range = Tuple[float, float]


def in_range(value: float, bounds: Range) -> bool:
    """Inclusive range check."""
    return bounds[0] <= value <= bounds[1]


@dataclass(frozen=True)
class AudioThresholds:
    noise_floor: float = DEFAULT_NOISE_FLOOR
    pause_min_consecutive_windows: int = 3
    spike_std_dev_multiplier: float = SPIKE_STD_DEV_MULTIPLIER
    pacing_too_slow_segments_per_minute: float = 10.0
    pacing_too_fast_segments_per_minute: float = 40.0
    pacing_optimal_range: Range = (15.0, 30.0)
    spikes_per_minute_max: float = 5.0
    volume_stability_minimum: float = 0.5
    average_level_minimum: float = 0.1
    average_level_strong: float = 0.3
    silence_ratio_max: float = 0.5
    ideal_pause_interval_seconds: float = 20.0
    pause_tolerance_factor: float = 0.5


@dataclass(frozen=True)
class NlpThresholds:
    # Clarity
    clarity_base_score: int = 85
    filler_penalty_per_word: int = 3
    filler_penalty_max: int = 30
    repeated_penalty_per_word: int = 5
    repeated_penalty_max: int = 15
    incomplete_penalty_per_sentence: int = 5
    incomplete_penalty_max: int = 15
    low_confidence_penalty_per_segment: int = 2
    low_confidence_penalty_max: int = 10
    low_confidence_segment_threshold: float = 0.5
    average_word_length_bonus_threshold: float = 5.0
    average_word_length_bonus: int = 5

    # Pacing
    pacing_base_score: int = 80
    pacing_slow_words_per_minute: float = 100.0
    pacing_fast_words_per_minute: float = 180.0
    pacing_optimal_range: Range = (120.0, 160.0)
    pacing_optimal_bonus: int = 10
    pacing_penalty_divisor: float = 5.0
    no_pause_penalty_duration: float = 30.0
    no_pause_penalty: int = 10
    long_pause_penalty_threshold: int = 3
    long_pause_penalty_per_pause: int = 3
    medium_pause_bonus: int = 5

    # Confidence
    confidence_base_score: int = 80
    hedging_penalty_per_phrase: int = 4
    hedging_penalty_max: int = 24
    weak_opener_penalty_per_phrase: int = 5
    weak_opener_penalty_max: int = 15
    apologetic_penalty_per_phrase: int = 5
    apologetic_penalty_max: int = 15
    assertive_bonus_per_phrase: int = 3
    assertive_bonus_max: int = 15
    question_ratio_threshold: float = 0.1
    question_ratio_penalty: int = 5
    insight_filler_word_count_threshold: int = 3
    insight_hedging_phrase_count_threshold: int = 2

    # Tone
    tone_base_score: int = 75
    sentiment_multiplier: float = 15.0
    emotion_balance_threshold: int = 2
    emotion_balance_bonus: int = 5
    formality_bonus_range: Tuple[int, int] = (1, 3)
    formality_bonus: int = 5
    formality_penalty_threshold: int = 5
    formality_penalty: int = 5
    contraction_bonus_range: Tuple[int, int] = (1, 5)
    contraction_bonus: int = 5

    # Transcript pauses
    pause_threshold_seconds: float = PAUSE_THRESHOLD_SECONDS
    short_pause_upper_bound: float = SHORT_PAUSE_UPPER_BOUND
    medium_pause_upper_bound: float = MEDIUM_PAUSE_UPPER_BOUND


@dataclass(frozen=True)
class ScoreTuning:
    """Adjustments applied by the audio-only scorers and the blend step."""
    base_score: int = 75

    clarity_pause_penalty: int = 5
    clarity_silence_ratio_threshold: float = 0.4
    clarity_silence_penalty_multiplier: float = 50.0
    clarity_duration_bonus_short: float = 30.0
    clarity_duration_bonus_long: float = 60.0
    clarity_duration_bonus_value: int = 5
    clarity_good_pause_bonus: int = 5

    pacing_slow_penalty_multiplier: float = 3.0
    pacing_fast_penalty_multiplier: float = 2.0
    pacing_optimal_bonus: int = 10
    pacing_short_recording_threshold: float = 15.0
    pacing_short_recording_penalty: int = 15
    pacing_sustained_delivery_threshold: float = 30.0
    pacing_sustained_delivery_bonus: int = 5

    tone_stability_multiplier: float = 20.0
    tone_spike_penalty_multiplier: float = 3.0
    tone_inconsistent_penalty: int = 10
    tone_stability_bonus_threshold: float = 0.7

    confidence_low_volume_penalty: int = 15
    confidence_high_volume_bonus: int = 10
    confidence_stability_multiplier: float = 15.0
    confidence_silence_ratio_penalty: int = 10
    confidence_short_recording_threshold: float = 10.0
    confidence_short_recording_penalty: int = 10
    confidence_effective_duration_ratio: float = 0.7
    confidence_effective_duration_bonus: int = 5

    blend_bonus: int = 5


@dataclass(frozen=True)
class ScoreWeights:
    clarity: float = 1.0
    pacing: float = 1.0
    tone: float = 1.0
    confidence: float = 1.0

    def applying(self, bias: 'ScoreWeights') -> 'ScoreWeights':
        """Multiply each dimension weight by the matching bias."""
        return ScoreWeights(
            clarity=self.clarity * bias.clarity,
            pacing=self.pacing * bias.pacing,
            tone=self.tone * bias.tone,
            confidence=self.confidence * bias.confidence,
        )


class CoachTone(str, Enum):
    """Coaching voice; biases which dimension is emphasized."""
    GENTLE = "gentle"
    DIRECT = "direct"
    EXECUTIVE = "executive"

    @classmethod
    def default(cls) -> 'CoachTone':
        return cls.GENTLE

    @property
    def title(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return _TONE_DESCRIPTIONS[self]

    @property
    def weight_bias(self) -> ScoreWeights:
        return _TONE_BIAS[self]


_TONE_BIAS = {
    CoachTone.GENTLE: ScoreWeights(clarity=1.05, pacing=0.95, tone=1.1, confidence=0.95),
    CoachTone.DIRECT: ScoreWeights(clarity=1.0, pacing=1.1, tone=0.9, confidence=1.1),
    CoachTone.EXECUTIVE: ScoreWeights(clarity=1.15, pacing=1.0, tone=0.95, confidence=1.15),
}

_TONE_DESCRIPTIONS = {
    CoachTone.GENTLE: "Supportive, calm phrasing with softer prompts.",
    CoachTone.DIRECT: "Concise coaching with clear, actionable direction.",
    CoachTone.EXECUTIVE: "Crisp, professional language focused on authority.",
}


class ScenarioCategory(str, Enum):
    """Conversation type being rehearsed."""
    BOUNDARIES = "boundaries"
    CAREER = "career"
    RELATIONSHIPS = "relationships"
    DIFFICULT = "difficult"

    @property
    def weights(self) -> ScoreWeights:
        return _CATEGORY_WEIGHTS[self]


_CATEGORY_WEIGHTS = {
    ScenarioCategory.BOUNDARIES: ScoreWeights(clarity=1.1, pacing=0.95, tone=0.95, confidence=1.1),
    ScenarioCategory.CAREER: ScoreWeights(clarity=1.1, pacing=1.05, tone=0.9, confidence=1.05),
    ScenarioCategory.RELATIONSHIPS: ScoreWeights(clarity=1.0, pacing=0.95, tone=1.1, confidence=0.95),
    ScenarioCategory.DIFFICULT: ScoreWeights(clarity=1.05, pacing=0.95, tone=1.05, confidence=1.0),
}


@dataclass(frozen=True)
class ScoringProfile:
    """Full set of thresholds and weights governing one scoring pass."""
    audio: AudioThresholds = AudioThresholds()
    nlp: NlpThresholds = NlpThresholds()
    tuning: ScoreTuning = ScoreTuning()
    weights: ScoreWeights = ScoreWeights()

    @classmethod
    def default(cls) -> 'ScoringProfile':
        return cls()

    def with_weights(self, weights: ScoreWeights) -> 'ScoringProfile':
        return replace(self, weights=weights)

    def applying_baseline(self, baseline: BaselineMetrics) -> 'ScoringProfile':
        """
        Shift audio thresholds toward the user's own baseline, within fixed bounds.

        Each baseline field is optional; a missing field leaves its threshold alone.
        """
        audio = self.audio

        if baseline.segments_per_minute is not None:
            low, high = audio.pacing_optimal_range
            midpoint = (low + high) / 2
            adjustment = (baseline.segments_per_minute - midpoint) * BASELINE_PACING_SHIFT_FACTOR
            audio = replace(
                audio,
                pacing_optimal_range=(low + adjustment, high + adjustment),
                pacing_too_slow_segments_per_minute=max(
                    BASELINE_SLOW_FLOOR, audio.pacing_too_slow_segments_per_minute + adjustment),
                pacing_too_fast_segments_per_minute=min(
                    BASELINE_FAST_CEILING, audio.pacing_too_fast_segments_per_minute + adjustment),
            )

        if baseline.average_level is not None:
            target = min(audio.average_level_minimum, baseline.average_level * BASELINE_LEVEL_FACTOR)
            audio = replace(audio, average_level_minimum=max(BASELINE_LEVEL_FLOOR, target))

        if baseline.silence_ratio is not None:
            adjusted = min(BASELINE_SILENCE_CEILING,
                           max(audio.silence_ratio_max, baseline.silence_ratio + BASELINE_SILENCE_MARGIN))
            audio = replace(audio, silence_ratio_max=adjusted)

        logger.debug("Applied baseline %s -> audio thresholds %s", baseline, audio)
        return replace(self, audio=audio)


def build_profile(category: ScenarioCategory,
                  baseline: Optional[BaselineMetrics] = None,
                  coach_tone: CoachTone = CoachTone.GENTLE) -> ScoringProfile:
    """
    Compose the scoring profile for one pass.

    Args:
        category: Scenario category selecting the base weight table
        baseline: Optional rolling averages from the user's recent sessions
        coach_tone: Coaching voice whose bias multiplies the category weights

    Returns:
        A new, frozen ScoringProfile
    """
    category = ScenarioCategory(category)
    coach_tone = CoachTone(coach_tone)

    weights = category.weights.applying(coach_tone.weight_bias)
    profile = ScoringProfile.default().with_weights(weights)

    if baseline is not None:
        profile = profile.applying_baseline(baseline)

    return profile
