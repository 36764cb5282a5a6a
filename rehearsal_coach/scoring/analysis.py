"""
Transcript-driven dimension analyses.

Each analysis holds raw counts for one delivery dimension and exposes a pure
`score(profile)` returning an integer in [0, 100].
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .models import TranscriptionResult
from .patterns import LexicalCounts
from .profile import ScoringProfile, in_range
from .scores import FeedbackScores, clamp_score, round_half_away

logger = logging.getLogger("speech_analysis")


def _nonneg(value: int) -> int:
    return max(0, int(value))


@dataclass(frozen=True)
class PauseEvent:
    """Gap between two consecutive transcript segments."""
    timestamp: float
    duration: float
    word_before: str
    word_after: str


@dataclass(frozen=True)
class ClarityAnalysis:
    filler_word_count: int = 0
    repeated_word_count: int = 0
    incomplete_sentence_count: int = 0
    average_word_length: float = 0.0
    low_confidence_segment_count: int = 0
    total_word_count: int = 0
    filler_words: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def filler_ratio(self) -> float:
        if self.total_word_count <= 0:
            return 0.0
        return self.filler_word_count / self.total_word_count

    def score(self, profile: Optional[ScoringProfile] = None) -> int:
        nlp = (profile or ScoringProfile.default()).nlp
        score = nlp.clarity_base_score
        score -= min(nlp.filler_penalty_max, _nonneg(self.filler_word_count) * nlp.filler_penalty_per_word)
        score -= min(nlp.repeated_penalty_max, _nonneg(self.repeated_word_count) * nlp.repeated_penalty_per_word)
        score -= min(nlp.incomplete_penalty_max,
                     _nonneg(self.incomplete_sentence_count) * nlp.incomplete_penalty_per_sentence)
        score -= min(nlp.low_confidence_penalty_max,
                     _nonneg(self.low_confidence_segment_count) * nlp.low_confidence_penalty_per_segment)
        if self.average_word_length > nlp.average_word_length_bonus_threshold:
            score += nlp.average_word_length_bonus
        return clamp_score(score)

    @classmethod
    def from_transcript(cls, transcription: TranscriptionResult,
                        counts: Optional[LexicalCounts] = None,
                        profile: Optional[ScoringProfile] = None) -> 'ClarityAnalysis':
        nlp = (profile or ScoringProfile.default()).nlp
        counts = counts or LexicalCounts.from_text(transcription.text)
        low_confidence = sum(1 for s in transcription.segments
                             if s.confidence < nlp.low_confidence_segment_threshold)
        return cls(
            filler_word_count=counts.filler,
            repeated_word_count=counts.repeated,
            incomplete_sentence_count=counts.incomplete,
            average_word_length=counts.average_word_length,
            low_confidence_segment_count=low_confidence,
            total_word_count=counts.word_count,
            filler_words=counts.filler_words,
        )


@dataclass(frozen=True)
class PacingAnalysis:
    words_per_minute: float = 0.0
    total_word_count: int = 0
    total_pause_count: int = 0
    short_pauses: int = 0
    medium_pauses: int = 0
    long_pauses: int = 0
    average_pause_duration: float = 0.0
    duration: float = 0.0

    def is_optimal_pace(self, profile: Optional[ScoringProfile] = None) -> bool:
        nlp = (profile or ScoringProfile.default()).nlp
        return in_range(self.words_per_minute, nlp.pacing_optimal_range)

    def score(self, profile: Optional[ScoringProfile] = None) -> int:
        profile = profile or ScoringProfile.default()
        nlp = profile.nlp
        wpm = self.words_per_minute
        score = nlp.pacing_base_score

        if wpm < nlp.pacing_slow_words_per_minute:
            score -= int((nlp.pacing_slow_words_per_minute - wpm) / nlp.pacing_penalty_divisor)
        elif wpm > nlp.pacing_fast_words_per_minute:
            score -= int((wpm - nlp.pacing_fast_words_per_minute) / nlp.pacing_penalty_divisor)
        elif self.is_optimal_pace(profile):
            score += nlp.pacing_optimal_bonus

        # No pauses in a longer recording reads as rushing
        if _nonneg(self.total_pause_count) == 0 and self.duration > nlp.no_pause_penalty_duration:
            score -= nlp.no_pause_penalty

        long_pauses = _nonneg(self.long_pauses)
        if long_pauses > nlp.long_pause_penalty_threshold:
            score -= (long_pauses - nlp.long_pause_penalty_threshold) * nlp.long_pause_penalty_per_pause

        medium = _nonneg(self.medium_pauses)
        if medium > _nonneg(self.short_pauses) and medium > long_pauses:
            score += nlp.medium_pause_bonus

        return clamp_score(score)

    @classmethod
    def from_transcript(cls, transcription: TranscriptionResult, duration: float,
                        profile: Optional[ScoringProfile] = None) -> 'PacingAnalysis':
        nlp = (profile or ScoringProfile.default()).nlp
        word_count = transcription.word_count
        minutes = max(0.1, duration / 60.0)
        pauses = detect_pauses(transcription, nlp.pause_threshold_seconds)

        short = sum(1 for p in pauses if p.duration < nlp.short_pause_upper_bound)
        medium = sum(1 for p in pauses
                     if nlp.short_pause_upper_bound <= p.duration < nlp.medium_pause_upper_bound)
        long_ = sum(1 for p in pauses if p.duration >= nlp.medium_pause_upper_bound)

        return cls(
            words_per_minute=word_count / minutes,
            total_word_count=word_count,
            total_pause_count=len(pauses),
            short_pauses=short,
            medium_pauses=medium,
            long_pauses=long_,
            average_pause_duration=sum(p.duration for p in pauses) / len(pauses) if pauses else 0.0,
            duration=max(0.0, duration),
        )


def detect_pauses(transcription: TranscriptionResult, threshold: float) -> List[PauseEvent]:
    """Gaps longer than `threshold` seconds between consecutive segments."""
    pauses = []
    segments = transcription.segments
    for prev, cur in zip(segments, segments[1:]):
        gap = cur.timestamp - prev.end
        if gap > threshold:
            pauses.append(PauseEvent(timestamp=prev.end, duration=gap,
                                     word_before=prev.text, word_after=cur.text))
    return pauses


@dataclass(frozen=True)
class ConfidenceAnalysis:
    hedging_phrase_count: int = 0
    question_word_count: int = 0
    weak_opener_count: int = 0
    apologetic_phrase_count: int = 0
    assertive_phrase_count: int = 0
    total_word_count: int = 0
    hedging_phrases: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def question_ratio(self) -> float:
        if self.total_word_count <= 0:
            return 0.0
        return self.question_word_count / self.total_word_count

    def score(self, profile: Optional[ScoringProfile] = None) -> int:
        nlp = (profile or ScoringProfile.default()).nlp
        score = nlp.confidence_base_score
        score -= min(nlp.hedging_penalty_max, _nonneg(self.hedging_phrase_count) * nlp.hedging_penalty_per_phrase)
        score -= min(nlp.weak_opener_penalty_max,
                     _nonneg(self.weak_opener_count) * nlp.weak_opener_penalty_per_phrase)
        score -= min(nlp.apologetic_penalty_max,
                     _nonneg(self.apologetic_phrase_count) * nlp.apologetic_penalty_per_phrase)
        score += min(nlp.assertive_bonus_max, _nonneg(self.assertive_phrase_count) * nlp.assertive_bonus_per_phrase)
        if self.question_ratio > nlp.question_ratio_threshold:
            score -= nlp.question_ratio_penalty
        return clamp_score(score)

    @classmethod
    def from_transcript(cls, transcription: TranscriptionResult,
                        counts: Optional[LexicalCounts] = None) -> 'ConfidenceAnalysis':
        counts = counts or LexicalCounts.from_text(transcription.text)
        return cls(
            hedging_phrase_count=counts.hedging,
            question_word_count=counts.question,
            weak_opener_count=counts.weak_opener,
            apologetic_phrase_count=counts.apologetic,
            assertive_phrase_count=counts.assertive,
            total_word_count=counts.word_count,
            hedging_phrases=counts.hedging_phrases,
        )


@dataclass(frozen=True)
class ToneAnalysis:
    sentiment_score: float = 0.0
    positive_word_count: int = 0
    negative_word_count: int = 0
    contraction_count: int = 0
    formal_phrase_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "sentiment_score", max(-1.0, min(1.0, float(self.sentiment_score))))

    @property
    def is_positive(self) -> bool:
        return self.sentiment_score > 0.1

    @property
    def is_negative(self) -> bool:
        return self.sentiment_score < -0.1

    def score(self, profile: Optional[ScoringProfile] = None) -> int:
        nlp = (profile or ScoringProfile.default()).nlp
        score = nlp.tone_base_score
        score += round_half_away(self.sentiment_score * nlp.sentiment_multiplier)

        balance = _nonneg(self.positive_word_count) - _nonneg(self.negative_word_count)
        if balance > nlp.emotion_balance_threshold:
            score += nlp.emotion_balance_bonus
        elif balance < -nlp.emotion_balance_threshold:
            score -= nlp.emotion_balance_bonus

        formal = _nonneg(self.formal_phrase_count)
        if in_range(formal, nlp.formality_bonus_range):
            score += nlp.formality_bonus
        elif formal > nlp.formality_penalty_threshold:
            score -= nlp.formality_penalty

        if in_range(_nonneg(self.contraction_count), nlp.contraction_bonus_range):
            score += nlp.contraction_bonus

        return clamp_score(score)

    @classmethod
    def from_transcript(cls, transcription: TranscriptionResult,
                        counts: Optional[LexicalCounts] = None,
                        sentiment: Optional[float] = None) -> 'ToneAnalysis':
        """Sentiment falls back to the lexical positive/negative balance when not supplied."""
        counts = counts or LexicalCounts.from_text(transcription.text)
        return cls(
            sentiment_score=counts.lexical_sentiment if sentiment is None else sentiment,
            positive_word_count=counts.positive,
            negative_word_count=counts.negative,
            contraction_count=counts.contraction,
            formal_phrase_count=counts.formal,
        )


@dataclass(frozen=True)
class SpeechAnalysis:
    """All four transcript analyses for one recording."""
    transcription: TranscriptionResult
    clarity: ClarityAnalysis
    pacing: PacingAnalysis
    confidence: ConfidenceAnalysis
    tone: ToneAnalysis

    def generate_scores(self, profile: Optional[ScoringProfile] = None) -> FeedbackScores:
        return FeedbackScores(
            clarity=self.clarity.score(profile),
            pacing=self.pacing.score(profile),
            tone=self.tone.score(profile),
            confidence=self.confidence.score(profile),
        )


def analyze_transcript(transcription: TranscriptionResult, duration: float,
                       profile: Optional[ScoringProfile] = None,
                       sentiment: Optional[float] = None) -> SpeechAnalysis:
    """
    Build every dimension analysis from a transcript.

    Args:
        transcription: Text and timed segments from the speech collaborator
        duration: Recording length in seconds
        profile: Profile supplying pause buckets and confidence threshold
        sentiment: Optional collaborator sentiment in [-1, 1]

    Returns:
        SpeechAnalysis with clarity, pacing, confidence and tone analyses
    """
    counts = LexicalCounts.from_text(transcription.text)
    analysis = SpeechAnalysis(
        transcription=transcription,
        clarity=ClarityAnalysis.from_transcript(transcription, counts, profile),
        pacing=PacingAnalysis.from_transcript(transcription, duration, profile),
        confidence=ConfidenceAnalysis.from_transcript(transcription, counts),
        tone=ToneAnalysis.from_transcript(transcription, counts, sentiment),
    )
    logger.info("Transcript analysis: words=%d fillers=%d hedges=%d wpm=%.0f",
                counts.word_count, counts.filler, counts.hedging, analysis.pacing.words_per_minute)
    return analysis
