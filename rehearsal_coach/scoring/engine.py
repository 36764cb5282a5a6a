"""
Feedback engine: turns a finished recording into delivery scores.

All scores start from a competent baseline and move with observed behavior.
When a transcript is available its analyses are primary and audio patterns
act as small modifiers; otherwise the audio patterns drive scoring directly.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import TRANSCRIPTION_ENABLED
from ..infrastructure.audio.speech.transcription import (
    Transcriber, TranscriptionError, TranscriptionJob,
)
from .analysis import SpeechAnalysis, analyze_transcript
from .analyzer import AnalyzedMetrics, analyze
from .models import AudioMetrics, BaselineMetrics, TranscriptionResult
from .profile import CoachTone, ScenarioCategory, ScoringProfile, build_profile, in_range
from .scores import FeedbackScores, clamp_score

logger = logging.getLogger("feedback_engine")

AUDIO_ONLY_INSIGHT = "Audio analysis only - enable on-device transcription for richer feedback"
DEFAULT_INSIGHT = "Great job! Keep practicing to maintain consistency"


# =============================================================================
# Audio-only scorers
# =============================================================================

def clarity_from_audio(metrics: AnalyzedMetrics) -> int:
    """Clear speakers pause intentionally and don't trail off."""
    tuning = metrics.profile.tuning
    score = tuning.base_score

    score -= abs(metrics.pause_count - metrics.ideal_pause_count) * tuning.clarity_pause_penalty

    if metrics.silence_ratio > tuning.clarity_silence_ratio_threshold:
        score -= int((metrics.silence_ratio - tuning.clarity_silence_ratio_threshold)
                     * tuning.clarity_silence_penalty_multiplier)

    if metrics.duration > tuning.clarity_duration_bonus_short:
        score += tuning.clarity_duration_bonus_value
    if metrics.duration > tuning.clarity_duration_bonus_long:
        score += tuning.clarity_duration_bonus_value

    if metrics.has_good_pause_pattern:
        score += tuning.clarity_good_pause_bonus

    return clamp_score(score)


def pacing_from_audio(metrics: AnalyzedMetrics) -> int:
    """Rhythm in voiced segments per minute."""
    audio, tuning = metrics.profile.audio, metrics.profile.tuning
    score = tuning.base_score
    spm = metrics.segments_per_minute

    if spm < audio.pacing_too_slow_segments_per_minute:
        score -= int((audio.pacing_too_slow_segments_per_minute - spm) * tuning.pacing_slow_penalty_multiplier)
    elif spm > audio.pacing_too_fast_segments_per_minute:
        score -= int((spm - audio.pacing_too_fast_segments_per_minute) * tuning.pacing_fast_penalty_multiplier)
    elif in_range(spm, audio.pacing_optimal_range):
        score += tuning.pacing_optimal_bonus

    if metrics.duration < tuning.pacing_short_recording_threshold:
        score -= tuning.pacing_short_recording_penalty

    if metrics.effective_duration > tuning.pacing_sustained_delivery_threshold:
        score += tuning.pacing_sustained_delivery_bonus

    return clamp_score(score)


def tone_from_audio(metrics: AnalyzedMetrics) -> int:
    """Volume stability and spike control."""
    audio, tuning = metrics.profile.audio, metrics.profile.tuning
    score = tuning.base_score

    score += int(metrics.volume_stability * tuning.tone_stability_multiplier)

    spikes_per_minute = metrics.spikes_per_minute
    if spikes_per_minute > audio.spikes_per_minute_max:
        score -= int((spikes_per_minute - audio.spikes_per_minute_max) * tuning.tone_spike_penalty_multiplier)

    if metrics.has_inconsistent_volume:
        score -= tuning.tone_inconsistent_penalty

    return clamp_score(score)


def confidence_from_audio(metrics: AnalyzedMetrics) -> int:
    """Projection, steadiness and filling the space."""
    audio, tuning = metrics.profile.audio, metrics.profile.tuning
    score = tuning.base_score

    if metrics.average_level < audio.average_level_minimum:
        score -= tuning.confidence_low_volume_penalty
    elif metrics.average_level > audio.average_level_strong:
        score += tuning.confidence_high_volume_bonus

    score += int(metrics.volume_stability * tuning.confidence_stability_multiplier)

    if metrics.silence_ratio > audio.silence_ratio_max:
        score -= tuning.confidence_silence_ratio_penalty

    if metrics.duration < tuning.confidence_short_recording_threshold:
        score -= tuning.confidence_short_recording_penalty

    if metrics.effective_duration_ratio > tuning.confidence_effective_duration_ratio:
        score += tuning.confidence_effective_duration_bonus

    return clamp_score(score)


def scores_from_audio(metrics: AnalyzedMetrics) -> FeedbackScores:
    return FeedbackScores(
        clarity=clarity_from_audio(metrics),
        pacing=pacing_from_audio(metrics),
        tone=tone_from_audio(metrics),
        confidence=confidence_from_audio(metrics),
    )


def blend_scores(metrics: AnalyzedMetrics, speech: SpeechAnalysis, profile: ScoringProfile) -> FeedbackScores:
    """Transcript scores are primary; matching audio patterns add a small bonus each."""
    bonus = profile.tuning.blend_bonus
    clarity = speech.clarity.score(profile)
    pacing = speech.pacing.score(profile)
    tone = speech.tone.score(profile)
    confidence = speech.confidence.score(profile)

    if metrics.has_good_pause_pattern:
        clarity += bonus
    if metrics.volume_stability > profile.tuning.tone_stability_bonus_threshold:
        tone += bonus
    if metrics.average_level > profile.audio.average_level_strong:
        confidence += bonus
    if metrics.is_pacing_optimal and speech.pacing.is_optimal_pace(profile):
        pacing += bonus

    return FeedbackScores(clarity=clarity, pacing=pacing, tone=tone, confidence=confidence)


# =============================================================================
# Result
# =============================================================================

@dataclass(frozen=True)
class FeedbackResult:
    """Scores plus everything used to compute them."""
    scores: FeedbackScores
    analyzed: AnalyzedMetrics
    profile: ScoringProfile
    coach_tone: CoachTone
    category: ScenarioCategory
    speech_analysis: Optional[SpeechAnalysis] = None
    transcription: Optional[str] = None
    used_speech_analysis: bool = False
    insights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "scores": self.scores.to_dict(),
            "category": self.category.value,
            "coach_tone": self.coach_tone.value,
            "used_speech_analysis": self.used_speech_analysis,
            "transcription": self.transcription,
            "primary_strength": self.scores.primary_strength.value,
            "primary_weakness": self.scores.primary_weakness.value,
            "weighted_strength": self.scores.weighted_strength(self.profile.weights).value,
            "weighted_weakness": self.scores.weighted_weakness(self.profile.weights).value,
            "insights": list(self.insights),
        }
        if self.speech_analysis is not None:
            data["counts"] = {
                "filler_words": self.speech_analysis.clarity.filler_word_count,
                "filler_ratio": round(self.speech_analysis.clarity.filler_ratio, 3),
                "hedging_phrases": self.speech_analysis.confidence.hedging_phrase_count,
                "words_per_minute": round(self.speech_analysis.pacing.words_per_minute, 1),
            }
        return data


def build_insights(speech: Optional[SpeechAnalysis], profile: ScoringProfile) -> List[str]:
    """Short, actionable observations from the transcript analyses."""
    if speech is None:
        return [AUDIO_ONLY_INSIGHT]

    nlp = profile.nlp
    insights = []

    if speech.clarity.filler_word_count > nlp.insight_filler_word_count_threshold:
        top_fillers = ", ".join(speech.clarity.filler_words[:3])
        insights.append(f"Reduce filler words like: {top_fillers}")

    if not speech.pacing.is_optimal_pace(profile):
        low, high = nlp.pacing_optimal_range
        if speech.pacing.words_per_minute < low:
            insights.append("Try speaking slightly faster for better engagement")
        elif speech.pacing.words_per_minute > high:
            insights.append("Slow down a bit to improve clarity")

    if speech.confidence.hedging_phrase_count > nlp.insight_hedging_phrase_count_threshold:
        insights.append("Replace hedging phrases with more direct statements")

    if speech.tone.is_negative:
        insights.append("Try using more positive language")

    return insights or [DEFAULT_INSIGHT]


# =============================================================================
# Engine
# =============================================================================

def generate_scores(metrics: AudioMetrics,
                    category: ScenarioCategory,
                    baseline: Optional[BaselineMetrics] = None,
                    coach_tone: CoachTone = CoachTone.GENTLE) -> FeedbackScores:
    """Audio-only scores for a finished recording."""
    profile = build_profile(category, baseline, coach_tone)
    return scores_from_audio(analyze(metrics, profile))


class FeedbackEngine:
    """
    Scores finished recordings, with optional transcript-driven analysis.

    The transcriber is an external collaborator. A TranscriptionError or a
    cancelled job falls back to audio-only scoring.
    """

    def __init__(self,
                 transcriber: Optional[Transcriber] = None,
                 transcription_enabled: bool = TRANSCRIPTION_ENABLED):
        self.transcriber = transcriber
        self.transcription_enabled = transcription_enabled

    def _transcribe(self, audio: Any) -> Optional[TranscriptionResult]:
        if not self.transcription_enabled or self.transcriber is None or audio is None:
            return None
        try:
            return TranscriptionJob(self.transcriber, audio).run()
        except TranscriptionError as e:
            logger.warning("Speech analysis failed, using audio-only: %s", e)
            return None

    def evaluate(self,
                 metrics: AudioMetrics,
                 category: ScenarioCategory,
                 baseline: Optional[BaselineMetrics] = None,
                 coach_tone: CoachTone = CoachTone.GENTLE,
                 transcription: Optional[TranscriptionResult] = None,
                 audio: Any = None,
                 sentiment: Optional[float] = None) -> FeedbackResult:
        """
        Score one recording.

        Args:
            metrics: Frozen level windows from the recorder
            category: Scenario category being rehearsed
            baseline: Optional rolling averages from recent sessions
            coach_tone: Coaching style biasing the dimension weights
            transcription: Ready transcript; when omitted the transcriber is asked
            audio: Opaque audio handle passed to the transcriber
            sentiment: Optional collaborator sentiment in [-1, 1]

        Returns:
            FeedbackResult with scores, analyses and insights
        """
        category = ScenarioCategory(category)
        coach_tone = CoachTone(coach_tone)
        profile = build_profile(category, baseline, coach_tone)
        analyzed = analyze(metrics, profile)

        if transcription is None:
            transcription = self._transcribe(audio)

        if transcription is not None and transcription.is_empty:
            logger.info("Transcript is empty, scoring from audio only")
            transcription = None

        if transcription is None:
            scores = scores_from_audio(analyzed)
            speech = None
        else:
            speech = analyze_transcript(transcription, metrics.duration, profile, sentiment)
            scores = blend_scores(analyzed, speech, profile)
            logger.info("Speech analysis complete: %d words", transcription.word_count)

        logger.info("Scores for %s (%s): %s overall=%d tier=%s", category.value, coach_tone.value,
                    scores.to_dict(), scores.overall, scores.tier.value)

        return FeedbackResult(
            scores=scores,
            analyzed=analyzed,
            profile=profile,
            coach_tone=coach_tone,
            category=category,
            speech_analysis=speech,
            transcription=transcription.text if transcription is not None else None,
            used_speech_analysis=speech is not None,
            insights=build_insights(speech, profile),
        )
