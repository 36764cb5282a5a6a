"""
Delivery scoring: audio analysis, transcript analysis, profiles and aggregation.
"""

from .models import AudioMetrics, TranscriptSegment, TranscriptionResult, BaselineMetrics
from .profile import (
    AudioThresholds, NlpThresholds, ScoreTuning, ScoreWeights,
    CoachTone, ScenarioCategory, ScoringProfile, build_profile,
)
from .analyzer import (
    AnalyzedMetrics, analyze, average_rms, rms_standard_deviation, spike_count,
    silence_ratio, pause_count, voiced_segments_per_minute, normalized_waveform, peak_level,
)
from .patterns import LexicalCounts, count_phrases
from .analysis import (
    ClarityAnalysis, PacingAnalysis, ConfidenceAnalysis, ToneAnalysis,
    SpeechAnalysis, analyze_transcript,
)
from .scores import FeedbackScores, FeedbackRecord, ScoreDelta, ScoreType, Tier
from .engine import FeedbackEngine, FeedbackResult, generate_scores
from .notes import CoachNote, TryAgainFocus, generate_notes, try_again_focus, category_tips, interpretation

__all__ = [
    "AudioMetrics", "TranscriptSegment", "TranscriptionResult", "BaselineMetrics",
    "AudioThresholds", "NlpThresholds", "ScoreTuning", "ScoreWeights",
    "CoachTone", "ScenarioCategory", "ScoringProfile", "build_profile",
    "AnalyzedMetrics", "analyze", "average_rms", "rms_standard_deviation", "spike_count",
    "silence_ratio", "pause_count", "voiced_segments_per_minute", "normalized_waveform", "peak_level",
    "LexicalCounts", "count_phrases",
    "ClarityAnalysis", "PacingAnalysis", "ConfidenceAnalysis", "ToneAnalysis",
    "SpeechAnalysis", "analyze_transcript",
    "FeedbackScores", "FeedbackRecord", "ScoreDelta", "ScoreType", "Tier",
    "FeedbackEngine", "FeedbackResult", "generate_scores",
    "CoachNote", "TryAgainFocus", "generate_notes", "try_again_focus", "category_tips", "interpretation",
]
