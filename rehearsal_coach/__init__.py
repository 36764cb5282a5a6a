"""
Rehearsal Coach: delivery scoring for rehearsed conversations.

Turns microphone level measurements from a timed recording, plus an optional
transcript, into clarity, pacing, tone and confidence scores with coaching
feedback.
"""

__version__ = "1.0.0"

# Main entry points
from .scoring import (
    AudioMetrics, TranscriptionResult, BaselineMetrics,
    CoachTone, ScenarioCategory, build_profile,
    FeedbackEngine, FeedbackResult, FeedbackScores, generate_scores,
)

__all__ = [
    "AudioMetrics", "TranscriptionResult", "BaselineMetrics",
    "CoachTone", "ScenarioCategory", "build_profile",
    "FeedbackEngine", "FeedbackResult", "FeedbackScores", "generate_scores",
]
