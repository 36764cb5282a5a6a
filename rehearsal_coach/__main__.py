#!/usr/bin/env python3
"""
Main entry point for the rehearsal coach.
Scores a recorded session with: python -m rehearsal_coach session.json

Session file format:
    {
      "category": "career",
      "metrics": {"rms_windows": [...], "peak_windows": [...], "duration": 12.0},
      "transcript": {"text": "...", "segments": [{"text", "timestamp", "duration", "confidence"}]},
      "sentiment": 0.2,
      "coaching_hint": "..."
    }
Only "metrics" is required.
"""
import json
import math
import sys

from .config import WAVEFORM_SAMPLE_COUNT, get_config
from .utils import setup_logging
from .scoring import (
    AudioMetrics, TranscriptionResult, ScenarioCategory, CoachTone,
    FeedbackEngine, ScoreType, generate_notes, try_again_focus, interpretation,
)
from .scoring.analyzer import normalized_waveform, downsample_waveform
from .infrastructure.data import SessionHistory

USAGE = ("Usage: python -m rehearsal_coach session.json "
         "[--category=boundaries|career|relationships|difficult] "
         "[--tone=gentle|direct|executive] [--history=path.json] [--json]")


def _fail(message: str):
    print(f"❌ {message}")
    sys.exit(1)


def _load_session(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        _fail(f"Session file not found: {path}")
    except json.JSONDecodeError as e:
        _fail(f"Session file is not valid JSON: {e}")
    if not isinstance(data, dict) or not isinstance(data.get("metrics"), dict):
        _fail("Session file must be an object with a 'metrics' object")
    return data


def main():
    """Command-line interface for scoring one rehearsal session."""

    # Load configuration from environment
    try:
        config = get_config()
    except ValueError as e:
        _fail(f"Configuration Error: {e}")

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 1 or "--help" in sys.argv or "-h" in sys.argv:
        print(USAGE)
        sys.exit(0 if "--help" in sys.argv or "-h" in sys.argv else 1)

    session = _load_session(args[0])
    category = session.get("category", ScenarioCategory.BOUNDARIES.value)
    tone = config.coach_tone
    history_path = None
    as_json = False

    for arg in sys.argv[1:]:
        if arg.startswith("--category="):
            category = arg.split("=", 1)[1]
        elif arg.startswith("--tone="):
            tone = arg.split("=", 1)[1]
        elif arg.startswith("--history="):
            history_path = arg.split("=", 1)[1]
        elif arg == "--json":
            as_json = True

    try:
        category = ScenarioCategory(category)
    except ValueError:
        _fail(f"Unknown category '{category}'. Use one of: {', '.join(c.value for c in ScenarioCategory)}")
    try:
        tone = CoachTone(tone)
    except ValueError:
        _fail(f"Unknown coach tone '{tone}'. Use one of: {', '.join(t.value for t in CoachTone)}")
    sentiment = session.get("sentiment")
    if sentiment is not None and (isinstance(sentiment, bool) or not isinstance(sentiment, (int, float))
                                  or not math.isfinite(sentiment)):
        _fail(f"Sentiment must be a number between -1 and 1, got {sentiment!r}")

    setup_logging(config.log_file, config.log_level)

    history = SessionHistory.load(history_path) if history_path else SessionHistory()
    baseline = history.baseline(category, config.baseline_session_count)

    transcript = None
    if config.transcription_enabled and isinstance(session.get("transcript"), dict):
        transcript = TranscriptionResult.from_dict(session["transcript"])

    metrics = AudioMetrics.from_dict(session["metrics"])
    engine = FeedbackEngine(transcription_enabled=config.transcription_enabled)
    result = engine.evaluate(metrics, category, baseline=baseline, coach_tone=tone,
                             transcription=transcript, sentiment=sentiment)

    scores = result.scores
    delta = history.delta_from_previous(scores, category)
    notes = generate_notes(result.analyzed, scores, category, session.get("coaching_hint"))
    focus = try_again_focus(scores)

    if history_path:
        history.add_result(result)
        history.save(history_path)

    if as_json:
        output = result.to_dict()
        output["interpretation"] = interpretation(scores.overall)
        output["notes"] = [n.to_dict() for n in notes]
        output["try_again"] = focus.to_dict()
        output["delta"] = delta.to_dict() if delta else None
        output["waveform"] = downsample_waveform(normalized_waveform(metrics), WAVEFORM_SAMPLE_COUNT)
        print(json.dumps(output, indent=2))
        return

    print(f"🎯 Overall: {scores.overall} ({scores.tier.display_name})")
    print(f"   {interpretation(scores.overall)}")
    for score_type in ScoreType:
        line = f"   {score_type.display_name:<11} {scores.score(score_type):>3}"
        if delta:
            line += f"  ({delta.formatted(getattr(delta, score_type.value))})"
        print(line)
    print(f"💪 Strength: {scores.weighted_strength(result.profile.weights).display_name}"
          f"   📈 Focus area: {scores.weighted_weakness(result.profile.weights).display_name}")
    print(f"   {scores.weighted_weakness(result.profile.weights).explanation}")
    print("📝 Coach notes:")
    for note in notes:
        print(f"   • {note.title}: {note.body}")
    print(f"🔁 Try again: {focus.goal} {focus.reason}")
    for insight in result.insights:
        print(f"💡 {insight}")


if __name__ == "__main__":
    main()
