"""
Coaching notes, the single try-again focus, and score interpretation.

At most three notes are returned per session so feedback stays brief.
"""
from dataclasses import dataclass, asdict
from enum import Enum, IntEnum
from typing import Dict, List, Optional

from .analyzer import AnalyzedMetrics
from .profile import ScenarioCategory
from .scores import FeedbackScores, ScoreType

MAX_NOTES = 3


class NoteType(str, Enum):
    SCENARIO = "scenario"
    PACING = "pacing"
    INTENSITY = "intensity"
    GENERAL = "general"


class Priority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


@dataclass(frozen=True)
class CoachNote:
    title: str
    body: str
    type: NoteType
    priority: Priority = Priority.MEDIUM

    def to_dict(self) -> Dict[str, str]:
        data = asdict(self)
        data["type"] = self.type.value
        data["priority"] = self.priority.name.lower()
        return data


@dataclass(frozen=True)
class TryAgainFocus:
    """One specific goal for the next attempt."""
    goal: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


CATEGORY_TIPS = {
    ScenarioCategory.BOUNDARIES: [
        "State your boundary clearly, without apologizing.",
        "Use 'I need' instead of 'I think' or 'Maybe'.",
        "Silence after your boundary is okay. Let it land.",
    ],
    ScenarioCategory.CAREER: [
        "Lead with your contributions, not your needs.",
        "Use specific numbers and examples when possible.",
        "End with a clear ask and wait for a response.",
    ],
    ScenarioCategory.RELATIONSHIPS: [
        "Share how you feel, not what they did wrong.",
        "Use 'I' statements throughout.",
        "Leave space for their response.",
    ],
    ScenarioCategory.DIFFICULT: [
        "Say the hard part first. Don't bury the lede.",
        "Be direct but not harsh.",
        "Acknowledge that this is difficult.",
    ],
}


def category_tips(category: ScenarioCategory) -> List[str]:
    return list(CATEGORY_TIPS[ScenarioCategory(category)])


def interpretation(overall: int) -> str:
    """Brief reading of an overall score."""
    if overall >= 90:
        return "Excellent delivery. You sound ready."
    if overall >= 80:
        return "Strong performance. Minor refinements possible."
    if overall >= 70:
        return "Good foundation. Focus on consistency."
    if overall >= 60:
        return "Developing well. Keep practicing."
    if overall >= 50:
        return "Room to grow. Try again with the focus below."
    return "Let's work on the basics. One thing at a time."


def _pacing_note(metrics: AnalyzedMetrics, score: int) -> Optional[CoachNote]:
    if score >= 80:
        return None
    priority = Priority.HIGH if score < 60 else Priority.MEDIUM

    if metrics.is_pacing_too_fast:
        return CoachNote("Slow down slightly",
                         "Try adding a breath between thoughts. Let your words land before moving on.",
                         NoteType.PACING, priority)
    if metrics.is_pacing_too_slow:
        return CoachNote("Pick up the pace",
                         "Keep the momentum going while being deliberate. "
                         "Silence is okay, but don't lose your listener.",
                         NoteType.PACING, priority)
    if metrics.pause_count < 2 and metrics.duration > 30:
        return CoachNote("Add strategic pauses",
                         "Pauses after key points give them impact. Try pausing right after your main ask.",
                         NoteType.PACING, Priority.MEDIUM)
    return None


def _tone_note(metrics: AnalyzedMetrics, score: int) -> Optional[CoachNote]:
    if score >= 80:
        return None
    priority = Priority.HIGH if score < 60 else Priority.MEDIUM

    if metrics.has_too_many_spikes:
        return CoachNote("Smooth out intensity spikes",
                         "Try to stay even, especially on key points. Calm is powerful.",
                         NoteType.INTENSITY, priority)
    if metrics.has_inconsistent_volume:
        return CoachNote("Aim for consistency",
                         "Steady volume throughout sounds more assured. Pick a level and hold it.",
                         NoteType.INTENSITY, Priority.MEDIUM)
    return None


def _confidence_note(metrics: AnalyzedMetrics, score: int) -> Optional[CoachNote]:
    if score >= 75:
        return None
    if metrics.is_too_quiet:
        return CoachNote("Project more",
                         "Imagine you're speaking to someone across a table. A bit louder sounds more confident.",
                         NoteType.GENERAL, Priority.HIGH)
    if metrics.has_too_much_silence:
        return CoachNote("Fill the space",
                         "It's okay to pause and think, but keep moving forward. Own the conversation.",
                         NoteType.GENERAL, Priority.MEDIUM)
    return None


def generate_notes(metrics: AnalyzedMetrics, scores: FeedbackScores,
                   category: ScenarioCategory, coaching_hint: Optional[str] = None) -> List[CoachNote]:
    """
    Build up to three coaching notes, highest priority first.

    Args:
        metrics: Analyzed audio for the session
        scores: Final feedback scores
        category: Scenario category (supplies the default hint)
        coaching_hint: Scenario-specific hint; the first category tip when omitted

    Returns:
        List of CoachNote, never more than three
    """
    hint = coaching_hint or category_tips(category)[0]
    notes = [CoachNote("For this conversation", hint, NoteType.SCENARIO, Priority.HIGH)]

    for note in (_pacing_note(metrics, scores.pacing),
                 _tone_note(metrics, scores.tone),
                 _confidence_note(metrics, scores.confidence)):
        if note is not None:
            notes.append(note)

    notes.sort(key=lambda n: n.priority, reverse=True)
    return notes[:MAX_NOTES]


def try_again_focus(scores: FeedbackScores) -> TryAgainFocus:
    """One goal aimed at the weakest dimension."""
    weakness = scores.primary_weakness
    if weakness == ScoreType.CLARITY:
        return TryAgainFocus("State your main point in the first sentence.",
                             "Opening with clarity sets up everything that follows.")
    if weakness == ScoreType.PACING:
        if scores.pacing < 60:
            return TryAgainFocus("Add a deliberate pause after your key ask.",
                                 "Pauses give weight to what you just said.")
        return TryAgainFocus("Try speaking at 80% of your natural speed.",
                             "Slightly slower sounds more confident and controlled.")
    if weakness == ScoreType.TONE:
        return TryAgainFocus("Keep your volume steady throughout.",
                             "Consistent tone signals calm control.")
    return TryAgainFocus("Start louder than feels natural.",
                         "We often underestimate how quiet we sound to others.")
