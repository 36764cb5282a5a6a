"""
Session history: past results per scenario category.

Feeds personalization (rolling baselines over recent sessions) and trend
display (delta against the previous session).
"""
import json
import logging
import os
import time
import uuid
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional

import numpy as np

from ...config import BASELINE_SESSION_COUNT
from ...scoring.engine import FeedbackResult
from ...scoring.models import BaselineMetrics
from ...scoring.profile import ScenarioCategory
from ...scoring.scores import FeedbackRecord, FeedbackScores, ScoreDelta

logger = logging.getLogger("session_history")


@dataclass
class SessionRecord:
    """One completed rehearsal and the measurements baselines are built from."""
    category: str
    scores: Dict[str, int]
    duration: float = 0.0
    segments_per_minute: Optional[float] = None
    average_level: Optional[float] = None
    silence_ratio: Optional[float] = None
    volume_stability: Optional[float] = None
    words_per_minute: Optional[float] = None
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: float = field(default_factory=time.time)

    @classmethod
    def from_result(cls, result: FeedbackResult) -> 'SessionRecord':
        analyzed = result.analyzed
        wpm = None
        if result.speech_analysis is not None:
            wpm = result.speech_analysis.pacing.words_per_minute
        return cls(
            category=result.category.value,
            scores=FeedbackRecord.from_scores(result.scores).model_dump(mode="json"),
            duration=analyzed.duration,
            segments_per_minute=analyzed.segments_per_minute,
            average_level=analyzed.average_level,
            silence_ratio=analyzed.silence_ratio,
            volume_stability=analyzed.volume_stability,
            words_per_minute=wpm,
        )

    @property
    def feedback_scores(self) -> FeedbackScores:
        return FeedbackScores.from_dict(self.scores)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionRecord':
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


def _mean_of(records: List[SessionRecord], attr: str) -> Optional[float]:
    values = [getattr(r, attr) for r in records if getattr(r, attr) is not None]
    if not values:
        return None
    return float(np.mean(values))


class SessionHistory:
    """In-memory session store, newest last, optionally backed by a JSON file."""

    def __init__(self, records: Optional[List[SessionRecord]] = None):
        self.records: List[SessionRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self.records)

    def add(self, record: SessionRecord) -> SessionRecord:
        self.records.append(record)
        logger.debug("Added session %s (%s)", record.session_id, record.category)
        return record

    def add_result(self, result: FeedbackResult) -> SessionRecord:
        return self.add(SessionRecord.from_result(result))

    def sessions_for(self, category: ScenarioCategory) -> List[SessionRecord]:
        category = ScenarioCategory(category).value
        matching = [r for r in self.records if r.category == category]
        return sorted(matching, key=lambda r: r.created_at)

    def baseline(self, category: ScenarioCategory,
                 limit: int = BASELINE_SESSION_COUNT) -> Optional[BaselineMetrics]:
        """
        Average the most recent sessions for a category.

        Args:
            category: Scenario category
            limit: How many of the most recent sessions to average

        Returns:
            BaselineMetrics, or None when the category has no sessions
        """
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        recent = self.sessions_for(category)[-limit:]
        if not recent:
            return None
        baseline = BaselineMetrics(
            segments_per_minute=_mean_of(recent, "segments_per_minute"),
            average_level=_mean_of(recent, "average_level"),
            silence_ratio=_mean_of(recent, "silence_ratio"),
            volume_stability=_mean_of(recent, "volume_stability"),
            words_per_minute=_mean_of(recent, "words_per_minute"),
        )
        logger.info("Baseline for %s over %d sessions: %s", ScenarioCategory(category).value, len(recent), baseline)
        return baseline

    def previous_scores(self, category: ScenarioCategory) -> Optional[FeedbackScores]:
        sessions = self.sessions_for(category)
        return sessions[-1].feedback_scores if sessions else None

    def delta_from_previous(self, scores: FeedbackScores, category: ScenarioCategory) -> Optional[ScoreDelta]:
        """Change against the latest stored session of the same category."""
        return scores.delta(self.previous_scores(category))

    def to_dict(self) -> Dict[str, Any]:
        return {"sessions": [r.to_dict() for r in self.records]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionHistory':
        return cls([SessionRecord.from_dict(d) for d in data.get("sessions", [])])

    def save(self, path: str) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info("Saved %d sessions to %s", len(self.records), path)

    @classmethod
    def load(cls, path: str) -> 'SessionHistory':
        """Load from disk; a missing file yields an empty history."""
        if not os.path.exists(path):
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        history = cls.from_dict(data)
        logger.info("Loaded %d sessions from %s", len(history), path)
        return history
