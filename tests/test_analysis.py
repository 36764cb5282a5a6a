import pytest

from rehearsal_coach.scoring import TranscriptionResult, TranscriptSegment
from rehearsal_coach.scoring.analysis import (
    ClarityAnalysis, PacingAnalysis, ConfidenceAnalysis, ToneAnalysis,
    analyze_transcript, detect_pauses,
)
from rehearsal_coach.scoring.scores import round_half_away


def _segments(*spans):
    """Build segments from (text, start, duration) triples."""
    return tuple(TranscriptSegment(text, start, duration, 0.9) for text, start, duration in spans)


def test_scores_are_clamped_for_extreme_counts():
    assert ClarityAnalysis(filler_word_count=10_000, repeated_word_count=10_000,
                           incomplete_sentence_count=10_000,
                           low_confidence_segment_count=10_000).score() == 15
    assert PacingAnalysis(words_per_minute=10_000.0).score() == 0
    assert PacingAnalysis(words_per_minute=140.0, long_pauses=10_000).score() == 0
    assert ConfidenceAnalysis(assertive_phrase_count=10_000).score() == 95
    assert 0 <= ToneAnalysis(sentiment_score=50.0, positive_word_count=10_000).score() <= 100


def test_negative_counts_are_treated_as_zero():
    assert ClarityAnalysis(filler_word_count=-5).score() == ClarityAnalysis().score()
    assert ConfidenceAnalysis(assertive_phrase_count=-5).score() == ConfidenceAnalysis().score()


def test_filler_penalty_is_monotonic_and_saturates():
    scores = [ClarityAnalysis(filler_word_count=n).score() for n in range(0, 25)]

    assert all(later <= earlier for earlier, later in zip(scores, scores[1:]))
    assert scores[0] == 85
    assert scores[10] == 55
    assert scores[24] == 55


def test_average_word_length_bonus():
    assert ClarityAnalysis(average_word_length=5.5).score() == 90
    assert ClarityAnalysis(average_word_length=5.0).score() == 85


def test_optimal_band_bonus():
    in_band = PacingAnalysis(words_per_minute=140.0).score()
    outside = PacingAnalysis(words_per_minute=110.0).score()
    assert in_band == 90
    assert in_band - outside == 10


def test_pacing_penalties_truncate():
    assert PacingAnalysis(words_per_minute=93.0).score() == 79
    assert PacingAnalysis(words_per_minute=199.0).score() == 77


def test_pacing_pause_rules():
    assert PacingAnalysis(words_per_minute=140.0, duration=31.0).score() == 80
    assert PacingAnalysis(words_per_minute=140.0, total_pause_count=5, long_pauses=5, duration=31.0).score() == 84
    assert PacingAnalysis(words_per_minute=110.0, total_pause_count=2, medium_pauses=2).score() == 85


def test_score_is_idempotent(default_profile):
    analysis = ConfidenceAnalysis(hedging_phrase_count=3, question_word_count=2, total_word_count=10)
    assert analysis.score(default_profile) == analysis.score(default_profile)


def test_question_ratio():
    assert ConfidenceAnalysis(question_word_count=3).question_ratio == 0.0
    analysis = ConfidenceAnalysis(question_word_count=2, total_word_count=10)
    assert analysis.question_ratio == pytest.approx(0.2)
    assert analysis.score() == 75


def test_confidence_penalties_cap():
    analysis = ConfidenceAnalysis(hedging_phrase_count=10, weak_opener_count=10, apologetic_phrase_count=10)
    assert analysis.score() == 80 - 24 - 15 - 15


def test_tone_sentiment():
    assert ToneAnalysis().score() == 75
    assert ToneAnalysis(sentiment_score=1.0).score() == 90
    assert ToneAnalysis(sentiment_score=-1.0).score() == 60
    assert ToneAnalysis(sentiment_score=4.0).sentiment_score == 1.0
    assert ToneAnalysis(sentiment_score=-0.5).is_negative


def test_tone_modifiers():
    assert ToneAnalysis(positive_word_count=3).score() == 80
    assert ToneAnalysis(negative_word_count=3).score() == 70
    assert ToneAnalysis(formal_phrase_count=2).score() == 80
    assert ToneAnalysis(formal_phrase_count=6).score() == 70
    assert ToneAnalysis(contraction_count=3).score() == 80


def test_detect_pauses_uses_gap_threshold():
    transcription = TranscriptionResult("one two three four", _segments(
        ("one", 0.0, 0.3), ("two", 0.5, 0.3), ("three", 2.0, 0.3), ("four", 5.0, 0.2),
    ))

    pauses = detect_pauses(transcription, 0.3)

    assert [p.word_before for p in pauses] == ["two", "three"]
    assert pauses[0].duration == pytest.approx(1.2)
    assert pauses[1].duration == pytest.approx(2.7)


def test_pacing_from_transcript_buckets_pauses():
    transcription = TranscriptionResult("a b c d e", _segments(
        ("a", 0.0, 0.2), ("b", 0.7, 0.2), ("c", 2.4, 0.2), ("d", 5.0, 0.2), ("e", 5.3, 0.2),
    ))

    pacing = PacingAnalysis.from_transcript(transcription, duration=6.0)

    assert pacing.total_word_count == 5
    assert pacing.words_per_minute == pytest.approx(50.0)
    assert (pacing.short_pauses, pacing.medium_pauses, pacing.long_pauses) == (1, 1, 1)
    assert pacing.total_pause_count == 3


def test_short_duration_uses_minimum_minutes():
    transcription = TranscriptionResult("hello there")
    pacing = PacingAnalysis.from_transcript(transcription, duration=0.0)
    assert pacing.words_per_minute == pytest.approx(20.0)


def test_analyze_transcript_builds_every_dimension():
    transcription = TranscriptionResult(
        "Um, I think maybe we should talk",
        (TranscriptSegment("um", 0.0, 0.2, 0.3), TranscriptSegment("talk", 0.4, 0.2, 0.95)),
    )

    speech = analyze_transcript(transcription, duration=3.0)

    assert speech.clarity.low_confidence_segment_count == 1
    assert speech.clarity.filler_word_count >= 1
    assert speech.confidence.hedging_phrase_count == 2
    assert speech.tone.sentiment_score == 0.0
    scores = speech.generate_scores()
    assert scores.clarity == speech.clarity.score()
    assert scores.pacing == speech.pacing.score()


def test_collaborator_sentiment_overrides_lexical():
    transcription = TranscriptionResult("this is a great plan")
    assert analyze_transcript(transcription, 2.0).tone.sentiment_score == pytest.approx(1.0)
    assert analyze_transcript(transcription, 2.0, sentiment=-0.4).tone.sentiment_score == pytest.approx(-0.4)


def test_ratios_and_sentiment_flags():
    assert ClarityAnalysis(filler_word_count=3, total_word_count=12).filler_ratio == pytest.approx(0.25)
    assert ClarityAnalysis(filler_word_count=3).filler_ratio == 0.0
    assert ToneAnalysis(sentiment_score=0.4).is_positive
    assert not ToneAnalysis(sentiment_score=0.1).is_positive


def test_sentiment_ties_round_away_from_zero():
    # 1/6 * 15 lands exactly on 2.5
    assert ToneAnalysis(sentiment_score=1 / 6).score() == 78
    assert ToneAnalysis(sentiment_score=-1 / 6).score() == 72
    assert ToneAnalysis(sentiment_score=0.5).score() == 83


@pytest.mark.parametrize("value, expected", [
    (2.5, 3), (-2.5, -3), (0.5, 1), (-0.5, -1), (2.4, 2), (-2.6, -3), (0.0, 0),
])
def test_round_half_away(value, expected):
    assert round_half_away(value) == expected


def test_apology_counts_once_in_confidence():
    confidence = ConfidenceAnalysis.from_transcript(TranscriptionResult("I'm sorry"))

    assert confidence.apologetic_phrase_count == 1
    assert confidence.weak_opener_count == 1
    assert confidence.score() == 70


def test_long_filler_counts_once_in_clarity():
    assert ClarityAnalysis.from_transcript(TranscriptionResult("umm")).filler_word_count == 1
