from rehearsal_coach.scoring import (
    AudioMetrics, FeedbackScores, ScenarioCategory, analyze, category_tips,
    generate_notes, generate_scores, interpretation, try_again_focus,
)
from rehearsal_coach.scoring.notes import NoteType, Priority


def test_zero_metrics_notes(zero_metrics):
    analyzed = analyze(zero_metrics)
    scores = generate_scores(zero_metrics, ScenarioCategory.BOUNDARIES)

    notes = generate_notes(analyzed, scores, ScenarioCategory.BOUNDARIES)

    assert [n.title for n in notes] == ["For this conversation", "Pick up the pace", "Project more"]
    assert notes[0].body == category_tips(ScenarioCategory.BOUNDARIES)[0]
    assert all(n.priority == Priority.HIGH for n in notes)


def test_notes_are_capped_and_sorted():
    # Quiet, slow and spiky: every dimension wants a note
    metrics = AudioMetrics((0.02,) * 19 + (0.9,) + (0.02,) * 19 + (0.9,), (0.9,) * 40, 12.0)
    analyzed = analyze(metrics)

    notes = generate_notes(analyzed, FeedbackScores(50, 50, 50, 50), "difficult", coaching_hint="Say it plainly.")

    assert len(notes) == 3
    assert notes[0].type == NoteType.SCENARIO
    assert notes[0].body == "Say it plainly."
    priorities = [n.priority for n in notes]
    assert priorities == sorted(priorities, reverse=True)


def test_good_scores_only_get_the_scenario_note(alternating_metrics):
    notes = generate_notes(analyze(alternating_metrics), FeedbackScores(90, 90, 90, 90), ScenarioCategory.CAREER)
    assert len(notes) == 1
    assert notes[0].to_dict() == {
        "title": "For this conversation",
        "body": "Lead with your contributions, not your needs.",
        "type": "scenario",
        "priority": "high",
    }


def test_try_again_targets_weakest_dimension():
    assert try_again_focus(FeedbackScores(50, 80, 80, 80)).goal.startswith("State your main point")
    assert try_again_focus(FeedbackScores(80, 50, 80, 80)).goal.startswith("Add a deliberate pause")
    assert try_again_focus(FeedbackScores(80, 65, 80, 80)).goal.startswith("Try speaking at 80%")
    assert try_again_focus(FeedbackScores(80, 80, 50, 80)).goal.startswith("Keep your volume steady")
    assert try_again_focus(FeedbackScores(80, 80, 80, 50)).goal.startswith("Start louder")


def test_interpretation_bands():
    assert interpretation(95) == "Excellent delivery. You sound ready."
    assert interpretation(80) == "Strong performance. Minor refinements possible."
    assert interpretation(66) == "Developing well. Keep practicing."
    assert interpretation(10) == "Let's work on the basics. One thing at a time."
