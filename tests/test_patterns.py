import pytest

from rehearsal_coach.scoring.patterns import (
    FILLER_PHRASES, HEDGING_PHRASES, ASSERTIVE_PHRASES, APOLOGETIC_PHRASES,
    LexicalCounts, count_phrases, matched_phrases, repeated_word_count,
    average_word_length, split_words,
)


def test_count_phrases_is_case_insensitive_substring():
    assert count_phrases("Actually, factually speaking", ("actually",)) == 2
    assert count_phrases("I THINK so, maybe", HEDGING_PHRASES) == 2


def test_count_phrases_counts_each_span_once():
    assert count_phrases("um, umm", FILLER_PHRASES) == 2
    assert count_phrases("umm", FILLER_PHRASES) == 1
    assert count_phrases("uhh... ahh", FILLER_PHRASES) == 2


def test_longer_phrase_wins_over_its_prefix():
    assert count_phrases("I'm sorry", APOLOGETIC_PHRASES) == 1
    assert LexicalCounts.from_text("I'm sorry").apologetic == 1


def test_count_phrases_with_no_phrases():
    assert count_phrases("anything", ()) == 0
    assert count_phrases("anything", ("",)) == 0


def test_matched_phrases_are_distinct_and_sorted():
    assert matched_phrases("maybe I think, maybe", HEDGING_PHRASES) == ["i think", "maybe"]


def test_repeated_word_count_ignores_short_words():
    assert repeated_word_count("the the plan plan, is is") == 2
    assert repeated_word_count("") == 0


def test_split_words_drops_empty_pieces():
    assert split_words("  one  two ") == ["one", "two"]


def test_average_word_length():
    assert average_word_length("ab abcd") == pytest.approx(3.0)
    assert average_word_length("") == 0.0


def test_lexical_counts_from_text():
    counts = LexicalCounts.from_text("I need this. I will be clear and confident")

    assert counts.word_count == 9
    assert counts.assertive == count_phrases("I need this. I will be clear and confident", ASSERTIVE_PHRASES)
    assert counts.assertive == 2
    assert counts.positive == 2
    assert counts.negative == 0
    assert counts.lexical_sentiment == pytest.approx(1.0)


def test_lexical_sentiment_is_zero_without_sentiment_words():
    assert LexicalCounts.from_text("the plan is on the table").lexical_sentiment == 0.0
    assert LexicalCounts.from_text(None).word_count == 0
