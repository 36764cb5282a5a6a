"""
Phrase dictionaries and lexical counting over transcript text.

Matching is case-insensitive substring counting on the full text, not
word-boundary tokenization: "actually" inside a longer word still counts.
Each category is scanned once with its phrases tried longest first, so
"umm" is one filler and "i'm sorry" is one apology.
"""
import re
import string
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, List, Pattern, Tuple

FILLER_PHRASES = (
    "um", "uh", "uhh", "umm", "er", "ah", "ahh",
    "like", "you know", "basically", "actually",
    "literally", "honestly", "right", "so yeah",
    "i mean", "kind of", "sort of",
)

HEDGING_PHRASES = (
    "i think", "i guess", "i feel like", "maybe",
    "probably", "might", "could be", "sort of",
    "kind of", "in a way", "it seems", "perhaps",
    "i'm not sure", "i don't know",
)

QUESTION_WORDS = ("what", "why", "how", "when", "where", "who", "which")

WEAK_OPENERS = (
    "i just", "i'm just", "sorry", "i was just",
    "i don't know if", "this might be", "i'm not sure",
)

APOLOGETIC_PHRASES = (
    "sorry", "apologize", "my fault", "excuse me",
    "forgive me", "i'm sorry",
)

ASSERTIVE_PHRASES = (
    "i need", "i want", "i will", "i expect",
    "i require", "i believe", "i'm confident",
    "it's important", "this matters",
)

INCOMPLETE_MARKERS = ("...", "um", "uh", "so", "and", "but", "or")

POSITIVE_WORDS = (
    "good", "great", "excellent", "happy", "pleased",
    "confident", "strong", "clear", "effective", "success",
)

NEGATIVE_WORDS = (
    "bad", "terrible", "worried", "anxious", "nervous",
    "weak", "unclear", "difficult", "problem", "fail",
)

CONTRACTIONS = (
    "don't", "can't", "won't", "wouldn't", "couldn't",
    "shouldn't", "isn't", "aren't", "wasn't", "weren't",
    "i'm", "you're", "we're", "they're", "it's",
)

FORMAL_PHRASES = (
    "therefore", "however", "furthermore", "consequently",
    "nevertheless", "regarding", "pertaining to",
)

_STRIP_CHARS = string.punctuation + "’‘“”"


@lru_cache(maxsize=None)
def _phrase_pattern(phrases: Tuple[str, ...]) -> Pattern[str]:
    ordered = sorted({p for p in phrases if p}, key=len, reverse=True)
    return re.compile("|".join(re.escape(p) for p in ordered))


def count_phrases(text: str, phrases: Iterable[str]) -> int:
    """Non-overlapping occurrences of any of the phrases in the lowercased text."""
    phrases = tuple(phrases)
    if not any(phrases):
        return 0
    return len(_phrase_pattern(phrases).findall(text.lower()))


def matched_phrases(text: str, phrases: Iterable[str]) -> List[str]:
    """Distinct phrases that occur at least once, sorted."""
    lowered = text.lower()
    return sorted({p for p in phrases if p and p in lowered})


def split_words(text: str) -> List[str]:
    """Split on single spaces, dropping empty pieces."""
    return [w for w in text.split(" ") if w]


def repeated_word_count(text: str) -> int:
    """Consecutive identical words longer than two characters (stammer indicator)."""
    words = [w.strip(_STRIP_CHARS) for w in split_words(text.lower())]
    return sum(1 for prev, cur in zip(words, words[1:]) if cur == prev and len(cur) > 2)


def average_word_length(text: str) -> float:
    words = split_words(text)
    if not words:
        return 0.0
    return sum(len(w) for w in words) / len(words)


@dataclass(frozen=True)
class LexicalCounts:
    """Per-category phrase counts for one transcript."""
    word_count: int = 0
    filler: int = 0
    hedging: int = 0
    question: int = 0
    weak_opener: int = 0
    apologetic: int = 0
    assertive: int = 0
    incomplete: int = 0
    positive: int = 0
    negative: int = 0
    contraction: int = 0
    formal: int = 0
    repeated: int = 0
    average_word_length: float = 0.0
    filler_words: Tuple[str, ...] = field(default_factory=tuple)
    hedging_phrases: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_text(cls, text: str) -> 'LexicalCounts':
        text = text or ""
        return cls(
            word_count=len(split_words(text)),
            filler=count_phrases(text, FILLER_PHRASES),
            hedging=count_phrases(text, HEDGING_PHRASES),
            question=count_phrases(text, QUESTION_WORDS),
            weak_opener=count_phrases(text, WEAK_OPENERS),
            apologetic=count_phrases(text, APOLOGETIC_PHRASES),
            assertive=count_phrases(text, ASSERTIVE_PHRASES),
            incomplete=count_phrases(text, INCOMPLETE_MARKERS),
            positive=count_phrases(text, POSITIVE_WORDS),
            negative=count_phrases(text, NEGATIVE_WORDS),
            contraction=count_phrases(text, CONTRACTIONS),
            formal=count_phrases(text, FORMAL_PHRASES),
            repeated=repeated_word_count(text),
            average_word_length=average_word_length(text),
            filler_words=tuple(matched_phrases(text, FILLER_PHRASES)),
            hedging_phrases=tuple(matched_phrases(text, HEDGING_PHRASES)),
        )

    @property
    def lexical_sentiment(self) -> float:
        """(positive - negative) / (positive + negative), 0 when neither occurs."""
        total = self.positive + self.negative
        if total == 0:
            return 0.0
        return (self.positive - self.negative) / total
