"""Relevance scoring for dictionary results.

Scores are additive. A headword equal to the query gets the largest bonus,
then prefix relations in either direction, then a bonus for short headwords
(base forms are usually shorter than their derivatives). For French to Korean
searches the French side of each sense is scored as well.
"""

from typing import List

from .models import Direction, Entry
from .normalize import normalize


EXACT_WORD = 100
WORD_STARTS_WITH_QUERY = 30
QUERY_STARTS_WITH_WORD = 20
SHORT_WORD = 10
SHORT_WORD_MAX_LEN = 3

EXACT_TRANSLATION = 50
TRANSLATION_STARTS_WITH_QUERY = 25
TRANSLATION_CONTAINS_QUERY = 15
DEFINITION_CONTAINS_QUERY = 5


def length_bonus(word: str) -> int:
    return max(0, 20 - 2 * len(word))


def score_entry(entry: Entry, query: str, direction: Direction) -> int:
    q_norm = normalize(query)
    word_norm = normalize(entry.word)

    score = 0
    if word_norm == q_norm:
        score += EXACT_WORD
    if word_norm.startswith(q_norm):
        score += WORD_STARTS_WITH_QUERY
    if q_norm.startswith(word_norm):
        score += QUERY_STARTS_WITH_WORD
    score += length_bonus(entry.word)
    if len(entry.word) <= SHORT_WORD_MAX_LEN:
        score += SHORT_WORD

    if direction == Direction.FR_KO:
        score += _translation_score(entry, q_norm)
    return score


def _translation_score(entry: Entry, q_norm: str) -> int:
    score = 0
    # Only the first exact translation match counts
    for sense in entry.senses:
        if sense.translation and normalize(sense.translation.word or "") == q_norm:
            score += EXACT_TRANSLATION
            break

    # Partial matches accumulate over every sense
    for sense in entry.senses:
        if not sense.translation:
            continue
        trans_word = normalize(sense.translation.word or "")
        trans_def = normalize(sense.translation.definition or "")
        if trans_word.startswith(q_norm):
            score += TRANSLATION_STARTS_WITH_QUERY
        if q_norm in trans_word:
            score += TRANSLATION_CONTAINS_QUERY
        if q_norm in trans_def:
            score += DEFINITION_CONTAINS_QUERY
    return score


def rank(entries: List[Entry], query: str, direction: Direction) -> List[Entry]:
    """Order ``entries`` by descending score; equal scores keep input order."""
    scores = [score_entry(e, query, direction) for e in entries]
    order = sorted(range(len(entries)), key=lambda i: -scores[i])
    return [entries[i] for i in order]
