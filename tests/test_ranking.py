from __future__ import annotations

from conftest import make_entry

from kstudy.models import Direction
from kstudy.ranking import length_bonus, rank, score_entry


def test_exact_korean_match_score() -> None:
    entry = make_entry("1", "사랑", ("amour", "sentiment"))
    # exact + prefix both ways + length bonus (20 - 4) + short word
    assert score_entry(entry, "사랑", Direction.KO_FR) == 100 + 30 + 20 + 16 + 10


def test_prefix_only_score() -> None:
    entry = make_entry("2", "사랑하다", ("aimer", None))
    assert score_entry(entry, "사랑", Direction.KO_FR) == 30 + 12


def test_length_bonus_floor() -> None:
    assert length_bonus("가") == 18
    assert length_bonus("가" * 10) == 0
    assert length_bonus("가" * 15) == 0


def test_translation_bonuses_ignored_for_ko_fr() -> None:
    entry = make_entry("1", "사랑", ("amour", "amour"))
    assert score_entry(entry, "amour", Direction.KO_FR) == 16 + 10


def test_exact_translation_counted_once_partials_accumulate() -> None:
    entry = make_entry("1", "사랑", ("amour", "sentiment d'amour"), ("Amour", None))
    base = 16 + 10
    exact = 50
    first_sense = 25 + 15 + 5
    second_sense = 25 + 15
    assert score_entry(entry, "amour", Direction.FR_KO) == base + exact + first_sense + second_sense


def test_accent_insensitive_translation_match() -> None:
    entry = make_entry("1", "고르다", ("élire", None))
    # exact 50 + starts 25 + contains 15, plus length/short bonuses
    assert score_entry(entry, "ELIRE", Direction.FR_KO) == 14 + 10 + 50 + 25 + 15


def test_rank_orders_by_score() -> None:
    entries = [
        make_entry("a", "사랑하다", ("aimer", None)),
        make_entry("b", "사랑니", ("dent de sagesse", None)),
        make_entry("c", "사랑", ("amour", None)),
    ]
    ranked = rank(entries, "사랑", Direction.KO_FR)
    assert [e.target_code for e in ranked] == ["c", "b", "a"]


def test_rank_is_stable_on_ties() -> None:
    entries = [make_entry(str(i), "사과", ("pomme", None)) for i in range(5)]
    ranked = rank(entries, "사과", Direction.KO_FR)
    assert [e.target_code for e in ranked] == ["0", "1", "2", "3", "4"]


def test_rank_is_deterministic() -> None:
    entries = [
        make_entry("1", "눈", ("œil", None), ("neige", "eau gelée")),
        make_entry("2", "눈사람", ("bonhomme de neige", None)),
        make_entry("3", "첫눈", ("première neige", None)),
    ]
    first = rank(entries, "neige", Direction.FR_KO)
    second = rank(entries, "neige", Direction.FR_KO)
    assert first == second


def test_exact_headword_ranks_above_prefix_match() -> None:
    exact = make_entry("x", "바다", ("mer", None))
    prefix = make_entry("y", "바다가", ("mer", None))
    for entries in ([exact, prefix], [prefix, exact]):
        ranked = rank(entries, "바다", Direction.KO_FR)
        assert ranked[0].target_code == "x"


def test_rank_does_not_mutate_input() -> None:
    entries = [make_entry("a", "사랑하다"), make_entry("b", "사랑")]
    rank(entries, "사랑", Direction.KO_FR)
    assert [e.target_code for e in entries] == ["a", "b"]
