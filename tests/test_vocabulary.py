from __future__ import annotations

from pathlib import Path

from kstudy.vocabulary import VocabularyManager

BUNDLED = Path(__file__).resolve().parents[1] / "vocabulary"


def test_loads_bundled_list() -> None:
    vocab = VocabularyManager(str(BUNDLED))
    vocab.load_all()

    words = vocab.get_words()
    assert len(words) > 500
    assert all(w.ko and w.fr for w in words)
    greetings = {w.ko: w.fr for w in vocab.get_words("salutations")}
    assert greetings["감사합니다"] == "Merci"


def test_categories_are_counted() -> None:
    vocab = VocabularyManager(str(BUNDLED))
    vocab.load_all()
    categories = {c["id"]: c["count"] for c in vocab.get_categories()}
    assert sum(categories.values()) == len(vocab.get_words())
    assert categories["couleurs"] > 0


def test_csv_without_category_uses_file_name(tmp_path) -> None:
    (tmp_path / "animaux.csv").write_text("ko,fr\n개,Chien\n고양이,Chat\n", encoding="utf-8")
    (tmp_path / "broken.csv").write_text("korean,french\n개,Chien\n", encoding="utf-8")
    vocab = VocabularyManager(str(tmp_path))
    vocab.load_all()
    assert [(w.ko, w.category) for w in vocab.get_words()] == [("개", "animaux"), ("고양이", "animaux")]


def test_missing_directory(tmp_path) -> None:
    vocab = VocabularyManager(str(tmp_path / "nowhere"))
    vocab.load_all()
    assert vocab.get_words() == []


def test_blank_cells_are_dropped(tmp_path) -> None:
    (tmp_path / "base.csv").write_text(
        "ko,fr\n사과,pomme\n바다,mer\n학교,école\n물, \n,eau\n  불  ,  feu  \n", encoding="utf-8"
    )
    vocab = VocabularyManager(str(tmp_path))
    vocab.load_all()
    assert [(w.ko, w.fr) for w in vocab.get_words()] == [
        ("사과", "pomme"),
        ("바다", "mer"),
        ("학교", "école"),
        ("불", "feu"),
    ]
