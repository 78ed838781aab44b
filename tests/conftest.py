from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

import pytest

from kstudy.config import Settings
from kstudy.models import Entry, LookupResult, Sense, Translation
from kstudy.search import SearchService


def make_entry(code: str, word: str, *senses: Tuple[Optional[str], Optional[str]]) -> Entry:
    """Entry with one sense per ``(translation word, translation definition)`` pair."""
    return Entry(
        target_code=code,
        word=word,
        senses=tuple(
            Sense(order=str(i + 1), definition=f"{word} 뜻 {i + 1}", translation=Translation(word=w, definition=d))
            for i, (w, d) in enumerate(senses)
        ),
    )


class FakeKrdict:
    """Scripted upstream: results keyed by ``(query, part, method)``; anything else is an empty success."""

    def __init__(self, results: Optional[Dict[Tuple[str, str, str], LookupResult]] = None):
        self.results = results or {}
        self.calls: List[Tuple[str, str, str]] = []

    async def lookup(self, query, part="word", method="include"):
        self.calls.append((query, part, method))
        return self.results.get((query, part, method), LookupResult(ok=True, status=200, entries=[]))


class FakeTranslator:
    def __init__(self, answers: Optional[Dict[str, str]] = None):
        self.answers = answers or {}
        self.calls: List[str] = []

    async def translate(self, text):
        self.calls.append(text)
        return self.answers.get(text)


@pytest.fixture
def settings() -> Settings:
    s = Settings()
    s.KRDICT_API_KEY = "test-key"
    s.KRDICT_BASE_URL = "https://krdict.test/api/search"
    s.TRANSLATE_URL = "https://mt.test/get"
    return s


@pytest.fixture
def krdict() -> FakeKrdict:
    return FakeKrdict()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def service(settings, krdict, translator) -> SearchService:
    return SearchService(settings, krdict, translator)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
