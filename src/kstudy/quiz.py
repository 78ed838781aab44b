import asyncio
import logging
import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple, TypeVar

from .errors import InsufficientDataError, UpstreamError, ValidationError
from .models import Direction, Entry, HistoryItem, Question
from .search import SearchService
from .vocabulary import VocabularyManager

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATIC_CHOICES = 4
HISTORY_CHOICES = 3
MIN_HISTORY_ITEMS = 3
MIN_HISTORY_PAIRS = 3
MIN_HISTORY_QUESTIONS = 2

_DIRECTION_LABELS = {Direction.KO_FR: "KO→FR", Direction.FR_KO: "FR→KO"}


def shuffled(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly random permutation of ``items`` as a new list.

    Fisher-Yates: walk from the last index down to 1 and swap each slot
    with a random slot at or below it.
    """
    rng = rng or random
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randrange(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


def pick_distractors(
    correct: str, candidates: Sequence[str], k: int, rng: Optional[random.Random] = None
) -> List[str]:
    """Up to ``k`` distinct wrong answers drawn at random from ``candidates``."""
    distinct = list(dict.fromkeys(c for c in candidates if c and c != correct))
    return shuffled(distinct, rng)[:k]


def verdict(percentage: int) -> str:
    if percentage == 100:
        return "Parfait ! Tu maîtrises ce vocabulaire !"
    if percentage >= 70:
        return "Excellent travail, continue comme ça !"
    if percentage >= 50:
        return "Pas mal ! Entraîne-toi encore."
    return "Continue à réviser, tu vas progresser !"


# --- Strategy Pattern: Quiz Generators ---
class QuizGenerator(ABC):
    """Abstract Base Class for different quiz generation strategies."""

    choice_count: int = STATIC_CHOICES

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @abstractmethod
    async def generate(self, direction: Direction, count: int) -> List[Question]:
        pass

    def _build_question(
        self, prompt: str, correct: str, wrong_pool: Sequence[str], direction: Direction
    ) -> Optional[Question]:
        wrong = pick_distractors(correct, wrong_pool, self.choice_count - 1, self.rng)
        if len(wrong) < self.choice_count - 1:
            return None
        return Question(
            prompt=prompt,
            correct_answer=correct,
            choices=shuffled([correct] + wrong, self.rng),
            direction=direction,
        )


class StaticQuizGenerator(QuizGenerator):
    """Draws questions without replacement from the bundled vocabulary."""

    choice_count = STATIC_CHOICES

    def __init__(self, vocab: VocabularyManager, category: Optional[str] = None, rng: Optional[random.Random] = None):
        super().__init__(rng)
        self.vocab = vocab
        self.category = category

    async def generate(self, direction: Direction, count: int) -> List[Question]:
        pool = self.vocab.get_words(self.category)
        if not pool:
            raise ValidationError(f"Unknown vocabulary category: {self.category}")

        def target(item):
            return item.fr if direction == Direction.KO_FR else item.ko

        targets = [target(item) for item in pool if target(item)]
        if len(set(targets)) < self.choice_count:
            raise InsufficientDataError("Pas assez de mots différents pour construire un quiz.")

        selected = shuffled(pool, self.rng)[: max(0, min(count, len(pool)))]
        questions = []
        for item in selected:
            prompt = item.ko if direction == Direction.KO_FR else item.fr
            if not prompt or not target(item):
                continue
            question = self._build_question(prompt, target(item), targets, direction)
            if question is not None:
                questions.append(question)
        return questions


def french_term(entry: Entry) -> str:
    """French side of an entry's primary sense: the translation word, else its gloss."""
    if not entry.senses or entry.senses[0].translation is None:
        return ""
    tr = entry.senses[0].translation
    return tr.word or tr.definition or ""


class HistoryQuizGenerator(QuizGenerator):
    """Builds a short quiz from the learner's most recent searches."""

    choice_count = HISTORY_CHOICES

    def __init__(
        self,
        search: SearchService,
        history: Sequence[HistoryItem],
        window: int = 5,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(rng)
        self.search = search
        self.history = history
        self.window = window

    async def generate(self, direction: Direction, count: int = 0) -> List[Question]:
        recent = [h for h in self.history if h.dir == direction][: self.window]
        if len(recent) < MIN_HISTORY_ITEMS:
            raise InsufficientDataError(
                f"Fais au moins {MIN_HISTORY_ITEMS} recherches {_DIRECTION_LABELS[direction]} pour lancer le quiz."
            )

        resolved = await asyncio.gather(*(self._resolve(h.q) for h in recent))

        # One (Korean, French) pair per history item, from its top entry
        pool: List[Tuple[str, str]] = []
        for entries in resolved:
            if not entries:
                continue
            main = entries[0]
            fr = french_term(main)
            if main.word and fr:
                pool.append((main.word, fr))
        if len(pool) < MIN_HISTORY_PAIRS:
            raise InsufficientDataError("Pas assez de traductions disponibles pour le quiz.")

        questions = []
        for ko, fr in pool:
            if direction == Direction.KO_FR:
                question = self._build_question(ko, fr, [p[1] for p in pool], direction)
            else:
                question = self._build_question(fr, ko, [p[0] for p in pool], direction)
            if question is not None:
                questions.append(question)

        if len(questions) < MIN_HISTORY_QUESTIONS:
            raise InsufficientDataError("Pas assez de questions valides. Fais plus de recherches !")
        return questions

    async def _resolve(self, query: str) -> List[Entry]:
        try:
            result = await self.search.search(query, Direction.KO_FR)
        except (ValidationError, UpstreamError) as e:
            logger.warning(f"Could not resolve history item {query!r}: {e.message}")
            return []
        return result.entries


class QuizFactory:
    """Factory to select the appropriate generator."""

    @staticmethod
    def create(
        mode: str,
        vocab: Optional[VocabularyManager] = None,
        search: Optional[SearchService] = None,
        history: Sequence[HistoryItem] = (),
        category: Optional[str] = None,
        window: int = 5,
        rng: Optional[random.Random] = None,
    ) -> QuizGenerator:
        if mode == "static":
            return StaticQuizGenerator(vocab, category=category, rng=rng)
        if mode == "history":
            return HistoryQuizGenerator(search, history, window=window, rng=rng)
        raise ValidationError(f"Unknown quiz mode: {mode}")
