from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Direction(str, Enum):
    KO_FR = "ko-fr"
    FR_KO = "fr-ko"


# --- Dictionary entries ---
class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Translation(_Frozen):
    lang: Optional[str] = None
    word: Optional[str] = None
    definition: Optional[str] = None


class Sense(_Frozen):
    order: Optional[str] = None
    definition: Optional[str] = None
    translation: Optional[Translation] = None


class Entry(_Frozen):
    target_code: str
    word: str
    pos: Optional[str] = None
    origin: Optional[str] = None
    pronunciation: Optional[str] = None
    link: Optional[str] = None
    senses: Tuple[Sense, ...] = ()


class Attribution(_Frozen):
    source: str
    license: str
    license_url: str


ATTRIBUTION = Attribution(
    source="한국어기초사전 (KRDict) Open API",
    license="CC BY-SA 2.0 KR",
    license_url="http://ccl.cckorea.org",
)


class SearchResponse(_Frozen):
    query: str
    direction: Direction
    count: int
    entries: List[Entry]
    attribution: Attribution = ATTRIBUTION


# --- Local state ---
class HistoryItem(BaseModel):
    q: str
    dir: Direction
    at: int  # epoch milliseconds


class QuizStats(BaseModel):
    total: int = 0
    correct: int = 0


class Preferences(BaseModel):
    theme: str = Field("light", pattern="^(light|dark)$")
    direction: Direction = Direction.KO_FR


# --- Quiz ---
class Question(BaseModel):
    prompt: str
    correct_answer: str
    choices: List[str]
    direction: Direction


class AnswerRecord(BaseModel):
    prompt: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    attempted: bool = True


class SessionData(BaseModel):
    prepared_questions: List[Question]
    correct_count: int
    total_questions: int
    answers: List[AnswerRecord]
    created_at: datetime
    direction: Direction
    mode: str = "static"
    category: Optional[str] = None


class QuizStartRequest(BaseModel):
    mode: str = "static"
    direction: Direction = Direction.KO_FR
    count: Optional[int] = Field(None, ge=1)
    category: Optional[str] = None


class AnswerRequest(BaseModel):
    selected_option_index: int
    current_index: int


class ResultSummary(BaseModel):
    correct_count: int
    total_questions: int
    score_percentage: int
    verdict: str
    answers: List[AnswerRecord]


# --- Upstream and vocabulary ---
class LookupResult(BaseModel):
    """Outcome of one upstream call. ``ok`` is False on any transport failure."""

    ok: bool
    status: Optional[int] = None
    entries: List[Entry] = []


class VocabItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    ko: str
    fr: str
    category: str = ""
