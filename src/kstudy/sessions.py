import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from .errors import SessionError
from .models import AnswerRecord, Direction, Question, ResultSummary, SessionData
from .quiz import verdict

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory quiz sessions keyed by a random id, expiring after ``timeout_minutes``."""

    def __init__(self, timeout_minutes: int = 120):
        self.timeout = timedelta(minutes=timeout_minutes)
        self.sessions: Dict[str, SessionData] = {}

    def create(
        self,
        questions: List[Question],
        direction: Direction,
        mode: str,
        category: Optional[str] = None,
    ) -> str:
        new_id = str(uuid.uuid4())
        self.sessions[new_id] = SessionData(
            prepared_questions=questions,
            correct_count=0,
            total_questions=len(questions),
            answers=[],
            created_at=datetime.now(),
            direction=direction,
            mode=mode,
            category=category,
        )
        logger.info(f"New session: {new_id} [Mode: {mode}, Direction: {direction.value}, Questions: {len(questions)}]")
        return new_id

    def get(self, session_id: Optional[str]) -> Optional[SessionData]:
        if not session_id or session_id not in self.sessions:
            return None
        session = self.sessions[session_id]
        if datetime.now() - session.created_at > self.timeout:
            del self.sessions[session_id]
            return None
        return session

    def require(self, session_id: Optional[str]) -> SessionData:
        session = self.get(session_id)
        if session is None:
            raise SessionError("Session invalid")
        return session

    def discard(self, session_id: Optional[str]):
        self.sessions.pop(session_id, None)


def answer_question(session: SessionData, current_index: int, selected_option_index: int) -> AnswerRecord:
    if not 0 <= current_index < session.total_questions:
        raise SessionError("Index error", status_code=404)
    if current_index != len(session.answers):
        if current_index < len(session.answers):
            raise SessionError("Already answered", status_code=400)
        raise SessionError("Previous questions are unanswered", status_code=400)

    question = session.prepared_questions[current_index]
    if not 0 <= selected_option_index < len(question.choices):
        raise SessionError("Invalid option", status_code=400)

    user_answer = question.choices[selected_option_index]
    is_correct = user_answer == question.correct_answer
    if is_correct:
        session.correct_count += 1

    record = AnswerRecord(
        prompt=question.prompt,
        user_answer=user_answer,
        correct_answer=question.correct_answer,
        is_correct=is_correct,
    )
    session.answers.append(record)
    return record


def summarize(session: SessionData) -> ResultSummary:
    total = session.total_questions
    score = round((session.correct_count / total) * 100) if total > 0 else 0
    return ResultSummary(
        correct_count=session.correct_count,
        total_questions=total,
        score_percentage=score,
        verdict=verdict(score),
        answers=session.answers,
    )
