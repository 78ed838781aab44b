from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from .config import settings
from .dependencies import (
    get_local_state,
    get_search_service,
    get_session_id,
    get_sessions,
    get_vocab,
)
from .errors import SessionError
from .models import (
    AnswerRecord,
    AnswerRequest,
    Direction,
    Entry,
    Preferences,
    QuizStartRequest,
    SearchResponse,
)
from .quiz import QuizFactory
from .search import SearchService
from .sessions import SessionStore, answer_question, summarize
from .storage import LocalState
from .vocabulary import VocabularyManager


router = APIRouter(prefix="/api")


# --- Dictionary ---
@router.get("/krdict/search", response_model=SearchResponse)
async def search(
    q: Optional[str] = Query(None),
    dir: Direction = Query(Direction.KO_FR),
    service: SearchService = Depends(get_search_service),
    state: LocalState = Depends(get_local_state),
):
    result = await service.search(q, dir)
    await state.push_history(result.query, dir)
    if dir == Direction.KO_FR:
        await state.update_fr_index(result.entries)
    return result


@router.get("/word/{q}", response_model=Entry)
async def word_detail(q: str, service: SearchService = Depends(get_search_service)):
    result = await service.search(q, Direction.KO_FR)
    if not result.entries:
        return JSONResponse({"error": "Aucun résultat trouvé pour ce mot."}, status_code=404)
    return result.entries[0]


@router.get("/fr-index")
async def fr_index(state: LocalState = Depends(get_local_state)):
    return state.fr_index()


# --- History ---
@router.get("/history")
async def get_history(state: LocalState = Depends(get_local_state)):
    return state.history()


@router.delete("/history")
async def clear_history(state: LocalState = Depends(get_local_state)):
    await state.clear_history()
    return {"status": "success"}


@router.delete("/history/{index}")
async def remove_history_item(index: int, state: LocalState = Depends(get_local_state)):
    if not await state.remove_history(index):
        return JSONResponse({"error": "Index error"}, status_code=404)
    return {"status": "success"}


# --- Favorites ---
@router.get("/favorites")
async def get_favorites(state: LocalState = Depends(get_local_state)):
    return [f.model_dump(mode="json", by_alias=True) for f in state.favorites()]


@router.post("/favorites")
async def toggle_favorite(entry: Entry, state: LocalState = Depends(get_local_state)):
    added = await state.toggle_favorite(entry)
    return {"targetCode": entry.target_code, "favorite": added}


@router.delete("/favorites/{target_code}")
async def remove_favorite(target_code: str, state: LocalState = Depends(get_local_state)):
    if not await state.remove_favorite(target_code):
        return JSONResponse({"error": "Not a favorite"}, status_code=404)
    return {"status": "success"}


# --- Preferences ---
@router.get("/preferences", response_model=Preferences)
async def get_preferences(state: LocalState = Depends(get_local_state)):
    return state.preferences()


@router.put("/preferences", response_model=Preferences)
async def set_preferences(prefs: Preferences, state: LocalState = Depends(get_local_state)):
    await state.set_preferences(prefs)
    return state.preferences()


# --- Quiz ---
@router.get("/vocabulary/categories")
async def get_categories(vocab: VocabularyManager = Depends(get_vocab)):
    return vocab.get_categories()


@router.get("/quiz/stats")
async def get_stats(state: LocalState = Depends(get_local_state)):
    stats = state.stats()
    percentage = round(stats.correct / stats.total * 100) if stats.total else 0
    return {"total": stats.total, "correct": stats.correct, "percentage": percentage}


@router.delete("/quiz/stats")
async def reset_stats(state: LocalState = Depends(get_local_state)):
    await state.reset_stats()
    return {"status": "success"}


@router.post("/quiz/start")
async def start_quiz(
    body: QuizStartRequest,
    response: Response,
    vocab: VocabularyManager = Depends(get_vocab),
    service: SearchService = Depends(get_search_service),
    state: LocalState = Depends(get_local_state),
    sessions: SessionStore = Depends(get_sessions),
):
    count = body.count if body.count is not None else settings.TEST_SIZE
    count = min(count, settings.MAX_TEST_SIZE)

    generator = QuizFactory.create(
        body.mode,
        vocab=vocab,
        search=service,
        history=state.history(),
        category=body.category,
        window=settings.HISTORY_QUIZ_WINDOW,
    )
    questions = await generator.generate(body.direction, count)
    session_id = sessions.create(questions, body.direction, body.mode, body.category)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        samesite="lax",
    )
    return {"total_questions": len(questions), "direction": body.direction, "mode": body.mode}


@router.get("/quiz/result")
async def get_result(
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
):
    session_data = sessions.require(session_id)
    return summarize(session_data)


@router.get("/quiz/{index}")
async def get_question(
    index: int,
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
):
    session_data = sessions.require(session_id)
    if not (0 <= index < session_data.total_questions):
        raise SessionError("Index error", status_code=404)

    current_q = session_data.prepared_questions[index]
    record = session_data.answers[index] if index < len(session_data.answers) else None
    return {
        "prompt": current_q.prompt,
        "choices": current_q.choices,
        "direction": current_q.direction,
        "current_index": index,
        "total_questions": session_data.total_questions,
        "score": session_data.correct_count,
        "answer_record": record,
    }


@router.post("/quiz/answer", response_model=AnswerRecord)
async def submit_answer(
    body: AnswerRequest,
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
    state: LocalState = Depends(get_local_state),
):
    session_data = sessions.require(session_id)
    record = answer_question(session_data, body.current_index, body.selected_option_index)
    if session_data.mode == "static":
        await state.record_answer(record.is_correct)
    return record


@router.post("/quiz/reset")
async def reset_session(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
):
    sessions.discard(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}
