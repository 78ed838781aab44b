from typing import Optional

from fastapi import Cookie, Request

from .config import settings
from .globals import session_store, vocab_manager
from .search import SearchService
from .sessions import SessionStore
from .storage import LocalState
from .vocabulary import VocabularyManager


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def get_local_state(request: Request) -> LocalState:
    return request.app.state.local_state


def get_vocab() -> VocabularyManager:
    return vocab_manager


def get_sessions() -> SessionStore:
    return session_store


def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id
