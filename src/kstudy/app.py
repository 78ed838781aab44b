import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .database import db_path, init_db
from .errors import KStudyError
from .globals import vocab_manager
from .krdict import KrdictClient
from .log_handler import SQLiteHandler
from .router import router
from .search import SearchService
from .storage import LocalState, SQLiteStore
from .translator import TranslationClient

logger = logging.getLogger("kstudy")


# --- Logging Setup ---
def setup_logging():
    logger.setLevel(logging.INFO)

    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    if settings.LOG_TO_DB and not any(isinstance(h, SQLiteHandler) for h in logger.handlers):
        init_db()
        db_handler = SQLiteHandler(db_path())
        db_handler.setFormatter(formatter)
        logger.addHandler(db_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    vocab_manager.load_all()

    store = SQLiteStore(db_path())
    store.init()
    local_state = LocalState(store, settings.HISTORY_LIMIT, settings.FAVORITES_LIMIT)
    await local_state.hydrate()

    http = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)
    app.state.local_state = local_state
    app.state.search_service = SearchService(
        settings, KrdictClient(settings, http), TranslationClient(settings, http)
    )
    if not settings.KRDICT_API_KEY:
        logger.warning("KRDICT_API_KEY is not set; dictionary searches will fail.")
    yield
    await http.aclose()


# --- Error handlers ---
async def kstudy_error_handler(request: Request, exc: KStudyError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path}: {exc.message}")
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.url.path}", exc_info=exc)
    return JSONResponse({"error": "Unexpected server error"}, status_code=500)


# --- App Factory ---
def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    app.add_exception_handler(KStudyError, kstudy_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(router)

    return app
