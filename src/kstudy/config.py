import os


class Settings:
    PROJECT_NAME: str = "kstudy"
    DEBUG: bool = False
    LOG_DIR: str = "log"
    LOG_FILE: str = "kstudy.log"
    LOG_TO_DB: bool = os.environ.get("LOG_TO_DB", "0") == "1"
    DB_DIR: str = "db"
    DB_FILE: str = "kstudy.db"
    VOCAB_DIR: str = "vocabulary"
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")

    # Upstream dictionary (KRDict open API)
    KRDICT_API_KEY: str = os.environ.get("KRDICT_API_KEY", "")
    KRDICT_BASE_URL: str = os.environ.get(
        "KRDICT_BASE_URL", "https://krdict.korean.go.kr/api/search"
    )
    KRDICT_RESULT_LIMIT: int = 30
    KRDICT_SORT: str = "dict"
    KRDICT_TRANS_LANG: str = "3"  # French
    TRANSLATE_URL: str = os.environ.get(
        "TRANSLATE_URL", "https://api.mymemory.translated.net/get"
    )
    HTTP_TIMEOUT: float = float(os.environ.get("HTTP_TIMEOUT", "10"))
    MIN_QUERY_LENGTH: int = 2

    # Quiz
    TEST_SIZE: int = 10
    MAX_TEST_SIZE: int = 50
    HISTORY_QUIZ_WINDOW: int = 5
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120

    # Local state
    HISTORY_LIMIT: int = 50
    FAVORITES_LIMIT: int = 200


settings = Settings()
