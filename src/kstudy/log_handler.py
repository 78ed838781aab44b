import logging

from .database import get_db_connection


class SQLiteHandler(logging.Handler):
    """
    A logging handler that writes log records to the ``logs`` table.
    """

    def __init__(self, path=None):
        super().__init__()
        self.path = path

    def emit(self, record):
        try:
            conn = get_db_connection(self.path)
            with conn:
                conn.execute(
                    "INSERT INTO logs (logger, level, message) VALUES (?, ?, ?)",
                    (record.name, record.levelname, self.format(record)),
                )
            conn.close()
        except Exception:
            self.handleError(record)
