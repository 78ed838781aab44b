"""Persistent local state: history, favorites, quiz statistics and preferences.

Values live in an asynchronous key-value store. Each key is wrapped in a
:class:`PersistentState` that is read once and written on every change; a
write before the first read is refused so stored data is never overwritten
by a default.
"""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from .database import get_db_connection, init_db
from .errors import StateNotLoadedError
from .models import Direction, Entry, HistoryItem, Preferences, QuizStats

logger = logging.getLogger(__name__)


class _Marker:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return self.name


UNLOADED = _Marker("UNLOADED")
ABSENT = _Marker("ABSENT")

HISTORY_KEY = "krdict:history"
FAVORITES_KEY = "krdict:favorites"
STATS_KEY = "krdict:quiz-stats"
THEME_KEY = "krdict:theme"
DIRECTION_KEY = "krdict:direction"
FR_INDEX_KEY = "krdict:frIndex"


class KeyValueStore(ABC):
    @abstractmethod
    async def load(self, key: str) -> Any:
        """Return the stored value, or ``ABSENT``."""

    @abstractmethod
    async def save(self, key: str, value: Any) -> None:
        pass


class MemoryStore(KeyValueStore):
    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, str] = {k: json.dumps(v) for k, v in (data or {}).items()}

    async def load(self, key):
        if key not in self.data:
            return ABSENT
        return json.loads(self.data[key])

    async def save(self, key, value):
        self.data[key] = json.dumps(value)


class SQLiteStore(KeyValueStore):
    """JSON values in the ``kv`` table of the application database."""

    def __init__(self, path: Optional[str] = None):
        self.path = path

    def init(self):
        init_db(self.path)

    def _load(self, key):
        conn = get_db_connection(self.path)
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return ABSENT
        try:
            return json.loads(row["value"])
        except ValueError:
            logger.error(f"Discarding unreadable value for {key}")
            return ABSENT

    def _save(self, key, value):
        conn = get_db_connection(self.path)
        with conn:
            conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
                (key, json.dumps(value, ensure_ascii=False)),
            )
        conn.close()

    async def load(self, key):
        return await asyncio.to_thread(self._load, key)

    async def save(self, key, value):
        await asyncio.to_thread(self._save, key, value)


class PersistentState:
    """One stored value: ``UNLOADED`` until hydrated, then a value or ``ABSENT``."""

    def __init__(self, store: KeyValueStore, key: str, default: Any = None):
        self.store = store
        self.key = key
        self.default = default
        self.state: Any = UNLOADED

    @property
    def hydrated(self) -> bool:
        return self.state is not UNLOADED

    async def hydrate(self):
        if self.state is UNLOADED:
            self.state = await self.store.load(self.key)
        return self.value

    @property
    def value(self):
        if self.state is UNLOADED:
            raise StateNotLoadedError(f"{self.key} has not been loaded")
        if self.state is ABSENT:
            return self.default
        return self.state

    async def set(self, value):
        if self.state is UNLOADED:
            raise StateNotLoadedError(f"Refusing to write {self.key} before it was loaded")
        self.state = value
        await self.store.save(self.key, value)


def _now_ms() -> int:
    return int(time.time() * 1000)


class LocalState:
    """Application state shared by the API: one instance per store."""

    def __init__(self, store: KeyValueStore, history_limit: int = 50, favorites_limit: int = 200):
        self.history_limit = history_limit
        self.favorites_limit = favorites_limit
        self._history = PersistentState(store, HISTORY_KEY, [])
        self._favorites = PersistentState(store, FAVORITES_KEY, [])
        self._stats = PersistentState(store, STATS_KEY, {"total": 0, "correct": 0})
        self._theme = PersistentState(store, THEME_KEY, "light")
        self._direction = PersistentState(store, DIRECTION_KEY, Direction.KO_FR.value)
        self._fr_index = PersistentState(store, FR_INDEX_KEY, {})
        self._lock = asyncio.Lock()

    @property
    def _states(self) -> List[PersistentState]:
        return [self._history, self._favorites, self._stats, self._theme, self._direction, self._fr_index]

    async def hydrate(self):
        for state in self._states:
            await state.hydrate()

    # --- History ---
    def history(self) -> List[HistoryItem]:
        return [HistoryItem.model_validate(h) for h in self._history.value]

    async def push_history(self, query: str, direction: Direction, at: Optional[int] = None):
        item = HistoryItem(q=query, dir=direction, at=at if at is not None else _now_ms())
        async with self._lock:
            items = [item] + [h for h in self.history() if not (h.q == item.q and h.dir == item.dir)]
            await self._history.set([h.model_dump(mode="json") for h in items[: self.history_limit]])

    async def remove_history(self, index: int) -> bool:
        async with self._lock:
            items = self.history()
            if not 0 <= index < len(items):
                return False
            del items[index]
            await self._history.set([h.model_dump(mode="json") for h in items])
            return True

    async def clear_history(self):
        async with self._lock:
            await self._history.set([])

    # --- Favorites ---
    def favorites(self) -> List[Entry]:
        return [Entry.model_validate(f) for f in self._favorites.value]

    async def toggle_favorite(self, entry: Entry) -> bool:
        """Add ``entry`` or remove it if already saved. Returns the new membership."""
        async with self._lock:
            favorites = self.favorites()
            if any(f.target_code == entry.target_code for f in favorites):
                favorites = [f for f in favorites if f.target_code != entry.target_code]
                added = False
            else:
                favorites = ([entry] + favorites)[: self.favorites_limit]
                added = True
            await self._favorites.set([f.model_dump(mode="json", by_alias=True) for f in favorites])
            return added

    async def remove_favorite(self, target_code: str) -> bool:
        async with self._lock:
            favorites = self.favorites()
            kept = [f for f in favorites if f.target_code != target_code]
            if len(kept) == len(favorites):
                return False
            await self._favorites.set([f.model_dump(mode="json", by_alias=True) for f in kept])
            return True

    # --- Quiz statistics ---
    def stats(self) -> QuizStats:
        return QuizStats.model_validate(self._stats.value)

    async def record_answer(self, correct: bool) -> QuizStats:
        async with self._lock:
            stats = self.stats()
            stats.total += 1
            if correct:
                stats.correct += 1
            await self._stats.set(stats.model_dump())
            return stats

    async def reset_stats(self):
        async with self._lock:
            await self._stats.set(QuizStats().model_dump())

    # --- Preferences ---
    def preferences(self) -> Preferences:
        return Preferences(theme=self._theme.value, direction=self._direction.value)

    async def set_preferences(self, prefs: Preferences):
        async with self._lock:
            await self._theme.set(prefs.theme)
            await self._direction.set(prefs.direction.value)

    # --- French to Korean reverse index ---
    def fr_index(self) -> Dict[str, List[str]]:
        return dict(self._fr_index.value)

    async def update_fr_index(self, entries: Iterable[Entry]):
        """Map each entry's first French translation word to its Korean headword."""
        async with self._lock:
            index = {k: list(v) for k, v in self.fr_index().items()}
            for entry in entries:
                if not entry.senses or entry.senses[0].translation is None:
                    continue
                word = entry.senses[0].translation.word
                if not word:
                    continue
                fr = word.strip().lower()
                known = index.setdefault(fr, [])
                if entry.word not in known:
                    known.append(entry.word)
            await self._fr_index.set(index)
