import logging
from typing import List, Optional

from .config import Settings
from .errors import ConfigurationError, UpstreamError, ValidationError
from .krdict import (
    METHOD_EXACT,
    METHOD_INCLUDE,
    PART_TRANS_DFN,
    PART_TRANS_WORD,
    PART_WORD,
    KrdictClient,
)
from .models import Direction, Entry, LookupResult, SearchResponse, Sense
from .normalize import normalize
from .ranking import rank
from .translator import TranslationClient

logger = logging.getLogger(__name__)


def validate_query(raw: Optional[str], min_length: int = 2) -> str:
    q = (raw or "").strip()
    if not q:
        raise ValidationError("missing query")
    if len(q) < min_length:
        raise ValidationError("query too short")
    return q


def _sense_mentions(sense: Sense, q_norm: str) -> bool:
    tr = sense.translation
    if tr is None:
        return False
    return q_norm in normalize(tr.word or "") or q_norm in normalize(tr.definition or "")


def filter_senses(entries: List[Entry], query: str) -> List[Entry]:
    """Keep only the senses whose French side mentions ``query``.

    An entry where no sense matches keeps its full sense list. Entries that
    have no senses at all are dropped.
    """
    q_norm = normalize(query)
    filtered = []
    for entry in entries:
        matched = tuple(s for s in entry.senses if _sense_mentions(s, q_norm))
        senses = matched or entry.senses
        if not senses:
            continue
        filtered.append(entry.model_copy(update={"senses": senses}))
    return filtered


def dedupe(entries: List[Entry]) -> List[Entry]:
    seen = set()
    unique = []
    for entry in entries:
        if entry.target_code in seen:
            continue
        seen.add(entry.target_code)
        unique.append(entry)
    return unique


class SearchService:
    """Resolves a query against KRDict in either direction and ranks the result."""

    def __init__(self, settings: Settings, krdict: KrdictClient, translator: TranslationClient):
        self.settings = settings
        self.krdict = krdict
        self.translator = translator

    async def search(self, raw_query: Optional[str], direction: Direction = Direction.KO_FR) -> SearchResponse:
        q = validate_query(raw_query, self.settings.MIN_QUERY_LENGTH)
        if not self.settings.KRDICT_API_KEY:
            raise ConfigurationError("Missing KRDICT_API_KEY (check the environment and restart the server)")

        if direction == Direction.KO_FR:
            entries = await self._search_ko_fr(q)
        else:
            entries = await self._search_fr_ko(q)

        return SearchResponse(query=q, direction=direction, count=len(entries), entries=entries)

    async def _search_ko_fr(self, q: str) -> List[Entry]:
        r = await self.krdict.lookup(q, PART_WORD, METHOD_INCLUDE)
        if not r.ok:
            raise UpstreamError(r.status)
        return rank(r.entries, q, Direction.KO_FR)

    async def _search_fr_ko(self, q: str) -> List[Entry]:
        r = await self._cascade(q)
        if not r.entries and not r.ok:
            raise UpstreamError(r.status)

        entries = dedupe(filter_senses(r.entries, q))
        return rank(entries, q, Direction.FR_KO)

    async def _cascade(self, q: str) -> LookupResult:
        """Try each lookup strategy in turn until one returns entries.

        Returns the last attempted lookup.
        """
        r = await self.krdict.lookup(q, PART_TRANS_WORD, METHOD_INCLUDE)
        if r.entries:
            return r

        r = await self.krdict.lookup(q, PART_TRANS_DFN, METHOD_INCLUDE)
        if r.entries:
            return r

        logger.info(f"No KRDict results for {q!r}, trying machine translation")
        korean = await self.translator.translate(q)
        if not korean:
            logger.info(f"No translation available for {q!r}")
            return r
        logger.info(f"Translated {q!r} -> {korean!r}")

        r = await self.krdict.lookup(korean, PART_WORD, METHOD_INCLUDE)
        if r.entries:
            return r
        return await self.krdict.lookup(korean, PART_WORD, METHOD_EXACT)
