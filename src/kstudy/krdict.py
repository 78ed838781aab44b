import logging
from typing import Optional

import httpx
from lxml import etree

from .config import Settings
from .krdict_xml import parse_krdict_xml
from .models import LookupResult

logger = logging.getLogger(__name__)

# Search field selectors
PART_WORD = "word"
PART_TRANS_WORD = "trans_word"
PART_TRANS_DFN = "trans_dfn"

# Match modes
METHOD_INCLUDE = "include"
METHOD_EXACT = "exact"


class KrdictClient:
    """Issues search requests against the KRDict open API.

    ``lookup`` never raises; callers branch on ``LookupResult.ok``.
    """

    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.http = http or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)

    def build_params(self, query: str, part: str, method: str) -> dict:
        return {
            "key": self.settings.KRDICT_API_KEY,
            "q": query,
            "part": part,
            "method": method,
            "num": str(self.settings.KRDICT_RESULT_LIMIT),
            "sort": self.settings.KRDICT_SORT,
            "advanced": "y",
            "translated": "y",
            "trans_lang": self.settings.KRDICT_TRANS_LANG,
        }

    async def lookup(self, query: str, part: str = PART_WORD, method: str = METHOD_INCLUDE) -> LookupResult:
        logger.info(f"Calling KRDict [q={query!r}, part={part}, method={method}]")
        try:
            resp = await self.http.get(
                self.settings.KRDICT_BASE_URL,
                params=self.build_params(query, part, method),
                timeout=self.settings.HTTP_TIMEOUT,
            )
        except httpx.HTTPError as e:
            logger.warning(f"KRDict unreachable: {e!r}")
            return LookupResult(ok=False)

        if not resp.is_success:
            logger.warning(f"KRDict responded {resp.status_code}")
            return LookupResult(ok=False, status=resp.status_code)

        try:
            entries = parse_krdict_xml(resp.content)
        except etree.XMLSyntaxError as e:
            logger.error(f"Malformed KRDict response: {e}")
            return LookupResult(ok=False, status=resp.status_code)
        return LookupResult(ok=True, status=resp.status_code, entries=entries)

    async def aclose(self):
        await self.http.aclose()
