import logging
from typing import Optional

import httpx

from .config import Settings

logger = logging.getLogger(__name__)


class TranslationClient:
    """Best-effort French to Korean machine translation (MyMemory).

    ``translate`` returns ``None`` whenever no usable translation exists,
    including when the service echoes the input back unchanged.
    """

    langpair = "fr|ko"

    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.http = http or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)

    async def translate(self, text: str) -> Optional[str]:
        try:
            resp = await self.http.get(
                self.settings.TRANSLATE_URL,
                params={"q": text, "langpair": self.langpair},
                timeout=self.settings.HTTP_TIMEOUT,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Translation error: {e!r}")
            return None

        if not resp.is_success:
            logger.warning(f"Translation API error: {resp.status_code}")
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Translation API returned a non-JSON body")
            return None
        if not isinstance(data, dict) or data.get("responseStatus") != 200:
            return None

        translated = (data.get("responseData") or {}).get("translatedText")
        if not isinstance(translated, str) or not translated:
            return None
        # The service returns the query itself when it cannot translate it
        if translated.lower() == text.lower():
            return None
        return translated

    async def aclose(self):
        await self.http.aclose()
