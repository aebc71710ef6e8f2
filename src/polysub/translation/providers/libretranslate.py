"""LibreTranslate (self-hosted REST translator) adapter.

LibreTranslate has no multi-text endpoint, so every text unit of a batch is a
separate POST /translate request.
"""

from __future__ import annotations

from dataclasses import replace

import httpx

from polysub.core.config import LibreTranslateConfig
from polysub.core.models import ProviderId, TranslationBatch
from polysub.translation.outcomes import RateLimited, Success, TranslationOutcome
from polysub.translation.providers.base import TranslationProvider, retry_after

DEFAULT_RETRY_AFTER = 30


class LibreTranslateProvider(TranslationProvider):
    provider_id = ProviderId.LIBRETRANSLATE

    def __init__(self, config: LibreTranslateConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client)
        self.config = config

    @property
    def is_configured(self) -> bool:
        return bool(self.config.url)

    async def _translate(
        self,
        batch: TranslationBatch,
        source_lang: str,
        target_lang: str,
    ) -> TranslationOutcome:
        client = self._http_client()
        url = f"{self.config.url.rstrip('/')}/translate"
        translations = []

        for text in batch.segments:
            payload = {"q": text, "source": source_lang, "target": target_lang, "format": "text"}
            if self.config.api_key:
                payload["api_key"] = self.config.api_key

            response = await client.post(url, json=payload)
            calls = len(translations) + 1
            if response.status_code == 429:
                return RateLimited(retry_after(response, default=DEFAULT_RETRY_AFTER), api_calls=calls)
            if not response.is_success:
                return replace(self._error_outcome(response), api_calls=calls)

            translations.append(str(response.json()["translatedText"]))

        return Success(translations, api_calls=len(batch.segments))
