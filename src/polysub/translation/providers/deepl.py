"""DeepL (commercial neural MT) adapter.

One form-encoded POST /v2/translate per batch. Keys ending in ":fx" belong to
the free plan and must use the api-free host.
"""

from __future__ import annotations

from dataclasses import replace

import httpx

from polysub.core.config import DeepLConfig
from polysub.core.languages import deepl_language_code
from polysub.core.models import ProviderId, TranslationBatch
from polysub.translation.outcomes import (
    ConfigurationError,
    RateLimited,
    ServiceError,
    Success,
    TranslationOutcome,
)
from polysub.translation.providers.base import TranslationProvider

FREE_API_URL = "https://api-free.deepl.com/v2"
PRO_API_URL = "https://api.deepl.com/v2"
MAX_TEXTS_PER_REQUEST = 50
RATE_LIMIT_RETRY_AFTER = 60


class DeepLProvider(TranslationProvider):
    provider_id = ProviderId.DEEPL

    def __init__(self, config: DeepLConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client)
        self.config = config

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    @property
    def base_url(self) -> str:
        if self.config.api_url:
            return self.config.api_url.rstrip("/")
        return FREE_API_URL if self.config.api_key.endswith(":fx") else PRO_API_URL

    async def _translate(
        self,
        batch: TranslationBatch,
        source_lang: str,
        target_lang: str,
    ) -> TranslationOutcome:
        client = self._http_client()
        context = " ".join(pair.translated for pair in batch.context_prefix if pair.translated)
        translations: list[str] = []
        calls = 0

        # Batches built for another provider may exceed DeepL's per-request cap
        for i in range(0, len(batch.segments), MAX_TEXTS_PER_REQUEST):
            texts = batch.segments[i : i + MAX_TEXTS_PER_REQUEST]
            data: dict[str, str | list[str]] = {
                "text": texts,
                "source_lang": deepl_language_code(source_lang),
                "target_lang": deepl_language_code(target_lang, target=True),
            }
            if context:
                data["context"] = context

            response = await client.post(
                f"{self.base_url}/translate",
                data=data,
                headers={"Authorization": f"DeepL-Auth-Key {self.config.api_key}"},
            )
            calls += 1
            if not response.is_success:
                return replace(self._deepl_error(response), api_calls=calls)

            items = response.json()["translations"]
            if len(items) != len(texts):
                raise ValueError(f"expected {len(texts)} translations, got {len(items)}")
            translations.extend(str(item["text"]) for item in items)

        return Success(translations, api_calls=calls)

    def _deepl_error(self, response: httpx.Response) -> TranslationOutcome:
        status = response.status_code
        if status == 403:
            return ConfigurationError("DeepL rejected the API key (HTTP 403)")
        if status == 413:
            return ServiceError("DeepL request payload too large (HTTP 413)", is_retryable=False)
        if status == 456:
            return ServiceError("DeepL character quota exceeded (HTTP 456)", is_retryable=False)
        if status in (429, 529):
            return RateLimited(RATE_LIMIT_RETRY_AFTER)
        return self._error_outcome(response)
