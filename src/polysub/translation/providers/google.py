"""Google Cloud Translation (v2 REST) adapter.

One JSON POST per batch, authenticated with the API key as a query parameter.
"""

from __future__ import annotations

import html

import httpx

from polysub.core.config import GoogleConfig
from polysub.core.models import ProviderId, TranslationBatch
from polysub.translation.outcomes import (
    ConfigurationError,
    RateLimited,
    Success,
    TranslationOutcome,
)
from polysub.translation.providers.base import TranslationProvider

RATE_LIMIT_RETRY_AFTER = 60


class GoogleProvider(TranslationProvider):
    provider_id = ProviderId.GOOGLE

    def __init__(self, config: GoogleConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client)
        self.config = config

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    async def _translate(
        self,
        batch: TranslationBatch,
        source_lang: str,
        target_lang: str,
    ) -> TranslationOutcome:
        response = await self._http_client().post(
            self.config.api_url,
            params={"key": self.config.api_key},
            json={
                "q": batch.segments,
                "source": source_lang,
                "target": target_lang,
                "format": "text",
            },
        )

        if response.status_code in (401, 403):
            return ConfigurationError(
                f"Google Translate rejected the API key (HTTP {response.status_code})"
            )
        if response.status_code == 429:
            return RateLimited(RATE_LIMIT_RETRY_AFTER)
        if not response.is_success:
            return self._error_outcome(response)

        items = response.json()["data"]["translations"]
        if len(items) != len(batch.segments):
            raise ValueError(f"expected {len(batch.segments)} translations, got {len(items)}")
        # Some deployments escape entities even for format=text
        return Success([html.unescape(str(item["translatedText"])) for item in items])
