"""Common contract for translation provider adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx

from polysub.core.models import BatchConfig, ProviderId, TranslationBatch
from polysub.translation.batching import BATCH_CONFIGS
from polysub.translation.outcomes import (
    ConfigurationError,
    RateLimited,
    ServiceError,
    TranslationOutcome,
)


class TranslationProvider(ABC):
    """A remote translation backend.

    Subclasses implement _translate() for their wire format. translate_batch()
    wraps it so that no exception escapes: transport failures become retryable
    ServiceErrors and unparseable responses become non-retryable ones.
    """

    provider_id: ProviderId

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self.client = client

    @property
    def name(self) -> str:
        return self.provider_id.display_name

    @property
    def batch_config(self) -> BatchConfig:
        return BATCH_CONFIGS[self.provider_id]

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the credentials/endpoint this provider needs are present."""

    async def translate_batch(
        self,
        batch: TranslationBatch,
        source_lang: str,
        target_lang: str,
    ) -> TranslationOutcome:
        """Translate every text unit of a batch, in order."""
        if not self.is_configured:
            return ConfigurationError(f"{self.name} is not configured", api_calls=0)
        try:
            return await self._translate(batch, source_lang, target_lang)
        except httpx.RequestError as e:
            return ServiceError(
                f"{self.name} request failed: {type(e).__name__}: {e}",
                is_retryable=True,
                cause=e,
            )
        except (ValueError, KeyError, TypeError, IndexError) as e:
            # json.JSONDecodeError is a ValueError
            return ServiceError(
                f"Unexpected response from {self.name}: {e}",
                is_retryable=False,
                cause=e,
            )

    @abstractmethod
    async def _translate(
        self,
        batch: TranslationBatch,
        source_lang: str,
        target_lang: str,
    ) -> TranslationOutcome: ...

    def _http_client(self) -> httpx.AsyncClient:
        if self.client is None:
            raise RuntimeError(f"{self.name} needs an HTTP client")
        return self.client

    def _error_outcome(self, response: httpx.Response) -> TranslationOutcome:
        """Default status mapping: 429 rate limited, 5xx retryable, rest fatal."""
        if response.status_code == 429:
            return RateLimited(retry_after(response, default=60))
        return ServiceError(
            f"{self.name} returned HTTP {response.status_code}: {_snippet(response)}",
            is_retryable=response.status_code >= 500,
        )


def retry_after(response: httpx.Response, default: int | None) -> int | None:
    """Parse a Retry-After header given in seconds, falling back to default."""
    value = response.headers.get("Retry-After")
    if value is None:
        return default
    try:
        seconds = int(value.strip())
    except ValueError:
        return default  # HTTP-date form is not worth supporting here
    return seconds if seconds > 0 else default


def _snippet(response: httpx.Response, limit: int = 200) -> str:
    text = response.text.strip()
    return text[:limit] if text else response.reason_phrase
