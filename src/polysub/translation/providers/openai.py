"""LLM chat-completion adapter (OpenAI and any LiteLLM-compatible model).

The whole batch goes out as one JSON array; the model is asked for a JSON array
of the same length. Responses are parsed leniently and always fitted to the
input length, with untranslated slots falling back to the source text.
"""

from __future__ import annotations

from polysub.core.config import LLMConfig
from polysub.core.languages import language_name
from polysub.core.models import ProviderId, TranslationBatch
from polysub.llm.client import LLMRequestError, complete
from polysub.llm.prompts import (
    TRANSLATION_SYSTEM,
    TRANSLATION_USER,
    format_history_context,
    format_json_segments,
    parse_json_array_response,
)
from polysub.translation.outcomes import (
    ConfigurationError,
    RateLimited,
    ServiceError,
    Success,
    TranslationOutcome,
)
from polysub.translation.providers.base import TranslationProvider
from polysub.utils.console import console

DEFAULT_RETRY_AFTER = 60


class OpenAIProvider(TranslationProvider):
    provider_id = ProviderId.OPENAI

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(client=None)
        self.config = config

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key or self.config.api_base)

    async def _translate(
        self,
        batch: TranslationBatch,
        source_lang: str,
        target_lang: str,
    ) -> TranslationOutcome:
        messages = build_messages(batch, source_lang, target_lang)

        try:
            response = await complete(messages, self.config)
        except LLMRequestError as e:
            return self._request_error(e)
        except ImportError as e:
            return ConfigurationError(str(e), api_calls=0)

        if not response.strip():
            console.print(
                f"[yellow]{self.name} returned an empty response, keeping the source text[/yellow]"
            )
            return Success(list(batch.segments))

        texts, exact_match = parse_json_array_response(response, len(batch.segments))
        if not exact_match:
            console.print(
                f"[yellow]{self.name} returned a mismatched translation list "
                f"({len(batch.segments)} expected), using best-effort parse[/yellow]"
            )
        translations = [
            text if text.strip() else source for text, source in zip(texts, batch.segments)
        ]
        return Success(translations)

    def _request_error(self, error: LLMRequestError) -> TranslationOutcome:
        status = error.status_code
        if status is None:
            return ServiceError(f"{self.name} request failed: {error}", is_retryable=True, cause=error)
        if status == 401:
            return ConfigurationError(f"{self.name} rejected the API key (HTTP 401)")
        if status == 429:
            return RateLimited(error.retry_after or DEFAULT_RETRY_AFTER)
        return ServiceError(
            f"{self.name} returned HTTP {status}: {error}",
            is_retryable=status >= 500,
            cause=error,
        )


def build_messages(
    batch: TranslationBatch,
    source_lang: str,
    target_lang: str,
) -> list[dict[str, str]]:
    """Build the chat messages for one batch, including its translated context."""
    source_name = language_name(source_lang)
    target_name = language_name(target_lang)
    context = format_history_context(
        [pair.original for pair in batch.context_prefix],
        [pair.translated for pair in batch.context_prefix],
    )
    return [
        {
            "role": "system",
            "content": TRANSLATION_SYSTEM.format(source_lang=source_name, target_lang=target_name),
        },
        {
            "role": "user",
            "content": TRANSLATION_USER.format(
                count=len(batch.segments),
                source_lang=source_name,
                target_lang=target_name,
                context=context,
                segments=format_json_segments(batch.segments),
            ),
        },
    ]
