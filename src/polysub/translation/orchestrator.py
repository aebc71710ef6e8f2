"""Per-batch provider fallback with rate-limit backoff."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from polysub.core.models import ProviderId, TranslationBatch
from polysub.translation.outcomes import (
    RateLimited,
    ServiceError,
    Success,
    TranslationError,
)
from polysub.translation.providers.base import TranslationProvider
from polysub.translation.rate_limit import RateLimitTracker
from polysub.utils.console import console

Sleep = Callable[[float], Awaitable[None]]
# (provider, delay in ms, reason), called before every backoff sleep
WaitCallback = Callable[[TranslationProvider, int, str], None]


@dataclass(frozen=True)
class BatchResult:
    translations: list[str]
    provider_id: ProviderId


class FallbackOrchestrator:
    """Drives the fallback order for the batches of one session.

    The current provider position only moves forward: once a provider is
    skipped, later batches of the same session start from the provider that
    replaced it and never go back to the primary.

    Per attempt:
    - Success: reset the provider's tracker, return. A Success whose length
      differs from the batch counts as a non-retryable ServiceError.
    - RateLimited / retryable ServiceError: back off via the tracker and retry
      the same provider.
    - Non-retryable ServiceError / ConfigurationError: move to the next provider.
    - Tracker says give up: skip the provider without calling it.
    """

    def __init__(
        self,
        providers: list[TranslationProvider],
        trackers: dict[ProviderId, RateLimitTracker],
        sleep: Sleep = asyncio.sleep,
        on_wait: WaitCallback | None = None,
    ) -> None:
        self.providers = providers
        self.trackers = trackers
        self._sleep = sleep
        self._on_wait = on_wait
        self._index = 0
        self.api_calls = 0
        self.providers_used: list[ProviderId] = []

    @property
    def current_provider(self) -> TranslationProvider | None:
        if self._index < len(self.providers):
            return self.providers[self._index]
        return None

    async def translate(
        self,
        batch: TranslationBatch,
        source_lang: str,
        target_lang: str,
    ) -> BatchResult:
        """Translate one batch with the first provider that succeeds.

        Raises:
            TranslationError: Every remaining provider failed for this batch.
                Carries the most recent failure.
        """
        last_error: TranslationError | None = None

        while self._index < len(self.providers):
            provider = self.providers[self._index]
            tracker = self.trackers[provider.provider_id]

            if tracker.should_give_up():
                console.print(
                    f"[yellow]Skipping {provider.name}: too many consecutive failures[/yellow]"
                )
                if last_error is None:
                    last_error = TranslationError(
                        provider.provider_id,
                        True,
                        f"{provider.name} failed too many times in a row",
                    )
                self._index += 1
                continue

            outcome = await provider.translate_batch(batch, source_lang, target_lang)
            self.api_calls += outcome.api_calls

            if isinstance(outcome, Success) and len(outcome.translations) != len(batch.segments):
                outcome = ServiceError(
                    f"{provider.name} returned {len(outcome.translations)} translations "
                    f"for {len(batch.segments)} segments",
                    is_retryable=False,
                    api_calls=outcome.api_calls,
                )

            if isinstance(outcome, Success):
                tracker.record_success()
                if provider.provider_id not in self.providers_used:
                    self.providers_used.append(provider.provider_id)
                return BatchResult(outcome.translations, provider.provider_id)

            last_error = TranslationError.from_outcome(outcome, provider.provider_id)

            if isinstance(outcome, RateLimited):
                delay_ms = tracker.record_failure(outcome.retry_after_seconds)
                await self._wait(provider, delay_ms, f"Rate limited by {provider.name}")
                continue

            if isinstance(outcome, ServiceError) and outcome.is_retryable:
                delay_ms = tracker.record_failure()
                await self._wait(provider, delay_ms, f"{provider.name} error: {outcome.message}")
                continue

            console.print(f"[yellow]{provider.name} failed:[/yellow] {last_error.user_message}")
            self._index += 1
            if self.current_provider is not None:
                console.print(f"[yellow]Falling back to {self.current_provider.name}[/yellow]")

        if last_error is None:
            last_error = TranslationError(None, False, "No translation provider is available")
        raise last_error

    async def _wait(self, provider: TranslationProvider, delay_ms: int, reason: str) -> None:
        console.print(f"[yellow]{reason}, waiting {delay_ms / 1000:.1f}s...[/yellow]")
        if self._on_wait:
            self._on_wait(provider, delay_ms, reason)
        await self._sleep(delay_ms / 1000)
