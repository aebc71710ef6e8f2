"""Translation sessions and the process-wide Translator service.

A Translator owns the state that outlives a single request (segment cache,
one rate-limit tracker per provider, glossary, last stats). Every call to
Translator.translate() runs a fresh TranslationSession. Empty and same-language
sources are returned unchanged; anything else is checked for warnings (see
validation.py) and then goes through:

1. bulk cache lookup, splitting segments into cached and uncached
2. cache-only short circuit
3. formatting extraction, then glossary masking, of the uncached texts
4. batching against the primary provider's limits
5. sequential batch translation through the fallback orchestrator
6. glossary resolution, then formatting restoration
7. cache write
8. reassembly in original segment order
9. statistics

The finished translation is checked once more for segments that came back
unchanged.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field

import httpx

from polysub.core.config import PolySubConfig
from polysub.core.events import ProgressCallback, TranslationProgress
from polysub.core.languages import language_name
from polysub.core.models import (
    Glossary,
    ProviderId,
    SubtitleSource,
    TranslatedContext,
    TranslationStats,
)
from polysub.translation import formatting
from polysub.translation.batching import build_batches, with_context
from polysub.translation.cache import SegmentCache
from polysub.translation.formatting import Restore
from polysub.translation.glossary import GlossaryEngine
from polysub.translation.orchestrator import FallbackOrchestrator, Sleep
from polysub.translation.outcomes import TranslationError
from polysub.translation.providers import build_providers, fallback_order
from polysub.translation.providers.base import TranslationProvider
from polysub.translation.rate_limit import RateLimitTracker
from polysub.translation.validation import (
    NO_CONTENT_MESSAGE,
    check_output,
    check_source,
    has_content,
)
from polysub.utils.console import console

PREPARED_PROGRESS = 0.05
BATCHES_DONE_PROGRESS = 0.95


@dataclass
class _PreparedText:
    """An uncached source text on its way through the pipeline."""

    original: str
    masked: str
    restore: Restore
    glossary_replacements: dict[str, str] = field(default_factory=dict)


class TranslationSession:
    """One translation request. Create, run once, discard."""

    def __init__(
        self,
        providers: list[TranslationProvider],
        cache: SegmentCache,
        trackers: dict[ProviderId, RateLimitTracker],
        glossary: Glossary | None = None,
        sleep: Sleep = asyncio.sleep,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        if not providers:
            raise TranslationError(None, False, "No translation provider is available")
        self.providers = providers
        self.primary = providers[0]
        self.cache = cache
        self.trackers = trackers
        self.glossary = glossary
        self._sleep = sleep
        self._on_progress = on_progress
        self._percentage = 0.0

    def _emit(self, percentage: float, message: str, data: dict | None = None) -> None:
        # Percentages never go backwards
        self._percentage = max(self._percentage, min(percentage, 1.0))
        if self._on_progress:
            self._on_progress(TranslationProgress(self._percentage, message, data))

    async def run(
        self,
        source: SubtitleSource,
        target_language: str,
    ) -> tuple[SubtitleSource, TranslationStats]:
        """Translate a subtitle source.

        Raises:
            TranslationError: Every provider failed for some batch.
            asyncio.CancelledError: The calling task was cancelled. Nothing is
                cached for a cancelled session.
        """
        started = time.monotonic()
        source_lang = source.language
        primary_id = self.primary.provider_id
        self._emit(0.0, "Starting translation...")

        skip_message = None
        if not has_content(source):
            skip_message = NO_CONTENT_MESSAGE
        elif source_lang.lower() == target_language.lower():
            skip_message = (
                f"Source and target language are both {language_name(source_lang).title()}. "
                "No translation needed."
            )
        if skip_message:
            self._emit(1.0, skip_message)
            stats = TranslationStats(
                total_segments=len(source.entries),
                duration_ms=_elapsed_ms(started),
                provider_used=primary_id,
            )
            return SubtitleSource(list(source.entries), target_language), stats

        self._warn(check_source(source))

        # Step 1: partition by a single bulk cache lookup
        translatable = _unique([e.text for e in source.entries if e.text.strip()])
        cached = self.cache.get_multiple(translatable, source_lang, target_language, primary_id)
        uncached = [text for text in translatable if text not in cached]
        cached_segments = sum(1 for e in source.entries if e.text in cached)

        # Step 2: everything cached
        if not uncached:
            result = self._reassemble(source, target_language, cached)
            stats = TranslationStats(
                total_segments=len(source.entries),
                cached_segments=cached_segments,
                duration_ms=_elapsed_ms(started),
                provider_used=primary_id,
            )
            self._emit(
                1.0,
                f"Translation complete ({cached_segments} segments from cache)",
                self._output_warnings(source, result),
            )
            return result, stats

        # Step 3: formatting, then glossary
        engine = GlossaryEngine(self.glossary, source_lang, target_language)
        prepared = []
        for text in uncached:
            masked, restore = formatting.extract(text)
            masked, replacements = engine.apply_pre(masked)
            prepared.append(_PreparedText(text, masked, restore, replacements))
        self._emit(
            PREPARED_PROGRESS,
            f"Prepared {len(prepared)} segments for translation "
            f"({cached_segments} from cache)",
        )

        # Step 4: batches sized for the primary provider
        config = self.primary.batch_config
        batches = build_batches([p.masked for p in prepared], config)

        # Step 5: one batch at a time
        orchestrator = FallbackOrchestrator(
            self.providers, self.trackers, sleep=self._sleep, on_wait=self._on_wait
        )
        translated: list[str] = []
        produced_by: list[ProviderId] = []
        history: list[TranslatedContext] = []

        for number, batch in enumerate(batches, 1):
            batch = with_context(batch, history, config)
            try:
                result = await orchestrator.translate(batch, source_lang, target_language)
            except TranslationError as e:
                provider = e.provider_id.display_name if e.provider_id else "translation"
                self._emit(self._percentage, f"Translation failed ({provider}): {e.user_message}")
                raise

            translated.extend(result.translations)
            produced_by.extend([result.provider_id] * len(batch.segments))
            history.extend(
                TranslatedContext(original, translation)
                for original, translation in zip(batch.segments, result.translations)
            )
            history = history[-max(config.context_segments, 1) :]

            progress = PREPARED_PROGRESS + (BATCHES_DONE_PROGRESS - PREPARED_PROGRESS) * (
                number / len(batches)
            )
            self._emit(
                progress,
                f"Translated batch {number}/{len(batches)}",
                {"batch": number, "total": len(batches), "provider": result.provider_id.value},
            )

        # Step 6: glossary placeholders first, then formatting markup
        fresh: dict[str, str] = {}
        for item, text in zip(prepared, translated):
            text = engine.apply_post(text, item.glossary_replacements)
            text = item.restore(text)
            if formatting.has_placeholders(text):
                console.print(f"[yellow]Unresolved placeholder in translation:[/yellow] {text}")
            fresh[item.original] = text

        # Step 7: cache under the provider that produced each translation
        by_provider: dict[ProviderId, dict[str, str]] = {}
        for item, provider_id in zip(prepared, produced_by):
            by_provider.setdefault(provider_id, {})[item.original] = fresh[item.original]
        for provider_id, translations in by_provider.items():
            self.cache.put_multiple(translations, source_lang, target_language, provider_id)

        # Steps 8-9
        result_source = self._reassemble(source, target_language, {**cached, **fresh})
        stats = TranslationStats(
            total_segments=len(source.entries),
            cached_segments=cached_segments,
            api_calls=orchestrator.api_calls,
            total_characters=sum(len(text) for text in uncached),
            duration_ms=_elapsed_ms(started),
            provider_used=primary_id,
            fallbacks_used=[p for p in orchestrator.providers_used if p != primary_id],
        )
        self._emit(1.0, "Translation complete", self._output_warnings(source, result_source))
        return result_source, stats

    def _warn(self, warnings: list[str]) -> None:
        if not warnings:
            return
        for warning in warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        self._emit(self._percentage, warnings[0], {"warnings": warnings})

    @staticmethod
    def _output_warnings(source: SubtitleSource, result: SubtitleSource) -> dict | None:
        warnings = check_output(source, result)
        for warning in warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        return {"warnings": warnings} if warnings else None

    def _on_wait(self, provider: TranslationProvider, delay_ms: int, reason: str) -> None:
        self._emit(
            self._percentage,
            f"{reason}, waiting {delay_ms / 1000:.0f}s...",
            {"provider": provider.provider_id.value, "delay_ms": delay_ms},
        )

    @staticmethod
    def _reassemble(
        source: SubtitleSource,
        target_language: str,
        translations: dict[str, str],
    ) -> SubtitleSource:
        entries = [entry.with_text(translations.get(entry.text, entry.text)) for entry in source.entries]
        return SubtitleSource(entries, target_language)


class Translator:
    """Process-wide translation service.

    Holds the segment cache, one rate-limit tracker per provider, the active
    glossary and the stats of the last completed session. Use one instance for
    the lifetime of the application.

    Example::

        async with Translator(load_config()) as translator:
            result = await translator.translate(source, "fr", on_progress=print)
            print(translator.get_last_stats())
    """

    def __init__(
        self,
        config: PolySubConfig,
        client: httpx.AsyncClient | None = None,
        providers: dict[ProviderId, TranslationProvider] | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config
        self._owns_client = client is None and providers is None
        if self._owns_client:
            client = httpx.AsyncClient(timeout=config.translation.timeout)
        self.client = client
        self.providers = providers if providers is not None else build_providers(config, client)
        self.cache = SegmentCache(max_size=config.translation.cache_size)
        self.trackers = {
            provider_id: RateLimitTracker(config.rate_limit) for provider_id in ProviderId
        }
        self._sleep = sleep
        self._glossary: Glossary | None = None
        self._last_stats: TranslationStats | None = None

    @property
    def primary(self) -> ProviderId:
        provider_id = ProviderId.from_string(self.config.translation.provider)
        if provider_id is None:
            choices = ", ".join(p.value for p in ProviderId)
            raise ValueError(
                f"Unknown translation provider: '{self.config.translation.provider}' "
                f"(choose from {choices})"
            )
        return provider_id

    def fallback_order(self) -> list[TranslationProvider]:
        return fallback_order(self.primary, self.providers)

    async def translate(
        self,
        source: SubtitleSource,
        target_language: str,
        on_progress: ProgressCallback | None = None,
    ) -> SubtitleSource:
        """Translate a subtitle source into target_language.

        Args:
            source: Segments to translate, tagged with their language.
            target_language: Target language code (e.g. "fr").
            on_progress: Optional callback receiving TranslationProgress events:
                one at start, one after preprocessing, one per batch, one at the
                end (or on failure), plus one per rate-limit wait.

        Returns:
            A new SubtitleSource with the same segments, retranslated.

        Raises:
            TranslationError: No provider could translate some batch.
        """
        session = TranslationSession(
            self.fallback_order(),
            self.cache,
            self.trackers,
            glossary=self._glossary,
            sleep=self._sleep,
            on_progress=on_progress,
        )
        result, stats = await session.run(source, target_language)
        self._last_stats = stats

        console.print(
            f"[green]Translation complete:[/green] {stats.total_segments} segments "
            f"({stats.cached_segments} cached, {stats.api_calls} API calls)"
        )
        return result

    def get_last_stats(self) -> TranslationStats | None:
        return self._last_stats

    def set_glossary(self, glossary: Glossary | None) -> None:
        self._glossary = glossary

    def get_glossary(self) -> Glossary | None:
        return self._glossary

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_size(self) -> int:
        return self.cache.size()

    def reset_rate_limits(self) -> None:
        for tracker in self.trackers.values():
            tracker.reset()

    async def aclose(self) -> None:
        if self._owns_client and self.client is not None:
            await self.client.aclose()

    async def __aenter__(self) -> Translator:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _unique(texts: list[str]) -> list[str]:
    return list(dict.fromkeys(texts))


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
