"""Smart batching of text units under per-provider limits."""

from __future__ import annotations

from dataclasses import replace

from polysub.core.models import BatchConfig, ProviderId, TranslatedContext, TranslationBatch

# Fixed limits per provider. DeepL caps a request at 50 texts; the LLM is
# bounded by prompt tokens; Google by the 128-text request limit.
BATCH_CONFIGS: dict[ProviderId, BatchConfig] = {
    ProviderId.LIBRETRANSLATE: BatchConfig(
        max_characters=5000, max_segments=50, max_tokens=5000, context_segments=0
    ),
    ProviderId.DEEPL: BatchConfig(
        max_characters=30000, max_segments=50, max_tokens=10000, context_segments=2
    ),
    ProviderId.OPENAI: BatchConfig(
        max_characters=8000, max_segments=40, max_tokens=3000, context_segments=3
    ),
    ProviderId.GOOGLE: BatchConfig(
        max_characters=5000, max_segments=100, max_tokens=5000, context_segments=0
    ),
}


def estimate_tokens(text: str) -> int:
    """Rough token estimate (~4 characters per token)."""
    return len(text) // 4 + 1


def build_batches(
    texts: list[str],
    config: BatchConfig,
    context: list[TranslatedContext] | tuple[TranslatedContext, ...] = (),
) -> list[TranslationBatch]:
    """Partition text units into batches that respect the config limits.

    Units are appended greedily. A batch is closed before a unit that would push
    it past max_characters or max_tokens, or when it already holds max_segments
    units. A single unit larger than a limit still gets its own batch; nothing is
    dropped or truncated.

    Args:
        texts: Prepared text units, in order.
        config: Limits of the provider the batches are built for.
        context: Already translated pairs; the trailing context_segments of them
            become each batch's context prefix.

    Returns:
        Batches in order, covering every text unit exactly once.
    """
    prefix = _context_window(list(context), config)
    batches: list[TranslationBatch] = []

    current: list[str] = []
    start_index = 0
    characters = 0
    tokens = 0

    for i, text in enumerate(texts):
        text_tokens = estimate_tokens(text)
        if current and (
            characters + len(text) > config.max_characters
            or len(current) >= config.max_segments
            or tokens + text_tokens > config.max_tokens
        ):
            batches.append(_close(current, start_index, characters, tokens, prefix))
            current, start_index, characters, tokens = [], i, 0, 0

        current.append(text)
        characters += len(text)
        tokens += text_tokens

    if current:
        batches.append(_close(current, start_index, characters, tokens, prefix))

    return batches


def with_context(
    batch: TranslationBatch,
    history: list[TranslatedContext],
    config: BatchConfig,
) -> TranslationBatch:
    """Return the batch with the trailing window of translated history attached."""
    return replace(batch, context_prefix=_context_window(history, config))


def _context_window(history: list[TranslatedContext], config: BatchConfig) -> list[TranslatedContext]:
    if config.context_segments <= 0:
        return []
    return history[-config.context_segments :]


def _close(
    segments: list[str],
    start_index: int,
    characters: int,
    tokens: int,
    prefix: list[TranslatedContext],
) -> TranslationBatch:
    return TranslationBatch(
        segments=list(segments),
        start_index=start_index,
        total_characters=characters,
        estimated_tokens=tokens,
        context_prefix=list(prefix),
    )
