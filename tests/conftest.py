"""Shared test fixtures."""

from pathlib import Path

import httpx
import pytest

from polysub.core.config import (
    DeepLConfig,
    GoogleConfig,
    LibreTranslateConfig,
    LLMConfig,
    PolySubConfig,
    TranslationConfig,
)
from polysub.core.models import BatchConfig, ProviderId, TranslationBatch
from polysub.translation.batching import estimate_tokens
from polysub.translation.outcomes import Success
from polysub.translation.providers.base import TranslationProvider

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_srt(fixtures_dir: Path) -> Path:
    return fixtures_dir / "sample.srt"


@pytest.fixture
def sample_glossary(fixtures_dir: Path) -> Path:
    return fixtures_dir / "glossary.toml"


def make_config(provider: str = "libretranslate", **sections) -> PolySubConfig:
    """Build a config without reading TOML layers.

    Only LibreTranslate is configured unless other sections are passed.
    """
    values = {
        "translation": TranslationConfig(provider=provider),
        "libretranslate": LibreTranslateConfig(url="http://libre.test"),
        "deepl": DeepLConfig(),
        "openai": LLMConfig(),
        "google": GoogleConfig(),
    }
    values.update(sections)
    return PolySubConfig(**values)


def make_batch(texts: list[str], **kwargs) -> TranslationBatch:
    return TranslationBatch(
        segments=list(texts),
        start_index=kwargs.pop("start_index", 0),
        total_characters=sum(len(t) for t in texts),
        estimated_tokens=sum(estimate_tokens(t) for t in texts),
        **kwargs,
    )


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class ScriptedProvider(TranslationProvider):
    """Provider returning pre-set outcomes; the last one repeats forever.

    A callable outcome is called with the batch. By default every batch
    succeeds with "<id>:<text>" translations.
    """

    def __init__(
        self,
        provider_id: ProviderId,
        outcomes=None,
        configured: bool = True,
        batch_config: BatchConfig | None = None,
    ) -> None:
        super().__init__(client=None)
        self.provider_id = provider_id
        self.outcomes = list(outcomes or [echo(provider_id.value)])
        self.configured = configured
        self.limits = batch_config
        self.batches: list[TranslationBatch] = []

    @property
    def batch_config(self) -> BatchConfig:
        return self.limits or super().batch_config

    @property
    def calls(self) -> int:
        return len(self.batches)

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def _translate(self, batch, source_lang, target_lang):
        self.batches.append(batch)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        return outcome(batch) if callable(outcome) else outcome


def echo(prefix: str):
    def translate(batch: TranslationBatch) -> Success:
        return Success([f"{prefix}:{text}" for text in batch.segments])

    return translate


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def mock_client():
    """Factory for an httpx.AsyncClient whose requests go to a handler function."""

    def factory(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
