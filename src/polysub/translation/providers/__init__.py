"""Translation provider adapters and fallback ordering."""

from __future__ import annotations

import httpx

from polysub.core.config import PolySubConfig
from polysub.core.models import ProviderId
from polysub.translation.providers.base import TranslationProvider
from polysub.translation.providers.deepl import DeepLProvider
from polysub.translation.providers.google import GoogleProvider
from polysub.translation.providers.libretranslate import LibreTranslateProvider
from polysub.translation.providers.openai import OpenAIProvider

__all__ = [
    "DeepLProvider",
    "GoogleProvider",
    "LibreTranslateProvider",
    "OpenAIProvider",
    "TranslationProvider",
    "build_providers",
    "fallback_order",
]


def build_providers(
    config: PolySubConfig,
    client: httpx.AsyncClient | None,
) -> dict[ProviderId, TranslationProvider]:
    """Create one adapter per provider from the configuration."""
    return {
        ProviderId.LIBRETRANSLATE: LibreTranslateProvider(config.libretranslate, client),
        ProviderId.DEEPL: DeepLProvider(config.deepl, client),
        ProviderId.OPENAI: OpenAIProvider(config.openai),
        ProviderId.GOOGLE: GoogleProvider(config.google, client),
    }


def fallback_order(
    primary: ProviderId,
    providers: dict[ProviderId, TranslationProvider],
) -> list[TranslationProvider]:
    """Providers to try, in order: the primary, then every other configured one.

    The primary comes first even when unconfigured; it then fails fast with a
    ConfigurationError and the orchestrator moves on. The rest follow the fixed
    ProviderId priority order.
    """
    order = []
    if primary in providers:
        order.append(providers[primary])
    for provider_id in ProviderId:
        provider = providers.get(provider_id)
        if provider_id != primary and provider is not None and provider.is_configured:
            order.append(provider)
    return order
