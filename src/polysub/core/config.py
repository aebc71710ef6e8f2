"""Configuration system for PolySub.

Layered config loading (lowest to highest priority):
1. config/default.toml (shipped with package)
2. ~/.config/polysub/config.toml (user-level)
3. ./polysub.toml (project-level)
4. Environment variables (POLYSUB_DEEPL__API_KEY, etc.)
5. CLI flags
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent.parent.parent
_DEFAULT_CONFIG = _PACKAGE_ROOT / "config" / "default.toml"
_USER_CONFIG = Path.home() / ".config" / "polysub" / "config.toml"
_PROJECT_CONFIG = Path("polysub.toml")


class TranslationConfig(BaseModel):
    provider: str = "libretranslate"  # primary provider id
    source_language: str = "en"
    target_language: str = "fr"
    timeout: float = 30.0  # seconds, per HTTP request
    cache_size: int = 10000


class LibreTranslateConfig(BaseModel):
    url: str | None = "http://127.0.0.1:5000"
    api_key: str | None = None


class DeepLConfig(BaseModel):
    api_key: str | None = None
    api_url: str | None = None  # Overrides the free/pro endpoint selection


class LLMConfig(BaseModel):
    api_key: str | None = None
    model: str = "gpt-4o-mini"
    api_base: str | None = None  # Custom endpoint (e.g. an OpenAI-compatible proxy)
    temperature: float = 0.3
    max_tokens: int = 4096


class GoogleConfig(BaseModel):
    api_key: str | None = None
    api_url: str = "https://translation.googleapis.com/language/translate/v2"


class RateLimitConfig(BaseModel):
    initial_delay_ms: int = 1000
    max_delay_ms: int = 60000
    multiplier: float = 2.0
    max_retries: int = 5


class PolySubConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="POLYSUB_",
        env_nested_delimiter="__",
    )

    translation: TranslationConfig = TranslationConfig()
    libretranslate: LibreTranslateConfig = LibreTranslateConfig()
    deepl: DeepLConfig = DeepLConfig()
    openai: LLMConfig = LLMConfig()
    google: GoogleConfig = GoogleConfig()
    rate_limit: RateLimitConfig = RateLimitConfig()


def _load_toml(path: Path) -> dict:
    """Load a TOML file if it exists, return empty dict otherwise."""
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(**cli_overrides: object) -> PolySubConfig:
    """Load configuration from all layers and merge.

    Args:
        **cli_overrides: Direct overrides from CLI flags. Keys can be
            dot-separated (e.g. translation.provider="deepl").
    """
    # Layer 1-3: TOML files
    config_data: dict = {}
    for path in (_DEFAULT_CONFIG, _USER_CONFIG, _PROJECT_CONFIG):
        layer = _load_toml(path)
        config_data = _deep_merge(config_data, layer)

    # Layer 4: env vars (POLYSUB_SECTION__KEY) outrank every TOML layer
    config_data = _deep_merge(config_data, EnvSettingsSource(PolySubConfig)())

    # Layer 5: CLI overrides (dot-separated keys)
    for key, value in cli_overrides.items():
        if value is None:
            continue
        parts = key.split(".")
        target = config_data
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = value

    return PolySubConfig(**config_data)
