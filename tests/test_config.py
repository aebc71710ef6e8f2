"""Tests for configuration system."""

from polysub.core.config import LLMConfig, RateLimitConfig, _deep_merge, load_config


def test_default_config_loads():
    """Config loads without errors and has all required sections."""
    config = load_config()
    assert config.translation is not None
    assert config.libretranslate is not None
    assert config.deepl is not None
    assert config.openai is not None
    assert config.google is not None
    assert config.translation.provider  # non-empty
    assert config.translation.cache_size > 0


def test_cli_overrides():
    """CLI overrides take precedence over defaults."""
    config = load_config(**{"translation.provider": "deepl", "translation.target_language": "de"})
    assert config.translation.provider == "deepl"
    assert config.translation.target_language == "de"


def test_cli_override_none_ignored():
    """None values in CLI overrides are ignored, defaults preserved."""
    default = load_config()
    overridden = load_config(**{"translation.provider": None})
    assert overridden.translation.provider == default.translation.provider


def test_api_key_from_environment(monkeypatch):
    monkeypatch.setenv("POLYSUB_DEEPL__API_KEY", "env-key:fx")
    config = load_config()
    assert config.deepl.api_key == "env-key:fx"


def test_environment_outranks_toml_layers(monkeypatch):
    """default.toml sets provider and url; env vars win over it."""
    monkeypatch.setenv("POLYSUB_TRANSLATION__PROVIDER", "deepl")
    monkeypatch.setenv("POLYSUB_LIBRETRANSLATE__URL", "http://libre.env:5000")
    config = load_config()
    assert config.translation.provider == "deepl"
    assert config.libretranslate.url == "http://libre.env:5000"
    # Keys the environment leaves unset still come from TOML
    assert config.translation.source_language == "en"
    assert config.translation.cache_size == 10000


def test_cli_overrides_outrank_environment(monkeypatch):
    monkeypatch.setenv("POLYSUB_TRANSLATION__PROVIDER", "deepl")
    config = load_config(**{"translation.provider": "google"})
    assert config.translation.provider == "google"


def test_deep_merge():
    base = {"a": {"b": 1, "c": 2}, "d": 3}
    override = {"a": {"b": 10, "e": 5}, "f": 6}
    result = _deep_merge(base, override)
    assert result == {"a": {"b": 10, "c": 2, "e": 5}, "d": 3, "f": 6}


def test_deep_merge_no_mutation():
    """Deep merge does not mutate the base dict."""
    base = {"a": {"b": 1}}
    override = {"a": {"c": 2}}
    _deep_merge(base, override)
    assert "c" not in base["a"]


def test_rate_limit_defaults():
    config = RateLimitConfig()
    assert config.initial_delay_ms == 1000
    assert config.max_delay_ms == 60000
    assert config.multiplier == 2.0
    assert config.max_retries == 5


def test_llm_config_has_required_fields():
    config = LLMConfig()
    assert config.api_key is None
    assert config.model
    assert hasattr(config, "api_base")
    assert 0.0 <= config.temperature <= 1.0
