"""Tests for core data models."""

import pytest

from polysub.core.models import (
    BatchConfig,
    Glossary,
    ProviderId,
    Segment,
    SubtitleSource,
    TranslationStats,
)


def test_segment_with_text_keeps_timing():
    seg = Segment(index=3, start_time=1000, end_time=2500, text="Hello")
    translated = seg.with_text("Bonjour")
    assert translated == Segment(index=3, start_time=1000, end_time=2500, text="Bonjour")
    assert seg.text == "Hello"


def test_subtitle_source_texts():
    source = SubtitleSource(
        [Segment(1, 0, 1000, "Hello"), Segment(2, 1000, 2000, "World")], "en"
    )
    assert source.texts == ["Hello", "World"]


def test_subtitle_source_rejects_duplicate_indices():
    with pytest.raises(ValueError, match="Duplicate"):
        SubtitleSource([Segment(1, 0, 1000, "a"), Segment(1, 1000, 2000, "b")], "en")


def test_subtitle_source_rejects_unsorted_entries():
    with pytest.raises(ValueError, match="sorted"):
        SubtitleSource([Segment(1, 5000, 6000, "a"), Segment(2, 1000, 2000, "b")], "en")


def test_subtitle_source_allows_equal_start_times():
    source = SubtitleSource([Segment(1, 0, 1000, "a"), Segment(2, 0, 1000, "b")], "en")
    assert len(source.entries) == 2


def test_provider_id_from_string():
    assert ProviderId.from_string("DeepL") is ProviderId.DEEPL
    assert ProviderId.from_string(" google ") is ProviderId.GOOGLE
    assert ProviderId.from_string("babelfish") is None


def test_provider_display_names():
    assert ProviderId.LIBRETRANSLATE.display_name == "LibreTranslate"
    assert ProviderId.OPENAI.display_name == "OpenAI"


def test_provider_priority_order():
    assert list(ProviderId) == [
        ProviderId.LIBRETRANSLATE,
        ProviderId.DEEPL,
        ProviderId.OPENAI,
        ProviderId.GOOGLE,
    ]


def test_glossary_applies_to_is_case_insensitive():
    glossary = Glossary(name="g", source_language="EN", target_language="fr")
    assert glossary.applies_to("en", "FR")
    assert not glossary.applies_to("fr", "en")
    assert glossary.entries == []


def test_batch_config_defaults():
    config = BatchConfig()
    assert (config.max_characters, config.max_segments, config.max_tokens, config.context_segments) == (
        5000,
        50,
        3000,
        2,
    )


def test_translation_stats_defaults():
    stats = TranslationStats()
    assert stats.api_calls == 0
    assert stats.provider_used is None
    assert stats.fallbacks_used == []
