"""Tests for language code helpers."""

import pytest

from polysub.core.languages import (
    DEEPL_LANGUAGES,
    SUPPORTED_LANGUAGES,
    deepl_language_code,
    is_valid_language,
    language_name,
    validate_language,
)


def test_common_languages_supported():
    for code in ("en", "fr", "de", "es", "ja", "zh"):
        assert is_valid_language(code)


def test_deepl_languages_are_supported_languages():
    assert DEEPL_LANGUAGES <= set(SUPPORTED_LANGUAGES)


def test_language_name():
    assert language_name("fr") == "french"
    assert language_name("xx") == "xx"


def test_validate_language():
    assert validate_language("de") == "de"
    with pytest.raises(ValueError, match="polysub languages"):
        validate_language("klingon")


def test_deepl_codes():
    assert deepl_language_code("de") == "DE"
    assert deepl_language_code("en") == "EN"
    assert deepl_language_code("en", target=True) == "EN-US"
    assert deepl_language_code("pt", target=True) == "PT-PT"
    assert deepl_language_code("en-gb", target=True) == "EN-GB"
