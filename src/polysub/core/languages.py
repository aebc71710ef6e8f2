"""Translation language definitions.

Codes are ISO 639-1 as accepted by LibreTranslate, Google Cloud Translation and
LLM prompts. DeepL uses its own upper-case codes and requires a regional variant
for a few target languages; see deepl_language_code().

Reference: https://developers.deepl.com/docs/resources/supported-languages
"""

from __future__ import annotations

# fmt: off
SUPPORTED_LANGUAGES: dict[str, str] = {
    "ar": "arabic",      "az": "azerbaijani",     "bg": "bulgarian",
    "bn": "bengali",     "ca": "catalan",         "cs": "czech",
    "da": "danish",      "de": "german",          "el": "greek",
    "en": "english",     "eo": "esperanto",       "es": "spanish",
    "et": "estonian",    "fa": "persian",         "fi": "finnish",
    "fr": "french",      "ga": "irish",           "he": "hebrew",
    "hi": "hindi",       "hu": "hungarian",       "id": "indonesian",
    "it": "italian",     "ja": "japanese",        "ko": "korean",
    "lt": "lithuanian",  "lv": "latvian",         "ms": "malay",
    "nb": "norwegian",   "nl": "dutch",           "pl": "polish",
    "pt": "portuguese",  "ro": "romanian",        "ru": "russian",
    "sk": "slovak",      "sl": "slovenian",       "sq": "albanian",
    "sv": "swedish",     "th": "thai",            "tl": "tagalog",
    "tr": "turkish",     "uk": "ukrainian",       "ur": "urdu",
    "vi": "vietnamese",  "zh": "chinese",
}
# fmt: on

# Languages DeepL can translate. Everything else is still valid for the
# other providers.
DEEPL_LANGUAGES: set[str] = {
    "ar",
    "bg",
    "cs",
    "da",
    "de",
    "el",
    "en",
    "es",
    "et",
    "fi",
    "fr",
    "hu",
    "id",
    "it",
    "ja",
    "ko",
    "lt",
    "lv",
    "nb",
    "nl",
    "pl",
    "pt",
    "ro",
    "ru",
    "sk",
    "sl",
    "sv",
    "tr",
    "uk",
    "zh",
}

# DeepL rejects the bare code for these targets.
_DEEPL_TARGET_VARIANTS = {
    "en": "EN-US",
    "pt": "PT-PT",
}


def is_valid_language(code: str) -> bool:
    """Check if a language code is supported."""
    return code in SUPPORTED_LANGUAGES


def language_name(code: str) -> str:
    """Get the full language name for a code, or the code itself if unknown."""
    return SUPPORTED_LANGUAGES.get(code, code)


def validate_language(code: str) -> str:
    """Validate a language code and return it, raising ValueError if invalid."""
    if code not in SUPPORTED_LANGUAGES:
        raise ValueError(
            f"Unsupported language: '{code}'. "
            f"Run 'polysub languages' to see all {len(SUPPORTED_LANGUAGES)} supported languages."
        )
    return code


def deepl_language_code(code: str, target: bool = False) -> str:
    """Map an ISO code to the DeepL API form ("de" -> "DE", target "en" -> "EN-US")."""
    base = code.split("-")[0].lower()
    if target and base in _DEEPL_TARGET_VARIANTS and "-" not in code:
        return _DEEPL_TARGET_VARIANTS[base]
    return code.upper()
