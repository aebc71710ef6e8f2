"""Sanity checks run before and after a translation session.

Only an empty source stops a session. Everything else is a warning shown to
the user and passed along with the progress events.
"""

from __future__ import annotations

from polysub.core.models import SubtitleSource

MAX_SEGMENT_LENGTH = 200
MAX_SPECIAL_CHAR_RATIO = 0.3
MAX_UNCHANGED_RATIO = 0.3

NO_CONTENT_MESSAGE = "No translatable text content found."


def has_content(source: SubtitleSource) -> bool:
    return any(entry.text.strip() for entry in source.entries)


def special_char_ratio(text: str) -> float:
    """Share of characters that are neither alphanumeric nor whitespace."""
    if not text:
        return 0.0
    special = sum(1 for ch in text if not ch.isalnum() and not ch.isspace())
    return special / len(text)


def check_source(source: SubtitleSource) -> list[str]:
    """Warnings about a source that will translate poorly."""
    warnings = []

    ratio = special_char_ratio(" ".join(entry.text for entry in source.entries))
    if ratio > MAX_SPECIAL_CHAR_RATIO:
        warnings.append(
            f"Content contains {ratio:.0%} special characters, "
            "translation quality may suffer"
        )

    long_segments = sum(1 for entry in source.entries if len(entry.text) > MAX_SEGMENT_LENGTH)
    if long_segments:
        warnings.append(
            f"{long_segments} segment(s) longer than {MAX_SEGMENT_LENGTH} characters"
        )

    return warnings


def check_output(source: SubtitleSource, result: SubtitleSource) -> list[str]:
    """Warnings about a finished translation.

    Blank segments pass through untouched and are not counted.
    """
    pairs = [
        (original.text.strip(), translated.text.strip())
        for original, translated in zip(source.entries, result.entries)
        if original.text.strip()
    ]
    unchanged = sum(1 for original, translated in pairs if original == translated)
    if pairs and unchanged > len(pairs) * MAX_UNCHANGED_RATIO:
        return [
            f"{unchanged} of {len(pairs)} segments came back unchanged, "
            "the source may be mixed-language or already translated"
        ]
    return []
