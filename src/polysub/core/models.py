"""Shared data models for PolySub."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class ProviderId(str, Enum):
    """Remote translation backends, in fixed fallback priority order."""

    LIBRETRANSLATE = "libretranslate"
    DEEPL = "deepl"
    OPENAI = "openai"
    GOOGLE = "google"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_string(cls, value: str) -> ProviderId | None:
        """Look up a provider by its id, case-insensitively. None if unknown."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_DISPLAY_NAMES = {
    ProviderId.LIBRETRANSLATE: "LibreTranslate",
    ProviderId.DEEPL: "DeepL",
    ProviderId.OPENAI: "OpenAI",
    ProviderId.GOOGLE: "Google Translate",
}


@dataclass(frozen=True)
class Segment:
    """One timed subtitle line."""

    index: int
    start_time: int  # milliseconds
    end_time: int  # milliseconds
    text: str

    def with_text(self, text: str) -> Segment:
        return replace(self, text=text)


@dataclass
class SubtitleSource:
    """A language-tagged, ordered list of subtitle segments.

    Entries must be sorted by start time and carry unique indices.
    """

    entries: list[Segment]
    language: str

    def __post_init__(self) -> None:
        seen: set[int] = set()
        previous_start: int | None = None
        for entry in self.entries:
            if entry.index in seen:
                raise ValueError(f"Duplicate segment index: {entry.index}")
            seen.add(entry.index)
            if previous_start is not None and entry.start_time < previous_start:
                raise ValueError(
                    f"Segments must be sorted by start time (index {entry.index} "
                    f"starts at {entry.start_time}ms, before {previous_start}ms)"
                )
            previous_start = entry.start_time

    @property
    def texts(self) -> list[str]:
        return [entry.text for entry in self.entries]


@dataclass(frozen=True)
class GlossaryEntry:
    """A terminology rule: source term and its fixed target-language rendering."""

    source: str
    target: str
    case_sensitive: bool = False
    whole_word: bool = True


@dataclass
class Glossary:
    """A named terminology list for one translation direction."""

    name: str
    source_language: str
    target_language: str
    entries: list[GlossaryEntry] = field(default_factory=list)

    def applies_to(self, source_language: str, target_language: str) -> bool:
        return (
            self.source_language.lower() == source_language.lower()
            and self.target_language.lower() == target_language.lower()
        )


@dataclass(frozen=True)
class BatchConfig:
    """Per-provider batching limits.

    Attributes:
        max_characters: Maximum characters per batch.
        max_segments: Maximum text units per batch.
        max_tokens: Maximum estimated tokens per batch.
        context_segments: Number of previously translated pairs sent as context.
    """

    max_characters: int = 5000
    max_segments: int = 50
    max_tokens: int = 3000
    context_segments: int = 2


@dataclass(frozen=True)
class TranslatedContext:
    """A previously translated pair passed to a provider for continuity."""

    original: str
    translated: str


@dataclass(frozen=True)
class TranslationBatch:
    """A provider-bounded group of text units sent in one translation call."""

    segments: list[str]
    start_index: int
    total_characters: int
    estimated_tokens: int
    context_prefix: list[TranslatedContext] = field(default_factory=list)


@dataclass(frozen=True)
class TranslationStats:
    """Usage statistics for one completed translation session."""

    total_segments: int = 0
    cached_segments: int = 0
    api_calls: int = 0
    total_characters: int = 0
    duration_ms: int = 0
    provider_used: ProviderId | None = None
    fallbacks_used: list[ProviderId] = field(default_factory=list)
