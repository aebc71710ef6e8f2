"""Glossary pre/post-processing for consistent terminology.

Before translation, every glossary term found in a text unit is replaced with an
opaque ⟦GLOSS_n⟧ placeholder (n is the entry's position in the glossary). After
translation the placeholders are replaced with the target-language terms.
"""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path

from polysub.core.models import Glossary, GlossaryEntry

_PLACEHOLDER_RE = re.compile(r"⟦\s*GLOSS_(\d+)\s*⟧")
_ANY_TOKEN_RE = re.compile(r"⟦[^⟧]*⟧")


def _placeholder(index: int) -> str:
    return f"⟦GLOSS_{index}⟧"


def _build_pattern(entry: GlossaryEntry) -> re.Pattern:
    pattern = re.escape(entry.source)
    if entry.whole_word:
        pattern = rf"(?<!\w){pattern}(?!\w)"
    flags = 0 if entry.case_sensitive else re.IGNORECASE
    return re.compile(pattern, flags)


class GlossaryEngine:
    """Applies a glossary for one translation direction.

    The engine is inactive (both operations are the identity) when there is no
    glossary or its language pair differs from the session's.
    """

    def __init__(
        self,
        glossary: Glossary | None,
        source_language: str,
        target_language: str,
    ) -> None:
        self.glossary = glossary
        self.active = bool(
            glossary
            and glossary.entries
            and glossary.applies_to(source_language, target_language)
        )
        self._patterns = (
            [_build_pattern(entry) for entry in glossary.entries] if self.active else []
        )

    def apply_pre(self, text: str) -> tuple[str, dict[str, str]]:
        """Mask glossary terms in text.

        Entries are matched in declared order against the unmasked text. A span
        claimed by an earlier entry (or covered by an existing placeholder token)
        is never matched again.

        Returns:
            Tuple of (masked text, placeholder -> target term).
        """
        if not self.active:
            return text, {}

        consumed = [(m.start(), m.end()) for m in _ANY_TOKEN_RE.finditer(text)]
        matches: list[tuple[int, int, int]] = []  # (start, end, entry index)

        for index, pattern in enumerate(self._patterns):
            for match in pattern.finditer(text):
                start, end = match.span()
                if start == end:
                    continue
                if any(start < c_end and c_start < end for c_start, c_end in consumed):
                    continue
                consumed.append((start, end))
                matches.append((start, end, index))

        if not matches:
            return text, {}

        replacements: dict[str, str] = {}
        parts = []
        cursor = 0
        for start, end, index in sorted(matches):
            placeholder = _placeholder(index)
            replacements[placeholder] = self.glossary.entries[index].target
            parts.append(text[cursor:start])
            parts.append(placeholder)
            cursor = end
        parts.append(text[cursor:])
        return "".join(parts), replacements

    def apply_post(self, text: str, replacements: dict[str, str]) -> str:
        """Replace glossary placeholders with their target-language terms."""
        if not replacements:
            return text

        def substitute(match: re.Match) -> str:
            return replacements.get(_placeholder(int(match.group(1))), match.group(0))

        return _PLACEHOLDER_RE.sub(substitute, text)


def load_glossary(path: Path) -> Glossary:
    """Load a glossary from a TOML or JSON file.

    Expected shape (TOML shown)::

        name = "Star Trek"
        source_language = "en"
        target_language = "fr"

        [[entries]]
        source = "warp drive"
        target = "distorsion"
        case_sensitive = false
        whole_word = true

    Raises:
        ValueError: If the file is malformed or misses required fields.
    """
    path = Path(path)
    try:
        if path.suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ValueError(f"Invalid glossary file {path}: {e}") from e

    try:
        entries = [
            GlossaryEntry(
                source=item["source"],
                target=item["target"],
                case_sensitive=bool(item.get("case_sensitive", False)),
                whole_word=bool(item.get("whole_word", True)),
            )
            for item in data.get("entries", [])
        ]
        return Glossary(
            name=data.get("name", path.stem),
            source_language=data["source_language"],
            target_language=data["target_language"],
            entries=entries,
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Invalid glossary file {path}: missing or malformed {e}") from e
