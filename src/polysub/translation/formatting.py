"""Formatting preservation for subtitle text sent to translation providers.

Markup that must survive translation is swapped for placeholder tokens of the
form ⟦KIND_n⟧ before the text leaves the process, and swapped back afterwards:

- Paired emphasis/style tags (<i>, <b>, <u>, <font ...>): the tags become an
  open/close placeholder pair, the text between them is still translated.
- ASS/SSA override codes ({\\i1}, {\\an8}, ...): opaque.
- Music spans (♪ lyrics ♪): opaque, lyrics are not translated.
- Line breaks: an inline token, so providers that collapse newlines keep the
  line structure.
"""

from __future__ import annotations

import re
from typing import Callable

OPEN = "⟦"
CLOSE = "⟧"

_PAIRED_TAG_RE = re.compile(
    r"(<(i|b|u|font)(?:\s[^>]*)?>)(.*?)(</\2\s*>)",
    re.DOTALL | re.IGNORECASE,
)
_ASS_CODE_RE = re.compile(r"\{\\[^}]*\}")
_MUSIC_SPAN_RE = re.compile(r"[♪♫][^♪♫]*[♪♫]")
_MUSIC_SYMBOL_RE = re.compile(r"[♪♫]")
_LINE_BREAK_RE = re.compile(r"\r?\n")

# Providers sometimes add spaces inside tokens ("⟦ NL_0 ⟧"); accept them.
_LINE_BREAK_TOKEN_RE = re.compile(r" ?⟦\s*NL_(\d+)\s*⟧ ?")
_TOKEN_RE = re.compile(r"⟦\s*([A-Z]+)_(\d+)\s*⟧")

Restore = Callable[[str], str]


def extract(text: str) -> tuple[str, Restore]:
    """Replace formatting markup with placeholder tokens.

    Returns:
        Tuple of (masked text, restore function). The restore function maps a
        (translated) masked text back to text with the original markup.
    """
    originals: dict[int, tuple[str, str]] = {}  # index -> (kind, literal)

    def token(kind: str, literal: str) -> str:
        index = len(originals)
        originals[index] = (kind, literal)
        return f"{OPEN}{kind}_{index}{CLOSE}"

    def replace_tag(match: re.Match) -> str:
        name = match.group(2).upper()
        open_token = token(f"{name}O", match.group(1))
        close_token = token(f"{name}C", match.group(4))
        return f"{open_token}{match.group(3)}{close_token}"

    masked = text
    # Nested tags need one pass per nesting level
    while True:
        masked, count = _PAIRED_TAG_RE.subn(replace_tag, masked)
        if count == 0:
            break

    masked = _ASS_CODE_RE.sub(lambda m: token("ASS", m.group(0)), masked)
    masked = _MUSIC_SPAN_RE.sub(lambda m: token("MUSIC", m.group(0)), masked)
    masked = _MUSIC_SYMBOL_RE.sub(lambda m: token("MUSIC", m.group(0)), masked)
    masked = _LINE_BREAK_RE.sub(lambda m: f" {token('NL', m.group(0))} ", masked)

    def restore(translated: str) -> str:
        def put_back(match: re.Match, kind: str | None = None) -> str:
            kind = kind or match.group(1)
            entry = originals.get(int(match.group(match.lastindex)))
            if entry is None or entry[0] != kind:
                return match.group(0)
            return entry[1]

        def put_back_line_break(match: re.Match) -> str:
            return put_back(match, "NL")

        # Opaque spans can contain earlier tokens, so repeat until stable
        restored = translated
        for _ in range(len(originals) + 1):
            updated = _TOKEN_RE.sub(put_back, _LINE_BREAK_TOKEN_RE.sub(put_back_line_break, restored))
            if updated == restored:
                break
            restored = updated
        return restored

    return masked, restore


def has_placeholders(text: str) -> bool:
    """Check whether text still contains placeholder tokens."""
    return _TOKEN_RE.search(text) is not None
