"""Prompt templates and response parsing for LLM subtitle translation."""

from __future__ import annotations

import json
import re

TRANSLATION_SYSTEM = """\
You are a professional subtitle translator. Translate subtitle segments accurately \
while keeping them natural and concise for on-screen reading.

Rules:
- Translate every string of the input JSON array from {source_lang} to {target_lang}
- Keep translations concise — suitable for subtitle display
- Preserve the tone and register of the original
- Keep every token of the form ⟦NAME_0⟧ exactly as written, in the right place
- Do NOT merge or split segments — return the EXACT same number of strings
- Return ONLY a JSON array of strings, with no commentary and no code fences

Example (en → fr):
Input:
["Hello, how are you?", "⟦IO_0⟧I'm fine⟦IC_1⟧, thanks."]

Output:
["Bonjour, comment allez-vous ?", "⟦IO_0⟧Je vais bien⟦IC_1⟧, merci."]
"""

TRANSLATION_USER = """\
Translate these {count} subtitle segments from {source_lang} to {target_lang}. \
Return a JSON array of exactly {count} strings, one per input string.

{context}{segments}
"""

# Keys a model may wrap the array in, checked in this order
WRAPPER_KEYS = ("translations", "segments", "result", "data", "lines", "items")
DELIMITER = "|||"

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


def format_json_segments(texts: list[str]) -> str:
    """Serialize subtitle texts as a JSON array for LLM input."""
    return json.dumps(texts, ensure_ascii=False)


def format_history_context(
    source_texts: list[str],
    translated_texts: list[str],
) -> str:
    """Format previously translated pairs as reference context.

    Provides the LLM with its own recent translation style and terminology
    to maintain consistency across batches.
    """
    if not source_texts or not translated_texts:
        return ""
    pairs = []
    for src, tgt in zip(source_texts, translated_texts):
        pairs.append(f"  {src} → {tgt}")
    return (
        "Previous translations for style reference (do NOT re-translate these):\n"
        + "\n".join(pairs)
        + "\n\n"
    )


def parse_numbered_response(response: str, expected_count: int) -> tuple[list[str], bool]:
    """Parse a numbered LLM response back into a list of texts.

    Handles various formats:
    - "1. Text here"
    - "1) Text here"
    - "1: Text here"
    - Plain lines (fallback)

    Returns:
        Tuple of (parsed texts, exact_match) where exact_match is True
        if the parsed count matches expected_count exactly.
    """
    lines = [line.strip() for line in response.strip().splitlines() if line.strip()]

    parsed = []
    for line in lines:
        # Try stripping common numbering patterns
        for sep in [". ", ") ", ": "]:
            parts = line.split(sep, 1)
            if len(parts) == 2 and parts[0].strip().isdigit():
                parsed.append(parts[1].strip())
                break
        else:
            # No numbering found, use the line as-is
            parsed.append(line)

    exact_match = len(parsed) == expected_count

    # If we got more lines than expected, take only the first N
    if len(parsed) > expected_count:
        parsed = parsed[:expected_count]

    # If we got fewer, pad with empty strings (will fall back to original)
    while len(parsed) < expected_count:
        parsed.append("")

    return parsed, exact_match


def parse_json_array_response(response: str, expected_count: int) -> tuple[list[str], bool]:
    """Parse an LLM translation response into exactly expected_count strings.

    Tried in order, first usable result wins:
    1. The whole response is a JSON array.
    2. The whole response is a JSON object wrapping the array under one of
       WRAPPER_KEYS (or, failing those, its only list value).
    3. A JSON array embedded in surrounding prose.
    4. Delimiter split ("|||"), then numbered/plain lines.

    Returns:
        Tuple of (texts, exact_match). Texts is padded with empty strings or
        truncated to expected_count; exact_match is False when that happened
        or when only the line-based fallback worked.
    """
    cleaned = _CODE_FENCE_RE.sub("", response.strip())

    items = _json_list(cleaned)
    if items is None:
        match = _ARRAY_RE.search(cleaned)
        if match:
            items = _json_list(match.group(0))

    if items is not None:
        texts = ["" if item is None else str(item).strip() for item in items]
        exact_match = len(texts) == expected_count
        return _fit(texts, expected_count), exact_match

    if DELIMITER in cleaned:
        texts = [part.strip() for part in cleaned.split(DELIMITER)]
        return _fit(texts, expected_count), len(texts) == expected_count

    texts, _ = parse_numbered_response(cleaned, expected_count)
    return texts, False


def _json_list(text: str) -> list | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
        lists = [value for value in data.values() if isinstance(value, list)]
        if len(lists) == 1:
            return lists[0]
    return None


def _fit(texts: list[str], expected_count: int) -> list[str]:
    return (texts + [""] * expected_count)[:expected_count]
