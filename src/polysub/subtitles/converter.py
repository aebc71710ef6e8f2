"""Subtitle file loading and saving.

Files are read with pysubs2, which normalises SRT/VTT markup to ASS override
codes ({\\i1}...{\\i0}). Those codes are kept in the segment text so the
formatting preserver can protect them, and pysubs2 converts them back when
saving to SRT/VTT. ASS hard line breaks (\\N) become real newlines.
"""

from __future__ import annotations

import re
from pathlib import Path

import pysubs2

from polysub.core.models import Segment, SubtitleSource

_ASS_LINE_BREAK_RE = re.compile(r"\\[Nn]")


def save_subtitles(source: SubtitleSource, path: Path, fmt: str = "srt") -> Path:
    """Save a subtitle source to a subtitle file.

    Args:
        source: Subtitle segments to write.
        path: Output file path.
        fmt: Format — "srt", "vtt", "ass", or "txt".

    Returns:
        The path the file was written to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "txt":
        text = "\n".join(
            " ".join(seg.text.split()) for seg in source.entries if seg.text.strip()
        )
        path.write_text(text, encoding="utf-8")
    else:
        subs = pysubs2.SSAFile()
        for seg in source.entries:
            subs.events.append(
                pysubs2.SSAEvent(
                    start=seg.start_time,
                    end=seg.end_time,
                    text=seg.text.replace("\r\n", "\n").replace("\n", "\\N"),
                )
            )
        subs.save(str(path), format_=fmt)

    return path


def load_subtitles(path: Path, language: str) -> SubtitleSource:
    """Load a subtitle file into a SubtitleSource.

    Supports SRT, VTT, ASS, and plain TXT (one line per segment, no timestamps).
    Segments are sorted by start time and numbered from 1.
    """
    path = Path(path)

    if path.suffix == ".txt":
        text = path.read_text(encoding="utf-8")
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        return SubtitleSource(
            [Segment(index=i, start_time=0, end_time=0, text=line) for i, line in enumerate(lines, 1)],
            language,
        )

    subs = pysubs2.load(str(path))
    events = sorted((e for e in subs.events if not e.is_comment), key=lambda e: e.start)
    return SubtitleSource(
        [
            Segment(
                index=i,
                start_time=event.start,
                end_time=event.end,
                text=_ASS_LINE_BREAK_RE.sub("\n", event.text),
            )
            for i, event in enumerate(events, 1)
        ],
        language,
    )
