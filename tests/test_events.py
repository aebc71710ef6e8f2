"""Tests for the translation progress event system."""

from polysub.core.events import ProgressCallback, TranslationProgress


def test_progress_event_creation():
    """TranslationProgress stores percentage, message, and optional data."""
    event = TranslationProgress(percentage=0.5, message="Translated batch 1/2")
    assert event.percentage == 0.5
    assert event.message == "Translated batch 1/2"
    assert event.data is None


def test_progress_event_with_data():
    """TranslationProgress accepts optional data payload."""
    event = TranslationProgress(
        percentage=0.3,
        message="Rate limited by DeepL, waiting 5s...",
        data={"provider": "deepl", "delay_ms": 5000},
    )
    assert event.data == {"provider": "deepl", "delay_ms": 5000}


def test_progress_callback_type():
    """ProgressCallback is a callable type alias accepting TranslationProgress."""
    collected: list[TranslationProgress] = []

    def handler(event: TranslationProgress) -> None:
        collected.append(event)

    # Type check: handler satisfies ProgressCallback
    cb: ProgressCallback = handler
    cb(TranslationProgress(percentage=0.0, message="Starting translation..."))
    assert len(collected) == 1
    assert collected[0].percentage == 0.0
