"""Progress event system for streaming translation progress to external consumers.

Provides a lightweight callback mechanism that a translation session emits events
through. Consumers (CLI progress bars, GUIs, web handlers) register a callback to
receive real-time updates without modifying translation logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass
class TranslationProgress:
    """A progress event emitted during a translation session.

    Attributes:
        percentage: Overall session progress, 0.0 to 1.0. Never decreases
            within one session.
        message: Human-readable status message.
        data: Optional payload (e.g. batch number, provider id, wait time).
    """

    percentage: float
    message: str
    data: dict | None = field(default=None)


ProgressCallback = Callable[[TranslationProgress], None]
