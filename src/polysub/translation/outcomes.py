"""Provider call outcomes and the public translation error."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from polysub.core.models import ProviderId


@dataclass(frozen=True)
class Success:
    """Translations for every text unit of the batch, in order.

    Every outcome carries api_calls, the number of requests the provider sent
    to produce it.
    """

    translations: list[str]
    api_calls: int = 1


@dataclass(frozen=True)
class RateLimited:
    """Provider-imposed throttling. Retry the same provider after a delay."""

    retry_after_seconds: int | None = None
    api_calls: int = field(default=1, compare=False)


@dataclass(frozen=True)
class ServiceError:
    """Provider failure. Retryable errors back off, others move to the next provider."""

    message: str
    is_retryable: bool
    cause: BaseException | None = field(default=None, compare=False)
    api_calls: int = field(default=1, compare=False)


@dataclass(frozen=True)
class ConfigurationError:
    """Missing or rejected credentials. Never retried."""

    message: str
    api_calls: int = field(default=1, compare=False)


TranslationOutcome = Union[Success, RateLimited, ServiceError, ConfigurationError]


class TranslationError(Exception):
    """A translation session failed after every provider was exhausted.

    Attributes:
        provider_id: Provider that failed last, if any was tried.
        is_retryable: Whether retrying the whole request later may succeed.
        user_message: Message suitable for showing to the user.
    """

    def __init__(
        self,
        provider_id: ProviderId | None,
        is_retryable: bool,
        user_message: str,
    ) -> None:
        super().__init__(user_message)
        self.provider_id = provider_id
        self.is_retryable = is_retryable
        self.user_message = user_message

    @classmethod
    def from_outcome(cls, outcome: TranslationOutcome, provider_id: ProviderId) -> TranslationError:
        """Build an error from a failed provider outcome.

        Raises:
            ValueError: If the outcome is a Success.
        """
        if isinstance(outcome, ServiceError):
            error = cls(provider_id, outcome.is_retryable, outcome.message)
            error.__cause__ = outcome.cause
            return error
        if isinstance(outcome, ConfigurationError):
            return cls(provider_id, False, outcome.message)
        if isinstance(outcome, RateLimited):
            return cls(provider_id, True, f"Rate limited by {provider_id.display_name}")
        raise ValueError("Cannot create a TranslationError from a successful outcome")
