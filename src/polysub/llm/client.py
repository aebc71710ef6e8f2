"""Async chat completion client via LiteLLM."""

from __future__ import annotations

from polysub.core.config import LLMConfig


class LLMRequestError(Exception):
    """A chat completion request failed.

    Attributes:
        status_code: HTTP status returned by the provider, or None for
            connection-level failures (DNS, timeout, reset).
        retry_after: Seconds the provider asked us to wait, if it said so.
    """

    def __init__(self, message: str, status_code: int | None = None, retry_after: int | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after


async def complete(
    messages: list[dict[str, str]],
    config: LLMConfig,
    **kwargs: object,
) -> str:
    """Send a chat completion request via LiteLLM.

    Args:
        messages: Chat messages in OpenAI format.
        config: LLM configuration.
        **kwargs: Additional kwargs passed to litellm.acompletion.

    Returns:
        The assistant's response text (empty string if the model sent none).

    Raises:
        LLMRequestError: If the request failed for any reason LiteLLM reports.
    """
    try:
        import litellm
    except ImportError:
        raise ImportError("LiteLLM is not installed. Install with: pip install 'polysub[llm]'")

    call_kwargs: dict = {
        "model": config.model,
        "messages": messages,
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }
    if config.api_key:
        call_kwargs["api_key"] = config.api_key
    if config.api_base:
        call_kwargs["api_base"] = config.api_base
    call_kwargs.update(kwargs)

    try:
        response = await litellm.acompletion(**call_kwargs)
    except (litellm.APIConnectionError, litellm.Timeout) as e:
        raise LLMRequestError(str(e)) from e
    except Exception as e:
        # LiteLLM maps provider failures onto exceptions carrying status_code
        status = getattr(e, "status_code", None)
        if not isinstance(status, int):
            raise
        raise LLMRequestError(str(e), status_code=status, retry_after=_retry_after(e)) from e

    return response.choices[0].message.content or ""


def _retry_after(error: Exception) -> int | None:
    """Extract a Retry-After value (seconds) from a LiteLLM exception, if present."""
    response = getattr(error, "response", None)
    headers = getattr(response, "headers", None) or getattr(error, "litellm_response_headers", None)
    if not headers:
        return None
    value = headers.get("retry-after") or headers.get("Retry-After")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
