"""LLM client for the Anthropic-compatible messages API.

Base URL, model and key come from settings, so any provider speaking the
same API can be plugged in.
"""

import asyncio
import logging
from typing import Optional

from anthropic import AsyncAnthropic

from evolua.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

_semaphore = asyncio.Semaphore(settings.LLM_MAX_CONCURRENCY)

_client: Optional[AsyncAnthropic] = None


class LLMServiceError(RuntimeError):
    """The LLM call failed or returned nothing usable."""


def get_client() -> AsyncAnthropic:
    global _client
    if _client is None:
        _client = AsyncAnthropic(
            api_key=settings.LLM_API_KEY,
            base_url=settings.LLM_BASE_URL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_retries=0,
        )
    return _client


def _split_messages(
    messages: list[dict[str, str]],
) -> tuple[Optional[str], list[dict[str, str]]]:
    """Extract leading system message for the Anthropic API's `system` parameter."""
    if messages and messages[0]["role"] == "system":
        return messages[0]["content"], messages[1:]
    return None, messages


async def chat_complete(
    messages: list[dict[str, str]],
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 1024,
) -> tuple[str, int, int]:
    """
    Single request to the messages API, bounded by the concurrency semaphore.

    Returns:
        (content, prompt_tokens, completion_tokens)

    Raises LLMServiceError on any client failure. Callers decide on fallbacks.
    """
    if model is None:
        model = settings.LLM_MODEL

    system, user_messages = _split_messages(messages)

    kwargs = {
        "model": model,
        "messages": user_messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if system:
        kwargs["system"] = system

    try:
        async with _semaphore:
            response = await get_client().messages.create(**kwargs)
    except Exception as exc:
        logger.warning("LLM API error: %s", exc)
        raise LLMServiceError(f"LLM API call failed: {exc}") from exc

    content = next(
        (block.text for block in response.content or [] if getattr(block, "type", None) == "text"),
        "",
    )
    input_tokens = response.usage.input_tokens if response.usage else 0
    output_tokens = response.usage.output_tokens if response.usage else 0
    return content, input_tokens, output_tokens
