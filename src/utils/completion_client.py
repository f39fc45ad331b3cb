"""
Chat-completion client for the channel planner.

Talks to an OpenAI-compatible endpoint (OpenRouter by default) through the
openai SDK. The SDK's own retries are disabled; this module applies a fixed
retry policy of its own so every failure class is treated the same way.
"""

import asyncio
from functools import partial
from typing import List, Dict, Optional

from openai import OpenAI

from ..config import (
    OPENROUTER_API_KEY,
    OPENROUTER_MODEL,
    OPENROUTER_BASE_URL,
    AI_TEMPERATURE,
    AI_MAX_TOKENS,
    COMPLETION_MAX_ATTEMPTS,
    COMPLETION_RETRY_DELAY_SECONDS,
    get_prompt_template,
)
from .exceptions import UpstreamUnavailable
from .logging import logger


# Returned when the endpoint answers but the first choice carries no text
NO_RESPONSE = "No response from model."

CHANNEL_PLANNER_SYSTEM_PROMPT = (
    "You design Discord server layouts. Reply with ONLY a valid JSON array of "
    "channel objects and no other text. Each object has the fields "
    '"name" (string), "type" (one of "text", "voice", "category"), '
    '"topic" (string or null) and "parent" (the name of a category object in '
    "the same array, or null). List categories before the channels they contain."
)

MENTION_SYSTEM_PROMPT = (
    "You are a helpful assistant living in a Discord server. "
    "Answer concisely and use Discord markdown where it helps."
)


def get_channel_planner_prompt() -> str:
    """Get the system prompt for channel planning, honoring config.yaml overrides."""
    return get_prompt_template("channel_planner_system") or CHANNEL_PLANNER_SYSTEM_PROMPT


def get_mention_prompt() -> str:
    """Get the system prompt for mention replies, honoring config.yaml overrides."""
    return get_prompt_template("mention_reply_system") or MENTION_SYSTEM_PROMPT


class CompletionClient:
    """Wrapper for the chat-completion API with a fixed retry policy."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        max_attempts: int = COMPLETION_MAX_ATTEMPTS,
        retry_delay: float = COMPLETION_RETRY_DELAY_SECONDS,
    ):
        """Initialize the completion client.

        Args:
            api_key: Bearer key for the endpoint. Defaults to config value.
            model: Model name. Defaults to config value.
            base_url: Endpoint base URL. Defaults to config value.
            max_attempts: Total attempts before giving up.
            retry_delay: Seconds to wait between attempts.
        """
        self.api_key = api_key or OPENROUTER_API_KEY
        self.model = model or OPENROUTER_MODEL
        self.base_url = base_url or OPENROUTER_BASE_URL
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._client: Optional[OpenAI] = None

    @property
    def client(self) -> Optional[OpenAI]:
        """Lazy-load the OpenAI SDK client.

        Returns:
            The SDK client instance, or None if not configured.
        """
        if self._client is None and self.is_configured():
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                max_retries=0,
            )
        return self._client

    def is_configured(self) -> bool:
        """Check if an API key and model are set."""
        return bool(self.api_key and self.model)

    def build_messages(self, prompt: str, system_prompt: str) -> List[Dict[str, str]]:
        """Build the system + user message pair for a request."""
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]

    async def _request(self, messages: List[Dict[str, str]]) -> str:
        """Make a single completion request off the event loop."""
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            partial(
                self.client.chat.completions.create,
                model=self.model,
                messages=messages,
                temperature=AI_TEMPERATURE,
                max_tokens=AI_MAX_TOKENS,
            ),
        )

        if not response.choices:
            logger.warning("Completion returned no choices")
            return NO_RESPONSE

        content = response.choices[0].message.content
        if not content:
            logger.warning(
                f"Completion returned empty content (finish_reason: {response.choices[0].finish_reason})"
            )
            return NO_RESPONSE

        return content

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Send a prompt and return the raw completion text.

        Args:
            prompt: The user's natural-language request.
            system_prompt: System instruction. Defaults to the channel planner prompt.

        Returns:
            The first choice's text, or NO_RESPONSE when it is absent.

        Raises:
            UpstreamUnavailable: If every attempt failed.
        """
        if not self.is_configured():
            logger.warning("Completion API not configured")
            raise UpstreamUnavailable("Completion API is not configured")

        messages = self.build_messages(prompt, system_prompt or get_channel_planner_prompt())
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                content = await self._request(messages)
                logger.info(f"Completion succeeded on attempt {attempt} ({len(content)} chars)")
                return content
            except Exception as e:
                last_error = e
                logger.warning(
                    f"Completion attempt {attempt}/{self.max_attempts} failed: {type(e).__name__}: {e}"
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay)

        logger.error(f"Completion failed after {self.max_attempts} attempts")
        raise UpstreamUnavailable(last_error=last_error) from last_error


# Singleton instance for easy access
_completion_client: Optional[CompletionClient] = None


def get_completion_client() -> CompletionClient:
    """Get the singleton completion client instance."""
    global _completion_client
    if _completion_client is None:
        _completion_client = CompletionClient()
    return _completion_client


def reset_completion_client() -> None:
    """Reset the completion client singleton (useful for testing)."""
    global _completion_client
    _completion_client = None
