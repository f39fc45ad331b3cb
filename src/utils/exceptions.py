"""
Exceptions raised by the channel creation pipeline.
"""

from typing import Optional


class ChannelBotError(Exception):
    """Base exception for channel pipeline errors."""


class UpstreamUnavailable(ChannelBotError):
    """Raised when the completion endpoint keeps failing after all attempts."""

    def __init__(
        self,
        message: str = "The language model service is unavailable",
        last_error: Optional[BaseException] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            last_error: The error raised by the final attempt, if any.
        """
        self.last_error = last_error
        super().__init__(message)


class MalformedResponse(ChannelBotError):
    """Raised when the model output holds no parseable channel array."""


class ItemCreationFailure(ChannelBotError):
    """Raised when the directory API rejects a single category or channel."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(reason)
