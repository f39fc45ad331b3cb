"""
Text utilities for the Discord Channel Architect Bot.
"""

from typing import List

from ..config import MAX_MESSAGE_LENGTH


def truncate_output(output: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Keep the head of output within max_length, marking the cut with '...'."""
    if len(output) <= max_length:
        return output
    return output[:max_length - 3] + "..."


def split_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """Split a long message into chunks that fit Discord's character limit.

    Prefers paragraph breaks, then line breaks, then spaces; falls back to a
    hard cut when none lies in the second half of the window.

    Args:
        text: The text to split.
        max_length: Maximum length per chunk.

    Returns:
        A list of message chunks, each within max_length.
    """
    chunks = []
    remaining = text

    while len(remaining) > max_length:
        window = remaining[:max_length]
        for separator in ("\n\n", "\n", " "):
            break_point = window.rfind(separator)
            if break_point > max_length // 2:
                break
        else:
            break_point = max_length

        chunks.append(remaining[:break_point].rstrip())
        remaining = remaining[break_point:].lstrip()

    if remaining or not chunks:
        chunks.append(remaining)
    return chunks


def format_error_message(title: str, error: str, include_traceback: bool = False) -> str:
    """Format an error message consistently for Discord.

    Args:
        title: The error title (e.g., "Invalid Input").
        error: The error message or traceback.
        include_traceback: If True, wraps error in a code block.

    Returns:
        A consistently formatted error message.
    """
    if include_traceback:
        return f"❌ **{title}**\n```\n{error}\n```"
    return f"❌ **{title}:** {error}"
