"""
Channel naming helpers.

Discord channel names are lowercase, limited to letters, digits and hyphens,
and at most 100 characters long. Model output rarely respects that, so every
name goes through sanitize_channel_name() before it reaches the directory API.
"""

import re
from typing import Set

from ..config import MAX_CHANNEL_NAME_LENGTH


_INVALID_CHARS = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def sanitize_channel_name(raw: str, max_length: int = MAX_CHANNEL_NAME_LENGTH) -> str:
    """Map an arbitrary string to a platform-legal channel name.

    Args:
        raw: The name as written by the user or the model.
        max_length: Maximum length of the result.

    Returns:
        The sanitized name. Empty or all-invalid input yields an empty string,
        so callers must supply their own fallback.
    """
    if not raw:
        return ""

    name = _INVALID_CHARS.sub("-", raw.lower())
    name = _REPEATED_HYPHENS.sub("-", name).strip("-")

    if len(name) > max_length:
        name = name[:max_length].rstrip("-")

    return name


def make_unique(name: str, taken: Set[str], max_length: int = MAX_CHANNEL_NAME_LENGTH) -> str:
    """Return name, or name with a numeric suffix, that is not yet in taken.

    The chosen name is added to taken.

    Args:
        name: A sanitized channel name.
        taken: Names already used in the same scope.
        max_length: Maximum length of the result, suffix included.

    Returns:
        The unique name (e.g. 'general', then 'general-2', 'general-3').
    """
    candidate = name
    counter = 2
    while candidate in taken:
        suffix = f"-{counter}"
        base = name[:max_length - len(suffix)].rstrip("-")
        candidate = f"{base}{suffix}"
        counter += 1

    taken.add(candidate)
    return candidate
