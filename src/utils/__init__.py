"""
Utility modules for the Discord Channel Architect Bot.
"""

from .logging import get_logger, CommandLogCollector
from .naming import sanitize_channel_name, make_unique
from .text_utils import truncate_output, split_message, format_error_message
from .exceptions import ChannelBotError, UpstreamUnavailable, MalformedResponse, ItemCreationFailure
from .channel_specs import ChannelSpec, extract_channel_specs
from .planner import ChannelKind, NormalizedChannel, plan, normalize_channels, render_preview
from .directory import CreationResult, ChannelDirectory, GuildDirectory, execute_channels
from .completion_client import CompletionClient, get_completion_client

__all__ = [
    "get_logger",
    "CommandLogCollector",
    "sanitize_channel_name",
    "make_unique",
    "truncate_output",
    "split_message",
    "format_error_message",
    "ChannelBotError",
    "UpstreamUnavailable",
    "MalformedResponse",
    "ItemCreationFailure",
    "ChannelSpec",
    "extract_channel_specs",
    "ChannelKind",
    "NormalizedChannel",
    "plan",
    "normalize_channels",
    "render_preview",
    "CreationResult",
    "ChannelDirectory",
    "GuildDirectory",
    "execute_channels",
    "CompletionClient",
    "get_completion_client",
]
