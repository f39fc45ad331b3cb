"""
Discord bot commands for the Channel Architect Bot.
"""

from .createchannels import setup_createchannels_command, run_channel_pipeline
from .mention import setup_message_listener

__all__ = [
    "setup_createchannels_command",
    "run_channel_pipeline",
    "setup_message_listener",
]
