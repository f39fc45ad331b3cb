"""
Mention listener: answers free-form prompts addressed to the bot.

Unlike /createchannels, the completion text is sent back as-is and never
parsed into channels.
"""

import re
from typing import Callable

import discord

from ..utils.completion_client import get_completion_client, get_mention_prompt
from ..utils.exceptions import UpstreamUnavailable
from ..utils.logging import logger
from ..utils.message_templates import MessageTemplates
from ..utils.text_utils import split_message


def strip_mentions(content: str, user_id: int) -> str:
    """Remove <@id> and <@!id> tokens for the given user from content."""
    return re.sub(rf"<@!?{user_id}>", "", content).strip()


def setup_message_listener(bot) -> Callable:
    """Set up the listener that answers messages mentioning the bot.

    Returns:
        The on_message event handler function.
    """
    completion_client = get_completion_client()

    @bot.event
    async def on_message(message: discord.Message) -> None:
        """Reply to messages that mention the bot."""
        if message.author.bot:
            return

        if bot.user is None or bot.user not in message.mentions:
            return

        prompt = strip_mentions(message.content, bot.user.id)
        if not prompt:
            await message.reply(MessageTemplates.MENTION_EMPTY, mention_author=False)
            return

        logger.info(f"Mention from {message.author.name}: {len(prompt)} chars")

        async with message.channel.typing():
            try:
                answer = await completion_client.complete(prompt, system_prompt=get_mention_prompt())
            except UpstreamUnavailable as e:
                logger.error(f"Mention reply failed: {e.last_error}")
                await message.reply(MessageTemplates.MENTION_UNAVAILABLE, mention_author=False)
                return

        chunks = split_message(answer)
        await message.reply(chunks[0], mention_author=False)
        for chunk in chunks[1:]:
            await message.channel.send(chunk)

    return on_message
