"""
Discord bot client for the Channel Architect Bot.
"""

import asyncio
import signal
from typing import Optional

import discord
from discord import app_commands

from .config import DISCORD_BOT_TOKEN, DISCORD_APPLICATION_ID, GUILD_ID, OPENROUTER_MODEL, PORT
from .utils.health import start_health_server
from .utils.logging import logger


class ChannelArchitectBot(discord.Client):
    """Discord bot client with application commands support."""

    def __init__(self, guild_id: Optional[str] = GUILD_ID) -> None:
        intents = discord.Intents.default()
        intents.message_content = True  # Required for reading mention prompts
        super().__init__(
            intents=intents,
            application_id=int(DISCORD_APPLICATION_ID) if DISCORD_APPLICATION_ID else None,
        )
        self.tree = app_commands.CommandTree(self)
        self.guild_id = guild_id

    async def setup_hook(self) -> None:
        """Register slash commands, guild-scoped when a guild id is configured."""
        try:
            if self.guild_id:
                guild = discord.Object(id=int(self.guild_id))
                self.tree.copy_global_to(guild=guild)
                await self.tree.sync(guild=guild)
                logger.info(f"Registered guild commands for guild {self.guild_id}")
            else:
                await self.tree.sync()
                logger.info("Registered global commands")
        except (discord.HTTPException, ValueError) as e:
            logger.error(f"Command registration failed: {e}")

    async def cleanup(self) -> None:
        """Cleanup resources before shutdown."""
        logger.info("Cleaning up resources...")
        if not self.is_closed():
            await self.close()
        logger.info("Cleanup complete")


# Bot instance management using factory pattern
_bot_instance: Optional[ChannelArchitectBot] = None


def get_bot() -> ChannelArchitectBot:
    """Get or create the bot instance (singleton pattern)."""
    global _bot_instance
    if _bot_instance is None:
        _bot_instance = ChannelArchitectBot()
    return _bot_instance


def create_bot() -> ChannelArchitectBot:
    """Create a new bot instance (useful for testing)."""
    return ChannelArchitectBot()


def reset_bot() -> None:
    """Reset the global bot instance (useful for testing)."""
    global _bot_instance
    _bot_instance = None


async def on_ready_handler(bot: ChannelArchitectBot) -> None:
    """Handle the on_ready event."""
    logger.info(f"Bot is ready! Logged in as {bot.user}")
    logger.info(f"Completion model: {OPENROUTER_MODEL}")
    logger.info(f"Command scope: {'guild ' + bot.guild_id if bot.guild_id else 'global'}")
    logger.info(
        f"Invite URL: https://discord.com/api/oauth2/authorize?"
        f"client_id={bot.user.id}&permissions=68624&scope=bot%20applications.commands"
    )


def setup_signal_handlers(bot: ChannelArchitectBot) -> None:
    """Close the bot gracefully on SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()

    def signal_handler(sig: int) -> None:
        logger.info(f"Received signal {sig}, initiating graceful shutdown...")
        asyncio.ensure_future(bot.cleanup())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler, sig)
        except (NotImplementedError, AttributeError):
            pass  # add_signal_handler is unavailable on Windows event loops


async def serve(bot: ChannelArchitectBot, token: str, port: int = PORT) -> None:
    """Run the health server and the Discord connection until the bot closes."""
    health_runner = await start_health_server(port)
    setup_signal_handlers(bot)
    try:
        async with bot:
            await bot.start(token)
    finally:
        await health_runner.cleanup()
        logger.info("Health server stopped")


def run_bot() -> None:
    """Start the Discord bot."""
    if not DISCORD_BOT_TOKEN:
        raise ValueError("DISCORD_BOT_TOKEN environment variable is required")

    bot = get_bot()

    @bot.event
    async def on_ready() -> None:
        """Discord event handler for when the bot is ready."""
        await on_ready_handler(bot)

    logger.info("Starting Discord Channel Architect Bot...")
    asyncio.run(serve(bot, DISCORD_BOT_TOKEN))
