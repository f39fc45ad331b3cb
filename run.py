"""
Discord Channel Architect Bot
A Discord bot that creates channels from natural-language descriptions.

Entry point for the application.
"""

from src.config import init_config
from src.bot import get_bot, run_bot
from src.commands import setup_createchannels_command, setup_message_listener
from src.utils.startup_checks import run_startup_checks

# Initialize configuration (load .env and config.yaml)
init_config()

# Exits with an error if the Discord token or completion API key is missing
run_startup_checks(exit_on_critical=True)

# Get bot instance and set up commands
bot = get_bot()
setup_createchannels_command(bot)
setup_message_listener(bot)

if __name__ == "__main__":
    run_bot()
