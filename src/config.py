"""
Configuration settings for the Discord Channel Architect Bot.
"""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load environment variables (safe - just reads .env file)
load_dotenv()

# Track initialization state
_initialized = False

# Discord Configuration
DISCORD_BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN")
DISCORD_APPLICATION_ID = os.getenv("DISCORD_APPLICATION_ID")
GUILD_ID = os.getenv("GUILD_ID")

# Completion API Configuration (OpenRouter speaks the OpenAI chat-completions protocol)
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "gpt-4o-mini")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

# Liveness endpoint
PORT = int(os.getenv("PORT", "3000"))

# Project Paths
BASE_DIR = Path(__file__).parent.parent
CONFIG_YAML_PATH = BASE_DIR / "config.yaml"

# Prompt templates loaded from config.yaml
PROMPT_TEMPLATES: dict = {}


def init_config() -> None:
    """Initialize configuration by loading config.yaml.

    This function should be called once at application startup.
    It's safe to call multiple times.
    """
    global _initialized

    if _initialized:
        return

    if CONFIG_YAML_PATH.exists():
        try:
            with open(CONFIG_YAML_PATH, 'r', encoding='utf-8') as f:
                PROMPT_TEMPLATES.update(yaml.safe_load(f) or {})
        except (OSError, yaml.YAMLError):
            pass  # Fall back to the built-in prompts

    _initialized = True


def get_prompt_template(key: str) -> str:
    """Get a prompt template override from config.yaml.

    Args:
        key: The template key (e.g., 'channel_planner_system')

    Returns:
        The prompt template string, or empty string if not found.
    """
    return PROMPT_TEMPLATES.get(key) or ""


def is_initialized() -> bool:
    """Check if configuration has been initialized."""
    return _initialized


# Completion retry policy
COMPLETION_MAX_ATTEMPTS = 3
COMPLETION_RETRY_DELAY_SECONDS = 1.0

# Completion request parameters
AI_TEMPERATURE = 0.2
AI_MAX_TOKENS = 800

# Discord limits
MAX_CHANNEL_NAME_LENGTH = 100
MAX_MESSAGE_LENGTH = 1950  # Discord max is 2000, leave a small buffer

# Input validation
MAX_PROMPT_LENGTH = 4000

# Prompt truncation length for logs
PROMPT_LOG_TRUNCATE_LENGTH = 100
