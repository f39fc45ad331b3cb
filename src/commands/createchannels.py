"""
Create channels command for the Discord Channel Architect Bot.
"""

import traceback
import uuid
from typing import Optional, Callable

import discord
from discord import app_commands

from ..config import MAX_PROMPT_LENGTH, PROMPT_LOG_TRUNCATE_LENGTH
from ..utils.channel_specs import extract_channel_specs
from ..utils.completion_client import CompletionClient, NO_RESPONSE, get_completion_client
from ..utils.directory import ChannelDirectory, GuildDirectory, execute_channels
from ..utils.exceptions import MalformedResponse, UpstreamUnavailable
from ..utils.logging import CommandLogCollector, logger
from ..utils.message_templates import MessageTemplates
from ..utils.planner import plan
from ..utils.text_utils import format_error_message, truncate_output


async def run_channel_pipeline(
    prompt: str,
    dry_run: bool,
    completion_client: CompletionClient,
    directory: Optional[ChannelDirectory],
    command_log: Optional[CommandLogCollector] = None,
) -> str:
    """Turn a natural-language prompt into a preview or created channels.

    Args:
        prompt: The user's description of the channels.
        dry_run: If True, only render the preview.
        completion_client: Client for the language model.
        directory: Where channels are created; may be None in dry-run mode.
        command_log: Per-invocation log collector.

    Returns:
        The reply text. Errors are reported in the text, never raised.
    """
    command_log = command_log or CommandLogCollector(uuid.uuid4().hex[:8])

    try:
        raw = await completion_client.complete(prompt)
        if raw == NO_RESPONSE:
            command_log.warning("Model returned no response")
            return MessageTemplates.NO_MODEL_RESPONSE

        specs = extract_channel_specs(raw)
        command_log.info(f"Model proposed {len(specs)} channel(s)")

        planned = plan(specs, dry_run)
        if dry_run:
            command_log.info("Dry run, no channels created")
            return planned

        if directory is None:
            return MessageTemplates.GUILD_ONLY

        results = await execute_channels(planned, directory)
        failed = sum(1 for r in results if not r.created)
        command_log.info(f"Created {len(results) - failed} item(s), {failed} failed")
        return MessageTemplates.format_creation_report(results)

    except UpstreamUnavailable as e:
        command_log.error(f"Completion unavailable: {e.last_error}")
        return MessageTemplates.UPSTREAM_UNAVAILABLE
    except MalformedResponse as e:
        command_log.error(f"Malformed model response: {e}")
        return MessageTemplates.format_malformed_response(str(e))
    except Exception as e:
        command_log.error(f"Unexpected failure: {type(e).__name__}: {e}\n{traceback.format_exc()}")
        return MessageTemplates.format_unexpected_error(str(e) or type(e).__name__)


def setup_createchannels_command(bot) -> Callable:
    """Set up the /createchannels command on the bot."""

    @bot.tree.command(name="createchannels", description="Create Discord channels from a natural language prompt.")
    @app_commands.describe(
        prompt="Describe the channels to create",
        dryrun="Set 1 for preview, 0 to actually create"
    )
    async def createchannels(
        interaction: discord.Interaction,
        prompt: str,
        dryrun: Optional[int] = None
    ) -> None:
        """Handle the /createchannels command."""
        prompt = prompt.strip()
        if not prompt:
            await interaction.response.send_message(
                format_error_message("Invalid Input", "Prompt cannot be empty."),
                ephemeral=True
            )
            return

        if len(prompt) > MAX_PROMPT_LENGTH:
            await interaction.response.send_message(
                format_error_message("Invalid Input", f"Prompt is too long (max {MAX_PROMPT_LENGTH:,} characters)."),
                ephemeral=True
            )
            return

        await interaction.response.defer()

        dry_run = bool(dryrun)
        command_log = CommandLogCollector(uuid.uuid4().hex[:8])
        command_log.info(f"User '{interaction.user.name}' started /createchannels (dry run: {dry_run})")
        command_log.info(
            f"Prompt: {prompt[:PROMPT_LOG_TRUNCATE_LENGTH]}{'...' if len(prompt) > PROMPT_LOG_TRUNCATE_LENGTH else ''}"
        )

        directory = GuildDirectory(interaction.guild) if interaction.guild else None
        reply = await run_channel_pipeline(
            prompt, dry_run, get_completion_client(), directory, command_log
        )

        try:
            await interaction.edit_original_response(content=truncate_output(reply))
        except discord.HTTPException as e:
            logger.error(f"Failed to edit /createchannels reply: {e}")

    return createchannels
