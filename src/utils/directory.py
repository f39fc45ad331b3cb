"""
Channel creation against the Discord directory API.

Categories are created first so their ids can be handed to the channels that
reference them. Every call is wrapped on its own: one rejected item is
recorded in the results and never stops its siblings.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence

import discord

from .exceptions import ItemCreationFailure
from .logging import logger
from .planner import ChannelKind, NormalizedChannel


AUDIT_LOG_REASON = "Requested via /createchannels"


@dataclass
class CreationResult:
    """Outcome of a single create call."""
    name: str
    type: Optional[ChannelKind] = None
    created: bool = False
    error: Optional[str] = None

    @classmethod
    def success(cls, channel: NormalizedChannel) -> "CreationResult":
        return cls(name=channel.name, type=channel.type, created=True)

    @classmethod
    def failure(cls, channel: NormalizedChannel, error: str) -> "CreationResult":
        return cls(name=channel.name, type=channel.type, error=error)


class ChannelDirectory(Protocol):
    """Protocol for the directory API the executor writes to."""

    async def create_category(self, name: str) -> int:
        """Create a category and return its id."""
        ...

    async def create_channel(
        self,
        name: str,
        kind: ChannelKind,
        topic: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a text or voice channel and return its id."""
        ...


class GuildDirectory:
    """ChannelDirectory backed by a discord.py Guild."""

    def __init__(self, guild: discord.Guild, reason: str = AUDIT_LOG_REASON) -> None:
        self.guild = guild
        self.reason = reason
        self._categories: Dict[int, discord.CategoryChannel] = {}

    async def create_category(self, name: str) -> int:
        try:
            category = await self.guild.create_category(name, reason=self.reason)
        except discord.HTTPException as e:
            raise ItemCreationFailure(name, e.text or str(e)) from e
        self._categories[category.id] = category
        return category.id

    def _resolve_category(self, parent_id: Optional[int]) -> Optional[discord.CategoryChannel]:
        if parent_id is None:
            return None
        category = self._categories.get(parent_id)
        if category is None:
            channel = self.guild.get_channel(parent_id)
            if isinstance(channel, discord.CategoryChannel):
                category = channel
        return category

    async def create_channel(
        self,
        name: str,
        kind: ChannelKind,
        topic: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> int:
        category = self._resolve_category(parent_id)
        try:
            if kind is ChannelKind.VOICE:
                channel = await self.guild.create_voice_channel(
                    name, category=category, reason=self.reason
                )
            else:
                channel = await self.guild.create_text_channel(
                    name, category=category, topic=topic, reason=self.reason
                )
        except discord.HTTPException as e:
            raise ItemCreationFailure(name, e.text or str(e)) from e
        return channel.id


async def execute_channels(
    channels: Sequence[NormalizedChannel],
    directory: ChannelDirectory,
) -> List[CreationResult]:
    """Create normalized channels, categories first.

    Args:
        channels: Output of the planner.
        directory: Where to create them.

    Returns:
        One result per channel: category results in input order, followed by
        the other channels in input order.
    """
    results: List[CreationResult] = []
    category_ids: Dict[str, int] = {}

    for channel in channels:
        if channel.type is not ChannelKind.CATEGORY:
            continue
        try:
            category_ids[channel.name] = await directory.create_category(channel.name)
            results.append(CreationResult.success(channel))
            logger.info(f"Created category '{channel.name}'")
        except Exception as e:
            logger.error(f"Failed to create category '{channel.name}': {type(e).__name__}: {e}")
            results.append(CreationResult.failure(channel, str(e) or type(e).__name__))

    for channel in channels:
        if channel.type is ChannelKind.CATEGORY:
            continue
        parent_id = category_ids.get(channel.parent) if channel.parent else None
        if channel.parent and parent_id is None:
            logger.warning(f"Parent '{channel.parent}' unavailable, creating '{channel.name}' without it")
        topic = channel.topic if channel.type is ChannelKind.TEXT else None
        try:
            await directory.create_channel(channel.name, channel.type, topic=topic, parent_id=parent_id)
            results.append(CreationResult.success(channel))
            logger.info(f"Created {channel.type.value} channel '{channel.name}'")
        except Exception as e:
            logger.error(f"Failed to create channel '{channel.name}': {type(e).__name__}: {e}")
            results.append(CreationResult.failure(channel, str(e) or type(e).__name__))

    return results
