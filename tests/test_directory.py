"""
Tests for the directory executor and the discord.py-backed directory.
"""

from itertools import count
from typing import Optional
from unittest.mock import MagicMock, AsyncMock

import discord
import pytest

from src.utils.directory import CreationResult, GuildDirectory, execute_channels
from src.utils.exceptions import ItemCreationFailure
from src.utils.planner import ChannelKind, NormalizedChannel


class FakeDirectory:
    """In-memory ChannelDirectory that records calls and can fail on demand."""

    def __init__(self, fail_names=()):
        self.fail_names = set(fail_names)
        self.calls = []
        self._ids = count(1000)

    async def create_category(self, name: str) -> int:
        self.calls.append(("category", name, None, None))
        if name in self.fail_names:
            raise ItemCreationFailure(name, "Missing Permissions")
        return next(self._ids)

    async def create_channel(
        self,
        name: str,
        kind: ChannelKind,
        topic: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> int:
        self.calls.append((kind.value, name, topic, parent_id))
        if name in self.fail_names:
            raise RuntimeError(f"could not create {name}")
        return next(self._ids)


def text(name, parent=None, topic=None):
    return NormalizedChannel(name=name, type=ChannelKind.TEXT, topic=topic, parent=parent)


def voice(name, parent=None, topic=None):
    return NormalizedChannel(name=name, type=ChannelKind.VOICE, topic=topic, parent=parent)


def category(name):
    return NormalizedChannel(name=name, type=ChannelKind.CATEGORY)


class TestExecuteChannels:
    """Tests for execute_channels."""

    @pytest.mark.asyncio
    async def test_creates_categories_before_channels(self):
        directory = FakeDirectory()
        channels = [text("lobby"), category("team-alpha"), text("standup", parent="team-alpha")]

        await execute_channels(channels, directory)

        assert [c[1] for c in directory.calls] == ["team-alpha", "lobby", "standup"]

    @pytest.mark.asyncio
    async def test_parent_resolves_to_created_category_id(self):
        directory = FakeDirectory()
        channels = [category("team-alpha"), text("standup", parent="team-alpha")]

        await execute_channels(channels, directory)

        assert directory.calls[0] == ("category", "team-alpha", None, None)
        assert directory.calls[1] == ("text", "standup", None, 1000)

    @pytest.mark.asyncio
    async def test_unresolved_parent_creates_parentless_channel(self):
        directory = FakeDirectory()

        await execute_channels([text("standup", parent="ghost")], directory)

        assert directory.calls == [("text", "standup", None, None)]

    @pytest.mark.asyncio
    async def test_topic_is_ignored_for_voice(self):
        directory = FakeDirectory()

        await execute_channels([voice("huddle", topic="Talk here"), text("news", topic="Updates")], directory)

        assert directory.calls == [("voice", "huddle", None, None), ("text", "news", "Updates", None)]

    @pytest.mark.asyncio
    async def test_all_success_results(self):
        results = await execute_channels([category("team"), text("chat", parent="team")], FakeDirectory())

        assert results == [
            CreationResult(name="team", type=ChannelKind.CATEGORY, created=True),
            CreationResult(name="chat", type=ChannelKind.TEXT, created=True),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing_index", [0, 2, 4])
    async def test_single_failure_does_not_block_siblings(self, failing_index):
        channels = [text(f"channel-{i}") for i in range(5)]
        directory = FakeDirectory(fail_names={f"channel-{failing_index}"})

        results = await execute_channels(channels, directory)

        assert len(results) == 5
        errors = [r for r in results if not r.created]
        assert len(errors) == 1
        assert errors[0].name == f"channel-{failing_index}"
        assert "could not create" in errors[0].error
        assert sum(1 for r in results if r.created) == 4
        assert [r.name for r in results] == [c.name for c in channels]

    @pytest.mark.asyncio
    async def test_category_failure_is_reported_and_children_become_parentless(self):
        directory = FakeDirectory(fail_names={"team"})

        results = await execute_channels([category("team"), text("chat", parent="team")], directory)

        assert results[0] == CreationResult(
            name="team", type=ChannelKind.CATEGORY, error="Missing Permissions"
        )
        assert results[1].created is True
        assert directory.calls[1] == ("text", "chat", None, None)

    @pytest.mark.asyncio
    async def test_empty_input(self):
        directory = FakeDirectory()
        assert await execute_channels([], directory) == []
        assert directory.calls == []


class TestGuildDirectory:
    """Tests for GuildDirectory."""

    @pytest.fixture
    def guild(self):
        guild = MagicMock()
        guild.create_category = AsyncMock(return_value=MagicMock(id=111))
        guild.create_text_channel = AsyncMock(return_value=MagicMock(id=222))
        guild.create_voice_channel = AsyncMock(return_value=MagicMock(id=333))
        guild.get_channel = MagicMock(return_value=None)
        return guild

    @pytest.mark.asyncio
    async def test_create_category(self, guild):
        directory = GuildDirectory(guild)

        assert await directory.create_category("team") == 111
        guild.create_category.assert_awaited_once()
        assert guild.create_category.call_args.args[0] == "team"

    @pytest.mark.asyncio
    async def test_text_channel_under_created_category(self, guild):
        directory = GuildDirectory(guild)
        category_id = await directory.create_category("team")

        channel_id = await directory.create_channel("chat", ChannelKind.TEXT, topic="Hi", parent_id=category_id)

        assert channel_id == 222
        kwargs = guild.create_text_channel.call_args.kwargs
        assert kwargs["topic"] == "Hi"
        assert kwargs["category"] is guild.create_category.return_value

    @pytest.mark.asyncio
    async def test_voice_channel_has_no_topic(self, guild):
        directory = GuildDirectory(guild)

        assert await directory.create_channel("huddle", ChannelKind.VOICE, topic="ignored") == 333
        kwargs = guild.create_voice_channel.call_args.kwargs
        assert "topic" not in kwargs
        assert kwargs["category"] is None

    @pytest.mark.asyncio
    async def test_http_error_becomes_item_creation_failure(self, guild):
        response = MagicMock(status=403, reason="Forbidden")
        guild.create_text_channel.side_effect = discord.Forbidden(response, "Missing Permissions")
        directory = GuildDirectory(guild)

        with pytest.raises(ItemCreationFailure) as exc_info:
            await directory.create_channel("chat", ChannelKind.TEXT)

        assert exc_info.value.name == "chat"
        assert "Missing Permissions" in str(exc_info.value)
