"""Shared test fixtures for bumpbot."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from bumpbot.core.config import BotSettings

BUMP_CHANNEL_ID = 1000
CONSOLE_CHANNEL_ID = 2000
OTHER_CHANNEL_ID = 3000
BUMP_ROLE_ID = 4000
GUILD_ID = 5000
HIDDEN_USER_ID = 851409275010940948
DISBOARD_ID = 302050872383242240


# ── Settings ─────────────────────────────────────────────────


def make_settings(**overrides: Any) -> BotSettings:
    """Build settings with test defaults, ignoring any local .env file."""
    values: dict[str, Any] = {
        "discord_bot_token": "token",
        "bump_channel_id": BUMP_CHANNEL_ID,
        "console_channel_id": CONSOLE_CHANNEL_ID,
        "bump_role_id": BUMP_ROLE_ID,
        "hidden_user_ids": [HIDDEN_USER_ID],
        "nocodb_base_url": "https://nocodb.test",
        "nocodb_api_token": "secret",
        "nocodb_table_id": "tbl_users",
    }
    values.update(overrides)
    return BotSettings(_env_file=None, **values)  # type: ignore[call-arg]


# ── Discord doubles ──────────────────────────────────────────


class AsyncIter:
    """Async iterator over a fixed list, standing in for channel.history()."""

    def __init__(self, items: list[Any]):
        self._items = list(items)

    def __aiter__(self) -> "AsyncIter":
        return self

    async def __anext__(self) -> Any:
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


def make_http_error(cls: type[discord.HTTPException] = discord.HTTPException, status: int = 500):
    response = MagicMock(status=status, reason="Error")
    return cls(response, "boom")


def make_user(user_id: int = 111, name: str = "steve", bot: bool = False) -> MagicMock:
    user = MagicMock()
    user.id = user_id
    user.name = name
    user.bot = bot
    user.mention = f"<@{user_id}>"
    user.__str__.return_value = name
    return user


def make_message(
    author: MagicMock | None = None,
    channel: MagicMock | None = None,
    content: str = "",
    embeds: list[discord.Embed] | None = None,
    interaction: MagicMock | None = None,
    guild: MagicMock | None = None,
) -> MagicMock:
    message = MagicMock()
    message.id = 9999
    message.author = author or make_user()
    message.channel = channel
    message.content = content
    message.embeds = embeds or []
    message.interaction = interaction
    message.guild = guild
    message.edit = AsyncMock()
    message.delete = AsyncMock()
    return message


def make_invocation(user: MagicMock, command: str = "bump") -> MagicMock:
    invocation = MagicMock()
    invocation.name = command
    invocation.user = user
    return invocation


def make_channel(channel_id: int, history: list[MagicMock] | None = None) -> MagicMock:
    channel = MagicMock()
    channel.id = channel_id
    channel.send = AsyncMock(side_effect=lambda *args, **kwargs: make_message(channel=channel))
    items = history or []
    channel.history = MagicMock(side_effect=lambda limit=100: AsyncIter(items[:limit]))
    return channel


def make_member(user: MagicMock, has_role: bool = False) -> MagicMock:
    member = MagicMock()
    member.id = user.id
    member.get_role = MagicMock(return_value=MagicMock(id=BUMP_ROLE_ID) if has_role else None)
    member.add_roles = AsyncMock()
    return member


def make_guild(member: MagicMock | None = None, role_exists: bool = True) -> MagicMock:
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.get_member = MagicMock(return_value=member)
    guild.fetch_member = AsyncMock(side_effect=make_http_error(discord.NotFound, 404))
    role = MagicMock()
    role.id = BUMP_ROLE_ID
    guild.get_role = MagicMock(return_value=role if role_exists else None)
    return guild


def make_interaction(
    user: MagicMock, guild: MagicMock | None = None, channel: MagicMock | None = None
) -> MagicMock:
    interaction = MagicMock()
    interaction.user = user
    interaction.guild = guild
    interaction.channel = channel
    interaction.response.send_message = AsyncMock()
    interaction.response.send_modal = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


# ── Fixtures ─────────────────────────────────────────────────


@pytest.fixture
def settings() -> BotSettings:
    return make_settings()


@pytest.fixture
def bump_channel() -> MagicMock:
    return make_channel(BUMP_CHANNEL_ID)


@pytest.fixture
def console_channel() -> MagicMock:
    return make_channel(CONSOLE_CHANNEL_ID)


@pytest.fixture
def bot(bump_channel: MagicMock, console_channel: MagicMock) -> MagicMock:
    """Bot double that knows the bump and console channels."""
    channels = {BUMP_CHANNEL_ID: bump_channel, CONSOLE_CHANNEL_ID: console_channel}
    client = MagicMock()
    client.get_channel = MagicMock(side_effect=channels.get)
    client.get_user = MagicMock(return_value=None)
    client.fetch_user = AsyncMock()
    return client
