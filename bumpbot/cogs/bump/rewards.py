"""Bump reward dispatch.

Rewards are granted by posting plain-text commands into a channel that a
game-server integration executes. Nothing confirms that the server ran them.
"""

import logging
from collections.abc import Iterable
from typing import Any, Optional

import discord

from .views import build_reward_embed

logger = logging.getLogger(__name__)


def build_console_commands(minecraft_username: str) -> list[str]:
    """Console commands granting one bump reward, in send order."""
    return [
        f"crate key give {minecraft_username} balanced 1 offline",
        f"tempfly give {minecraft_username} 3m",
    ]


class RewardDispatcher:
    """Announces rewards in the bump channel and issues console commands"""

    def __init__(
        self,
        bot: Any,
        bump_channel_id: int,
        console_channel_id: int,
        hidden_user_ids: Iterable[int] = (),
    ):
        self.bot = bot
        self.bump_channel_id = bump_channel_id
        self.console_channel_id = console_channel_id
        self.hidden_user_ids = frozenset(hidden_user_ids)

    def is_hidden(self, user_id: int) -> bool:
        return user_id in self.hidden_user_ids

    def _get_channel(self, channel_id: int, label: str) -> Optional[Any]:
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            logger.error(f"{label} channel not found: {channel_id}")
        return channel

    async def announce_reward(
        self, user: discord.abc.User, minecraft_username: str, hidden: bool = False
    ) -> Optional[discord.Message]:
        """Post the reward notice in the bump channel."""
        channel = self._get_channel(self.bump_channel_id, "Bump")
        if channel is None:
            return None

        embed = build_reward_embed(user, minecraft_username, hidden=hidden)
        try:
            message = await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.error(f"Error sending reward message for {user}: {e}")
            return None

        logger.info(f"Reward message sent for {user}")
        return message

    async def issue_console_commands(self, minecraft_username: str) -> list[str]:
        """Send the reward commands to the console channel.

        Returns:
            The commands that were sent successfully
        """
        channel = self._get_channel(self.console_channel_id, "Console")
        if channel is None:
            return []

        sent: list[str] = []
        try:
            for command in build_console_commands(minecraft_username):
                await channel.send(command)
                sent.append(command)
        except discord.HTTPException as e:
            logger.error(f"Error sending console commands for {minecraft_username}: {e}")
            return sent

        logger.info(f"Console commands sent for {minecraft_username}")
        return sent

    async def dispatch(self, user: discord.abc.User, minecraft_username: str) -> None:
        """Announce and grant one bump reward."""
        await self.announce_reward(user, minecraft_username, hidden=self.is_hidden(user.id))
        await self.issue_console_commands(minecraft_username)
