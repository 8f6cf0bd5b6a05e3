"""Bump reward cog.

Listens to the bump channel and turns Discord callbacks into workflow events.
"""

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from .events import DirectInvocation, ServiceConfirmation, UserCommand
from .views import UsernameModal
from .workflow import BumpWorkflow

logger = logging.getLogger(__name__)


class BumpCog(commands.Cog):
    """Bump detection and Minecraft reward commands"""

    def __init__(self, bot: commands.Bot, workflow: BumpWorkflow):
        self.bot = bot
        self.workflow = workflow
        self.bump_channel_id = workflow.settings.bump_channel_id

    async def cog_unload(self) -> None:
        await self.workflow.shutdown()
        logger.info("Bump cog unloaded")

    def _in_bump_channel(self, channel: Optional[discord.abc.Snowflake]) -> bool:
        return channel is not None and channel.id == self.bump_channel_id

    async def _refuse_outside_channel(self, interaction: discord.Interaction) -> bool:
        if self._in_bump_channel(interaction.channel):
            return False
        await interaction.response.send_message(
            f"This command only works in <#{self.bump_channel_id}>", ephemeral=True
        )
        return True

    # ==================== Listeners ====================

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """Route bot messages in the bump channel to bump detection."""
        if not self._in_bump_channel(message.channel):
            return
        if message.author.bot:
            await self.workflow.handle(ServiceConfirmation(message=message))

    # ==================== Commands ====================

    @commands.command(name="minecraft")
    async def minecraft_prefix(self, ctx: commands.Context, username: Optional[str] = None):
        """!minecraft <username> - link your Minecraft username"""
        if not self._in_bump_channel(ctx.channel):
            return
        await self.workflow.handle(UserCommand(message=ctx.message, username=username))

    @app_commands.command(name="minecraft", description="Link your Minecraft username")
    async def minecraft_slash(self, interaction: discord.Interaction):
        if await self._refuse_outside_channel(interaction):
            return
        await interaction.response.send_modal(UsernameModal(self.workflow))

    @app_commands.command(name="bump", description="Claim your reward for bumping the server")
    async def bump_slash(self, interaction: discord.Interaction):
        if await self._refuse_outside_channel(interaction):
            return
        await interaction.response.send_message("🚀 Thanks for bumping!", ephemeral=True)
        await self.workflow.handle(DirectInvocation(user=interaction.user))
