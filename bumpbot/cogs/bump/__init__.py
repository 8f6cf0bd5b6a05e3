"""Bump reward feature module."""

from discord.ext import commands

from .cog import BumpCog
from .workflow import BumpWorkflow

__all__ = ["BumpCog", "BumpWorkflow", "setup"]


async def setup(bot: commands.Bot) -> None:
    """Extension entry point."""
    workflow = BumpWorkflow(
        bot,
        settings=bot.settings,  # type: ignore[attr-defined]
        store=bot.identity_store,  # type: ignore[attr-defined]
    )
    await bot.add_cog(BumpCog(bot, workflow))
