"""Discord bot that rewards server bumps with Minecraft in-game items."""

from .core.config import BOT_VERSION

__version__ = BOT_VERSION
