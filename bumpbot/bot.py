"""
Bump reward Discord bot
Built on discord.py 2.x with prefix and slash commands
"""

import asyncio
import logging
import os
import signal

import discord
from discord.ext import commands
from dotenv import load_dotenv

from .core.config import PROJECT_DIR, BotSettings, get_settings
from .core.health_server import HealthCheckServer
from .core.logging import setup_logging
from .database.identity_store import IdentityStore

logger = logging.getLogger("bumpbot")


class BumpBotClient(commands.Bot):
    """Bump reward bot client"""

    def __init__(self, settings: BotSettings):
        intents = discord.Intents.default()
        intents.message_content = True  # bump confirmations and !minecraft
        intents.members = True  # role checks

        super().__init__(
            command_prefix="!",
            intents=intents,
            help_command=None,
        )

        self.settings = settings
        self.identity_store = IdentityStore(
            base_url=settings.nocodb_base_url,
            api_token=settings.nocodb_api_token,
            table_id=settings.nocodb_table_id,
            timeout=settings.store_timeout,
        )
        self.health_server = HealthCheckServer(
            self,
            host=settings.host,
            port=settings.port,
            nocodb_configured=self.identity_store.is_configured,
        )

        self.initial_extensions = ["bumpbot.cogs.bump"]
        self._shutdown_task: asyncio.Task | None = None

    async def setup_hook(self):
        """Start the health server, load cogs and sync slash commands"""
        await self.health_server.start()

        for extension in self.initial_extensions:
            await self.load_extension(extension)
        logger.info(f"Loaded extensions: {', '.join(self.initial_extensions)}")

        guild_id = self.settings.discord_guild_id
        if guild_id:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
            logger.info(f"Synced slash commands to guild {guild_id}")
        else:
            await self.tree.sync()
            logger.info("Synced slash commands globally")

    async def on_ready(self):
        """Set presence and log the active configuration"""
        await self.change_presence(status=discord.Status.online, activity=self.settings.get_activity())

        logger.info(f"Bot online: {self.user} (ID: {self.user.id if self.user else '?'})")
        logger.info(f"Bump channel: {self.settings.bump_channel_id}")
        logger.info(f"Console channel: {self.settings.console_channel_id}")
        logger.info(f"NocoDB: {'Configured' if self.identity_store.is_configured else 'Not configured'}")
        logger.info(f"Bump role: {self.settings.bump_role_id}")
        logger.info(f"Hidden users: {len(self.settings.hidden_user_ids)}")

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError):
        """Handle prefix command errors"""
        if isinstance(error, commands.CommandNotFound):
            return

        logger.error(f"Command error: {error}", exc_info=error)

    async def on_error(self, event_method: str, *args, **kwargs):
        logger.exception(f"Unhandled error in {event_method}")

    async def close(self):
        """Release the Discord connection and every owned resource"""
        logger.info("Shutting down")
        # Unload first so pending role offers are dropped before the connection goes
        for extension in list(self.extensions):
            try:
                await self.unload_extension(extension)
            except Exception as e:
                logger.exception(f"Error unloading {extension}: {e}")
        await self.health_server.stop()
        await self.identity_store.close()
        await super().close()

    def request_shutdown(self, sig: signal.Signals) -> asyncio.Task:
        """Start a graceful shutdown once; repeated signals reuse the same task."""
        if self._shutdown_task is None:
            logger.info(f"{sig.name} received, shutting down gracefully")
            self._shutdown_task = asyncio.create_task(self._shutdown(), name="bot-shutdown")
        return self._shutdown_task

    async def _shutdown(self) -> None:
        if not self.is_closed():
            await self.close()


def _install_signal_handlers(bot: BumpBotClient) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, bot.request_shutdown, sig)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass


async def main():
    """Bot entry point"""
    load_dotenv(dotenv_path=PROJECT_DIR / ".env", encoding="utf-8")
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    settings = get_settings()

    if not settings.discord_bot_token:
        logger.error("DISCORD_BOT_TOKEN is required")
        logger.error("Set it in the .env file: DISCORD_BOT_TOKEN=your_token_here")
        return

    async with BumpBotClient(settings) as bot:
        _install_signal_handlers(bot)
        try:
            await bot.start(settings.discord_bot_token)
        except (KeyboardInterrupt, asyncio.CancelledError):
            if not bot.is_closed():
                await bot.close()


def run() -> None:
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Bot stopped manually")
    except Exception as e:
        logger.error(f"Bot crashed: {e}", exc_info=e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    run()
