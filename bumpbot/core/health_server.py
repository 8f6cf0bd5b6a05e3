"""HTTP health check server"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from aiohttp import web

if TYPE_CHECKING:
    from discord.ext.commands import Bot

logger = logging.getLogger(__name__)


class HealthCheckServer:
    """HTTP health check server"""

    def __init__(
        self,
        bot: "Bot | None" = None,
        host: str = "0.0.0.0",
        port: int = 10000,
        nocodb_configured: bool = False,
    ) -> None:
        self.bot: Any = bot
        self.host = host
        self.port = port
        self.nocodb_configured = nocodb_configured
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self._heartbeat_task: asyncio.Task | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Configure HTTP routes"""
        self.app.router.add_get("/", self.handle_root)
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/ping", self.handle_ping)

    @property
    def uptime(self) -> int:
        return int(time.time() - self._start_time)

    def _connection_state(self) -> str:
        if self.bot is not None and self.bot.user is not None:
            return "connected"
        return "disconnected"

    async def handle_root(self, request: web.Request) -> web.Response:
        """Root endpoint - service status"""
        return web.json_response(
            {
                "status": "Bump reward bot is running!",
                "uptime": self.uptime,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "bot_status": self._connection_state(),
            }
        )

    async def handle_health(self, request: web.Request) -> web.Response:
        """Liveness endpoint, always 200"""
        connected = self._connection_state() == "connected"
        return web.json_response(
            {
                "status": "healthy",
                "bot": self._connection_state(),
                "guilds": len(self.bot.guilds) if connected else 0,
                "nocodb_configured": self.nocodb_configured,
                "uptime": self.uptime,
            }
        )

    async def handle_ping(self, request: web.Request) -> web.Response:
        """Ping endpoint for external keep-alive monitors"""
        return web.Response(text="pong")

    async def _heartbeat(self) -> None:
        """Log uptime and bot status every five minutes"""
        while True:
            await asyncio.sleep(300)
            ready = self.bot.is_ready() if self.bot else False
            guilds = len(self.bot.guilds) if ready else 0
            logger.info(f"Heartbeat: uptime={self.uptime}s, ready={ready}, guilds={guilds}")

    async def start(self) -> None:
        """Start health check server"""
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()
            site = web.TCPSite(self.runner, self.host, self.port)
            await site.start()

            self._heartbeat_task = asyncio.create_task(self._heartbeat())

            logger.info(f"Health server started on {self.host}:{self.port}")
        except Exception as e:
            logger.exception(f"Failed to start health server: {e}")
            raise

    async def stop(self) -> None:
        """Stop health check server"""
        if self._heartbeat_task:
            self._heartbeat_task.cancel()
            self._heartbeat_task = None
        if self.runner:
            try:
                await self.runner.cleanup()
                logger.info("Health server stopped")
            except Exception as e:
                logger.exception(f"Error stopping health server: {e}")
            self.runner = None
