"""Core modules for the bump reward bot."""

from .config import BOT_NAME, BOT_VERSION, PACKAGE_DIR, PROJECT_DIR, BotSettings, get_settings
from .errors import BumpBotError, PlatformError, StoreError, ValidationError
from .health_server import HealthCheckServer
from .logging import setup_logging

__all__ = [
    # Config
    "BotSettings",
    "get_settings",
    "BOT_NAME",
    "BOT_VERSION",
    # Paths
    "PACKAGE_DIR",
    "PROJECT_DIR",
    # Errors
    "BumpBotError",
    "PlatformError",
    "StoreError",
    "ValidationError",
    # Services
    "HealthCheckServer",
    # Logging
    "setup_logging",
]
