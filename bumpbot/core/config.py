"""Bump bot configuration using Pydantic Settings"""

import logging
from functools import lru_cache
from pathlib import Path

import discord
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# === Path Configuration ===
CORE_DIR = Path(__file__).parent
PACKAGE_DIR = CORE_DIR.parent
PROJECT_DIR = PACKAGE_DIR.parent

BOT_NAME = "bumpbot"
BOT_VERSION = "1.0.0"

DEFAULT_BUMP_ROLE_ID = 1382278107024851005

# Discord user IDs whose Minecraft usernames are redacted in public messages
DEFAULT_HIDDEN_USER_IDS = [
    851409275010940948,
    710833692490203156,
    680123642557759539,
    466884574081843202,
]


class BotSettings(BaseSettings):
    """Bump bot settings"""

    model_config = SettingsConfigDict(
        env_file=PROJECT_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discord
    discord_bot_token: str = Field(default="", description="Discord bot token")
    discord_guild_id: int | None = Field(
        default=None, description="Guild to sync slash commands to (faster than global sync)"
    )
    discord_activity_name: str = Field(
        default="for server bumps!", description="Watching-activity text shown on the bot"
    )

    # Channels and roles
    bump_channel_id: int = Field(..., description="Channel monitored for bumps")
    console_channel_id: int = Field(..., description="Game server console channel")
    bump_role_id: int = Field(default=DEFAULT_BUMP_ROLE_ID, description="Role offered to bumpers")
    hidden_user_ids: list[int] = Field(
        default_factory=lambda: list(DEFAULT_HIDDEN_USER_IDS),
        description="Users whose Minecraft username is hidden in announcements",
    )

    # NocoDB
    nocodb_base_url: str = Field(default="", description="NocoDB instance URL")
    nocodb_api_token: str = Field(default="", description="NocoDB xc-token")
    nocodb_table_id: str = Field(default="", description="NocoDB users table ID")
    nocodb_workspace_id: str = Field(default="", description="NocoDB workspace ID")
    nocodb_base_id: str = Field(default="", description="NocoDB base ID")
    store_timeout: float = Field(default=10.0, description="NocoDB request timeout in seconds")

    # Timing
    role_offer_timeout: float = Field(default=120.0, description="Seconds to answer a role offer")
    prompt_cleanup_delay: float = Field(
        default=10.0, description="Seconds before a resolved role prompt is deleted"
    )
    history_window: int = Field(default=10, description="Messages scanned to attribute a bump")

    # Health server
    host: str = Field(default="0.0.0.0", description="Health server host")
    port: int = Field(default=10000, description="Health server port")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("nocodb_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("history_window")
    @classmethod
    def validate_history_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError("HISTORY_WINDOW must be >= 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @property
    def nocodb_configured(self) -> bool:
        """Check if the identity store is configured"""
        return bool(self.nocodb_base_url and self.nocodb_api_token and self.nocodb_table_id)

    def get_activity(self) -> discord.Activity:
        return discord.Activity(type=discord.ActivityType.watching, name=self.discord_activity_name)


@lru_cache
def get_settings() -> BotSettings:
    """Get cached settings instance"""
    return BotSettings()  # type: ignore[call-arg]
