"""Bump reward UI components."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import discord

from .constants import (
    CONFIRM_ROLE_ID,
    DECLINE_ROLE_ID,
    DECLINED_COLOR,
    ERROR_COLOR,
    HIDDEN_USERNAME,
    PROMPT_COLOR,
    REWARD_SUMMARY,
    SUCCESS_COLOR,
    TIMEOUT_COLOR,
)
from .events import ButtonChoice, ModalSubmission
from .validation import MAX_USERNAME_LENGTH, MIN_USERNAME_LENGTH

if TYPE_CHECKING:
    from .workflow import BumpWorkflow


def _embed(title: str, description: str, color: discord.Color) -> discord.Embed:
    return discord.Embed(
        title=title,
        description=description,
        color=color,
        timestamp=datetime.now(timezone.utc),
    )


# ==================== Rewards ====================


def build_reward_embed(
    user: discord.abc.User, minecraft_username: str, hidden: bool = False
) -> discord.Embed:
    """Build the public reward notice; hidden users get a placeholder name."""
    display_name = HIDDEN_USERNAME if hidden else minecraft_username
    embed = _embed(
        "🎮 Bump Detected - Reward Sent!",
        f"{user.mention} bumped the server! 🎁",
        SUCCESS_COLOR,
    )
    embed.add_field(name="🎯 Minecraft Username", value=display_name, inline=True)
    embed.add_field(
        name="⏰ Time",
        value=discord.utils.format_dt(datetime.now(timezone.utc), "F"),
        inline=True,
    )
    embed.add_field(name="💰 Rewards", value=REWARD_SUMMARY, inline=False)
    return embed


def build_username_prompt_embed(user: discord.abc.User) -> discord.Embed:
    embed = _embed(
        "🎮 Minecraft Username Required",
        f"{user.mention}, thanks for bumping! Set your Minecraft username.",
        PROMPT_COLOR,
    )
    embed.add_field(name="📝 Command", value="`!minecraft <username>` or `/minecraft`")
    embed.add_field(name="📖 Example", value="`!minecraft Steve123`")
    return embed


# ==================== Registration ====================


def build_missing_username_embed(user: discord.abc.User) -> discord.Embed:
    embed = _embed(
        "❌ Missing Username",
        f"{user.mention}, provide your Minecraft username!",
        PROMPT_COLOR,
    )
    embed.add_field(name="📝 Usage", value="`!minecraft <username>`")
    return embed


def build_invalid_username_embed(user: discord.abc.User) -> discord.Embed:
    return _embed(
        "❌ Invalid Username",
        f"{user.mention}, username must be {MIN_USERNAME_LENGTH}-{MAX_USERNAME_LENGTH} "
        "characters (letters, numbers, underscores only).",
        ERROR_COLOR,
    )


def build_registered_embed(
    user: discord.abc.User, minecraft_username: str, created: bool
) -> discord.Embed:
    title = "✅ Registration Successful!" if created else "✅ Username Updated!"
    verb = "registered" if created else "updated"
    return _embed(
        title,
        f"{user.mention}, username {verb}: **{minecraft_username}**",
        SUCCESS_COLOR,
    )


def build_store_error_embed(user: discord.abc.User) -> discord.Embed:
    return _embed("❌ Error", f"{user.mention}, error occurred. Try again later.", ERROR_COLOR)


# ==================== Role offer ====================


def build_role_offer_embed(user: discord.abc.User, timeout: float) -> discord.Embed:
    embed = _embed(
        "🎭 Role Assignment",
        f"{user.mention}, would you like the **Bump Role**?",
        PROMPT_COLOR,
    )
    embed.add_field(name="🎯 Benefits", value="Get notified about server events!", inline=False)
    minutes = int(timeout // 60)
    limit = f"{minutes} minutes" if minutes >= 1 else f"{int(timeout)} seconds"
    embed.add_field(name="⏱️ Time Limit", value=f"{limit} to respond", inline=False)
    return embed


def build_role_assigned_embed(user: discord.abc.User) -> discord.Embed:
    return _embed("✅ Role Assigned!", f"Welcome to the bump team, {user.mention}! 🎉", SUCCESS_COLOR)


def build_role_declined_embed(user: discord.abc.User) -> discord.Embed:
    return _embed("👋 Role Declined", f"No problem, {user.mention}!", DECLINED_COLOR)


def build_role_timeout_embed() -> discord.Embed:
    return _embed("⏰ Timed Out", "No response received. Role skipped.", TIMEOUT_COLOR)


class RoleOfferView(discord.ui.View):
    """Yes/no buttons for a bump role offer.

    Stays up until the workflow resolves the offer; the deadline lives in the
    pending registry, not in the view.
    """

    def __init__(self, workflow: "BumpWorkflow", owner_id: int):
        super().__init__(timeout=None)
        self.workflow = workflow
        self.owner_id = owner_id

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message(
                "❌ This role offer isn't for you.", ephemeral=True
            )
            return False
        return True

    @discord.ui.button(
        label="Yes, assign role",
        emoji="✅",
        style=discord.ButtonStyle.success,
        custom_id=CONFIRM_ROLE_ID,
    )
    async def confirm_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self.workflow.handle(ButtonChoice(interaction=interaction, confirmed=True))

    @discord.ui.button(
        label="No, skip role",
        emoji="❌",
        style=discord.ButtonStyle.secondary,
        custom_id=DECLINE_ROLE_ID,
    )
    async def decline_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self.workflow.handle(ButtonChoice(interaction=interaction, confirmed=False))


class UsernameModal(discord.ui.Modal, title="Minecraft Username"):
    """Single-field form for linking a Minecraft username"""

    username: discord.ui.TextInput[discord.ui.Modal] = discord.ui.TextInput(
        label="Minecraft username",
        placeholder="Steve123",
        required=True,
        min_length=MIN_USERNAME_LENGTH,
        max_length=MAX_USERNAME_LENGTH,
    )

    def __init__(self, workflow: "BumpWorkflow"):
        super().__init__()
        self.workflow = workflow

    async def on_submit(self, interaction: discord.Interaction) -> None:
        await self.workflow.handle(
            ModalSubmission(interaction=interaction, username=self.username.value.strip())
        )
