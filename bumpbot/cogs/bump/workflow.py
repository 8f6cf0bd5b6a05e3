"""Bump reward workflow.

Routes bump events to the detection, registration and role-offer flows:

    confirmation → correlator → identity store → rewards | username prompt
    username     → validation → identity store → role offer → rewards

Every flow catches and logs its own failures; one bad event never stops the
others.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import discord

from ...core.config import BotSettings
from ...core.errors import PlatformError, StoreError, ValidationError
from ...database.identity_store import IdentityStore
from .constants import ERROR_REPLY_LIFETIME, SUCCESS_REPLY_LIFETIME, USERNAME_PROMPT_LIFETIME
from .correlator import BumpCorrelator
from .events import (
    BumpEvent,
    ButtonChoice,
    DirectInvocation,
    ModalSubmission,
    ServiceConfirmation,
    UserCommand,
)
from .pending import PendingAssignment, PendingAssignmentRegistry
from .rewards import RewardDispatcher
from .validation import ensure_valid_username
from .views import (
    RoleOfferView,
    build_invalid_username_embed,
    build_missing_username_embed,
    build_registered_embed,
    build_role_assigned_embed,
    build_role_declined_embed,
    build_role_offer_embed,
    build_role_timeout_embed,
    build_store_error_embed,
    build_username_prompt_embed,
)

logger = logging.getLogger(__name__)

Reply = Callable[[discord.Embed, int], Awaitable[None]]

ROLE_GRANT_FAILED = "❌ Failed to assign role."
NO_PENDING_OFFER = "❌ No pending assignment found."


class BumpWorkflow:
    """Bump detection, username registration and role offers"""

    def __init__(
        self,
        bot: Any,
        settings: BotSettings,
        store: IdentityStore,
        correlator: Optional[BumpCorrelator] = None,
        registry: Optional[PendingAssignmentRegistry] = None,
        rewards: Optional[RewardDispatcher] = None,
    ):
        self.bot = bot
        self.settings = settings
        self.store = store
        self.correlator = correlator or BumpCorrelator(
            settings.bump_channel_id, history_window=settings.history_window
        )
        self.registry = registry or PendingAssignmentRegistry(timeout=settings.role_offer_timeout)
        self.rewards = rewards or RewardDispatcher(
            bot,
            bump_channel_id=settings.bump_channel_id,
            console_channel_id=settings.console_channel_id,
            hidden_user_ids=settings.hidden_user_ids,
        )

    async def handle(self, event: BumpEvent) -> None:
        """Route one event; errors are logged, never raised."""
        try:
            await self._route(event)
        except Exception as e:
            logger.exception(f"Error handling {type(event).__name__}: {e}")

    async def _route(self, event: BumpEvent) -> None:
        if isinstance(event, DirectInvocation):
            await self.process_bump(event.user)
        elif isinstance(event, ServiceConfirmation):
            await self.on_service_message(event.message)
        elif isinstance(event, UserCommand):
            await self.on_user_command(event)
        elif isinstance(event, ModalSubmission):
            await self.on_modal_submission(event)
        elif isinstance(event, ButtonChoice):
            await self.resolve_choice(event)
        else:
            raise TypeError(f"Unsupported bump event: {event!r}")

    # ==================== Helpers ====================

    def _bump_channel(self) -> Optional[Any]:
        channel = self.bot.get_channel(self.settings.bump_channel_id)
        if channel is None:
            logger.error(f"Bump channel not found: {self.settings.bump_channel_id}")
        return channel

    async def _fetch_member(self, guild: discord.Guild, user_id: int) -> Optional[discord.Member]:
        if member := guild.get_member(user_id):
            return member
        try:
            return await guild.fetch_member(user_id)
        except (discord.NotFound, discord.HTTPException):
            return None

    async def _edit_prompt(self, prompt: discord.Message, **kwargs: Any) -> None:
        try:
            await prompt.edit(view=None, **kwargs)
        except discord.HTTPException as e:
            logger.warning(f"Could not edit role prompt {prompt.id}: {e}")

    async def _schedule_cleanup(self, prompt: discord.Message) -> None:
        # Message.delete(delay=...) runs in the background and ignores HTTP errors
        await prompt.delete(delay=self.settings.prompt_cleanup_delay)

    # ==================== Bump detection ====================

    async def on_service_message(self, message: discord.Message) -> None:
        if not self.correlator.is_confirmation(message):
            return

        logger.info(f"[BUMP_DETECT] Bump detected from: {message.author}")
        user = await self.correlator.resolve_invoker(message)
        if user is None:
            return
        await self.process_bump(user)

    async def process_bump(self, user: discord.abc.User) -> None:
        """Reward a bumper with a linked username, or ask them to link one."""
        logger.info(f"Processing bump: {user}")
        try:
            record = await self.store.find_by_discord_id(user.id)
        except StoreError as e:
            logger.error(f"Bump by {user} abandoned, identity lookup failed: {e}")
            return

        if record is not None and record.minecraft_username:
            await self.rewards.dispatch(user, record.minecraft_username)
        else:
            await self.prompt_for_username(user)

    async def prompt_for_username(self, user: discord.abc.User) -> None:
        channel = self._bump_channel()
        if channel is None:
            return
        try:
            await channel.send(
                content=user.mention,
                embed=build_username_prompt_embed(user),
                delete_after=USERNAME_PROMPT_LIFETIME,
            )
        except discord.HTTPException as e:
            logger.error(f"Error prompting {user} for a username: {e}")

    # ==================== Registration ====================

    async def on_user_command(self, event: UserCommand) -> None:
        message = event.message
        try:
            await message.delete()
        except discord.HTTPException:
            pass

        async def reply(embed: discord.Embed, lifetime: int) -> None:
            await message.channel.send(embed=embed, delete_after=lifetime)

        if not event.username:
            await reply(build_missing_username_embed(message.author), ERROR_REPLY_LIFETIME)
            return

        await self.register(message.author, message.guild, event.username, reply)

    async def on_modal_submission(self, event: ModalSubmission) -> None:
        interaction = event.interaction
        await interaction.response.defer(ephemeral=True, thinking=True)

        async def reply(embed: discord.Embed, lifetime: int) -> None:
            await interaction.followup.send(embed=embed, ephemeral=True)

        await self.register(interaction.user, interaction.guild, event.username, reply)

    async def register(
        self,
        user: discord.abc.User,
        guild: Optional[discord.Guild],
        minecraft_username: str,
        reply: Reply,
    ) -> None:
        """Link a username to a user, then offer the bump role if they lack it."""
        try:
            ensure_valid_username(minecraft_username)
        except ValidationError:
            await reply(build_invalid_username_embed(user), ERROR_REPLY_LIFETIME)
            return

        try:
            _, created = await self.store.register(user.id, str(user), minecraft_username)
        except StoreError as e:
            logger.error(f"Error saving username for {user}: {e}")
            await reply(build_store_error_embed(user), ERROR_REPLY_LIFETIME)
            return

        await reply(build_registered_embed(user, minecraft_username, created), SUCCESS_REPLY_LIFETIME)
        logger.info(f"{user} {'set' if created else 'updated'} username: {minecraft_username}")

        if guild is None:
            return
        if await self.member_has_role(guild, user.id):
            logger.info(f"{user} already has the bump role")
            return
        await self.offer_role(user, guild, minecraft_username)

    # ==================== Role offer ====================

    async def member_has_role(self, guild: discord.Guild, user_id: int) -> bool:
        member = await self._fetch_member(guild, user_id)
        if member is None:
            logger.error(f"Error checking bump role: member {user_id} not found")
            return False
        return member.get_role(self.settings.bump_role_id) is not None

    async def grant_role(self, user: discord.abc.User, guild: discord.Guild) -> bool:
        """Give the bump role; a member who already has it counts as success."""
        try:
            await self._assign_role(user, guild)
        except PlatformError as e:
            logger.error(f"Error assigning role to {user}: {e}")
            return False
        return True

    async def _assign_role(self, user: discord.abc.User, guild: discord.Guild) -> None:
        member = await self._fetch_member(guild, user.id)
        if member is None:
            raise PlatformError(f"member {user.id} not found")

        role = guild.get_role(self.settings.bump_role_id)
        if role is None:
            raise PlatformError(f"role {self.settings.bump_role_id} not found")

        if member.get_role(role.id) is not None:
            logger.info(f"{user} already has role")
            return

        try:
            await member.add_roles(role, reason="Accepted bump role offer")
        except discord.HTTPException as e:
            raise PlatformError(f"add_roles failed: {e}") from e

        logger.info(f"Role assigned to {user}")

    async def offer_role(
        self, user: discord.abc.User, guild: discord.Guild, minecraft_username: str
    ) -> None:
        """Post a yes/no role prompt and start its deadline."""
        if user.id in self.registry:
            logger.info(f"{user} already has a pending role offer")
            return

        channel = self._bump_channel()
        if channel is None:
            return

        view = RoleOfferView(self, owner_id=user.id)
        try:
            prompt = await channel.send(
                content=user.mention,
                embed=build_role_offer_embed(user, self.registry.timeout),
                view=view,
            )
        except discord.HTTPException as e:
            logger.error(f"Error requesting role confirmation from {user}: {e}")
            view.stop()
            return

        assignment = PendingAssignment(
            user_id=user.id,
            guild=guild,
            minecraft_username=minecraft_username,
            prompt=prompt,
            view=view,
        )
        if not self.registry.offer(assignment, self.on_offer_timeout):
            # Another offer won the race while the prompt was being sent
            view.stop()
            try:
                await prompt.delete()
            except discord.HTTPException:
                pass

    async def resolve_choice(self, event: ButtonChoice) -> None:
        interaction = event.interaction
        user = interaction.user

        assignment = self.registry.resolve(user.id)
        if assignment is None:
            await interaction.response.send_message(NO_PENDING_OFFER, ephemeral=True)
            return

        if assignment.view is not None:
            assignment.view.stop()
        try:
            await interaction.response.defer()
        except discord.HTTPException as e:
            logger.warning(f"Could not acknowledge role choice from {user}: {e}")

        if event.confirmed:
            if not await self.grant_role(user, assignment.guild):
                await self._edit_prompt(assignment.prompt, content=ROLE_GRANT_FAILED, embed=None)
                await self._schedule_cleanup(assignment.prompt)
                return
            await self._edit_prompt(assignment.prompt, embed=build_role_assigned_embed(user))
        else:
            await self._edit_prompt(assignment.prompt, embed=build_role_declined_embed(user))

        await self.rewards.dispatch(user, assignment.minecraft_username)
        await self._schedule_cleanup(assignment.prompt)

    async def on_offer_timeout(self, assignment: PendingAssignment) -> None:
        """Deadline passed with no answer: skip the role, keep the reward."""
        if assignment.view is not None:
            assignment.view.stop()
        await self._edit_prompt(assignment.prompt, embed=build_role_timeout_embed())

        user = self.bot.get_user(assignment.user_id)
        if user is None:
            try:
                user = await self.bot.fetch_user(assignment.user_id)
            except discord.HTTPException as e:
                # Announcement needs the user; console commands only need the username
                logger.error(f"Role offer timed out but user {assignment.user_id} is gone: {e}")
                await self.rewards.issue_console_commands(assignment.minecraft_username)
                await self._schedule_cleanup(assignment.prompt)
                return

        await self.rewards.dispatch(user, assignment.minecraft_username)
        await self._schedule_cleanup(assignment.prompt)

    async def shutdown(self) -> None:
        await self.registry.clear()
